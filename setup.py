from setuptools import setup, find_packages

INSTALL_REQUIRES = [
    "pydantic>=2.0,<3.0.0",
    "sqlalchemy[asyncio]>=2.0",
    "typing-extensions>=4.6.0",
]

EXTRAS_REQUIRE = {
    ':python_version >= "3.13"': [
        "pydantic>=2.8.0,<3.0.0"
    ],
    "litestar": [
        "litestar>=2.0",
    ],
    "test": [
        "pytest>=7.0",
        "pytest-asyncio>=0.21",
        "litestar>=2.0",
        "httpx",
    ],
}

setup(
    name="cursor-pagination",
    version="0.1.0",
    description="Cursor pagination (offset and keyset) over SQLAlchemy with immutable cursor requests and windows.",
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.10,<3.14',
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
