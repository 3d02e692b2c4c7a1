import base64
import functools
import warnings
from collections.abc import Callable
from typing import Any, TypeVar, cast

F = TypeVar('F', bound=Callable[..., Any])


def experimental(func: F) -> F:
    """Every call of `func` emits a UserWarning naming it (`Class.method()` for methods)."""
    message = f'{func.__qualname__}() is experimental and may change or be removed in a future release.'

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        warnings.warn(message, category=UserWarning, stacklevel=2)
        return func(*args, **kwargs)

    return cast(F, wrapper)


def b64_encode(raw: bytes) -> str:
    """URL-safe base64 text, safe to put in a query string."""
    return base64.urlsafe_b64encode(raw).decode('ascii')


def b64_decode(text: str) -> bytes:
    # non-ascii input surfaces as UnicodeEncodeError, bad padding as binascii.Error
    return base64.urlsafe_b64decode(text.encode('ascii'))
