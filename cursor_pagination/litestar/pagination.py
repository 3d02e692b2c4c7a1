from __future__ import annotations

from litestar.params import Parameter
from pydantic import BaseModel, Field

from cursor_pagination.request import CursorRequest
from cursor_pagination.sort import Sort
from cursor_pagination.tokens import decode_cursor


class OffsetCursorParams(BaseModel):
    cursor: str | None = Field(default=None, description='Cursor token of the page to fetch')
    size: int = Field(default=20, ge=1, description='Page size')


class KeysetCursorParams(BaseModel):
    cursor: str | None = Field(default=None, description='Cursor token (base64 encoded JSON seek keys)')
    size: int = Field(default=20, ge=1, description='Page size')


def provide_offset_cursor_params(
    cursor: str | None = Parameter(
        default=None,
        query='cursor',
        description='Cursor token of the page to fetch (omit for the first page)',
    ),
    size: int = Parameter(ge=1, default=20, query='size', description='Page size'),
) -> OffsetCursorParams:
    return OffsetCursorParams(cursor=cursor, size=size)


def provide_keyset_cursor_params(
    cursor: str | None = Parameter(
        default=None,
        query='cursor',
        description='Cursor token (base64 encoded JSON seek keys) of the page to fetch',
    ),
    size: int = Parameter(ge=1, default=20, query='size', description='Page size'),
) -> KeysetCursorParams:
    return KeysetCursorParams(cursor=cursor, size=size)


def to_cursor_request(params: OffsetCursorParams | KeysetCursorParams, sort: Sort) -> CursorRequest:
    """
    Build the cursor request for the page described by query parameters.

    The sort is fixed by the handler, never by the client. Malformed tokens raise
    InvalidArgumentError; register an exception handler for it to answer with a 400.
    """
    return decode_cursor(
        params.cursor,
        size=params.size,
        sort=sort,
        keyset=isinstance(params, KeysetCursorParams),
    )
