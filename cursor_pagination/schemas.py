from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from cursor_pagination.tokens import encode_cursor
from cursor_pagination.window import CursorWindow

T = TypeVar('T')


class CursorPage(BaseModel, Generic[T]):
    """Response model for one cursor window."""

    items: list[T]
    size: int = Field(ge=0, description='Number of items in this page')
    is_first: bool
    has_next: bool
    next_cursor: str | None = Field(default=None, description='Token of the next page, None on the last page')

    @classmethod
    def from_window(
        cls,
        window: CursorWindow[Any],
        encode: Callable[..., str] = encode_cursor,
    ) -> CursorPage[T]:
        next_cursor = encode(window.next_cursor_request()) if window.has_next() else None
        return cls(
            items=list(window.content),
            size=window.size,
            is_first=window.is_first(),
            has_next=window.has_next(),
            next_cursor=next_cursor,
        )
