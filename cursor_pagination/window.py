from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any, Generic, TypeVar

from cursor_pagination.exceptions import InvalidArgumentError
from cursor_pagination.request.base import CursorRequest
from cursor_pagination.sort import Sort

T = TypeVar('T')
R = TypeVar('R')


class CursorWindow(Generic[T]):
    """
    One fetched batch of items plus the cursor request that produced it.

    Navigation (`is_first`, `has_next`, `next_cursor_request`, ...) is answered by the request,
    which the executor has already updated with what it learned from the fetch.

    >>> window = CursorWindow.of(request, rows)
    >>> for row in window:
    ...     ...
    >>> if window.has_next():
    ...     request = window.next_cursor_request()
    """

    __slots__ = ('_request', '_content')

    def __init__(self, request: CursorRequest, content: Iterable[T]) -> None:
        if request is None:
            raise InvalidArgumentError('CursorRequest must not be None.')
        if content is None:
            raise InvalidArgumentError('List of items must not be None.')
        if not isinstance(request, CursorRequest):
            raise InvalidArgumentError(f'request must be a CursorRequest, got {type(request).__name__}.')
        self._request = request
        self._content: tuple[T, ...] = tuple(content)

    @classmethod
    def of(cls, request: CursorRequest, content: Iterable[T]) -> CursorWindow[T]:
        return cls(request, content)

    @property
    def request(self) -> CursorRequest:
        return self._request

    @property
    def content(self) -> Sequence[T]:
        return self._content

    @property
    def size(self) -> int:
        """Number of items in this window (not the requested window size)."""
        return len(self._content)

    @property
    def sort(self) -> Sort:
        return self._request.sort

    def is_empty(self) -> bool:
        return not self._content

    def is_first(self) -> bool:
        return self._request.is_first()

    def is_last(self) -> bool:
        return self._request.is_last()

    def has_next(self) -> bool:
        return self._request.has_next()

    def next_cursor_request(self) -> CursorRequest:
        return self._request.next_cursor_request()

    def map(self, fn: Callable[[T], R]) -> CursorWindow[R]:
        return CursorWindow(self._request, (fn(item) for item in self._content))

    def __iter__(self) -> Iterator[T]:
        return iter(self._content)

    def __len__(self) -> int:
        return len(self._content)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, CursorWindow):
            return NotImplemented
        return self._content == other._content and self._request == other._request

    def __hash__(self) -> int:
        return hash((self._content, self._request))

    def __repr__(self) -> str:
        return f'CursorWindow ({self._request!r}) {list(self._content)!r}'
