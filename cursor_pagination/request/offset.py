from __future__ import annotations

from typing import Any

from cursor_pagination.exceptions import InvalidArgumentError, InvalidStateError
from cursor_pagination.request.base import CursorRequest, check_size, check_sort
from cursor_pagination.sort import Sort


class OffsetCursorRequest(CursorRequest):
    """
    Offset (skip count) based cursor request.

    Offset paging cannot know whether more rows exist before running the query, so a fresh request
    is optimistic: `has_next()` stays True until the executor marks it terminal with `with_last()`
    after a fetch returned fewer rows than `size`.
    """

    __slots__ = ('_size', '_offset', '_sort', '_last')

    def __init__(self, size: int, offset: int, sort: Sort, is_last: bool = False) -> None:
        self._sort = check_sort(sort)
        self._size = check_size(size)
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise InvalidArgumentError(f'offset must be an int, got {type(offset).__name__}.')
        if offset < 0:
            raise InvalidArgumentError('offset must be >= 0.')
        self._offset = offset
        self._last = bool(is_last)

    @classmethod
    def of_size(cls, size: int, sort: Sort) -> OffsetCursorRequest:
        """First request for `size` and `sort`, starting at offset 0."""
        return cls(size, 0, sort, False)

    @property
    def size(self) -> int:
        return self._size

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def sort(self) -> Sort:
        return self._sort

    def with_size(self, size: int) -> OffsetCursorRequest:
        return OffsetCursorRequest(size, self._offset, self._sort, self._last)

    def with_offset(self, offset: int) -> OffsetCursorRequest:
        """
        Return a copy positioned at `offset`.

        The terminal flag survives only when the offset does not change: a different offset has to be
        executed again before anyone knows whether it is the last window.
        """
        return OffsetCursorRequest(self._size, offset, self._sort, self._last and self._offset == offset)

    def with_last(self, is_last: bool = True) -> OffsetCursorRequest:
        return OffsetCursorRequest(self._size, self._offset, self._sort, is_last)

    def is_first(self) -> bool:
        return self._offset == 0

    def has_next(self) -> bool:
        return not self._last

    def next_cursor_request(self) -> OffsetCursorRequest:
        if self._last:
            raise InvalidStateError('Cannot create a next cursor request beyond the end of the cursor.')
        # advancing does not assert terminality; the executor does after the next fetch
        return OffsetCursorRequest(self._size, self._offset + self._size, self._sort, self._last)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, OffsetCursorRequest):
            return NotImplemented
        return (
            self._size == other._size
            and self._offset == other._offset
            and self._sort == other._sort
            and self._last == other._last
        )

    def __hash__(self) -> int:
        return hash((OffsetCursorRequest, self._size, self._offset, self._sort, self._last))

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}(size={self._size}, offset={self._offset}, '
            f'sort={self._sort!r}, last={self._last})'
        )
