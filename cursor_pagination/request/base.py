from __future__ import annotations

from abc import ABC, abstractmethod

from cursor_pagination.exceptions import InvalidArgumentError
from cursor_pagination.sort import Sort


class CursorRequest(ABC):
    """
    Common contract of every pagination strategy.

    A cursor request describes one window to fetch: how many items (`size`), in which order (`sort`)
    and where the previous window stopped. Requests are immutable value objects; every `with_*`
    method returns a new instance.

    The executor that runs the request reports back whether more data exists via `with_last()`
    (offset) or `with_next()` (keyset), and callers advance with `next_cursor_request()`.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of items to fetch per window."""
        raise NotImplementedError()

    @property
    @abstractmethod
    def sort(self) -> Sort:
        """Ordering applied to the underlying result set."""
        raise NotImplementedError()

    @abstractmethod
    def with_size(self, size: int) -> CursorRequest:
        """Return a copy with another window size. Raises InvalidArgumentError if size <= 0."""
        raise NotImplementedError()

    @abstractmethod
    def with_last(self, is_last: bool = True) -> CursorRequest:
        """Return a copy marked as (not) being the last window."""
        raise NotImplementedError()

    @abstractmethod
    def is_first(self) -> bool:
        raise NotImplementedError()

    @abstractmethod
    def has_next(self) -> bool:
        raise NotImplementedError()

    def is_last(self) -> bool:
        return not self.has_next()

    @abstractmethod
    def next_cursor_request(self) -> CursorRequest:
        """
        Return the request for the following window.

        Raises
        ------
        InvalidStateError
            If there is no next window (`has_next()` is False).
        """
        raise NotImplementedError()


def check_size(size: int) -> int:
    # bool is an int subclass but never a meaningful size
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidArgumentError(f'size must be an int, got {type(size).__name__}.')
    if size < 1:
        raise InvalidArgumentError('size must be >= 1.')
    return size


def check_sort(sort: Sort | None) -> Sort:
    if sort is None:
        raise InvalidArgumentError('sort must not be None.')
    if not isinstance(sort, Sort):
        raise InvalidArgumentError(f'sort must be a Sort, got {type(sort).__name__}.')
    return sort
