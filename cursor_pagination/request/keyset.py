from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from cursor_pagination.exceptions import InvalidArgumentError, InvalidStateError
from cursor_pagination.request.base import CursorRequest, check_size, check_sort
from cursor_pagination.sort import Sort

_EMPTY_KEYS: Mapping[str, Any] = MappingProxyType({})


class KeysetCursorRequest(CursorRequest):
    """
    Keyset (seek) based cursor request.

    `keys` holds the sort values of the last row of the previous window, keyed by sort property.
    An empty mapping means "first window".

    Continuation is eager: a request has no next window until the executor has inspected the fetched
    rows and registered the next seek position with `with_next()`. The registered position is kept
    as a chained request (`next`), one step of look-ahead deep.

    Flow
    ----
    1. `KeysetCursorRequest.of_size(size, sort)` -> first request, `has_next()` is False.
    2. Executor fetches rows after `keys`, then returns `request.with_next(last_row_keys)`
       or `request.with_last(True)`.
    3. Caller advances with `next_cursor_request()`.
    """

    __slots__ = ('_size', '_sort', '_keys', '_next')

    def __init__(
        self,
        size: int,
        sort: Sort,
        keys: Mapping[str, Any] | None = None,
        next: KeysetCursorRequest | None = None,
    ) -> None:
        self._size = check_size(size)
        self._sort = check_sort(sort)
        if not sort.is_total():
            raise InvalidArgumentError(
                f'Keyset pagination requires a total sort (sorted, case-sensitive), got {sort!r}.'
            )
        self._keys = _freeze_keys(keys)
        if next is not None and not isinstance(next, KeysetCursorRequest):
            raise InvalidArgumentError(f'next must be a KeysetCursorRequest, got {type(next).__name__}.')
        self._next = next

    @classmethod
    def of_size(cls, size: int, sort: Sort) -> KeysetCursorRequest:
        """First request for `size` and `sort`: no keys, no next window."""
        return cls(size, sort)

    @property
    def size(self) -> int:
        return self._size

    @property
    def sort(self) -> Sort:
        return self._sort

    @property
    def keys(self) -> Mapping[str, Any]:
        """Read-only view of the seek keys."""
        return self._keys

    @property
    def next(self) -> KeysetCursorRequest | None:
        return self._next

    def with_size(self, size: int) -> KeysetCursorRequest:
        return KeysetCursorRequest(size, self._sort, self._keys, self._next)

    def with_next(self, keys: Mapping[str, Any]) -> KeysetCursorRequest:
        """
        Register the seek position of the following window.

        Returns a copy of this request (same keys) chained to a fresh request carrying `keys`.
        Any previously registered next request is replaced.
        """
        if not isinstance(keys, Mapping):
            raise InvalidArgumentError(f'keys must be a mapping, got {type(keys).__name__}.')
        following = KeysetCursorRequest(self._size, self._sort, keys)
        return KeysetCursorRequest(self._size, self._sort, self._keys, following)

    def with_last(self, is_last: bool = True) -> KeysetCursorRequest:
        """`True` drops the registered next request, `False` keeps it as is."""
        return KeysetCursorRequest(self._size, self._sort, self._keys, None if is_last else self._next)

    def is_first(self) -> bool:
        return not self._keys

    def has_next(self) -> bool:
        return self._next is not None

    def next_cursor_request(self) -> KeysetCursorRequest:
        if self.is_last():
            raise InvalidStateError('Cannot create a next cursor request beyond the end of the cursor.')
        if self._next is None:
            raise InvalidStateError('Cannot create a next cursor request from a non-executed KeysetCursorRequest.')
        return self._next

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, KeysetCursorRequest):
            return NotImplemented
        return (
            self._size == other._size
            and self._sort == other._sort
            and dict(self._keys) == dict(other._keys)
            and self._next == other._next
        )

    def __hash__(self) -> int:
        # key names only: seek values decoded from JSON can be lists or dicts
        return hash((KeysetCursorRequest, self._size, self._sort, frozenset(self._keys), self._next))

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}(size={self._size}, sort={self._sort!r}, '
            f'keys={dict(self._keys)!r}, has_next={self.has_next()})'
        )


def _freeze_keys(keys: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if keys is None or (isinstance(keys, Mapping) and not keys):
        return _EMPTY_KEYS
    if not isinstance(keys, Mapping):
        raise InvalidArgumentError(f'keys must be a mapping, got {type(keys).__name__}.')
    for k in keys:
        if not isinstance(k, str):
            raise InvalidArgumentError(f'keys must be keyed by sort property names, got {k!r}.')
    return MappingProxyType(dict(keys))
