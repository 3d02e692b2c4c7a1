from __future__ import annotations

import pytest

from cursor_pagination.exceptions import InvalidArgumentError, InvalidStateError
from cursor_pagination.request import KeysetCursorRequest, OffsetCursorRequest
from cursor_pagination.sort import Sort
from cursor_pagination.window import CursorWindow


def test_equals_and_hash() -> None:
    """
    < Windows compare by content and request >
    1. Two windows over an equal request and equal content are equal and share a hash.
    2. A request with another size makes them unequal even with equal content.
    """
    # 1
    request = KeysetCursorRequest.of_size(2, Sort.by('bar'))
    one = CursorWindow.of(request, [1, 2, 3])
    two = CursorWindow.of(request, [1, 2, 3])

    assert one == two
    assert hash(one) == hash(two)

    # 2
    other = CursorWindow.of(request.with_size(4), [1, 2, 3])
    assert other != two
    assert hash(other) != hash(two)


def test_allows_iteration() -> None:
    request = KeysetCursorRequest.of_size(2, Sort.by('bar'))
    window = CursorWindow.of(request, [1, 2, 3])

    assert list(window) == [1, 2, 3]
    # restartable
    assert list(window) == [1, 2, 3]
    assert window.size == 3
    assert len(window) == 3
    assert not window.is_empty()


def test_content_is_read_only_snapshot() -> None:
    items = [1, 2]
    window = CursorWindow.of(OffsetCursorRequest.of_size(2, Sort.by('id')), items)

    items.append(3)

    assert list(window.content) == [1, 2]
    assert isinstance(window.content, tuple)


def test_empty_content_is_allowed() -> None:
    window = CursorWindow.of(OffsetCursorRequest.of_size(2, Sort.by('id')).with_last(), [])
    assert window.is_empty()
    assert window.size == 0
    assert window.is_last()


def test_navigation_delegates_to_request() -> None:
    """
    < Navigation comes from the source request >
    1. A keyset request with registered next keys.
    2. Assert sort/is_first/has_next/is_last/next_cursor_request match the request.
    """
    # 1
    request = KeysetCursorRequest.of_size(2, Sort.by('bar')).with_next({'bar': 2})
    window = CursorWindow.of(request, [1, 2])

    # 2
    assert window.request is request
    assert window.sort == Sort.by('bar')
    assert window.is_first()
    assert window.has_next()
    assert not window.is_last()
    assert window.next_cursor_request() == request.next_cursor_request()


def test_next_cursor_request_on_last_window_raises() -> None:
    window = CursorWindow.of(KeysetCursorRequest.of_size(2, Sort.by('bar')), [1])
    with pytest.raises(InvalidStateError):
        window.next_cursor_request()


def test_map_keeps_request() -> None:
    request = OffsetCursorRequest.of_size(3, Sort.by('id'))
    window = CursorWindow.of(request, [1, 2, 3])

    mapped = window.map(str)

    assert list(mapped) == ['1', '2', '3']
    assert mapped.request is request


def test_missing_arguments_rejected() -> None:
    request = OffsetCursorRequest.of_size(3, Sort.by('id'))
    with pytest.raises(InvalidArgumentError, match='CursorRequest'):
        CursorWindow.of(None, [1])  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match='items'):
        CursorWindow.of(request, None)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        CursorWindow.of(object(), [1])  # type: ignore[arg-type]
