from __future__ import annotations

import pytest

from cursor_pagination.exceptions import InvalidArgumentError, InvalidStateError
from cursor_pagination.request import CursorRequest, OffsetCursorRequest
from cursor_pagination.sort import Sort


def test_equals_and_hash() -> None:
    """
    < Offset requests compare structurally >
    1. Two requests of the same size and sort are equal and share a hash.
    2. A different size or sort makes them unequal.
    3. Moving both to the same offset keeps them equal; different offsets do not.
    """
    # 1
    foo1 = OffsetCursorRequest.of_size(1, Sort.by('foo'))
    foo2 = OffsetCursorRequest.of_size(1, Sort.by('foo'))
    bar = OffsetCursorRequest.of_size(1, Sort.by('bar'))
    assert foo1 == foo2
    assert hash(foo1) == hash(foo2)

    # 2
    assert foo1.with_size(3) != foo2
    assert hash(foo1.with_size(3)) != hash(foo2)
    assert foo1 != bar

    # 3
    assert foo1.with_offset(25) == foo2.with_offset(25)
    assert foo1.with_offset(25) != foo2.with_offset(26)


def test_of_size_starts_at_first_window() -> None:
    first = OffsetCursorRequest.of_size(10, Sort.by('id'))

    assert isinstance(first, CursorRequest)
    assert first.size == 10
    assert first.offset == 0
    assert first.sort == Sort.by('id')
    assert first.is_first()
    assert first.has_next()
    assert not first.is_last()


def test_should_have_next() -> None:
    """
    < Offset paging is optimistic about continuation >
    1. The first request has a next window.
    2. The next request is not first and still has a next window.
    """
    # 1
    first = OffsetCursorRequest.of_size(1, Sort.by('foo'))
    assert first.is_first()
    assert first.has_next()
    assert not first.is_last()

    # 2
    nxt = first.next_cursor_request()
    assert not nxt.is_first()
    assert nxt.has_next()
    assert not nxt.is_last()


@pytest.mark.parametrize('k', [1, 2, 5])
def test_next_cursor_request_advances_by_size(k: int) -> None:
    request = OffsetCursorRequest.of_size(7, Sort.by('id'))
    for _ in range(k):
        request = request.next_cursor_request()
    assert request.offset == 7 * k
    assert request.size == 7


def test_with_last_should_reset_cursor() -> None:
    """
    < Moving a terminal request to another offset clears the terminal flag >
    1. Mark the first request as last.
    2. Move it to offset 1.
    3. Assert the terminal state is gone after moving.
    """
    # 1
    last = OffsetCursorRequest.of_size(1, Sort.by('foo')).with_last(True)

    # 2
    reset = last.with_offset(1)

    # 3
    assert not last.has_next()
    assert last.is_last()
    assert reset.has_next()
    assert not reset.is_last()


def test_with_offset_to_same_offset_keeps_terminal_state() -> None:
    last = OffsetCursorRequest.of_size(5, Sort.by('foo')).with_offset(10).with_last()

    same = last.with_offset(10)

    assert same.is_last()
    assert same == last


def test_with_last_false_reopens() -> None:
    last = OffsetCursorRequest.of_size(5, Sort.by('foo')).with_last(True)
    assert last.with_last(False).has_next()


def test_with_size_preserves_other_state() -> None:
    request = OffsetCursorRequest.of_size(5, Sort.by('foo')).with_offset(15).with_last(True)

    resized = request.with_size(50)

    assert resized.size == 50
    assert resized.offset == 15
    assert resized.sort == Sort.by('foo')
    assert resized.is_last()


def test_next_cursor_request_on_last_window_raises() -> None:
    last = OffsetCursorRequest.of_size(5, Sort.by('foo')).with_last(True)
    with pytest.raises(InvalidStateError):
        last.next_cursor_request()


@pytest.mark.parametrize('size', [0, -1])
def test_invalid_size_rejected(size: int) -> None:
    with pytest.raises(InvalidArgumentError, match='size must be >= 1'):
        OffsetCursorRequest.of_size(size, Sort.by('id'))
    with pytest.raises(InvalidArgumentError):
        OffsetCursorRequest.of_size(1, Sort.by('id')).with_size(size)


def test_negative_offset_rejected() -> None:
    with pytest.raises(InvalidArgumentError, match='offset must be >= 0'):
        OffsetCursorRequest.of_size(1, Sort.by('id')).with_offset(-1)


def test_missing_sort_rejected() -> None:
    with pytest.raises(InvalidArgumentError, match='sort'):
        OffsetCursorRequest.of_size(1, None)  # type: ignore[arg-type]


def test_unsorted_is_allowed_for_offset_paging() -> None:
    request = OffsetCursorRequest.of_size(1, Sort.unsorted())
    assert request.sort.is_unsorted()


def test_errors_are_builtin_compatible() -> None:
    with pytest.raises(ValueError):
        OffsetCursorRequest.of_size(0, Sort.by('id'))
    with pytest.raises(RuntimeError):
        OffsetCursorRequest.of_size(1, Sort.by('id')).with_last().next_cursor_request()
