from __future__ import annotations

import pytest

from cursor_pagination.exceptions import InvalidArgumentError, InvalidStateError
from cursor_pagination.request import CursorRequest, KeysetCursorRequest
from cursor_pagination.sort import Order, Sort
from cursor_pagination.tokens import decode_cursor, encode_cursor
from cursor_pagination.window import CursorWindow


def test_equals_and_hash() -> None:
    """
    < Keyset requests compare by size, sort, keys and chained next request >
    1. Same size/sort are equal; different size or sort are not.
    2. Chaining the same next keys keeps them equal.
    3. Chaining different next values makes them unequal.
    """
    # 1
    foo1 = KeysetCursorRequest.of_size(1, Sort.by('foo'))
    foo2 = KeysetCursorRequest.of_size(1, Sort.by('foo'))
    bar = KeysetCursorRequest.of_size(1, Sort.by('bar'))

    assert foo1 == foo2
    assert hash(foo1) == hash(foo2)
    assert foo1.with_size(3) != foo2
    assert hash(foo1.with_size(3)) != hash(foo2)
    assert foo1 != bar

    # 2
    foo1_next = foo1.with_next({'k': 'v'})
    foo2_next = foo2.with_next({'k': 'v'})
    assert foo1_next == foo2_next
    assert hash(foo1_next) == hash(foo2_next)

    # 3
    foo2_next_other = foo2.with_next({'k': 'different'})
    assert foo1_next != foo2_next_other
    assert hash(foo1_next) != hash(foo2_next_other)


def test_key_order_does_not_matter_for_equality() -> None:
    sort = Sort.by('a', 'b')
    one = KeysetCursorRequest(1, sort, {'a': 1, 'b': 2})
    two = KeysetCursorRequest(1, sort, {'b': 2, 'a': 1})
    assert one == two
    assert hash(one) == hash(two)


def test_should_have_next() -> None:
    """
    < Keyset continuation is eager: no next window until keys are registered >
    1. The first request is first and last at the same time.
    2. After with_next it is still first but has a next window.
    3. The next request carries the keys, is not first, and has no next window yet.
    """
    # 1
    first = KeysetCursorRequest.of_size(1, Sort.by('foo'))
    assert isinstance(first, CursorRequest)
    assert first.is_first()
    assert not first.has_next()
    assert first.is_last()

    # 2
    with_next = first.with_next({'k': 'v'})
    assert with_next.is_first()
    assert with_next.has_next()
    assert not with_next.is_last()

    # 3
    nxt = with_next.next_cursor_request()
    assert dict(nxt.keys) == {'k': 'v'}
    assert not nxt.is_first()
    assert not nxt.has_next()
    assert nxt.is_last()


def test_with_last_should_reset_cursor() -> None:
    first = KeysetCursorRequest.of_size(1, Sort.by('foo'))
    last = first.with_next({'k': 'v'}).with_last(True)

    assert not last.has_next()
    assert last.is_last()
    assert last.next is None


def test_with_last_false_keeps_next() -> None:
    with_next = KeysetCursorRequest.of_size(1, Sort.by('foo')).with_next({'k': 'v'})

    kept = with_next.with_last(False)

    assert kept.has_next()
    assert kept == with_next
    assert not KeysetCursorRequest.of_size(1, Sort.by('foo')).with_last(False).has_next()


def test_with_next_overwrites_previous_next() -> None:
    request = KeysetCursorRequest.of_size(2, Sort.by('id')).with_next({'id': 1}).with_next({'id': 2})
    assert dict(request.next_cursor_request().keys) == {'id': 2}


def test_with_next_keeps_own_keys() -> None:
    """
    < with_next chains a new request but keeps the current position >
    1. Start from a request positioned after id=10.
    2. Register id=20 as next.
    3. Assert the current keys are unchanged and the chained request carries id=20 with the same size/sort.
    """
    # 1
    request = KeysetCursorRequest(3, Sort.by('id'), {'id': 10})

    # 2
    chained = request.with_next({'id': 20})

    # 3
    assert dict(chained.keys) == {'id': 10}
    nxt = chained.next_cursor_request()
    assert dict(nxt.keys) == {'id': 20}
    assert nxt.size == 3
    assert nxt.sort == Sort.by('id')


def test_with_size_preserves_keys_and_next() -> None:
    request = KeysetCursorRequest(3, Sort.by('id'), {'id': 10}).with_next({'id': 20})

    resized = request.with_size(8)

    assert resized.size == 8
    assert dict(resized.keys) == {'id': 10}
    assert resized.has_next()
    assert resized.next == request.next


def test_keys_are_read_only() -> None:
    source = {'id': 1}
    request = KeysetCursorRequest(1, Sort.by('id'), source)

    source['id'] = 99
    assert request.keys['id'] == 1

    with pytest.raises(TypeError):
        request.keys['id'] = 2  # type: ignore[index]


def test_next_cursor_request_without_registered_keys_raises() -> None:
    first = KeysetCursorRequest.of_size(1, Sort.by('foo'))
    with pytest.raises(InvalidStateError, match='beyond the end'):
        first.next_cursor_request()


def test_next_cursor_request_on_non_executed_request_raises() -> None:
    """
    < A request whose is_last() is overridden still refuses to advance without a next request >
    1. Subclass to report is_last() False while no next request is registered.
    2. Assert the "non-executed" InvalidStateError is raised.
    """

    # 1
    class Optimistic(KeysetCursorRequest):
        __slots__ = ()

        def is_last(self) -> bool:
            return False

    request = Optimistic(1, Sort.by('foo'))

    # 2
    with pytest.raises(InvalidStateError, match='non-executed'):
        request.next_cursor_request()


@pytest.mark.parametrize('size', [0, -5])
def test_invalid_size_rejected(size: int) -> None:
    with pytest.raises(InvalidArgumentError):
        KeysetCursorRequest.of_size(size, Sort.by('id'))
    with pytest.raises(InvalidArgumentError):
        KeysetCursorRequest.of_size(1, Sort.by('id')).with_size(size)


def test_non_total_sort_rejected() -> None:
    """
    < Keyset paging needs a total sort >
    1. Unsorted is rejected.
    2. A case-insensitive ordering is rejected.
    3. A missing sort is rejected.
    """
    # 1
    with pytest.raises(InvalidArgumentError, match='total sort'):
        KeysetCursorRequest.of_size(1, Sort.unsorted())

    # 2
    with pytest.raises(InvalidArgumentError):
        KeysetCursorRequest.of_size(1, Sort.by_orders(Order.asc('name').ignoring_case()))

    # 3
    with pytest.raises(InvalidArgumentError):
        KeysetCursorRequest.of_size(1, None)  # type: ignore[arg-type]


def test_with_next_requires_mapping() -> None:
    request = KeysetCursorRequest.of_size(1, Sort.by('id'))
    with pytest.raises(InvalidArgumentError):
        request.with_next([('id', 1)])  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        request.with_next(None)  # type: ignore[arg-type]


def test_hash_tolerates_unhashable_key_values() -> None:
    """
    < Requests rebuilt from JSON cursor tokens stay hashable >
    1. Round-trip a request whose seek value is a list through a cursor token.
    2. Assert it hashes, equals a freshly built request and hashes the same.
    3. Assert a window over it hashes too.
    """
    sort = Sort.by('tags')

    # 1
    decoded = decode_cursor(encode_cursor(KeysetCursorRequest(2, sort, {'tags': [1, 2]})), size=2, sort=sort)

    # 2
    built = KeysetCursorRequest(2, sort, {'tags': [1, 2]})
    assert decoded == built
    assert hash(decoded) == hash(built)
    assert decoded != KeysetCursorRequest(2, sort, {'tags': [3]})

    # 3
    assert hash(CursorWindow.of(decoded.with_next({'tags': [5]}), ['x'])) == hash(
        CursorWindow.of(built.with_next({'tags': [5]}), ['x'])
    )
