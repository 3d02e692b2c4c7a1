"""
< Sort specification used by cursor requests >
1. An `Order` binds one property name to a direction, a null handling and a case sensitivity flag.
2. A `Sort` is an immutable, ordered collection of `Order` items. Duplicate properties are dropped
   (first occurrence wins), the same way ORDER BY inputs are deduplicated by the query layer.
3. `Sort.is_total()` tells whether the ordering positions every distinct row uniquely, which keyset
   paging requires. Executors may tighten that check with schema knowledge (see OrderByStrategy).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from typing import Any

from cursor_pagination.enums import Direction, NullHandling
from cursor_pagination.exceptions import InvalidArgumentError


@dataclass(frozen=True)
class Order:
    property: str
    direction: Direction = Direction.ASC
    null_handling: NullHandling = NullHandling.NATIVE
    ignore_case: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.property, str) or not self.property:
            raise InvalidArgumentError('Order property must be a non-empty string.')
        object.__setattr__(self, 'direction', Direction.from_str(self.direction))
        object.__setattr__(self, 'null_handling', NullHandling.from_str(self.null_handling))

    @classmethod
    def asc(cls, property: str) -> Order:
        return cls(property, Direction.ASC)

    @classmethod
    def desc(cls, property: str) -> Order:
        return cls(property, Direction.DESC)

    def is_ascending(self) -> bool:
        return not self.direction.is_descending()

    def is_descending(self) -> bool:
        return self.direction.is_descending()

    def with_direction(self, direction: Direction | str) -> Order:
        return replace(self, direction=Direction.from_str(direction))

    def nulls_first(self) -> Order:
        return replace(self, null_handling=NullHandling.NULLS_FIRST)

    def nulls_last(self) -> Order:
        return replace(self, null_handling=NullHandling.NULLS_LAST)

    def ignoring_case(self) -> Order:
        return replace(self, ignore_case=True)

    def __str__(self) -> str:
        out = f'{self.property}: {self.direction.value.upper()}'
        if self.ignore_case:
            out += ', ignoring case'
        if self.null_handling is not NullHandling.NATIVE:
            out += f', {self.null_handling.value}'
        return out


class Sort:
    """
    Immutable sort specification.

    >>> Sort.by('created_at', 'id').descending()
    Sort(created_at: DESC, id: DESC)
    """

    __slots__ = ('_orders',)

    def __init__(self, orders: Iterable[Order] = ()) -> None:
        seen: set[str] = set()
        uniq: list[Order] = []
        for order in orders:
            if not isinstance(order, Order):
                raise InvalidArgumentError(f'Sort accepts Order items only, got {type(order).__name__}.')
            if order.property in seen:
                continue
            seen.add(order.property)
            uniq.append(order)
        self._orders: tuple[Order, ...] = tuple(uniq)

    @classmethod
    def by(cls, *properties: str, direction: Direction | str = Direction.ASC) -> Sort:
        d = Direction.from_str(direction)
        return cls(Order(p, d) for p in properties)

    @classmethod
    def by_orders(cls, *orders: Order) -> Sort:
        return cls(orders)

    @classmethod
    def unsorted(cls) -> Sort:
        return _UNSORTED

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._orders

    @property
    def properties(self) -> tuple[str, ...]:
        return tuple(o.property for o in self._orders)

    def get_order(self, property: str) -> Order | None:
        for o in self._orders:
            if o.property == property:
                return o
        return None

    def ascending(self) -> Sort:
        return Sort(o.with_direction(Direction.ASC) for o in self._orders)

    def descending(self) -> Sort:
        return Sort(o.with_direction(Direction.DESC) for o in self._orders)

    def and_(self, other: Sort) -> Sort:
        if not isinstance(other, Sort):
            raise InvalidArgumentError('Sort.and_() requires a Sort.')
        return Sort((*self._orders, *other._orders))

    def is_sorted(self) -> bool:
        return bool(self._orders)

    def is_unsorted(self) -> bool:
        return not self._orders

    def is_total(self) -> bool:
        # Case-insensitive comparison ties rows that differ only by case.
        return self.is_sorted() and not any(o.ignore_case for o in self._orders)

    def __iter__(self) -> Iterator[Order]:
        return iter(self._orders)

    def __len__(self) -> int:
        return len(self._orders)

    def __bool__(self) -> bool:
        return bool(self._orders)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Sort):
            return NotImplemented
        return self._orders == other._orders

    def __hash__(self) -> int:
        return hash(self._orders)

    def __repr__(self) -> str:
        if not self._orders:
            return 'Sort(UNSORTED)'
        return f'Sort({", ".join(str(o) for o in self._orders)})'


_UNSORTED = Sort()
