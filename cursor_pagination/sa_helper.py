from typing import Any, cast

from sqlalchemy import ColumnElement, UnaryExpression, inspect
from sqlalchemy.orm import Mapper
from sqlalchemy.sql import operators

from cursor_pagination.enums import NullHandling


def sa_mapper(model: type[Any]) -> Mapper[Any]:
    return cast(Mapper[Any], inspect(model))


def peel_unary(expr: ColumnElement[Any]) -> ColumnElement[Any]:
    """Strip asc()/desc()/nulls_first()/nulls_last() wrappers down to the ordered expression."""
    base = expr
    while isinstance(base, UnaryExpression):
        base = base.element
    return base


def is_desc(expr: ColumnElement[Any]) -> bool:
    """True if any unary wrapper of `expr` is DESC (nulls_* wraps the direction modifier)."""
    cur: Any = expr
    while isinstance(cur, UnaryExpression):
        if cur.modifier is operators.desc_op:
            return True
        cur = cur.element
    return False


def null_placement(expr: ColumnElement[Any]) -> NullHandling:
    """NULLS_FIRST / NULLS_LAST when `expr` carries an explicit nulls_*() wrapper, NATIVE otherwise."""
    cur: Any = expr
    while isinstance(cur, UnaryExpression):
        if cur.modifier is operators.nulls_first_op:
            return NullHandling.NULLS_FIRST
        if cur.modifier is operators.nulls_last_op:
            return NullHandling.NULLS_LAST
        cur = cur.element
    return NullHandling.NATIVE
