"""
< Translate a Sort into SQLAlchemy ORDER BY items for one model >
1. Each Order's property must name a mapped column of the model (column_attrs key).
2. Direction becomes asc()/desc(); null handling becomes nulls_first()/nulls_last();
   ignore_case wraps the column in lower().
3. An unsorted Sort falls back to the model's PK columns (including composite PK).
4. Keyset paging additionally requires the ordering to cover a unique key of the model,
   checked by `ensure_unique()`, and an explicit NULL position for nullable columns,
   checked by `ensure_null_placement()`.

< Rejected >
- Properties that are not model columns (relationships, synonyms, hybrid attributes, typos)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

from cursor_pagination.enums import NullHandling
from cursor_pagination.exceptions import InvalidArgumentError
from cursor_pagination.repo_types import TModel
from cursor_pagination.sa_helper import null_placement, peel_unary, sa_mapper
from cursor_pagination.sort import Order, Sort


class OrderByStrategy:
    """
    < Sort to ORDER BY strategy >

    1. Resolves Sort properties against the model's column attributes only.
    2. Returns a list of ColumnElement items ready for `order_by(*cols)`.
    3. Validates that an ordering is total for a model before keyset paging uses it.
    """

    @staticmethod
    def apply(model: type[TModel], sort: Sort) -> list[ColumnElement[Any]]:
        """
        < Build ordering columns >

        Parameters
        ----------
        model : type[TModel]
            SQLAlchemy ORM model class.
        sort : Sort
            Sort specification of the cursor request.

        Returns
        -------
        list[ColumnElement[Any]]
            ORDER BY columns in Sort order.

        Raises
        ------
        InvalidArgumentError
            - If a property cannot be mapped to a model column
            - If the sort is unsorted and the model has no PK
        """
        if not isinstance(sort, Sort):
            raise InvalidArgumentError(f'sort must be a Sort, got {type(sort).__name__}.')

        valid_expr_map = OrderByStrategy._column_map(model)

        if sort.is_unsorted():
            pks = list(sa_mapper(model).primary_key)
            if not pks:
                raise InvalidArgumentError('Cannot build a default ordering. The model must have a primary key.')
            return [pk.asc() for pk in pks]

        return [OrderByStrategy._to_column(model, valid_expr_map, order) for order in sort]

    @staticmethod
    def ensure_unique(model: type[TModel], order_cols: Sequence[ColumnElement[Any]]) -> None:
        """
        < Keyset orderings must be total for the model >

        Accepted when the ordered columns contain either
        - every primary key column, or
        - at least one column declared `unique=True`.

        Raises
        ------
        InvalidArgumentError
            If the ordering can tie two distinct rows.
        """
        ordered = [peel_unary(c) for c in order_cols]
        ordered_keys = {getattr(c, 'key', None) for c in ordered}

        # table column keys on both sides
        pk_keys = {c.key for c in sa_mapper(model).primary_key}
        if pk_keys and pk_keys <= ordered_keys:
            return

        for c in ordered:
            if getattr(c, 'unique', False) is True:
                return

        raise InvalidArgumentError(
            f'Keyset pagination requires the ordering to include the primary key {sorted(pk_keys)} '
            f'or a unique column of {model.__name__}. got={sorted(k for k in ordered_keys if k)}'
        )

    @staticmethod
    def ensure_null_placement(order_cols: Sequence[ColumnElement[Any]]) -> None:
        """
        < Nullable keyset columns need an explicit NULL position >

        Where NULLs sort without nulls_first()/nulls_last() depends on the database, so a seek
        position holding NULL could not be translated into a predicate.

        Raises
        ------
        InvalidArgumentError
            If a nullable column is ordered with NullHandling.NATIVE.
        """
        for c in order_cols:
            col = peel_unary(c)
            if getattr(col, 'nullable', False) is True and null_placement(c) is NullHandling.NATIVE:
                raise InvalidArgumentError(
                    f"Keyset pagination over nullable column '{getattr(col, 'key', col)}' requires "
                    'nulls_first() or nulls_last() on its order.'
                )

    @staticmethod
    def _column_map(model: type[TModel]) -> dict[str, ColumnElement[Any]]:
        mapper = sa_mapper(model)
        return {c.key: getattr(model, c.key).expression for c in mapper.column_attrs}

    @staticmethod
    def _to_column(
        model: type[TModel],
        valid_expr_map: dict[str, ColumnElement[Any]],
        order: Order,
    ) -> ColumnElement[Any]:
        if order.property not in valid_expr_map:
            raise InvalidArgumentError(f"Model {model.__name__} does not have a field '{order.property}'.")

        col: ColumnElement[Any] = valid_expr_map[order.property]
        if order.ignore_case:
            col = func.lower(col)

        out = col.desc() if order.is_descending() else col.asc()

        if order.null_handling is NullHandling.NULLS_FIRST:
            out = out.nulls_first()
        elif order.null_handling is NullHandling.NULLS_LAST:
            out = out.nulls_last()
        return out
