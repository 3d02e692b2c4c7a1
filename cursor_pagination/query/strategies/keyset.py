from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import ClauseElement, Select, and_, false, or_, tuple_
from sqlalchemy.sql.elements import ColumnElement

from cursor_pagination.enums import NullHandling
from cursor_pagination.exceptions import InvalidArgumentError
from cursor_pagination.repo_types import TModel
from cursor_pagination.sa_helper import is_desc, null_placement, peel_unary


class KeysetStrategy:
    """
    <Keyset (seek) paging>

    Restricts a statement to the rows strictly after a seek position. The position is the
    `keys` mapping of a KeysetCursorRequest: the sort values of the last row of the previous window.

    Seek condition
    - every ordering ASC, no NULL placement involved: `col > v` for one column,
      `(c1, c2, ...) > (v1, v2, ...)` for several
    - otherwise: `after(c1, v1) OR (c1 = v1 AND after(c2, v2)) OR ...`

    NULL placement follows the nulls_first()/nulls_last() wrapper of each ordering column:
    - NULLS FIRST: after NULL are the non-NULL rows; after v is `c ⋛ v`
    - NULLS LAST: nothing is after NULL; after v is `c ⋛ v OR c IS NULL`
    - a NULL seek value on a column without explicit placement is rejected (its position is
      dialect dependent)
    """

    @staticmethod
    def apply(
        stmt: Select[tuple[TModel]],
        *,
        order_cols: Sequence[ColumnElement[Any]],
        cursor: Mapping[str, Any] | None,
        size: int,
        keys: Sequence[str] | None = None,
    ) -> Select[tuple[TModel]]:
        """
        <Seek after `cursor` and limit to `size`>

        `keys` names the cursor key of each order column (the Sort properties); by default the
        column keys are used. An empty cursor is the first window: LIMIT only.

        Cursor values arrive from JSON tokens as plain strings/numbers, so each one is coerced to
        the column's python type ('2024-01-01T00:00:00' -> datetime) before it is bound.

        Raises
        ------
        InvalidArgumentError
            - no order_cols, or size < 1
            - the cursor keys are not exactly the ordering keys
            - a cursor value is NULL on a column without explicit NULL placement
            - a cursor value cannot be coerced
        """
        if not order_cols:
            raise InvalidArgumentError('keyset pagination requires order_cols.')
        if size < 1:
            raise InvalidArgumentError('size must be >= 1.')

        if not cursor:
            return stmt.limit(size)

        cols = [peel_unary(c) for c in order_cols]
        placements = [null_placement(c) for c in order_cols]
        descending = [is_desc(c) for c in order_cols]
        values = KeysetStrategy._seek_values(cols, cursor, KeysetStrategy._keys_for(order_cols, keys), placements)

        return stmt.where(KeysetStrategy._seek_condition(cols, values, descending, placements)).limit(size)

    @staticmethod
    def cursor_from_row(
        row: Any,
        order_cols: Sequence[ColumnElement[Any]],
        keys: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        """
        <Seek keys of a fetched row>

        The returned dict is what `apply()` takes back as `cursor` for the following window.
        """
        out: dict[str, Any] = {}
        for key in KeysetStrategy._keys_for(order_cols, keys):
            if not hasattr(row, key):
                raise InvalidArgumentError(f"row {type(row).__name__} has no attribute '{key}' to build a cursor.")
            out[key] = getattr(row, key)
        return out

    @staticmethod
    def _seek_values(
        cols: Sequence[ColumnElement[Any]],
        cursor: Mapping[str, Any],
        keys: Sequence[str],
        placements: Sequence[NullHandling],
    ) -> list[Any]:
        if set(cursor) != set(keys):
            raise InvalidArgumentError(f'cursor keys mismatch. required={list(keys)}, got={list(cursor)}')

        # read in ordering order; the mapping's own order is irrelevant
        return [
            KeysetStrategy._coerce(key, col, cursor[key], placement)
            for key, col, placement in zip(keys, cols, placements)
        ]

    @staticmethod
    def _coerce(key: str, col: ColumnElement[Any], value: Any, placement: NullHandling) -> Any:
        if value is None:
            if placement is NullHandling.NATIVE:
                raise InvalidArgumentError(
                    f'NULL is not allowed in cursor values of columns ordered without nulls_first()/nulls_last(). '
                    f'key={key}'
                )
            return None

        py_type = KeysetStrategy._python_type(col)
        if py_type is None or isinstance(value, py_type):
            return value
        try:
            return _adapter(py_type).validate_python(value)
        except ValidationError as e:
            raise InvalidArgumentError(f"cursor['{key}'] is not {py_type.__name__}.") from e

    @staticmethod
    def _seek_condition(
        cols: Sequence[ColumnElement[Any]],
        values: Sequence[Any],
        descending: Sequence[bool],
        placements: Sequence[NullHandling],
    ) -> ColumnElement[bool]:
        plain = (
            not any(descending)
            and all(v is not None for v in values)
            and NullHandling.NULLS_LAST not in placements
        )
        if plain:
            if len(cols) == 1:
                return cols[0] > values[0]
            return tuple_(*cols) > tuple_(*values)

        branches = []
        for i, col in enumerate(cols):
            step = KeysetStrategy._after(col, values[i], descending[i], placements[i])
            if step is None:
                continue
            ties = [KeysetStrategy._same(cols[j], values[j]) for j in range(i)]
            branches.append(and_(*ties, step))
        if not branches:
            return false()
        return or_(*branches)

    @staticmethod
    def _after(
        col: ColumnElement[Any],
        value: Any,
        descending: bool,
        placement: NullHandling,
    ) -> ColumnElement[bool] | None:
        """Rows strictly after `value` in this column alone; None when there are none."""
        if value is None:
            return col.is_not(None) if placement is NullHandling.NULLS_FIRST else None
        step = col < value if descending else col > value
        if placement is NullHandling.NULLS_LAST:
            return or_(step, col.is_(None))
        return step

    @staticmethod
    def _same(col: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        return col.is_(None) if value is None else col == value

    @staticmethod
    def _col_key(col: ClauseElement) -> str:
        # labels and aliases: .key, then .name
        col = peel_unary(col)  # type: ignore[arg-type]
        return getattr(col, 'key', getattr(col, 'name', repr(col)))

    @staticmethod
    def _keys_for(order_cols: Sequence[ColumnElement[Any]], keys: Sequence[str] | None) -> list[str]:
        if keys is None:
            return [KeysetStrategy._col_key(c) for c in order_cols]
        if len(keys) != len(order_cols):
            raise InvalidArgumentError('keys length does not match order_cols length.')
        return list(keys)

    @staticmethod
    def _python_type(col: ColumnElement[Any]) -> type | None:
        col_type = getattr(col, 'type', None)
        if col_type is None:
            return None
        try:
            return col_type.python_type
        except NotImplementedError:
            return None


@lru_cache(maxsize=64)
def _adapter(tp: type) -> TypeAdapter[Any]:
    return TypeAdapter(tp)
