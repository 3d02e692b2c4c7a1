from __future__ import annotations

from sqlalchemy import Select

from cursor_pagination.repo_types import QueryOrStmt, TModel

from .cursor_query import CursorQuery, _build_cursor_query


def query_to_stmt(
    q_or_stmt: QueryOrStmt[TModel],
) -> Select[tuple[TModel]]:
    if isinstance(q_or_stmt, CursorQuery):
        return _build_cursor_query(q_or_stmt)

    # A ready-made statement is executed as-is.
    if isinstance(q_or_stmt, Select):
        return q_or_stmt

    raise TypeError(f'Unsupported query/statement type: {type(q_or_stmt)}')
