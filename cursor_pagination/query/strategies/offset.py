from __future__ import annotations

from sqlalchemy import Select

from cursor_pagination.exceptions import InvalidArgumentError
from cursor_pagination.repo_types import TModel


class OffsetStrategy:
    @staticmethod
    def apply(stmt: Select[tuple[TModel]], *, offset: int, size: int) -> Select[tuple[TModel]]:
        """
        < Apply OFFSET/LIMIT >
        `size` is the row limit of the statement; the caller adds the look-ahead row if it wants one.
        """
        if offset < 0:
            raise InvalidArgumentError('offset must be >= 0.')
        if size < 1:
            raise InvalidArgumentError('size must be >= 1.')
        if offset:
            stmt = stmt.offset(offset)
        return stmt.limit(size)
