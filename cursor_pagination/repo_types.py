import sys
from typing import TYPE_CHECKING, TypeAlias

from pydantic import BaseModel
from sqlalchemy import Select
from sqlalchemy.orm import DeclarativeBase

if sys.version_info >= (3, 13):
    from typing import TypeVar
else:
    from typing_extensions import TypeVar

if TYPE_CHECKING:
    from cursor_pagination.query.cursor_query import CursorQuery


class NoSchema:
    """Typing-only sentinel. Never used as a real mapping schema."""

    pass


TModel = TypeVar('TModel', bound=DeclarativeBase)
TSchema = TypeVar('TSchema', bound=BaseModel | NoSchema, default=NoSchema)


# Anything query_to_stmt() accepts.
QueryOrStmt: TypeAlias = 'CursorQuery[TModel] | Select[tuple[TModel]]'

__all__ = ['NoSchema', 'QueryOrStmt', 'TModel', 'TSchema']
