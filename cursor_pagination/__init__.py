from .base_filter import BaseCursorFilter
from .enums import Direction, NullHandling
from .exceptions import *
from .query import CursorQuery, query_to_stmt, resolve_window
from .repo_types import *
from .repository import CursorRepository, SessionProvider
from .request import CursorRequest, KeysetCursorRequest, OffsetCursorRequest
from .schemas import CursorPage
from .sort import Order, Sort
from .tokens import decode_cursor, encode_cursor
from .window import CursorWindow

__all__ = [
    # exceptions
    'CursorPaginationError',
    'InvalidArgumentError',
    'InvalidStateError',
    # sort
    'Direction',
    'NullHandling',
    'Order',
    'Sort',
    # request
    'CursorRequest',
    'KeysetCursorRequest',
    'OffsetCursorRequest',
    # window
    'CursorWindow',
    # query
    'BaseCursorFilter',
    'CursorQuery',
    'query_to_stmt',
    'resolve_window',
    # repository
    'CursorRepository',
    'SessionProvider',
    # tokens / schemas
    'CursorPage',
    'decode_cursor',
    'encode_cursor',
    # repo_types
    'TModel',
    'TSchema',
    'QueryOrStmt',
]


__version__ = '0.1.0'
