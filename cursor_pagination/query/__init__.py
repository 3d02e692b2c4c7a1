from .converter import query_to_stmt
from .cursor_query import LOOKAHEAD, CursorQuery, resolve_window
from .strategies import KeysetStrategy, OffsetStrategy, OrderByStrategy

__all__ = [
    'LOOKAHEAD',
    'CursorQuery',
    'KeysetStrategy',
    'OffsetStrategy',
    'OrderByStrategy',
    'query_to_stmt',
    'resolve_window',
]
