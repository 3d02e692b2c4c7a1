from .pagination import (
    KeysetCursorParams,
    OffsetCursorParams,
    provide_keyset_cursor_params,
    provide_offset_cursor_params,
    to_cursor_request,
)
from .repository import provide_repo

__all__ = [
    'KeysetCursorParams',
    'OffsetCursorParams',
    'provide_keyset_cursor_params',
    'provide_offset_cursor_params',
    'provide_repo',
    'to_cursor_request',
]
