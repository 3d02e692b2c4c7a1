from .base import CursorRequest
from .keyset import KeysetCursorRequest
from .offset import OffsetCursorRequest

__all__ = ['CursorRequest', 'KeysetCursorRequest', 'OffsetCursorRequest']
