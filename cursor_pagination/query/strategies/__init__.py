from .keyset import KeysetStrategy
from .offset import OffsetStrategy
from .order_by import OrderByStrategy

__all__ = ['KeysetStrategy', 'OffsetStrategy', 'OrderByStrategy']
