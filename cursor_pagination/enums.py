from enum import Enum

from cursor_pagination.exceptions import InvalidArgumentError


class Direction(str, Enum):
    ASC = 'asc'
    DESC = 'desc'

    def __str__(self):
        return self.value

    def is_descending(self) -> bool:
        return self is Direction.DESC

    @classmethod
    def from_str(cls, value: 'str | Direction') -> 'Direction':
        if isinstance(value, Direction):
            return value
        try:
            return cls(value.lower())
        except (AttributeError, ValueError) as e:
            raise InvalidArgumentError(f'Unsupported sort direction: {value!r}') from e


class NullHandling(str, Enum):
    NATIVE = 'native'
    NULLS_FIRST = 'nulls_first'
    NULLS_LAST = 'nulls_last'

    def __str__(self):
        return self.value

    @classmethod
    def from_str(cls, value: 'str | NullHandling') -> 'NullHandling':
        if isinstance(value, NullHandling):
            return value
        try:
            return cls(value.lower())
        except (AttributeError, ValueError) as e:
            raise InvalidArgumentError(f'Unsupported null handling: {value!r}') from e
