from __future__ import annotations

from collections.abc import Sequence
from collections.abc import Set as ABCSet
from dataclasses import fields, is_dataclass
from typing import Annotated, Any

from typing_extensions import Doc

from cursor_pagination.exceptions import InvalidArgumentError


class BaseCursorFilter:
    """
    Dataclass-driven WHERE criteria applied before cursor paging.

    Declare a dataclass subclass whose fields name model columns:

        @dataclass
        class EventFilter(BaseCursorFilter):
            tenant_id: int | None = None
            kind: Sequence[str] | None = None
            archived: bool | None = None

    Value rules
    -----------
    - None         → skipped
    - bool         → col.is_(val)
    - sequence/set → col.in_(seq) (empty sequences are skipped)
    - other scalar → col == val

    Every window of one cursor lineage must be fetched with the same filter, otherwise keyset
    seek positions and offsets point into a different result set.
    """

    __aliases__: Annotated[
        dict[str, str],
        Doc("Field name → column name mapping, e.g. {'tenant': 'tenant_id'}."),
    ] = {}

    __strict__: Annotated[
        bool,
        Doc('True raises InvalidArgumentError for fields that do not map to a model column; False skips them.'),
    ] = False

    @staticmethod
    def _is_seq(value: Any) -> bool:
        # str/bytes are sequences but never meant as IN lists
        if isinstance(value, (str, bytes, bytearray)):
            return False
        return isinstance(value, (Sequence, ABCSet))

    @classmethod
    def _resolve_column_name(cls, field_name: str) -> str:
        return cls.__aliases__.get(field_name, field_name)

    def where_criteria(
        self,
        m: Annotated[type[Any], Doc('SQLAlchemy ORM model class.')],
    ) -> Annotated[list[Any], Doc('SQLAlchemy criteria for a WHERE clause, in field declaration order.')]:
        """
        Build WHERE criteria from the dataclass field values.

        Raises
        ------
        TypeError
            If the filter is not a dataclass instance.
        InvalidArgumentError
            If __strict__ is True and a field does not map to a model column.
        """
        if not is_dataclass(self):
            raise TypeError('BaseCursorFilter must be used with a dataclass.')

        crit: list[Any] = []
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            col = self._column_for(m, f.name)
            if col is None:
                continue
            criterion = self._criterion(col, value)
            if criterion is not None:
                crit.append(criterion)
        return crit

    def _column_for(self, m: type[Any], field_name: str) -> Any:
        col_name = self._resolve_column_name(field_name)
        col = getattr(m, col_name, None)
        if col is None and self.__strict__:
            raise InvalidArgumentError(f"Mapping failed: {m.__name__}.{col_name} (from '{field_name}')")
        return col

    @classmethod
    def _criterion(cls, col: Any, value: Any) -> Any:
        if isinstance(value, bool):
            return col.is_(value)
        if cls._is_seq(value):
            # empty sequences are skipped rather than rendered as IN ()
            return col.in_(list(value)) if value else None
        return col == value
