from __future__ import annotations

import logging
import warnings
from collections.abc import AsyncIterator
from typing import Annotated, Any, Generic, Protocol, cast, get_args

from pydantic import BaseModel
from sqlalchemy.engine import ScalarResult
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase
from typing_extensions import Doc

from cursor_pagination.base_filter import BaseCursorFilter
from cursor_pagination.exceptions import InvalidArgumentError, InvalidStateError
from cursor_pagination.query.converter import query_to_stmt
from cursor_pagination.query.cursor_query import CursorQuery, resolve_window
from cursor_pagination.repo_types import TModel, TSchema
from cursor_pagination.request import CursorRequest
from cursor_pagination.sa_helper import sa_mapper
from cursor_pagination.utils import experimental
from cursor_pagination.validator import validate_mapping_schema
from cursor_pagination.window import CursorWindow

logger = logging.getLogger(__name__)


class SessionProvider(Protocol):
    def get_session(self) -> AsyncSession: ...


class CursorRepository(Generic[TModel, TSchema]):
    """
    Single-model repository that fetches **cursor windows**.

    It is the query executor of the cursor contract: it runs a CursorRequest against the model's
    table and hands back a CursorWindow whose request already knows whether a next window exists.

    Configuration
    -------------
    - `model` / `mapping_schema` are inferred from the generic arguments
      (`CursorRepository[Event, EventSchema]`) unless declared on the subclass.
    - When `mapping_schema` is set, window items are converted with `model_validate(row)` by default.
    - Sessions come from, in order: the `session=` argument of a call, the class-wide
      SessionProvider, the session given to `__init__`.

    >>> class EventRepo(CursorRepository[Event, EventSchema]):
    ...     filter_class = EventFilter
    >>> repo = EventRepo(session)
    >>> window = await repo.fetch(KeysetCursorRequest.of_size(50, Sort.by('id')))
    >>> while window.has_next():
    ...     window = await repo.fetch(window.next_cursor_request())
    """

    _session_provider: SessionProvider | None = None

    model: Annotated[
        type[TModel],
        Doc('Target SQLAlchemy ORM model class. Usually inferred from the first generic argument.'),
    ]
    mapping_schema: Annotated[
        type[TSchema] | None,
        Doc('Pydantic schema window items are converted to. Requires from_attributes=True.'),
    ] = None
    filter_class: Annotated[
        type[BaseCursorFilter] | None,
        Doc('Filter class accepted by fetch()/scroll(). None accepts any BaseCursorFilter.'),
    ] = None
    _default_convert_schema: Annotated[
        bool,
        Doc('True returns schema objects by default, False returns ORM objects.'),
    ] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """
        Infer `model` and `mapping_schema` from `CursorRepository[Model, Schema]` and validate the schema.
        """
        super().__init_subclass__(**kwargs)

        inferred_model: type[DeclarativeBase] | None = None
        inferred_schema: type[BaseModel] | None = None

        for base in getattr(cls, '__orig_bases__', []):
            args = get_args(base)
            if not args:
                continue

            if inferred_model is None and isinstance(args[0], type):
                inferred_model = args[0]

            if inferred_schema is None and len(args) >= 2:
                schema_arg = args[1]
                if isinstance(schema_arg, type) and issubclass(schema_arg, BaseModel):
                    inferred_schema = schema_arg

        if not hasattr(cls, 'model') and inferred_model is not None:
            cls.model = cast(type[TModel], inferred_model)

        if getattr(cls, 'mapping_schema', None) is None and inferred_schema is not None:
            cls.mapping_schema = cast(type[TSchema], inferred_schema)

        if getattr(cls, 'mapping_schema', None) is not None:
            validate_mapping_schema(cast(type[BaseModel], cls.mapping_schema))
            cls._default_convert_schema = True

    def __init__(
        self,
        session: Annotated[
            AsyncSession | None,
            Doc('AsyncSession to bind. If None, a SessionProvider or a per-call session must be used.'),
        ] = None,
        *,
        default_convert_schema: Annotated[
            bool | None,
            Doc('Default item type when a call does not say. True=schema, False=ORM. None keeps the class default.'),
        ] = None,
    ):
        if not hasattr(self, 'model'):
            raise TypeError(f'{type(self).__name__} must declare `model` or a generic model argument.')

        self._specific_session = session
        sa_mapper(self.model)  # fail early for unmapped classes

        if self.mapping_schema is not None:
            self._validate_schema_against_model(cast(type[BaseModel], self.mapping_schema))

        if default_convert_schema is not None:
            if default_convert_schema and self.mapping_schema is None:
                raise InvalidArgumentError('default_convert_schema=True is not allowed without mapping_schema.')
            self._default_convert_schema = default_convert_schema

        if session is not None and self._session_provider is not None:
            warnings.warn(
                '[CursorRepository] A session was passed to __init__ but a SessionProvider is also configured. '
                'The SessionProvider takes precedence and the session will be ignored.',
                stacklevel=2,
            )

    @classmethod
    def configure_session_provider(cls, provider: SessionProvider | None) -> None:
        cls._session_provider = provider

    @property
    def session(self) -> AsyncSession:
        if self._session_provider is not None:
            return self._session_provider.get_session()
        if self._specific_session is None:
            raise InvalidStateError('Neither SessionProvider nor session is configured.')
        return self._specific_session

    def _resolve_session(self, session: AsyncSession | None) -> AsyncSession:
        return session if session is not None else self.session

    def _validate_schema_against_model(self, schema: type[BaseModel]) -> None:
        """Required schema fields must be model columns, otherwise model_validate(row) fails per row."""
        model_column_names = {prop.key for prop in sa_mapper(self.model).column_attrs}
        required = {n for n, f in schema.model_fields.items() if f.is_required()}
        missing = required - model_column_names
        if missing:
            raise TypeError(
                f'Required schema fields must map to model columns: missing={missing} (model={self.model.__name__})'
            )

    def _check_filter(self, flt: BaseCursorFilter | None) -> None:
        if flt is None or self.filter_class is None:
            return
        if not isinstance(flt, self.filter_class):
            raise InvalidArgumentError(
                f'{type(self).__name__} expects {self.filter_class.__name__}, got {type(flt).__name__}.'
            )

    def _convert(self, row: TModel, *, convert_schema: bool | None = None) -> TSchema | TModel:
        effective = self._default_convert_schema if convert_schema is None else convert_schema
        schema = self.mapping_schema
        if not effective or schema is None:
            return row
        return cast(TSchema, cast(type[BaseModel], schema).model_validate(row))

    def query(
        self,
        request: Annotated[CursorRequest, Doc('Cursor request of the window to fetch.')],
        flt: Annotated[BaseCursorFilter | None, Doc('WHERE filter (optional).')] = None,
    ) -> Annotated[CursorQuery[TModel], Doc('Unsealed CursorQuery for this model.')]:
        self._check_filter(flt)
        return CursorQuery[TModel](self.model, request, flt=flt)

    async def fetch(
        self,
        request: Annotated[CursorRequest, Doc('Cursor request of the window to fetch.')],
        *,
        flt: Annotated[BaseCursorFilter | None, Doc('WHERE filter (optional).')] = None,
        session: Annotated[AsyncSession | None, Doc('Session to use for execution (optional).')] = None,
        convert_schema: Annotated[bool | None, Doc('Per-call schema conversion flag. None uses default.')] = None,
    ) -> Annotated[CursorWindow[Any], Doc('Fetched window; its request carries the continuation state.')]:
        """
        Execute one cursor request.

        1. Build the statement (WHERE → ORDER BY → paging, `size + 1` rows).
        2. Execute it.
        3. Resolve the continuation state and drop the look-ahead row.
        4. Convert items to `mapping_schema` when enabled.
        """
        q = self.query(request, flt)
        stmt = query_to_stmt(q)
        s = self._resolve_session(session)

        result = await s.execute(stmt)
        scalars: ScalarResult[TModel] = result.scalars()
        rows: list[TModel] = list(scalars)

        window = resolve_window(q, rows)
        logger.debug(
            'Fetched %d %s rows for %r (has_next=%s)',
            window.size,
            self.model.__name__,
            request,
            window.has_next(),
        )
        return window.map(lambda r: self._convert(r, convert_schema=convert_schema))

    @experimental
    async def scroll(
        self,
        request: Annotated[CursorRequest, Doc('First cursor request of the lineage.')],
        *,
        flt: Annotated[BaseCursorFilter | None, Doc('WHERE filter applied to every window.')] = None,
        session: Annotated[AsyncSession | None, Doc('Session to use for execution (optional).')] = None,
        convert_schema: Annotated[bool | None, Doc('Per-call schema conversion flag.')] = None,
    ) -> AsyncIterator[CursorWindow[Any]]:
        """
        Yield windows from `request` until the last one. Empty windows are not yielded.

        Stopping the iteration early is the way to cancel.
        """
        current: CursorRequest | None = request
        while current is not None:
            window = await self.fetch(current, flt=flt, session=session, convert_schema=convert_schema)
            if not window.is_empty():
                yield window
            current = window.next_cursor_request() if window.has_next() else None
