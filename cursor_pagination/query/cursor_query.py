from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Annotated, Any, Generic

from sqlalchemy import Select, select
from sqlalchemy.sql.elements import ColumnElement
from typing_extensions import Doc

from cursor_pagination.base_filter import BaseCursorFilter
from cursor_pagination.exceptions import InvalidArgumentError, InvalidStateError
from cursor_pagination.repo_types import TModel
from cursor_pagination.request import CursorRequest, KeysetCursorRequest, OffsetCursorRequest
from cursor_pagination.window import CursorWindow

from .strategies import KeysetStrategy, OffsetStrategy, OrderByStrategy

# One extra row is fetched past the window so the last window is recognised without another round trip.
LOOKAHEAD = 1


class CursorQuery(Generic[TModel]):
    """
    Read-only query for one cursor window.

    This is a **pure state object** pairing a model, an optional WHERE filter and the cursor request
    to fetch. Execution belongs to a higher layer (`CursorRepository.fetch`, or `query_to_stmt` +
    `resolve_window` for callers running statements themselves).

    Design principles
    -----------------
    - WHERE: a single BaseCursorFilter, `where()` at most once.
    - ORDER: always the request's Sort, translated by OrderByStrategy.
    - PAGING: chosen by the request type.
        - OffsetCursorRequest → OFFSET/LIMIT
        - KeysetCursorRequest → seek WHERE + LIMIT (the ordering must cover a unique key)
      Both fetch `size + 1` rows; the extra row only tells whether a next window exists.
    - Once converted into a Select, the query is sealed.

    Typical usage
    -------------
    >>> q = CursorQuery(Event, KeysetCursorRequest.of_size(50, Sort.by('created_at', 'id')))
    >>> stmt = query_to_stmt(q.where(EventFilter(tenant_id=1)))
    >>> rows = (await session.execute(stmt)).scalars().all()
    >>> window = resolve_window(q, rows)
    """

    def __init__(
        self,
        model: type[TModel],
        request: CursorRequest,
        flt: BaseCursorFilter | None = None,
    ) -> None:
        if not isinstance(request, (OffsetCursorRequest, KeysetCursorRequest)):
            raise InvalidArgumentError(f'Unsupported cursor request type: {type(request).__name__}')

        self.model: type[TModel] = model
        self._request: CursorRequest = request
        self._filter: BaseCursorFilter | None = flt
        self._order_cols: list[ColumnElement[Any]] | None = None
        self._sealed: bool = False

    def _ensure_mutable(self) -> None:
        if self._sealed:
            raise InvalidStateError('This query has already been used. Create a new CursorQuery.')

    def where(self, flt: BaseCursorFilter | None) -> CursorQuery[TModel]:
        """
        Set the WHERE filter. None is a no-op.

        Raises
        ------
        InvalidArgumentError
            If a filter is already set.
        InvalidStateError
            If called while sealed.
        """
        self._ensure_mutable()
        if flt is None:
            return self
        if self._filter is not None:
            raise InvalidArgumentError('where() can be called only once. Combine conditions in BaseCursorFilter.')
        self._filter = flt
        return self

    @property
    def request(self) -> Annotated[CursorRequest, Doc('The cursor request this query fetches.')]:
        return self._request

    @property
    def filter(self) -> Annotated[BaseCursorFilter | None, Doc('The current filter (or None if unset).')]:
        return self._filter

    @property
    def sealed(self) -> Annotated[bool, Doc('True once the query has been converted into a statement.')]:
        return self._sealed

    @property
    def order_cols(self) -> Annotated[list[ColumnElement[Any]], Doc('ORDER BY columns derived from the Sort.')]:
        if self._order_cols is None:
            self._order_cols = _compute_order_cols(self)
        return self._order_cols


def _apply_where(stmt: Select[tuple[TModel]], q: CursorQuery[TModel]) -> Select[tuple[TModel]]:
    if q.filter is None:
        return stmt
    crit = q.filter.where_criteria(q.model)
    if crit:
        stmt = stmt.where(*crit)
    return stmt


def _compute_order_cols(q: CursorQuery[TModel]) -> list[ColumnElement[Any]]:
    """
    Translate the request's Sort into ORDER BY columns.

    Keyset requests must be ordered by a unique key of the model, otherwise two rows can share a
    seek position and rows are skipped or repeated between windows. Nullable columns must say
    where their NULLs sort.
    """
    cols = OrderByStrategy.apply(q.model, q.request.sort)
    if isinstance(q.request, KeysetCursorRequest):
        OrderByStrategy.ensure_unique(q.model, cols)
        OrderByStrategy.ensure_null_placement(cols)
    return cols


def _apply_paging(
    stmt: Select[tuple[TModel]],
    q: CursorQuery[TModel],
    order_cols: Sequence[ColumnElement[Any]],
) -> Select[tuple[TModel]]:
    request = q.request
    limit = request.size + LOOKAHEAD

    if isinstance(request, KeysetCursorRequest):
        return KeysetStrategy.apply(
            stmt,
            order_cols=order_cols,
            cursor=request.keys,
            size=limit,
            keys=request.sort.properties,
        )

    if isinstance(request, OffsetCursorRequest):
        return OffsetStrategy.apply(stmt, offset=request.offset, size=limit)

    raise InvalidArgumentError(f'Unsupported cursor request type: {type(request).__name__}')


def _build_cursor_query(q: CursorQuery[TModel]) -> Select[tuple[TModel]]:
    """
    Convert a CursorQuery into a Select.

    Conversion order
    ----------------
    1. `select(q.model)`
    2. WHERE from the filter
    3. ORDER BY from the request's Sort
    4. OFFSET or keyset paging, limited to `size + 1`
    5. Seal the query
    """
    q._ensure_mutable()
    stmt = select(q.model)
    stmt = _apply_where(stmt, q)
    order_cols = q.order_cols
    stmt = stmt.order_by(*order_cols)
    stmt = _apply_paging(stmt, q, order_cols)
    q._sealed = True
    return stmt


def resolve_window(
    request: CursorRequest | CursorQuery[Any],
    rows: Iterable[Any],
    order_cols: Sequence[ColumnElement[Any]] | None = None,
) -> CursorWindow[Any]:
    """
    Turn fetched rows into a CursorWindow whose request carries the continuation state.

    `rows` is the result of a statement limited to `size + 1`:
    - more than `size` rows → a next window exists; the look-ahead row is dropped
        - offset: the request stays open
        - keyset: `with_next(<sort values of the last returned row>)`
    - `size` rows or fewer → `with_last(True)`

    Parameters
    ----------
    request:
        The executed cursor request, or the CursorQuery that wraps it (its order_cols are reused).
    rows:
        Fetched rows in query order.
    order_cols:
        ORDER BY columns, needed for keyset requests when `request` is not a CursorQuery.
    """
    if isinstance(request, CursorQuery):
        if order_cols is None:
            order_cols = request.order_cols
        request = request.request

    fetched = list(rows)
    has_more = len(fetched) > request.size
    content = fetched[: request.size]

    if isinstance(request, OffsetCursorRequest):
        return CursorWindow.of(request.with_last(not has_more), content)

    if isinstance(request, KeysetCursorRequest):
        if not has_more:
            return CursorWindow.of(request.with_last(True), content)
        if not order_cols:
            raise InvalidArgumentError('Keyset windows need order_cols to read the next seek keys.')
        keys = KeysetStrategy.cursor_from_row(content[-1], order_cols, keys=request.sort.properties)
        return CursorWindow.of(request.with_next(keys), content)

    raise InvalidArgumentError(f'Unsupported cursor request type: {type(request).__name__}')
