from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from cursor_pagination.repository.cursor_repo import CursorRepository

RepoT = TypeVar('RepoT', bound=CursorRepository)


def provide_repo(
    repo_type: type[RepoT],
    *,
    default_convert_schema: bool | None = None,
) -> Callable[[AsyncSession], Awaitable[RepoT]]:
    """
    Dependency provider building `repo_type` on the request's `session` dependency.

        app = Litestar(
            route_handlers=[list_events],
            dependencies={
                'session': Provide(get_session),
                'event_repo': Provide(provide_repo(EventRepository)),
            },
        )

    `default_convert_schema` is forwarded to the repository (None keeps the class default).
    """

    async def _provide(session: AsyncSession) -> RepoT:
        return repo_type(session, default_convert_schema=default_convert_schema)

    return _provide
