from .cursor_repo import CursorRepository, SessionProvider

__all__ = ['CursorRepository', 'SessionProvider']
