class CursorPaginationError(Exception):
    """Base class for errors raised by cursor_pagination."""


class InvalidArgumentError(CursorPaginationError, ValueError):
    """
    Raised when a request, window or query is built from invalid input.

    e.g. size <= 0, negative offset, missing sort, a non-total sort for keyset paging,
    cursor keys that do not match the ordering.
    """


class InvalidStateError(CursorPaginationError, RuntimeError):
    """
    Raised when an operation is not allowed in the current state.

    e.g. asking for the next cursor request of a terminal request,
    advancing a keyset request before the next seek keys are registered.
    """


__all__ = ['CursorPaginationError', 'InvalidArgumentError', 'InvalidStateError']
