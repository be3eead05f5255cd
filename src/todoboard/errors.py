"""Exceptions raised by board operations and repositories."""


class BoardError(Exception):
    """Base exception for board errors."""

    pass


class NotFoundError(BoardError):
    """Referenced category or todo does not exist."""

    pass


class ValidationError(BoardError):
    """Input rejected before any state was touched (e.g. empty title)."""

    pass


class PersistenceError(BoardError):
    """Remote store rejected the write or could not be reached."""

    pass


class TransactionConflictError(PersistenceError):
    """Atomic multi-document write was aborted."""

    pass
