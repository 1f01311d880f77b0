from __future__ import annotations

from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION_SQLSTATE = "23505"
FOREIGN_KEY_VIOLATION_SQLSTATE = "23503"


class DirectoryError(ValueError):
    """Base for failures the API maps onto a specific status code."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFoundError(DirectoryError):
    def __init__(self, message: str, *, entity: str = "resource", entity_id: int | None = None) -> None:
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(DirectoryError):
    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a unique-constraint violation."""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    # sqlite3 exposes no SQLSTATE; fall back to its message text.
    return "UNIQUE constraint failed" in str(orig)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a missing referenced row."""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == FOREIGN_KEY_VIOLATION_SQLSTATE
    return "FOREIGN KEY constraint failed" in str(orig)
