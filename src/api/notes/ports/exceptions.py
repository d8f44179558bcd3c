"""Port-level exceptions for the Notes bounded context."""

from notes.domain.exceptions import (
    InvalidNoteError,
    InvalidPlanError,
    NoteLimitReachedError,
)
from shared_kernel.exceptions import NotFoundError


class NoteNotFoundError(NotFoundError):
    """Raised when a note is missing or belongs to another tenant."""

    def __init__(self, message: str = "Note not found"):
        super().__init__(message)


class NoteTenantNotFoundError(NotFoundError):
    """Raised when the caller's tenant row no longer exists."""

    def __init__(self, message: str = "Tenant not found"):
        super().__init__(message)


__all__ = [
    "InvalidNoteError",
    "InvalidPlanError",
    "NoteLimitReachedError",
    "NoteNotFoundError",
    "NoteTenantNotFoundError",
]
