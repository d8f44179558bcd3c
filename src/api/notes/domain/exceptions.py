"""Domain exceptions for the Notes bounded context."""

from shared_kernel.exceptions import LimitReachedError, ValidationFailedError


class InvalidNoteError(ValidationFailedError):
    """Raised when a note title or content breaks its length rules."""

    pass


class InvalidPlanError(ValidationFailedError):
    """Raised when a tenant plan is neither free nor pro."""

    code = "INVALID_PLAN"


class NoteLimitReachedError(LimitReachedError):
    """Raised when the tenant's plan does not allow another note."""

    def __init__(
        self,
        message: str = "Note limit reached. Upgrade to Pro plan for unlimited notes.",
    ):
        super().__init__(message)
