"""Domain invariant violations for the IAM context."""

from shared_kernel.exceptions import NotFoundError, ValidationFailedError


class InvalidEmailError(ValidationFailedError):
    """Raised when an email address cannot be normalized."""

    pass


class InvalidSlugError(ValidationFailedError):
    """Raised when a tenant slug is empty or contains unsupported characters."""

    pass


class InvitationNotActiveError(NotFoundError):
    """Raised when accepting an invitation that is no longer pending or has expired.

    Surfaces as a not-found so callers cannot tell a consumed token from
    one that never existed.
    """

    def __init__(self, message: str = "Invalid or expired invitation"):
        super().__init__(message)
