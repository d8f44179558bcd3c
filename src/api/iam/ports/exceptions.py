"""Domain exceptions for IAM bounded context.

Each exception subclasses one of the shared tagged errors, so the
presentation boundary can translate it without knowing the concrete type.
"""

from shared_kernel.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationFailedError,
)


class AdminRoleRequiredError(ForbiddenError):
    """Raised when a member attempts an admin-only operation."""

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message)


class TenantNotFoundError(NotFoundError):
    """Raised when a tenant cannot be found."""

    def __init__(self, message: str = "Tenant not found"):
        super().__init__(message)


class CrossTenantOperationError(ForbiddenError):
    """Raised when an admin targets a tenant other than their own."""

    pass


class DuplicateTenantSlugError(ConflictError):
    """Raised when a tenant slug is already taken."""

    pass


class DuplicateUserEmailError(ConflictError):
    """Raised when a user with the same email already exists.

    Emails are unique across the whole system, not just within a tenant.
    """

    pass


class UserAlreadyInTenantError(ConflictError):
    """Raised when inviting an email that already belongs to the inviter's tenant."""

    def __init__(self, message: str = "User already exists in this tenant"):
        super().__init__(message)


class DuplicateInvitationError(ConflictError):
    """Raised when a live pending invitation already exists for (email, tenant).

    Also raised when a concurrent issue wins the race on the partial unique
    index guarding pending invitations.
    """

    def __init__(
        self, message: str = "A pending invitation already exists for this email"
    ):
        super().__init__(message)


class DuplicateInvitationTokenError(Exception):
    """Raised by the repository when a generated token collides with a stored one.

    Untagged: the application layer regenerates the token and retries.
    """

    pass


class InvitationTokenGenerationError(InternalError):
    """Raised when token regeneration keeps colliding."""

    def __init__(self, message: str = "Could not generate a unique invitation token"):
        super().__init__(message)


class InvitationNotFoundError(NotFoundError):
    """Raised when an invitation is missing, expired, consumed or in another tenant."""

    def __init__(self, message: str = "Invalid or expired invitation"):
        super().__init__(message)


class PasswordMismatchError(ValidationFailedError):
    """Raised when a password and its confirmation differ."""

    code = "PASSWORD_MISMATCH"

    def __init__(self, message: str = "Passwords do not match"):
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match a user."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)
