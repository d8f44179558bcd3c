"""Tagged error taxonomy shared by every bounded context.

Each error carries a stable machine-readable ``code`` and the HTTP status
the presentation boundary maps it to. Context-specific errors (for example
``NoteLimitReachedError``) subclass one of these tags so that callers can
handle a whole category without knowing every concrete type.

Services raise these errors; the global handlers registered by
``infrastructure.error_handlers`` translate them into
``{"success": false, "error": {"code": ..., "message": ...}}`` responses.
"""

from __future__ import annotations


class NotebaseError(Exception):
    """Base class for all tagged application errors."""

    code: str = "INTERNAL_ERROR"
    http_status: int = 500

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_response(self, expose_message: bool = True) -> dict:
        """Render the error envelope returned to HTTP callers."""
        return {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message if expose_message else "Internal server error",
            },
        }


class ValidationFailedError(NotebaseError):
    """Malformed or out-of-range input."""

    code = "VALIDATION_ERROR"
    http_status = 400


class ConflictError(NotebaseError):
    """A uniqueness rule would be violated (duplicate invite, duplicate user)."""

    code = "CONFLICT"
    http_status = 400


class AuthenticationError(NotebaseError):
    """Missing, invalid or stale credentials."""

    code = "UNAUTHORIZED"
    http_status = 401


class ForbiddenError(NotebaseError):
    """The caller's role or tenant does not permit the operation."""

    code = "FORBIDDEN"
    http_status = 403


class LimitReachedError(NotebaseError):
    """A plan limit denies the operation. Not retryable until the plan changes."""

    code = "LIMIT_REACHED"
    http_status = 403


class NotFoundError(NotebaseError):
    """Missing, expired or other-tenant resource.

    Deliberately indistinguishable from "exists in another tenant".
    """

    code = "NOT_FOUND"
    http_status = 404


class InternalError(NotebaseError):
    """Store or unexpected failure. The message is withheld outside debug mode."""

    code = "INTERNAL_ERROR"
    http_status = 500
