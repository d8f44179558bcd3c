"""Authentication shared kernel module."""

from shared_kernel.auth.observability import (
    DefaultSessionTokenProbe,
    SessionTokenProbe,
)
from shared_kernel.auth.session_tokens import (
    InvalidTokenError,
    SessionClaims,
    SessionTokenService,
)

__all__ = [
    "DefaultSessionTokenProbe",
    "InvalidTokenError",
    "SessionClaims",
    "SessionTokenProbe",
    "SessionTokenService",
]
