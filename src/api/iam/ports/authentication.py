"""Authentication ports for IAM bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ISessionTokenIssuer(Protocol):
    """Signs session tokens for an authenticated principal.

    Services supply only the claims; signing and expiry belong to the issuer.
    """

    def issue(self, user_id: str, tenant_id: str, role: str) -> str:
        """Return a signed session token bound to (user, tenant, role)."""
        ...
