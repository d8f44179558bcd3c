"""Tenant context value object for the authenticated principal.

This is the explicit request context threaded into every application
service call. It is framework-agnostic and carries no behaviour beyond
simple role checks, making it safe for the shared kernel.

The resolution logic (session token validation, user lookup, stale
membership detection) lives in the IAM bounded context's dependency layer.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.observability_context import ObservationContext

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class TenantContext:
    """Resolved (user, tenant, role) for the current request.

    Attributes:
        user_id: The authenticated user's identifier.
        email: The authenticated user's normalized email address.
        tenant_id: The tenant every data access is confined to.
        role: The user's role within that tenant ('admin' or 'member').
    """

    user_id: str
    email: str
    tenant_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        """Whether the principal administers its tenant."""
        return self.role == ADMIN_ROLE

    def observation_context(self, request_id: str | None = None) -> ObservationContext:
        """Build the observation context probes should log with."""
        return ObservationContext(
            request_id=request_id,
            user_id=self.user_id,
            tenant_id=self.tenant_id,
        )
