"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to resolving a session token into a
tenant context.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_context_resolved(self, user_id: str, tenant_id: str, role: str) -> None:
        """Record that a request was bound to a tenant context."""
        ...

    def credentials_missing(self) -> None:
        """Record that a protected route was called without a bearer token."""
        ...

    def user_no_longer_exists(self, user_id: str) -> None:
        """Record that a valid token referenced a deleted user."""
        ...

    def stale_tenant_membership(
        self,
        user_id: str,
        token_tenant_id: str,
        current_tenant_id: str,
    ) -> None:
        """Record that a token predates the user's move to another tenant."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_context_resolved(self, user_id: str, tenant_id: str, role: str) -> None:
        """Record that a request was bound to a tenant context."""
        self._logger.debug(
            "tenant_context_resolved",
            resolved_user_id=user_id,
            resolved_tenant_id=tenant_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def credentials_missing(self) -> None:
        """Record that a protected route was called without a bearer token."""
        self._logger.info(
            "credentials_missing",
            **self._get_context_kwargs(),
        )

    def user_no_longer_exists(self, user_id: str) -> None:
        """Record that a valid token referenced a deleted user."""
        self._logger.warning(
            "user_no_longer_exists",
            subject_user_id=user_id,
            **self._get_context_kwargs(),
        )

    def stale_tenant_membership(
        self,
        user_id: str,
        token_tenant_id: str,
        current_tenant_id: str,
    ) -> None:
        """Record that a token predates the user's move to another tenant."""
        self._logger.warning(
            "stale_tenant_membership",
            subject_user_id=user_id,
            token_tenant_id=token_tenant_id,
            current_tenant_id=current_tenant_id,
            **self._get_context_kwargs(),
        )
