"""Protocol for tenant application service observability.

Defines the interface for domain probes that capture application-level
domain events for tenant service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant application service operations."""

    def tenant_created(self, tenant_id: str, slug: str) -> None:
        """Record that a tenant was created."""
        ...

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        ...

    def tenant_upgraded(self, tenant_id: str, changed: bool) -> None:
        """Record that a tenant was moved to the pro plan."""
        ...

    def cross_tenant_upgrade_denied(self, tenant_id: str, requested_slug: str) -> None:
        """Record that an admin tried to upgrade a tenant other than their own."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, slug: str) -> None:
        """Record that a tenant was created."""
        self._logger.info(
            "tenant_created",
            created_tenant_id=tenant_id,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        self._logger.debug(
            "tenant_not_found",
            missing_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_upgraded(self, tenant_id: str, changed: bool) -> None:
        """Record that a tenant was moved to the pro plan."""
        self._logger.info(
            "tenant_upgraded",
            upgraded_tenant_id=tenant_id,
            changed=changed,
            **self._get_context_kwargs(),
        )

    def cross_tenant_upgrade_denied(self, tenant_id: str, requested_slug: str) -> None:
        """Record that an admin tried to upgrade a tenant other than their own."""
        self._logger.warning(
            "cross_tenant_upgrade_denied",
            own_tenant_id=tenant_id,
            requested_slug=requested_slug,
            **self._get_context_kwargs(),
        )
