"""Protocol for authentication observability.

Defines the interface for domain probes that capture password login
events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthenticationProbe(Protocol):
    """Domain probe for authentication operations."""

    def login_succeeded(self, user_id: str, tenant_id: str) -> None:
        """Record a successful password login."""
        ...

    def login_failed(self, reason: str) -> None:
        """Record a rejected password login."""
        ...

    def with_context(self, context: ObservationContext) -> AuthenticationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthenticationProbe:
    """Default implementation of AuthenticationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthenticationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthenticationProbe(logger=self._logger, context=context)

    def login_succeeded(self, user_id: str, tenant_id: str) -> None:
        """Record a successful password login."""
        self._logger.info(
            "login_succeeded",
            authenticated_user_id=user_id,
            authenticated_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def login_failed(self, reason: str) -> None:
        """Record a rejected password login."""
        self._logger.warning(
            "login_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )
