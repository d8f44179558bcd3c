"""Domain probe for IAM repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to tenant, user and invitation
repository operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class _ContextualProbe:
    """Shared structlog plumbing for the default repository probes."""

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

    def with_context(self, context: ObservationContext):
        """Create a new probe with observation context bound."""
        return type(self)(logger=self._logger, context=context)


class TenantRepositoryProbe(Protocol):
    """Domain probe for tenant repository operations."""

    def tenant_saved(self, tenant_id: str, slug: str) -> None:
        """Record that a tenant was inserted or updated."""
        ...

    def duplicate_tenant_slug(self, slug: str) -> None:
        """Record that a tenant slug was already taken."""
        ...

    def with_context(self, context: ObservationContext) -> TenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantRepositoryProbe(_ContextualProbe):
    """Default implementation of TenantRepositoryProbe using structlog."""

    def tenant_saved(self, tenant_id: str, slug: str) -> None:
        self._logger.debug(
            "tenant_saved",
            saved_tenant_id=tenant_id,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant_slug(self, slug: str) -> None:
        self._logger.warning(
            "duplicate_tenant_slug",
            slug=slug,
            **self._get_context_kwargs(),
        )


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_saved(self, user_id: str, tenant_id: str, role: str) -> None:
        """Record that a user was inserted or updated."""
        ...

    def duplicate_user_email(self) -> None:
        """Record that a user email was already registered."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe(_ContextualProbe):
    """Default implementation of UserRepositoryProbe using structlog."""

    def user_saved(self, user_id: str, tenant_id: str, role: str) -> None:
        self._logger.debug(
            "user_saved",
            saved_user_id=user_id,
            member_of_tenant_id=tenant_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def duplicate_user_email(self) -> None:
        self._logger.warning(
            "duplicate_user_email",
            **self._get_context_kwargs(),
        )


class InvitationRepositoryProbe(Protocol):
    """Domain probe for invitation repository operations."""

    def invitation_added(self, invitation_id: str) -> None:
        """Record that an invitation row was inserted."""
        ...

    def pending_invitation_conflict(self) -> None:
        """Record that the pending-invitation unique index rejected an insert."""
        ...

    def token_conflict(self) -> None:
        """Record that the token unique constraint rejected an insert."""
        ...

    def invitation_accepted(self, invitation_id: str) -> None:
        """Record that the conditional accept update matched a row."""
        ...

    def invitation_accept_conflict(self, invitation_id: str) -> None:
        """Record that the conditional accept update matched nothing."""
        ...

    def expired_invitations_purged(self, count: int) -> None:
        """Record that lapsed invitations were physically deleted."""
        ...

    def with_context(self, context: ObservationContext) -> InvitationRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultInvitationRepositoryProbe(_ContextualProbe):
    """Default implementation of InvitationRepositoryProbe using structlog."""

    def invitation_added(self, invitation_id: str) -> None:
        self._logger.debug(
            "invitation_added",
            invitation_id=invitation_id,
            **self._get_context_kwargs(),
        )

    def pending_invitation_conflict(self) -> None:
        self._logger.info(
            "pending_invitation_conflict",
            **self._get_context_kwargs(),
        )

    def token_conflict(self) -> None:
        self._logger.warning(
            "invitation_token_conflict",
            **self._get_context_kwargs(),
        )

    def invitation_accepted(self, invitation_id: str) -> None:
        self._logger.debug(
            "invitation_marked_accepted",
            invitation_id=invitation_id,
            **self._get_context_kwargs(),
        )

    def invitation_accept_conflict(self, invitation_id: str) -> None:
        self._logger.info(
            "invitation_accept_conflict",
            invitation_id=invitation_id,
            **self._get_context_kwargs(),
        )

    def expired_invitations_purged(self, count: int) -> None:
        self._logger.info(
            "expired_invitations_purged",
            count=count,
            **self._get_context_kwargs(),
        )
