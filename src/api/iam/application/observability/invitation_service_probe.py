"""Protocol for invitation application service observability.

Defines the interface for domain probes that capture the invitation
lifecycle: issue, cancellation, inspection and acceptance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class InvitationServiceProbe(Protocol):
    """Domain probe for invitation lifecycle operations."""

    def invitation_issued(
        self, invitation_id: str, tenant_id: str, role: str, invited_by: str
    ) -> None:
        """Record that a pending invitation was created."""
        ...

    def invitee_already_in_tenant(self, tenant_id: str) -> None:
        """Record that the invitee already belongs to the inviter's tenant."""
        ...

    def duplicate_pending_invitation(self, tenant_id: str) -> None:
        """Record that a live pending invitation already existed for the pair."""
        ...

    def stale_invitations_expired(self, tenant_id: str, count: int) -> None:
        """Record that lapsed pending invitations were marked expired."""
        ...

    def token_collision(self, attempt: int) -> None:
        """Record that a generated token collided with a stored one."""
        ...

    def token_generation_exhausted(self, attempts: int) -> None:
        """Record that every token regeneration attempt collided."""
        ...

    def invitation_cancelled(self, invitation_id: str, tenant_id: str) -> None:
        """Record that a pending invitation was deleted."""
        ...

    def invitation_not_found(self, reason: str) -> None:
        """Record that an invitation lookup came back empty."""
        ...

    def invitations_listed(self, scope: str, count: int) -> None:
        """Record that pending invitations were listed."""
        ...

    def password_mismatch(self) -> None:
        """Record that an acceptance was rejected for mismatched passwords."""
        ...

    def acceptance_lost_race(self, invitation_id: str) -> None:
        """Record that a concurrent acceptance consumed the invitation first."""
        ...

    def invitation_accepted(
        self,
        invitation_id: str,
        user_id: str,
        tenant_id: str,
        role: str,
        user_created: bool,
        previous_tenant_id: str | None,
    ) -> None:
        """Record that an invitation was consumed and the user provisioned."""
        ...

    def with_context(self, context: ObservationContext) -> InvitationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultInvitationServiceProbe:
    """Default implementation of InvitationServiceProbe using structlog.

    Invitee emails and tokens are never logged; tokens are bearer
    capabilities.
    """

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultInvitationServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultInvitationServiceProbe(logger=self._logger, context=context)

    def invitation_issued(
        self, invitation_id: str, tenant_id: str, role: str, invited_by: str
    ) -> None:
        self._logger.info(
            "invitation_issued",
            invitation_id=invitation_id,
            invitation_tenant_id=tenant_id,
            role=role,
            invited_by=invited_by,
            **self._get_context_kwargs(),
        )

    def invitee_already_in_tenant(self, tenant_id: str) -> None:
        self._logger.info(
            "invitee_already_in_tenant",
            invitation_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def duplicate_pending_invitation(self, tenant_id: str) -> None:
        self._logger.info(
            "duplicate_pending_invitation",
            invitation_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def stale_invitations_expired(self, tenant_id: str, count: int) -> None:
        self._logger.debug(
            "stale_invitations_expired",
            invitation_tenant_id=tenant_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def token_collision(self, attempt: int) -> None:
        self._logger.warning(
            "invitation_token_collision",
            attempt=attempt,
            **self._get_context_kwargs(),
        )

    def token_generation_exhausted(self, attempts: int) -> None:
        self._logger.error(
            "invitation_token_generation_exhausted",
            attempts=attempts,
            **self._get_context_kwargs(),
        )

    def invitation_cancelled(self, invitation_id: str, tenant_id: str) -> None:
        self._logger.info(
            "invitation_cancelled",
            invitation_id=invitation_id,
            invitation_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def invitation_not_found(self, reason: str) -> None:
        self._logger.info(
            "invitation_not_found",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def invitations_listed(self, scope: str, count: int) -> None:
        self._logger.debug(
            "invitations_listed",
            scope=scope,
            count=count,
            **self._get_context_kwargs(),
        )

    def password_mismatch(self) -> None:
        self._logger.info(
            "invitation_password_mismatch",
            **self._get_context_kwargs(),
        )

    def acceptance_lost_race(self, invitation_id: str) -> None:
        self._logger.warning(
            "invitation_acceptance_lost_race",
            invitation_id=invitation_id,
            **self._get_context_kwargs(),
        )

    def invitation_accepted(
        self,
        invitation_id: str,
        user_id: str,
        tenant_id: str,
        role: str,
        user_created: bool,
        previous_tenant_id: str | None,
    ) -> None:
        # Cross-tenant moves log at warning
        log = (
            self._logger.warning
            if previous_tenant_id is not None and previous_tenant_id != tenant_id
            else self._logger.info
        )
        log(
            "invitation_accepted",
            invitation_id=invitation_id,
            accepted_user_id=user_id,
            invitation_tenant_id=tenant_id,
            role=role,
            user_created=user_created,
            previous_tenant_id=previous_tenant_id,
            **self._get_context_kwargs(),
        )
