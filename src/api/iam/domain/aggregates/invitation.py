"""Invitation aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from iam.domain.exceptions import InvitationNotActiveError
from iam.domain.value_objects import (
    EmailAddress,
    InvitationId,
    InvitationStatus,
    TenantId,
    TenantRole,
    UserId,
)


@dataclass
class Invitation:
    """Invitation aggregate: a time-limited capability to join a tenant.

    The token is a bearer capability; anyone holding it may accept.

    Lifecycle:
    - pending -> accepted (terminal, via ``accept``)
    - pending -> expired (terminal, implicit once ``expires_at`` passes)
    - pending -> removed (terminal, cancellation deletes the record)
    """

    id: InvitationId
    email: EmailAddress
    tenant_id: TenantId
    invited_by: UserId
    role: TenantRole
    token: str
    status: InvitationStatus
    expires_at: datetime
    created_at: datetime
    accepted_at: datetime | None = None

    @classmethod
    def issue(
        cls,
        email: EmailAddress,
        tenant_id: TenantId,
        invited_by: UserId,
        role: TenantRole,
        token: str,
        now: datetime,
        ttl: timedelta,
    ) -> Invitation:
        """Factory method for a new pending invitation.

        Args:
            email: Normalized address of the invitee
            tenant_id: Tenant the invitee will join
            invited_by: Admin issuing the invitation
            role: Role granted on acceptance
            token: Unguessable URL-safe capability
            now: Issue time
            ttl: Lifetime before the invitation lapses

        Returns:
            A pending Invitation
        """
        return cls(
            id=InvitationId.generate(),
            email=email,
            tenant_id=tenant_id,
            invited_by=invited_by,
            role=role,
            token=token,
            status=InvitationStatus.PENDING,
            expires_at=now + ttl,
            created_at=now,
        )

    def is_expired(self, now: datetime) -> bool:
        """Whether the invitation has lapsed by time."""
        return self.expires_at <= now

    def is_active(self, now: datetime) -> bool:
        """Whether the invitation is pending and not yet expired."""
        return self.status == InvitationStatus.PENDING and not self.is_expired(now)

    def accept(self, now: datetime) -> None:
        """Consume the invitation.

        Raises:
            InvitationNotActiveError: If already accepted or expired
        """
        if not self.is_active(now):
            raise InvitationNotActiveError()
        self.status = InvitationStatus.ACCEPTED
        self.accepted_at = now
