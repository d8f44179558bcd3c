"""PostgreSQL implementation of IInvitationRepository.

Expiry is lazy: every query that returns live invitations filters on
``status = 'pending' AND expires_at > now`` instead of relying on a sweep.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Invitation
from iam.domain.value_objects import (
    EmailAddress,
    InvitationId,
    InvitationStatus,
    TenantId,
    TenantRole,
    UserId,
)
from iam.infrastructure.models import InvitationModel
from iam.infrastructure.models.invitation import (
    INVITATION_TOKEN_CONSTRAINT,
    PENDING_INVITATION_INDEX,
)
from iam.infrastructure.observability import (
    DefaultInvitationRepositoryProbe,
    InvitationRepositoryProbe,
)
from iam.ports.exceptions import (
    DuplicateInvitationError,
    DuplicateInvitationTokenError,
)
from iam.ports.repositories import IInvitationRepository
from infrastructure.database import constraint_mentioned

_PENDING = InvitationStatus.PENDING.value


def _active(now: datetime):
    return and_(
        InvitationModel.status == _PENDING,
        InvitationModel.expires_at > now,
    )


class InvitationRepository(IInvitationRepository):
    """Repository managing PostgreSQL storage for Invitation aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: InvitationRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultInvitationRepositoryProbe()

    async def add(self, invitation: Invitation) -> None:
        """Insert a new pending invitation.

        Callers that want to retry on a token collision should wrap this in
        a savepoint; a failed flush invalidates the enclosing transaction.

        Raises:
            DuplicateInvitationError: If a pending invitation for the same
                (email, tenant) exists
            DuplicateInvitationTokenError: If the token collides
        """
        model = InvitationModel(
            id=invitation.id.value,
            email=invitation.email.value,
            tenant_id=invitation.tenant_id.value,
            invited_by=invitation.invited_by.value,
            role=invitation.role.value,
            status=invitation.status.value,
            token=invitation.token,
            expires_at=invitation.expires_at,
            accepted_at=invitation.accepted_at,
            created_at=invitation.created_at,
        )
        self._session.add(model)

        try:
            await self._session.flush()
        except IntegrityError as e:
            if constraint_mentioned(e, INVITATION_TOKEN_CONSTRAINT):
                self._probe.token_conflict()
                raise DuplicateInvitationTokenError() from e
            if constraint_mentioned(e, PENDING_INVITATION_INDEX):
                self._probe.pending_invitation_conflict()
                raise DuplicateInvitationError() from e
            raise

        self._probe.invitation_added(invitation.id.value)

    async def expire_stale(
        self, email: EmailAddress, tenant_id: TenantId, now: datetime
    ) -> int:
        """Flip lapsed pending rows for (email, tenant) to expired."""
        stmt = (
            update(InvitationModel)
            .where(
                InvitationModel.email == email.value,
                InvitationModel.tenant_id == tenant_id.value,
                InvitationModel.status == _PENDING,
                InvitationModel.expires_at <= now,
            )
            .values(status=InvitationStatus.EXPIRED.value)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def get_active_for_email_in_tenant(
        self, email: EmailAddress, tenant_id: TenantId, now: datetime
    ) -> Invitation | None:
        """Retrieve the live pending invitation for (email, tenant), if any."""
        stmt = select(InvitationModel).where(
            InvitationModel.email == email.value,
            InvitationModel.tenant_id == tenant_id.value,
            _active(now),
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def get_active_by_token(self, token: str, now: datetime) -> Invitation | None:
        """Retrieve the live pending invitation carrying this token, if any."""
        stmt = select(InvitationModel).where(
            InvitationModel.token == token,
            _active(now),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_active_for_tenant(
        self, tenant_id: TenantId, now: datetime
    ) -> list[Invitation]:
        """List live pending invitations of a tenant, newest first."""
        stmt = (
            select(InvitationModel)
            .where(InvitationModel.tenant_id == tenant_id.value, _active(now))
            .order_by(InvitationModel.created_at.desc(), InvitationModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_active_for_email(
        self, email: EmailAddress, now: datetime
    ) -> list[Invitation]:
        """List live pending invitations addressed to an email, newest first."""
        stmt = (
            select(InvitationModel)
            .where(InvitationModel.email == email.value, _active(now))
            .order_by(InvitationModel.created_at.desc(), InvitationModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def delete_pending(
        self, invitation_id: InvitationId, tenant_id: TenantId
    ) -> bool:
        """Delete a pending invitation scoped to the tenant."""
        stmt = (
            delete(InvitationModel)
            .where(
                InvitationModel.id == invitation_id.value,
                InvitationModel.tenant_id == tenant_id.value,
                InvitationModel.status == _PENDING,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return (result.rowcount or 0) > 0

    async def mark_accepted(self, invitation: Invitation, now: datetime) -> bool:
        """Conditionally move a live pending invitation to accepted."""
        stmt = (
            update(InvitationModel)
            .where(InvitationModel.id == invitation.id.value, _active(now))
            .values(status=InvitationStatus.ACCEPTED.value, accepted_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if (result.rowcount or 0) == 1:
            self._probe.invitation_accepted(invitation.id.value)
            return True

        self._probe.invitation_accept_conflict(invitation.id.value)
        return False

    async def purge_expired(self, now: datetime) -> int:
        """Physically delete invitations that lapsed while pending."""
        stmt = (
            delete(InvitationModel)
            .where(
                InvitationModel.status.in_(
                    [_PENDING, InvitationStatus.EXPIRED.value]
                ),
                InvitationModel.expires_at <= now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        count = result.rowcount or 0
        self._probe.expired_invitations_purged(count)
        return count

    @staticmethod
    def _to_domain(model: InvitationModel) -> Invitation:
        return Invitation(
            id=InvitationId(value=model.id),
            email=EmailAddress(value=model.email),
            tenant_id=TenantId(value=model.tenant_id),
            invited_by=UserId(value=model.invited_by),
            role=TenantRole(model.role),
            token=model.token,
            status=InvitationStatus(model.status),
            expires_at=model.expires_at,
            created_at=model.created_at,
            accepted_at=model.accepted_at,
        )
