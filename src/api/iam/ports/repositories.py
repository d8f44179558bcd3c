"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations flush but never commit; application services
own the transaction boundary.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from iam.domain.aggregates import Invitation, Tenant, User
from iam.domain.value_objects import EmailAddress, InvitationId, TenantId, UserId


@runtime_checkable
class ITenantRepository(Protocol):
    """Repository for Tenant aggregate persistence."""

    async def save(self, tenant: Tenant) -> None:
        """Insert or update a tenant.

        Raises:
            DuplicateTenantSlugError: If the slug is already taken
        """
        ...

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by its ID."""
        ...

    async def get_by_slug(self, slug: str) -> Tenant | None:
        """Retrieve a tenant by its (normalized) slug."""
        ...

    async def list_by_ids(self, tenant_ids: list[TenantId]) -> list[Tenant]:
        """Retrieve several tenants at once; unknown IDs are skipped."""
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence."""

    async def save(self, user: User) -> None:
        """Insert or update a user.

        Raises:
            DuplicateUserEmailError: If another user already has this email
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by ID."""
        ...

    async def get_by_email(self, email: EmailAddress) -> User | None:
        """Retrieve a user by email, across all tenants."""
        ...

    async def exists_in_tenant(self, email: EmailAddress, tenant_id: TenantId) -> bool:
        """Check whether a user with this email belongs to the tenant."""
        ...

    async def list_by_ids(self, user_ids: list[UserId]) -> list[User]:
        """Retrieve several users at once; unknown IDs are skipped."""
        ...


@runtime_checkable
class IInvitationRepository(Protocol):
    """Repository for Invitation aggregate persistence.

    Every read that returns "active" invitations filters on
    ``status = 'pending' AND expires_at > now``; expiry is never assumed to
    have been swept.
    """

    async def add(self, invitation: Invitation) -> None:
        """Insert a new pending invitation.

        Raises:
            DuplicateInvitationError: If a pending invitation for the same
                (email, tenant) exists
            DuplicateInvitationTokenError: If the token collides
        """
        ...

    async def expire_stale(
        self, email: EmailAddress, tenant_id: TenantId, now: datetime
    ) -> int:
        """Mark lapsed pending invitations for (email, tenant) as expired.

        Returns:
            Number of invitations transitioned
        """
        ...

    async def get_active_for_email_in_tenant(
        self, email: EmailAddress, tenant_id: TenantId, now: datetime
    ) -> Invitation | None:
        """Retrieve the live pending invitation for (email, tenant), if any."""
        ...

    async def get_active_by_token(self, token: str, now: datetime) -> Invitation | None:
        """Retrieve the live pending invitation carrying this token, if any."""
        ...

    async def list_active_for_tenant(
        self, tenant_id: TenantId, now: datetime
    ) -> list[Invitation]:
        """List live pending invitations of a tenant, newest first."""
        ...

    async def list_active_for_email(
        self, email: EmailAddress, now: datetime
    ) -> list[Invitation]:
        """List live pending invitations addressed to an email, newest first."""
        ...

    async def delete_pending(
        self, invitation_id: InvitationId, tenant_id: TenantId
    ) -> bool:
        """Delete an invitation if it is pending and belongs to the tenant.

        Returns:
            True if a row was deleted
        """
        ...

    async def mark_accepted(self, invitation: Invitation, now: datetime) -> bool:
        """Atomically move a live pending invitation to accepted.

        Conditional on the stored row still being pending and unexpired,
        so exactly one of several concurrent callers succeeds.

        Returns:
            True if this call performed the transition
        """
        ...

    async def purge_expired(self, now: datetime) -> int:
        """Physically delete invitations that lapsed while pending.

        Returns:
            Number of invitations deleted
        """
        ...
