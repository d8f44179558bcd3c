"""Invitation application service for IAM bounded context.

Issues, lists, cancels, inspects and consumes invitations. Consuming an
invitation provisions a new user or moves an existing one into the
inviting tenant.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultInvitationServiceProbe,
    InvitationServiceProbe,
)
from iam.application.security import generate_invitation_token, hash_password
from iam.application.value_objects import (
    InvitationSummary,
    InvitationView,
    SessionGrant,
)
from iam.domain.aggregates import Invitation, User
from iam.domain.value_objects import (
    EmailAddress,
    InvitationId,
    TenantId,
    TenantRole,
    UserId,
)
from iam.ports.authentication import ISessionTokenIssuer
from iam.ports.exceptions import (
    AdminRoleRequiredError,
    DuplicateInvitationError,
    DuplicateInvitationTokenError,
    InvitationNotFoundError,
    InvitationTokenGenerationError,
    PasswordMismatchError,
    TenantNotFoundError,
    UserAlreadyInTenantError,
)
from iam.ports.repositories import (
    IInvitationRepository,
    ITenantRepository,
    IUserRepository,
)
from shared_kernel.middleware.tenant_context import TenantContext

DEFAULT_INVITATION_TTL = timedelta(days=7)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class InvitationService:
    """Application service for the invitation lifecycle.

    Every mutating operation runs in a single transaction. Cross-request
    invariants are enforced by the store:

    - at most one live pending invitation per (email, tenant), via a
      partial unique index
    - globally unique tokens, via a unique index
    - exactly-once acceptance, via a conditional status update
    """

    MAX_TOKEN_ATTEMPTS = 3

    def __init__(
        self,
        session: AsyncSession,
        invitation_repository: IInvitationRepository,
        user_repository: IUserRepository,
        tenant_repository: ITenantRepository,
        token_issuer: ISessionTokenIssuer,
        probe: InvitationServiceProbe | None = None,
        ttl: timedelta = DEFAULT_INVITATION_TTL,
        clock: Callable[[], datetime] = _utc_now,
        token_factory: Callable[[], str] = generate_invitation_token,
    ):
        """Initialize InvitationService with dependencies.

        Args:
            session: Database session for transaction management
            invitation_repository: Repository for invitation persistence
            user_repository: Repository for user lookup and provisioning
            tenant_repository: Repository for tenant lookup
            token_issuer: Signs session tokens for accepted invitations
            probe: Optional domain probe for observability
            ttl: Lifetime of newly issued invitations
            clock: Source of the current time
            token_factory: Generates invitation tokens
        """
        self._session = session
        self._invitation_repository = invitation_repository
        self._user_repository = user_repository
        self._tenant_repository = tenant_repository
        self._token_issuer = token_issuer
        self._probe = probe or DefaultInvitationServiceProbe()
        self._ttl = ttl
        self._clock = clock
        self._token_factory = token_factory

    def _require_admin(self, context: TenantContext) -> None:
        if not context.is_admin:
            raise AdminRoleRequiredError()

    async def issue(
        self,
        context: TenantContext,
        email: str,
        role: TenantRole = TenantRole.MEMBER,
    ) -> InvitationView:
        """Issue a pending invitation into the caller's tenant.

        Args:
            context: The inviting admin's tenant context
            email: Invitee address (normalized here)
            role: Role granted on acceptance

        Returns:
            The new invitation with tenant and inviter details

        Raises:
            AdminRoleRequiredError: If the caller is not an admin
            InvalidEmailError: If the email cannot be normalized
            UserAlreadyInTenantError: If the invitee already belongs to the tenant
            DuplicateInvitationError: If a live pending invitation exists
            InvitationTokenGenerationError: If every token attempt collided
        """
        self._require_admin(context)
        address = EmailAddress.parse(email)
        tenant_id = TenantId(value=context.tenant_id)
        inviter_id = UserId(value=context.user_id)
        now = self._clock()

        async with self._session.begin():
            if await self._user_repository.exists_in_tenant(address, tenant_id):
                self._probe.invitee_already_in_tenant(tenant_id=tenant_id.value)
                raise UserAlreadyInTenantError()

            # Free the (email, tenant) slot held by lapsed invitations
            expired = await self._invitation_repository.expire_stale(
                address, tenant_id, now
            )
            if expired:
                self._probe.stale_invitations_expired(
                    tenant_id=tenant_id.value, count=expired
                )

            existing = await self._invitation_repository.get_active_for_email_in_tenant(
                address, tenant_id, now
            )
            if existing is not None:
                self._probe.duplicate_pending_invitation(tenant_id=tenant_id.value)
                raise DuplicateInvitationError()

            invitation = await self._add_with_unique_token(
                email=address,
                tenant_id=tenant_id,
                invited_by=inviter_id,
                role=role,
                now=now,
            )
            tenant = await self._tenant_repository.get_by_id(tenant_id)

        self._probe.invitation_issued(
            invitation_id=invitation.id.value,
            tenant_id=tenant_id.value,
            role=role.value,
            invited_by=inviter_id.value,
        )
        return InvitationView(
            invitation=invitation,
            tenant=tenant,
            invited_by_email=context.email,
        )

    async def _add_with_unique_token(
        self,
        email: EmailAddress,
        tenant_id: TenantId,
        invited_by: UserId,
        role: TenantRole,
        now: datetime,
    ) -> Invitation:
        """Insert the invitation, regenerating the token on collision.

        Each attempt runs in a savepoint so a collision does not poison the
        surrounding transaction. A duplicate (email, tenant) raised by the
        repository propagates unchanged.
        """
        for attempt in range(1, self.MAX_TOKEN_ATTEMPTS + 1):
            invitation = Invitation.issue(
                email=email,
                tenant_id=tenant_id,
                invited_by=invited_by,
                role=role,
                token=self._token_factory(),
                now=now,
                ttl=self._ttl,
            )
            try:
                async with self._session.begin_nested():
                    await self._invitation_repository.add(invitation)
                return invitation
            except DuplicateInvitationTokenError:
                self._probe.token_collision(attempt=attempt)

        self._probe.token_generation_exhausted(attempts=self.MAX_TOKEN_ATTEMPTS)
        raise InvitationTokenGenerationError()

    async def list_pending_for_tenant(
        self, context: TenantContext
    ) -> list[InvitationView]:
        """List live pending invitations of the caller's tenant, newest first.

        Raises:
            AdminRoleRequiredError: If the caller is not an admin
        """
        self._require_admin(context)
        tenant_id = TenantId(value=context.tenant_id)
        now = self._clock()

        invitations = await self._invitation_repository.list_active_for_tenant(
            tenant_id, now
        )
        views = await self._build_views(invitations)
        self._probe.invitations_listed(scope="tenant", count=len(views))
        return views

    async def list_pending_for_email(
        self, context: TenantContext
    ) -> list[InvitationView]:
        """List live pending invitations addressed to the caller, across tenants.

        This is the only cross-tenant read; it is keyed strictly on the
        caller's own email.
        """
        address = EmailAddress(value=context.email)
        now = self._clock()

        invitations = await self._invitation_repository.list_active_for_email(
            address, now
        )
        views = await self._build_views(invitations)
        self._probe.invitations_listed(scope="email", count=len(views))
        return views

    async def _build_views(
        self, invitations: list[Invitation]
    ) -> list[InvitationView]:
        if not invitations:
            return []

        tenant_ids = list({i.tenant_id.value: i.tenant_id for i in invitations}.values())
        inviter_ids = list(
            {i.invited_by.value: i.invited_by for i in invitations}.values()
        )
        tenants = {
            t.id.value: t for t in await self._tenant_repository.list_by_ids(tenant_ids)
        }
        inviters = {
            u.id.value: u for u in await self._user_repository.list_by_ids(inviter_ids)
        }

        views = []
        for invitation in invitations:
            inviter = inviters.get(invitation.invited_by.value)
            views.append(
                InvitationView(
                    invitation=invitation,
                    tenant=tenants.get(invitation.tenant_id.value),
                    invited_by_email=inviter.email.value if inviter else None,
                )
            )
        return views

    async def cancel(self, context: TenantContext, invitation_id: str) -> None:
        """Delete a pending invitation of the caller's tenant.

        Wrong tenant, already consumed and malformed IDs all collapse to
        not-found.

        Raises:
            AdminRoleRequiredError: If the caller is not an admin
            InvitationNotFoundError: If no matching pending invitation exists
        """
        self._require_admin(context)
        try:
            invitation_id_obj = InvitationId.from_string(invitation_id)
        except ValueError as e:
            self._probe.invitation_not_found(reason="malformed_id")
            raise InvitationNotFoundError("Invitation not found") from e

        tenant_id = TenantId(value=context.tenant_id)
        async with self._session.begin():
            deleted = await self._invitation_repository.delete_pending(
                invitation_id_obj, tenant_id
            )

        if not deleted:
            self._probe.invitation_not_found(reason="cancel_no_match")
            raise InvitationNotFoundError("Invitation not found")

        self._probe.invitation_cancelled(
            invitation_id=invitation_id_obj.value, tenant_id=tenant_id.value
        )

    async def inspect(self, token: str) -> InvitationSummary:
        """Describe a live invitation to an unauthenticated caller.

        Raises:
            InvitationNotFoundError: If the token is unknown, consumed or expired
        """
        now = self._clock()
        invitation = await self._invitation_repository.get_active_by_token(token, now)
        if invitation is None:
            self._probe.invitation_not_found(reason="inspect_no_match")
            raise InvitationNotFoundError()

        tenant = await self._tenant_repository.get_by_id(invitation.tenant_id)
        if tenant is None:
            self._probe.invitation_not_found(reason="tenant_missing")
            raise InvitationNotFoundError()
        inviter = await self._user_repository.get_by_id(invitation.invited_by)

        return InvitationSummary(
            email=invitation.email.value,
            role=invitation.role,
            tenant_name=tenant.name,
            tenant_slug=tenant.slug,
            invited_by_email=inviter.email.value if inviter else None,
            expires_at=invitation.expires_at,
        )

    async def accept(
        self, token: str, password: str, password_confirmation: str
    ) -> SessionGrant:
        """Consume an invitation and sign the resulting session.

        Checks run in order: password confirmation, then invitation lookup.
        The status transition and the user provisioning or reassignment
        commit together or not at all.

        Args:
            token: The invitation token
            password: Password for a newly provisioned user
            password_confirmation: Must equal ``password``

        Returns:
            Session token bound to the invitation's tenant and role, plus the
            user and tenant

        Raises:
            PasswordMismatchError: If the passwords differ
            InvitationNotFoundError: If the token is not a live pending
                invitation, including when a concurrent acceptance won
            DuplicateUserEmailError: If a concurrent signup took the email
        """
        if password != password_confirmation:
            self._probe.password_mismatch()
            raise PasswordMismatchError()

        now = self._clock()
        async with self._session.begin():
            invitation = await self._invitation_repository.get_active_by_token(
                token, now
            )
            if invitation is None:
                self._probe.invitation_not_found(reason="accept_no_match")
                raise InvitationNotFoundError()

            invitation.accept(now)
            if not await self._invitation_repository.mark_accepted(invitation, now):
                self._probe.acceptance_lost_race(invitation_id=invitation.id.value)
                raise InvitationNotFoundError()

            tenant = await self._tenant_repository.get_by_id(invitation.tenant_id)
            if tenant is None:
                raise TenantNotFoundError()

            user, previous_tenant_id = await self._provision_user(invitation, password)

        session_token = self._token_issuer.issue(
            user_id=user.id.value,
            tenant_id=tenant.id.value,
            role=user.role.value,
        )
        self._probe.invitation_accepted(
            invitation_id=invitation.id.value,
            user_id=user.id.value,
            tenant_id=tenant.id.value,
            role=user.role.value,
            user_created=previous_tenant_id is None,
            previous_tenant_id=previous_tenant_id,
        )
        return SessionGrant(session_token=session_token, user=user, tenant=tenant)

    async def _provision_user(
        self, invitation: Invitation, password: str
    ) -> tuple[User, str | None]:
        """Create the invitee, or move an existing user into the tenant.

        Emails are globally unique, so an existing user may live in a
        different tenant; accepting moves them.

        Returns:
            The saved user and their previous tenant ID (None when created)
        """
        user = await self._user_repository.get_by_email(invitation.email)
        if user is None:
            user = User.create(
                email=invitation.email,
                password_hash=hash_password(password),
                tenant_id=invitation.tenant_id,
                role=invitation.role,
            )
            previous_tenant_id = None
        else:
            previous_tenant_id = user.tenant_id.value
            user.join_tenant(invitation.tenant_id, invitation.role)

        await self._user_repository.save(user)
        return user, previous_tenant_id

