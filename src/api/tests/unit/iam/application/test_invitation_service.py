"""Unit tests for InvitationService."""

from datetime import timedelta
from itertools import count
from unittest.mock import AsyncMock, Mock

import pytest

from iam.application.observability import InvitationServiceProbe
from iam.application.security import verify_password
from iam.application.services import InvitationService
from iam.domain.aggregates import Invitation, Tenant, User
from iam.domain.exceptions import InvalidEmailError
from iam.domain.value_objects import (
    EmailAddress,
    InvitationId,
    InvitationStatus,
    TenantId,
    TenantRole,
    UserId,
)
from iam.ports.authentication import ISessionTokenIssuer
from iam.ports.exceptions import (
    AdminRoleRequiredError,
    DuplicateInvitationError,
    DuplicateInvitationTokenError,
    DuplicateUserEmailError,
    InvitationNotFoundError,
    InvitationTokenGenerationError,
    PasswordMismatchError,
    UserAlreadyInTenantError,
)
from iam.ports.repositories import (
    IInvitationRepository,
    ITenantRepository,
    IUserRepository,
)
from shared_kernel.middleware.tenant_context import TenantContext

TTL = timedelta(days=7)


@pytest.fixture
def tenant() -> Tenant:
    return Tenant.create(name="Acme", slug="acme")


@pytest.fixture
def admin(tenant) -> TenantContext:
    return TenantContext(
        user_id=UserId.generate().value,
        email="admin@acme.test",
        tenant_id=tenant.id.value,
        role="admin",
    )


@pytest.fixture
def member(tenant) -> TenantContext:
    return TenantContext(
        user_id=UserId.generate().value,
        email="user@acme.test",
        tenant_id=tenant.id.value,
        role="member",
    )


@pytest.fixture
def pending_invitation(tenant, admin, fixed_clock) -> Invitation:
    return Invitation.issue(
        email=EmailAddress.parse("bob@acme.test"),
        tenant_id=tenant.id,
        invited_by=UserId(value=admin.user_id),
        role=TenantRole.MEMBER,
        token="token-1",
        now=fixed_clock() - timedelta(days=1),
        ttl=TTL,
    )


@pytest.fixture
def mock_invitation_repository() -> Mock:
    repo = Mock(spec=IInvitationRepository)
    repo.add = AsyncMock()
    repo.expire_stale = AsyncMock(return_value=0)
    repo.get_active_for_email_in_tenant = AsyncMock(return_value=None)
    repo.get_active_by_token = AsyncMock(return_value=None)
    repo.list_active_for_tenant = AsyncMock(return_value=[])
    repo.list_active_for_email = AsyncMock(return_value=[])
    repo.delete_pending = AsyncMock(return_value=True)
    repo.mark_accepted = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def mock_user_repository() -> Mock:
    repo = Mock(spec=IUserRepository)
    repo.exists_in_tenant = AsyncMock(return_value=False)
    repo.get_by_email = AsyncMock(return_value=None)
    repo.get_by_id = AsyncMock(return_value=None)
    repo.list_by_ids = AsyncMock(return_value=[])
    repo.save = AsyncMock()
    return repo


@pytest.fixture
def mock_tenant_repository(tenant) -> Mock:
    repo = Mock(spec=ITenantRepository)
    repo.get_by_id = AsyncMock(return_value=tenant)
    repo.list_by_ids = AsyncMock(return_value=[tenant])
    return repo


@pytest.fixture
def mock_token_issuer() -> Mock:
    issuer = Mock(spec=ISessionTokenIssuer)
    issuer.issue.return_value = "session-token"
    return issuer


@pytest.fixture
def mock_probe() -> Mock:
    return Mock(spec=InvitationServiceProbe)


@pytest.fixture
def token_factory():
    sequence = count(1)
    return lambda: f"token-{next(sequence)}"


@pytest.fixture
def service(
    mock_session,
    mock_invitation_repository,
    mock_user_repository,
    mock_tenant_repository,
    mock_token_issuer,
    mock_probe,
    fixed_clock,
    token_factory,
) -> InvitationService:
    return InvitationService(
        session=mock_session,
        invitation_repository=mock_invitation_repository,
        user_repository=mock_user_repository,
        tenant_repository=mock_tenant_repository,
        token_issuer=mock_token_issuer,
        probe=mock_probe,
        ttl=TTL,
        clock=fixed_clock,
        token_factory=token_factory,
    )


class TestIssue:
    """Tests for InvitationService.issue."""

    @pytest.mark.asyncio
    async def test_issues_pending_invitation(
        self,
        service,
        admin,
        tenant,
        mock_invitation_repository,
        mock_probe,
        fixed_clock,
    ):
        view = await service.issue(admin, email=" Bob@Acme.test ", role=TenantRole.ADMIN)

        invitation = view.invitation
        assert invitation.email.value == "bob@acme.test"
        assert invitation.tenant_id == tenant.id
        assert invitation.role == TenantRole.ADMIN
        assert invitation.status == InvitationStatus.PENDING
        assert invitation.token == "token-1"
        assert invitation.expires_at == fixed_clock() + TTL
        assert view.tenant is tenant
        assert view.invited_by_email == "admin@acme.test"
        mock_invitation_repository.add.assert_awaited_once_with(invitation)
        mock_probe.invitation_issued.assert_called_once()

    @pytest.mark.asyncio
    async def test_default_role_is_member(self, service, admin):
        view = await service.issue(admin, email="bob@acme.test")

        assert view.invitation.role == TenantRole.MEMBER

    @pytest.mark.asyncio
    async def test_insert_runs_in_savepoint(self, service, admin, mock_session):
        await service.issue(admin, email="bob@acme.test")

        mock_session.begin.assert_called_once()
        mock_session.begin_nested.assert_called_once()

    @pytest.mark.asyncio
    async def test_member_cannot_invite(
        self, service, member, mock_invitation_repository
    ):
        with pytest.raises(AdminRoleRequiredError):
            await service.issue(member, email="bob@acme.test")

        mock_invitation_repository.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_email(self, service, admin):
        with pytest.raises(InvalidEmailError):
            await service.issue(admin, email="bob")

    @pytest.mark.asyncio
    async def test_invitee_already_in_tenant(
        self, service, admin, mock_user_repository, mock_invitation_repository
    ):
        mock_user_repository.exists_in_tenant.return_value = True

        with pytest.raises(UserAlreadyInTenantError):
            await service.issue(admin, email="user@acme.test")

        mock_invitation_repository.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_live_pending_invitation_conflicts(
        self, service, admin, pending_invitation, mock_invitation_repository, mock_probe
    ):
        mock_invitation_repository.get_active_for_email_in_tenant.return_value = (
            pending_invitation
        )

        with pytest.raises(DuplicateInvitationError):
            await service.issue(admin, email="bob@acme.test")

        mock_invitation_repository.add.assert_not_called()
        mock_probe.duplicate_pending_invitation.assert_called_once()

    @pytest.mark.asyncio
    async def test_lapsed_invitations_are_expired_first(
        self, service, admin, tenant, mock_invitation_repository, mock_probe, fixed_clock
    ):
        mock_invitation_repository.expire_stale.return_value = 1

        await service.issue(admin, email="bob@acme.test")

        mock_invitation_repository.expire_stale.assert_awaited_once_with(
            EmailAddress(value="bob@acme.test"), tenant.id, fixed_clock()
        )
        mock_probe.stale_invitations_expired.assert_called_once_with(
            tenant_id=tenant.id.value, count=1
        )

    @pytest.mark.asyncio
    async def test_concurrent_issue_loses_on_unique_index(
        self, service, admin, mock_invitation_repository
    ):
        mock_invitation_repository.add.side_effect = DuplicateInvitationError()

        with pytest.raises(DuplicateInvitationError):
            await service.issue(admin, email="bob@acme.test")

    @pytest.mark.asyncio
    async def test_token_collision_is_retried(
        self, service, admin, mock_invitation_repository, mock_probe, mock_session
    ):
        mock_invitation_repository.add.side_effect = [
            DuplicateInvitationTokenError(),
            None,
        ]

        view = await service.issue(admin, email="bob@acme.test")

        assert view.invitation.token == "token-2"
        assert mock_invitation_repository.add.await_count == 2
        assert mock_session.begin_nested.call_count == 2
        mock_probe.token_collision.assert_called_once_with(attempt=1)

    @pytest.mark.asyncio
    async def test_token_generation_gives_up(
        self, service, admin, mock_invitation_repository, mock_probe
    ):
        mock_invitation_repository.add.side_effect = DuplicateInvitationTokenError()

        with pytest.raises(InvitationTokenGenerationError):
            await service.issue(admin, email="bob@acme.test")

        assert (
            mock_invitation_repository.add.await_count
            == InvitationService.MAX_TOKEN_ATTEMPTS
        )
        mock_probe.token_generation_exhausted.assert_called_once_with(
            attempts=InvitationService.MAX_TOKEN_ATTEMPTS
        )


class TestListing:
    """Tests for tenant and email invitation listings."""

    @pytest.mark.asyncio
    async def test_tenant_listing_requires_admin(self, service, member):
        with pytest.raises(AdminRoleRequiredError):
            await service.list_pending_for_tenant(member)

    @pytest.mark.asyncio
    async def test_tenant_listing_includes_inviter_email(
        self,
        service,
        admin,
        tenant,
        pending_invitation,
        mock_invitation_repository,
        mock_user_repository,
        fixed_clock,
    ):
        inviter = User(
            id=pending_invitation.invited_by,
            email=EmailAddress.parse("admin@acme.test"),
            password_hash="hash",
            role=TenantRole.ADMIN,
            tenant_id=tenant.id,
        )
        mock_invitation_repository.list_active_for_tenant.return_value = [
            pending_invitation
        ]
        mock_user_repository.list_by_ids.return_value = [inviter]

        views = await service.list_pending_for_tenant(admin)

        mock_invitation_repository.list_active_for_tenant.assert_awaited_once_with(
            tenant.id, fixed_clock()
        )
        assert len(views) == 1
        assert views[0].invitation is pending_invitation
        assert views[0].tenant is tenant
        assert views[0].invited_by_email == "admin@acme.test"

    @pytest.mark.asyncio
    async def test_email_listing_is_keyed_on_caller_email(
        self,
        service,
        member,
        mock_invitation_repository,
        mock_tenant_repository,
        fixed_clock,
    ):
        views = await service.list_pending_for_email(member)

        assert views == []
        mock_invitation_repository.list_active_for_email.assert_awaited_once_with(
            EmailAddress(value="user@acme.test"), fixed_clock()
        )
        mock_tenant_repository.list_by_ids.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_inviter_is_reported_as_none(
        self, service, member, pending_invitation, mock_invitation_repository
    ):
        mock_invitation_repository.list_active_for_email.return_value = [
            pending_invitation
        ]

        views = await service.list_pending_for_email(member)

        assert views[0].invited_by_email is None


class TestCancel:
    """Tests for InvitationService.cancel."""

    @pytest.mark.asyncio
    async def test_cancels_pending_invitation(
        self, service, admin, tenant, mock_invitation_repository, mock_probe
    ):
        invitation_id = InvitationId.generate()

        await service.cancel(admin, invitation_id.value)

        mock_invitation_repository.delete_pending.assert_awaited_once_with(
            invitation_id, tenant.id
        )
        mock_probe.invitation_cancelled.assert_called_once_with(
            invitation_id=invitation_id.value, tenant_id=tenant.id.value
        )

    @pytest.mark.asyncio
    async def test_member_cannot_cancel(self, service, member):
        with pytest.raises(AdminRoleRequiredError):
            await service.cancel(member, InvitationId.generate().value)

    @pytest.mark.asyncio
    async def test_no_match_is_not_found(
        self, service, admin, mock_invitation_repository
    ):
        mock_invitation_repository.delete_pending.return_value = False

        with pytest.raises(InvitationNotFoundError, match="Invitation not found"):
            await service.cancel(admin, InvitationId.generate().value)

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(
        self, service, admin, mock_invitation_repository
    ):
        with pytest.raises(InvitationNotFoundError):
            await service.cancel(admin, "not-an-id")

        mock_invitation_repository.delete_pending.assert_not_called()


class TestInspect:
    """Tests for InvitationService.inspect."""

    @pytest.mark.asyncio
    async def test_describes_live_invitation(
        self, service, tenant, pending_invitation, mock_invitation_repository
    ):
        mock_invitation_repository.get_active_by_token.return_value = (
            pending_invitation
        )

        summary = await service.inspect("token-1")

        assert summary.email == "bob@acme.test"
        assert summary.role == TenantRole.MEMBER
        assert summary.tenant_name == "Acme"
        assert summary.tenant_slug == "acme"
        assert summary.invited_by_email is None
        assert summary.expires_at == pending_invitation.expires_at

    @pytest.mark.asyncio
    async def test_unknown_token(self, service):
        with pytest.raises(InvitationNotFoundError, match="Invalid or expired"):
            await service.inspect("nope")


class TestAccept:
    """Tests for InvitationService.accept."""

    @pytest.mark.asyncio
    async def test_password_mismatch_checked_first(
        self, service, mock_invitation_repository
    ):
        with pytest.raises(PasswordMismatchError):
            await service.accept("token-1", "password", "different")

        mock_invitation_repository.get_active_by_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_token(self, service):
        with pytest.raises(InvitationNotFoundError):
            await service.accept("nope", "password", "password")

    @pytest.mark.asyncio
    async def test_creates_new_user(
        self,
        service,
        tenant,
        pending_invitation,
        mock_invitation_repository,
        mock_user_repository,
        mock_token_issuer,
        mock_probe,
        fixed_clock,
    ):
        mock_invitation_repository.get_active_by_token.return_value = (
            pending_invitation
        )

        grant = await service.accept("token-1", "secret1", "secret1")

        assert pending_invitation.status == InvitationStatus.ACCEPTED
        assert pending_invitation.accepted_at == fixed_clock()
        mock_invitation_repository.mark_accepted.assert_awaited_once_with(
            pending_invitation, fixed_clock()
        )

        user = grant.user
        assert user.email.value == "bob@acme.test"
        assert user.tenant_id == tenant.id
        assert user.role == TenantRole.MEMBER
        assert verify_password("secret1", user.password_hash)
        mock_user_repository.save.assert_awaited_once_with(user)

        assert grant.session_token == "session-token"
        assert grant.tenant is tenant
        mock_token_issuer.issue.assert_called_once_with(
            user_id=user.id.value, tenant_id=tenant.id.value, role="member"
        )
        assert mock_probe.invitation_accepted.call_args.kwargs["user_created"] is True

    @pytest.mark.asyncio
    async def test_moves_existing_user(
        self,
        service,
        tenant,
        pending_invitation,
        mock_invitation_repository,
        mock_user_repository,
        mock_probe,
    ):
        previous_tenant = TenantId.generate()
        existing = User.create(
            email=EmailAddress.parse("bob@acme.test"),
            password_hash="existing-hash",
            tenant_id=previous_tenant,
            role=TenantRole.ADMIN,
        )
        mock_invitation_repository.get_active_by_token.return_value = (
            pending_invitation
        )
        mock_user_repository.get_by_email.return_value = existing

        grant = await service.accept("token-1", "secret1", "secret1")

        assert grant.user is existing
        assert existing.tenant_id == tenant.id
        assert existing.role == TenantRole.MEMBER
        assert existing.password_hash == "existing-hash"
        kwargs = mock_probe.invitation_accepted.call_args.kwargs
        assert kwargs["user_created"] is False
        assert kwargs["previous_tenant_id"] == previous_tenant.value

    @pytest.mark.asyncio
    async def test_lost_race_is_not_found(
        self,
        service,
        pending_invitation,
        mock_invitation_repository,
        mock_user_repository,
        mock_token_issuer,
        mock_probe,
    ):
        mock_invitation_repository.get_active_by_token.return_value = (
            pending_invitation
        )
        mock_invitation_repository.mark_accepted.return_value = False

        with pytest.raises(InvitationNotFoundError):
            await service.accept("token-1", "secret1", "secret1")

        mock_user_repository.save.assert_not_called()
        mock_token_issuer.issue.assert_not_called()
        mock_probe.acceptance_lost_race.assert_called_once_with(
            invitation_id=pending_invitation.id.value
        )

    @pytest.mark.asyncio
    async def test_concurrent_signup_propagates(
        self,
        service,
        pending_invitation,
        mock_invitation_repository,
        mock_user_repository,
        mock_token_issuer,
    ):
        mock_invitation_repository.get_active_by_token.return_value = (
            pending_invitation
        )
        mock_user_repository.save.side_effect = DuplicateUserEmailError("taken")

        with pytest.raises(DuplicateUserEmailError):
            await service.accept("token-1", "secret1", "secret1")

        mock_token_issuer.issue.assert_not_called()
