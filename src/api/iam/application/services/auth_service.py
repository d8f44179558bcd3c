"""Authentication application service for IAM bounded context.

Exchanges email/password credentials for a session token.
"""

from __future__ import annotations

from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.security import verify_password
from iam.application.value_objects import SessionGrant
from iam.domain.aggregates import Tenant, User
from iam.domain.exceptions import InvalidEmailError
from iam.domain.value_objects import EmailAddress, TenantId, UserId
from iam.ports.authentication import ISessionTokenIssuer
from iam.ports.exceptions import InvalidCredentialsError, TenantNotFoundError
from iam.ports.repositories import ITenantRepository, IUserRepository
from shared_kernel.middleware.tenant_context import TenantContext


class AuthService:
    """Application service for password login and session introspection."""

    def __init__(
        self,
        user_repository: IUserRepository,
        tenant_repository: ITenantRepository,
        token_issuer: ISessionTokenIssuer,
        probe: AuthenticationProbe | None = None,
    ):
        """Initialize AuthService with dependencies.

        Args:
            user_repository: Repository for looking up users by email and id
            tenant_repository: Repository for loading the caller's tenant
            token_issuer: Signs session tokens for authenticated users
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._tenant_repository = tenant_repository
        self._token_issuer = token_issuer
        self._probe = probe or DefaultAuthenticationProbe()

    async def login(self, email: str, password: str) -> SessionGrant:
        """Verify credentials and sign a session token.

        Unknown emails and wrong passwords are indistinguishable to the caller.

        Raises:
            InvalidCredentialsError: If the credentials do not match a user
        """
        try:
            address = EmailAddress.parse(email)
        except InvalidEmailError as e:
            self._probe.login_failed(reason="malformed_email")
            raise InvalidCredentialsError() from e

        user = await self._user_repository.get_by_email(address)
        if user is None:
            self._probe.login_failed(reason="unknown_email")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            self._probe.login_failed(reason="wrong_password")
            raise InvalidCredentialsError()

        tenant = await self._tenant_repository.get_by_id(user.tenant_id)
        if tenant is None:
            self._probe.login_failed(reason="tenant_missing")
            raise InvalidCredentialsError()

        token = self._token_issuer.issue(
            user_id=user.id.value,
            tenant_id=tenant.id.value,
            role=user.role.value,
        )
        self._probe.login_succeeded(user_id=user.id.value, tenant_id=tenant.id.value)
        return SessionGrant(session_token=token, user=user, tenant=tenant)

    async def describe_session(self, context: TenantContext) -> tuple[User, Tenant]:
        """Return the user and tenant behind the caller's session.

        Raises:
            TenantNotFoundError: If the user or tenant no longer exists
        """
        user = await self._user_repository.get_by_id(UserId(value=context.user_id))
        tenant = await self._tenant_repository.get_by_id(
            TenantId(value=context.tenant_id)
        )
        if user is None or tenant is None:
            raise TenantNotFoundError()
        return user, tenant
