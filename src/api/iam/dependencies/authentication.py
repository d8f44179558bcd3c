"""Session token and tenant context dependencies.

Every protected route resolves a bearer token into a ``TenantContext``.
The user row is reloaded on each request so that deleted users and users
who have since moved to another tenant are rejected even while their
token is still within its lifetime.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.domain.value_objects import UserId
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_read_session
from infrastructure.settings import get_auth_settings
from shared_kernel.auth import (
    DefaultSessionTokenProbe,
    InvalidTokenError,
    SessionTokenService,
)
from shared_kernel.exceptions import AuthenticationError
from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import TenantContext
from shared_kernel.observability_context import ObservationContext

REQUEST_ID_HEADER = "X-Request-ID"

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_session_token_service() -> SessionTokenService:
    """Get cached session token service.

    Returns:
        SessionTokenService configured from auth settings
    """
    settings = get_auth_settings()
    return SessionTokenService(
        secret=settings.jwt_secret.get_secret_value(),
        probe=DefaultSessionTokenProbe(),
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(hours=settings.session_ttl_hours),
    )


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance.

    Returns:
        DefaultAuthenticationProbe instance for observability
    """
    return DefaultAuthenticationProbe()


def get_tenant_context_probe() -> TenantContextProbe:
    """Get TenantContextProbe instance for tenant context resolution.

    Returns:
        DefaultTenantContextProbe instance for observability
    """
    return DefaultTenantContextProbe()


def _get_user_repository_for_context(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> UserRepository:
    """Get UserRepository bound to the read session."""
    return UserRepository(session=session)


async def get_tenant_context(
    request: Request,
    token_service: Annotated[SessionTokenService, Depends(get_session_token_service)],
    user_repo: Annotated[UserRepository, Depends(_get_user_repository_for_context)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> TenantContext:
    """Resolve the bearer token into the caller's tenant context.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired,
            the user no longer exists, or the user has moved to another
            tenant since the token was issued
    """
    probe = probe.with_context(
        ObservationContext(request_id=request.headers.get(REQUEST_ID_HEADER))
    )

    if credentials is None or not credentials.credentials:
        probe.credentials_missing()
        raise AuthenticationError("Authentication required")

    try:
        claims = token_service.validate(credentials.credentials)
    except InvalidTokenError as e:
        raise AuthenticationError("Invalid or expired session token") from e

    try:
        user_id = UserId.from_string(claims.user_id)
    except ValueError as e:
        raise AuthenticationError("Invalid or expired session token") from e

    user = await user_repo.get_by_id(user_id)
    if user is None:
        probe.user_no_longer_exists(claims.user_id)
        raise AuthenticationError("User no longer exists")

    if user.tenant_id.value != claims.tenant_id:
        probe.stale_tenant_membership(
            user_id=claims.user_id,
            token_tenant_id=claims.tenant_id,
            current_tenant_id=user.tenant_id.value,
        )
        raise AuthenticationError("Session is no longer valid for this tenant")

    # Role comes from the stored row, not the token
    context = TenantContext(
        user_id=user.id.value,
        email=user.email.value,
        tenant_id=user.tenant_id.value,
        role=user.role.value,
    )
    probe.tenant_context_resolved(
        user_id=context.user_id,
        tenant_id=context.tenant_id,
        role=context.role,
    )
    return context


def get_observation_context(
    request: Request,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
) -> ObservationContext:
    """Build the observation context probes should log with for this request."""
    return context.observation_context(
        request_id=request.headers.get(REQUEST_ID_HEADER)
    )
