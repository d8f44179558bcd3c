"""Application service providers for the IAM bounded context."""

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthenticationProbe,
    DefaultInvitationServiceProbe,
    DefaultTenantServiceProbe,
    InvitationServiceProbe,
    TenantServiceProbe,
)
from iam.application.services import AuthService, InvitationService, TenantService
from iam.dependencies.authentication import (
    REQUEST_ID_HEADER,
    get_authentication_probe,
    get_session_token_service,
)
from iam.dependencies.repositories import (
    get_invitation_repository,
    get_tenant_repository,
    get_user_repository,
)
from iam.infrastructure.invitation_repository import InvitationRepository
from iam.infrastructure.tenant_repository import TenantRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_invitation_settings
from shared_kernel.auth import SessionTokenService
from shared_kernel.observability_context import ObservationContext


def _request_context(request: Request) -> ObservationContext:
    return ObservationContext(request_id=request.headers.get(REQUEST_ID_HEADER))


def get_invitation_service_probe(request: Request) -> InvitationServiceProbe:
    """Get InvitationServiceProbe bound to the request id."""
    return DefaultInvitationServiceProbe().with_context(_request_context(request))


def get_tenant_service_probe(request: Request) -> TenantServiceProbe:
    """Get TenantServiceProbe bound to the request id."""
    return DefaultTenantServiceProbe().with_context(_request_context(request))


def get_auth_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repository)],
    token_service: Annotated[SessionTokenService, Depends(get_session_token_service)],
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
) -> AuthService:
    """Get AuthService instance.

    Args:
        user_repo: User repository
        tenant_repo: Tenant repository
        token_service: Signs session tokens on login
        probe: Authentication probe for observability

    Returns:
        AuthService instance
    """
    return AuthService(
        user_repository=user_repo,
        tenant_repository=tenant_repo,
        token_issuer=token_service,
        probe=probe,
    )


def get_tenant_service(
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[TenantServiceProbe, Depends(get_tenant_service_probe)],
) -> TenantService:
    """Get TenantService instance.

    Args:
        tenant_repo: Tenant repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        probe: Tenant service probe for observability

    Returns:
        TenantService instance
    """
    return TenantService(tenant_repository=tenant_repo, session=session, probe=probe)


def get_invitation_service(
    invitation_repo: Annotated[
        InvitationRepository, Depends(get_invitation_repository)
    ],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repository)],
    token_service: Annotated[SessionTokenService, Depends(get_session_token_service)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[InvitationServiceProbe, Depends(get_invitation_service_probe)],
) -> InvitationService:
    """Get InvitationService instance.

    Args:
        invitation_repo: Invitation repository
        user_repo: User repository
        tenant_repo: Tenant repository
        token_service: Signs session tokens for accepted invitations
        session: Database session for transaction management
        probe: Invitation service probe for observability

    Returns:
        InvitationService instance
    """
    settings = get_invitation_settings()
    return InvitationService(
        session=session,
        invitation_repository=invitation_repo,
        user_repository=user_repo,
        tenant_repository=tenant_repo,
        token_issuer=token_service,
        probe=probe,
        ttl=timedelta(days=settings.ttl_days),
    )
