"""FastAPI dependency providers for the IAM bounded context."""

from iam.dependencies.authentication import (
    bearer_scheme,
    get_observation_context,
    get_session_token_service,
    get_tenant_context,
)
from iam.dependencies.repositories import (
    get_invitation_repository,
    get_tenant_repository,
    get_user_repository,
)
from iam.dependencies.services import (
    get_auth_service,
    get_invitation_service,
    get_tenant_service,
)

__all__ = [
    "bearer_scheme",
    "get_auth_service",
    "get_invitation_repository",
    "get_invitation_service",
    "get_observation_context",
    "get_session_token_service",
    "get_tenant_context",
    "get_tenant_repository",
    "get_tenant_service",
    "get_user_repository",
]
