"""Pydantic models for authentication requests and responses."""

from __future__ import annotations

from pydantic import Field

from iam.application.value_objects import SessionGrant
from iam.domain.aggregates import Tenant, User
from iam.domain.value_objects import TenantRole
from iam.presentation.tenants.models import TenantResponse
from shared_kernel.api_models import CamelModel


class LoginRequest(CamelModel):
    """Request model for password login."""

    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """A user together with the tenant they belong to."""

    id: str
    email: str
    role: TenantRole
    tenant: TenantResponse

    @classmethod
    def from_domain(cls, user: User, tenant: Tenant) -> UserResponse:
        """Convert domain User and Tenant aggregates to API response."""
        return cls(
            id=user.id.value,
            email=user.email.value,
            role=user.role,
            tenant=TenantResponse.from_domain(tenant),
        )


class SessionResponse(CamelModel):
    """A session token and the user it was issued for."""

    token: str = Field(..., description="Bearer session token")
    user: UserResponse

    @classmethod
    def from_grant(cls, grant: SessionGrant) -> SessionResponse:
        """Convert a SessionGrant to API response."""
        return cls(
            token=grant.session_token,
            user=UserResponse.from_domain(grant.user, grant.tenant),
        )


class CurrentUserResponse(CamelModel):
    """Payload of /auth/me."""

    user: UserResponse
