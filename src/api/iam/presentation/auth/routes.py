"""HTTP routes for password login and session introspection."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from iam.application.services import AuthService
from iam.dependencies import get_auth_service, get_tenant_context
from iam.presentation.auth.models import (
    CurrentUserResponse,
    LoginRequest,
    SessionResponse,
    UserResponse,
)
from shared_kernel.api_models import ApiResponse
from shared_kernel.middleware.tenant_context import TenantContext

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login")
async def login(
    request: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiResponse[SessionResponse]:
    """Exchange email and password for a session token."""
    grant = await service.login(email=request.email, password=request.password)
    return ApiResponse(
        message="Login successful",
        data=SessionResponse.from_grant(grant),
    )


@router.get("/me")
async def me(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiResponse[CurrentUserResponse]:
    """Describe the authenticated user and their tenant."""
    user, tenant = await service.describe_session(context)
    return ApiResponse(
        data=CurrentUserResponse(user=UserResponse.from_domain(user, tenant)),
    )
