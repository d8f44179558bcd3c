"""HTTP routes for the invitation lifecycle.

Issuing, listing and cancelling require a session; inspecting and
accepting are public because the token itself is the capability.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from iam.application.services import InvitationService
from iam.dependencies import get_invitation_service, get_tenant_context
from iam.presentation.auth.models import SessionResponse
from iam.presentation.invitations.models import (
    AcceptInvitationRequest,
    InvitationSummaryEnvelope,
    InvitationSummaryResponse,
    InviteUserRequest,
    IssuedInvitationEnvelope,
    IssuedInvitationResponse,
    MyInvitationResponse,
    MyInvitationsEnvelope,
    TenantInvitationResponse,
    TenantInvitationsEnvelope,
)
from infrastructure.settings import InvitationSettings, get_invitation_settings
from shared_kernel.api_models import ApiResponse
from shared_kernel.middleware.tenant_context import TenantContext

router = APIRouter(
    prefix="/users",
    tags=["invitations"],
)


@router.post("/invite", status_code=status.HTTP_201_CREATED)
async def invite_user(
    request: InviteUserRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[InvitationService, Depends(get_invitation_service)],
    settings: Annotated[InvitationSettings, Depends(get_invitation_settings)],
) -> ApiResponse[IssuedInvitationEnvelope]:
    """Invite an email address into the caller's tenant (admin only)."""
    view = await service.issue(context, email=request.email, role=request.role)
    link = settings.build_accept_link(view.invitation.token)
    return ApiResponse(
        message="Invitation sent successfully",
        data=IssuedInvitationEnvelope(
            invitation=IssuedInvitationResponse.from_view(view, link)
        ),
    )


@router.get("/my-invitations")
async def my_invitations(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[InvitationService, Depends(get_invitation_service)],
    settings: Annotated[InvitationSettings, Depends(get_invitation_settings)],
) -> ApiResponse[MyInvitationsEnvelope]:
    """List live invitations addressed to the caller's email."""
    views = await service.list_pending_for_email(context)
    return ApiResponse(
        data=MyInvitationsEnvelope(
            invitations=[
                MyInvitationResponse.from_view(
                    view, settings.build_accept_link(view.invitation.token)
                )
                for view in views
            ]
        )
    )


@router.get("/invitations")
async def tenant_invitations(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> ApiResponse[TenantInvitationsEnvelope]:
    """List live invitations of the caller's tenant (admin only)."""
    views = await service.list_pending_for_tenant(context)
    return ApiResponse(
        data=TenantInvitationsEnvelope(
            invitations=[TenantInvitationResponse.from_view(view) for view in views]
        )
    )


@router.delete("/invitations/{invitation_id}")
async def cancel_invitation(
    invitation_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> ApiResponse[None]:
    """Cancel a pending invitation of the caller's tenant (admin only)."""
    await service.cancel(context, invitation_id)
    return ApiResponse(message="Invitation cancelled successfully")


@router.get("/accept-invitation/{token}")
async def inspect_invitation(
    token: str,
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> ApiResponse[InvitationSummaryEnvelope]:
    """Describe a live invitation without consuming it."""
    summary = await service.inspect(token)
    return ApiResponse(
        data=InvitationSummaryEnvelope(
            invitation=InvitationSummaryResponse.from_summary(summary)
        )
    )


@router.post("/accept-invitation", status_code=status.HTTP_201_CREATED)
async def accept_invitation(
    request: AcceptInvitationRequest,
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> ApiResponse[SessionResponse]:
    """Consume an invitation and sign the caller in."""
    grant = await service.accept(
        token=request.token,
        password=request.password,
        password_confirmation=request.confirm_password,
    )
    return ApiResponse(
        message="Account created successfully",
        data=SessionResponse.from_grant(grant),
    )
