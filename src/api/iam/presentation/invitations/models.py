"""Pydantic models for invitation API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field

from iam.application.value_objects import InvitationSummary, InvitationView
from iam.domain.value_objects import InvitationStatus, TenantRole
from shared_kernel.api_models import CamelModel


class InviteUserRequest(CamelModel):
    """Request model for inviting a user into the caller's tenant."""

    email: str = Field(..., min_length=3, max_length=320)
    role: TenantRole = Field(TenantRole.MEMBER, description="Role granted on acceptance")


class AcceptInvitationRequest(CamelModel):
    """Request model for consuming an invitation."""

    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    confirm_password: str = Field(
        ...,
        min_length=6,
        validation_alias=AliasChoices(
            "confirmPassword", "passwordConfirmation", "confirm_password"
        ),
    )


class InvitationTenantResponse(CamelModel):
    """Tenant details shown alongside an invitation."""

    id: str | None = None
    name: str
    slug: str


class IssuedInvitationResponse(CamelModel):
    """A freshly issued invitation, including the link to share."""

    id: str
    email: str
    role: TenantRole
    status: InvitationStatus
    tenant: str | None
    invited_by: str | None
    expires_at: datetime
    invitation_link: str

    @classmethod
    def from_view(cls, view: InvitationView, link: str) -> IssuedInvitationResponse:
        """Convert an InvitationView to API response."""
        invitation = view.invitation
        return cls(
            id=invitation.id.value,
            email=invitation.email.value,
            role=invitation.role,
            status=invitation.status,
            tenant=view.tenant.name if view.tenant else None,
            invited_by=view.invited_by_email,
            expires_at=invitation.expires_at,
            invitation_link=link,
        )


class MyInvitationResponse(CamelModel):
    """An invitation addressed to the caller, with its accept link."""

    id: str
    email: str
    role: TenantRole
    status: InvitationStatus
    tenant: InvitationTenantResponse | None
    invited_by: str | None
    created_at: datetime
    expires_at: datetime
    token: str
    accept_link: str

    @classmethod
    def from_view(cls, view: InvitationView, link: str) -> MyInvitationResponse:
        """Convert an InvitationView to API response."""
        invitation = view.invitation
        tenant = None
        if view.tenant is not None:
            tenant = InvitationTenantResponse(
                id=view.tenant.id.value,
                name=view.tenant.name,
                slug=view.tenant.slug,
            )
        return cls(
            id=invitation.id.value,
            email=invitation.email.value,
            role=invitation.role,
            status=invitation.status,
            tenant=tenant,
            invited_by=view.invited_by_email,
            created_at=invitation.created_at,
            expires_at=invitation.expires_at,
            token=invitation.token,
            accept_link=link,
        )


class TenantInvitationResponse(CamelModel):
    """A pending invitation of the caller's tenant, as admins see it."""

    id: str
    email: str
    role: TenantRole
    status: InvitationStatus
    invited_by: str | None
    created_at: datetime
    expires_at: datetime

    @classmethod
    def from_view(cls, view: InvitationView) -> TenantInvitationResponse:
        """Convert an InvitationView to API response."""
        invitation = view.invitation
        return cls(
            id=invitation.id.value,
            email=invitation.email.value,
            role=invitation.role,
            status=invitation.status,
            invited_by=view.invited_by_email,
            created_at=invitation.created_at,
            expires_at=invitation.expires_at,
        )


class InvitationSummaryResponse(CamelModel):
    """Public description of a live invitation."""

    email: str
    role: TenantRole
    tenant: InvitationTenantResponse
    invited_by: str | None
    expires_at: datetime

    @classmethod
    def from_summary(cls, summary: InvitationSummary) -> InvitationSummaryResponse:
        """Convert an InvitationSummary to API response."""
        return cls(
            email=summary.email,
            role=summary.role,
            tenant=InvitationTenantResponse(
                name=summary.tenant_name, slug=summary.tenant_slug
            ),
            invited_by=summary.invited_by_email,
            expires_at=summary.expires_at,
        )


class IssuedInvitationEnvelope(CamelModel):
    """Payload wrapping a freshly issued invitation."""

    invitation: IssuedInvitationResponse


class MyInvitationsEnvelope(CamelModel):
    """Payload of /users/my-invitations."""

    invitations: list[MyInvitationResponse]


class TenantInvitationsEnvelope(CamelModel):
    """Payload of /users/invitations."""

    invitations: list[TenantInvitationResponse]


class InvitationSummaryEnvelope(CamelModel):
    """Payload of the public invitation lookup."""

    invitation: InvitationSummaryResponse
