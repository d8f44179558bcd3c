"""HTTP routes for tenant plan management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from iam.application.services import TenantService
from iam.dependencies import get_tenant_context, get_tenant_service
from iam.presentation.tenants.models import TenantEnvelope, TenantResponse
from shared_kernel.api_models import ApiResponse
from shared_kernel.middleware.tenant_context import TenantContext

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


@router.post("/{slug}/upgrade")
async def upgrade_tenant(
    slug: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> ApiResponse[TenantEnvelope]:
    """Upgrade the caller's own tenant to the pro plan.

    Only admins may upgrade, and only their own tenant (403 otherwise).
    """
    tenant = await service.upgrade(context, slug)
    return ApiResponse(
        message="Tenant upgraded to Pro plan successfully",
        data=TenantEnvelope(tenant=TenantResponse.from_domain(tenant)),
    )
