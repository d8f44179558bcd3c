"""Pydantic models for tenant API responses."""

from __future__ import annotations

from pydantic import Field

from iam.domain.aggregates import Tenant
from shared_kernel.api_models import CamelModel
from shared_kernel.plans import TenantPlan


class TenantResponse(CamelModel):
    """Response model for tenant."""

    id: str = Field(..., description="Tenant ID (ULID format)")
    name: str = Field(..., description="Tenant name")
    slug: str = Field(..., description="URL identifier")
    plan: TenantPlan = Field(..., description="Subscription plan")

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantResponse:
        """Convert domain Tenant aggregate to API response."""
        return cls(
            id=tenant.id.value,
            name=tenant.name,
            slug=tenant.slug,
            plan=tenant.plan,
        )


class TenantEnvelope(CamelModel):
    """Payload wrapping a single tenant."""

    tenant: TenantResponse
