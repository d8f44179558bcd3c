"""PostgreSQL implementation of ITenantRepository.

Tenants are flat metadata rows. The repository flushes but never commits;
application services own the transaction.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId
from iam.infrastructure.models import TenantModel
from iam.infrastructure.models.tenant import TENANT_SLUG_CONSTRAINT
from iam.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from iam.ports.exceptions import DuplicateTenantSlugError
from iam.ports.repositories import ITenantRepository
from infrastructure.database import constraint_mentioned
from shared_kernel.plans import TenantPlan


class TenantRepository(ITenantRepository):
    """Repository managing PostgreSQL storage for Tenant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    async def save(self, tenant: Tenant) -> None:
        """Insert or update a tenant.

        Raises:
            DuplicateTenantSlugError: If the slug is already taken
        """
        model = await self._session.get(TenantModel, tenant.id.value)
        if model is None:
            model = TenantModel(
                id=tenant.id.value,
                name=tenant.name,
                slug=tenant.slug,
                plan=tenant.plan.value,
            )
            self._session.add(model)
        else:
            model.name = tenant.name
            model.slug = tenant.slug
            model.plan = tenant.plan.value

        try:
            await self._session.flush()
        except IntegrityError as e:
            if constraint_mentioned(e, TENANT_SLUG_CONSTRAINT):
                self._probe.duplicate_tenant_slug(tenant.slug)
                raise DuplicateTenantSlugError(
                    f"Tenant slug '{tenant.slug}' is already taken"
                ) from e
            raise

        self._probe.tenant_saved(tenant.id.value, tenant.slug)

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by its ID."""
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def get_by_slug(self, slug: str) -> Tenant | None:
        """Retrieve a tenant by its normalized slug."""
        stmt = select(TenantModel).where(TenantModel.slug == slug.strip().lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_by_ids(self, tenant_ids: list[TenantId]) -> list[Tenant]:
        """Retrieve several tenants in one query."""
        if not tenant_ids:
            return []
        ids = {tenant_id.value for tenant_id in tenant_ids}
        stmt = select(TenantModel).where(TenantModel.id.in_(ids))
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: TenantModel) -> Tenant:
        return Tenant(
            id=TenantId(value=model.id),
            name=model.name,
            slug=model.slug,
            plan=TenantPlan(model.plan),
        )
