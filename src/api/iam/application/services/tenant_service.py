"""Tenant application service for IAM bounded context.

Handles tenant creation for seeding and plan upgrades.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultTenantServiceProbe, TenantServiceProbe
from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId
from iam.ports.exceptions import (
    AdminRoleRequiredError,
    CrossTenantOperationError,
    TenantNotFoundError,
)
from iam.ports.repositories import ITenantRepository
from shared_kernel.middleware.tenant_context import TenantContext
from shared_kernel.plans import TenantPlan


class TenantService:
    """Application service for tenant management."""

    def __init__(
        self,
        tenant_repository: ITenantRepository,
        session: AsyncSession,
        probe: TenantServiceProbe | None = None,
    ):
        """Initialize TenantService with dependencies.

        Args:
            tenant_repository: Repository for tenant persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._tenant_repository = tenant_repository
        self._probe = probe or DefaultTenantServiceProbe()
        self._session = session

    async def create_tenant(
        self, name: str, slug: str, plan: TenantPlan = TenantPlan.FREE
    ) -> Tenant:
        """Create a new tenant.

        Not exposed over HTTP; used by seeding and operational scripts.

        Raises:
            InvalidSlugError: If the slug is malformed
            DuplicateTenantSlugError: If the slug is already taken
        """
        tenant = Tenant.create(name=name, slug=slug, plan=plan)
        async with self._session.begin():
            await self._tenant_repository.save(tenant)

        self._probe.tenant_created(tenant_id=tenant.id.value, slug=tenant.slug)
        return tenant

    async def upgrade(self, context: TenantContext, slug: str) -> Tenant:
        """Move the caller's tenant to the pro plan.

        The slug in the request must name the caller's own tenant; admins
        cannot upgrade other tenants. Upgrading a pro tenant is a no-op.

        Args:
            context: The requesting admin's tenant context
            slug: Slug of the tenant to upgrade

        Returns:
            The upgraded Tenant

        Raises:
            AdminRoleRequiredError: If the caller is not an admin
            CrossTenantOperationError: If the slug names another tenant
            TenantNotFoundError: If the caller's tenant no longer exists
        """
        if not context.is_admin:
            raise AdminRoleRequiredError()

        requested_slug = slug.strip().lower()
        async with self._session.begin():
            tenant = await self._tenant_repository.get_by_id(
                TenantId(value=context.tenant_id)
            )
            if tenant is None:
                self._probe.tenant_not_found(tenant_id=context.tenant_id)
                raise TenantNotFoundError()

            if tenant.slug != requested_slug:
                self._probe.cross_tenant_upgrade_denied(
                    tenant_id=tenant.id.value, requested_slug=requested_slug
                )
                raise CrossTenantOperationError("You can only upgrade your own tenant")

            changed = tenant.upgrade_to_pro()
            if changed:
                await self._tenant_repository.save(tenant)

        self._probe.tenant_upgraded(tenant_id=tenant.id.value, changed=changed)
        return tenant
