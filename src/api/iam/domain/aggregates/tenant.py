"""Tenant aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import TenantId, normalize_slug
from shared_kernel.plans import TenantPlan


@dataclass
class Tenant:
    """Tenant aggregate representing an organization in the system.

    Tenants are the isolation boundary: every user and note belongs to
    exactly one tenant.

    Business rules:
    - Slugs are globally unique, trimmed and lowercase
    - The plan changes only through an explicit upgrade
    - Tenants are never deleted in normal operation
    """

    id: TenantId
    name: str
    slug: str
    plan: TenantPlan = TenantPlan.FREE

    @classmethod
    def create(cls, name: str, slug: str, plan: TenantPlan = TenantPlan.FREE) -> Tenant:
        """Factory method for creating a new tenant.

        Args:
            name: Display name of the organization
            slug: URL identifier; normalized before storage
            plan: Initial subscription plan

        Returns:
            A new Tenant aggregate
        """
        name = name.strip()
        if not name:
            raise ValueError("Tenant name must not be empty")
        return cls(
            id=TenantId.generate(),
            name=name,
            slug=normalize_slug(slug),
            plan=plan,
        )

    @property
    def is_pro(self) -> bool:
        """Whether the tenant is on the unlimited plan."""
        return self.plan == TenantPlan.PRO

    def upgrade_to_pro(self) -> bool:
        """Move the tenant to the pro plan.

        Returns:
            True if the plan changed, False if it was already pro
        """
        if self.is_pro:
            return False
        self.plan = TenantPlan.PRO
        return True
