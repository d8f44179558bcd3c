"""User aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import EmailAddress, TenantId, TenantRole, UserId


@dataclass
class User:
    """User aggregate representing a person with credentials.

    A user belongs to exactly one tenant at any instant. Tenant and role
    are mutable, but only invitation acceptance changes them (see
    ``join_tenant``); there is no direct edit path.
    """

    id: UserId
    email: EmailAddress
    password_hash: str
    role: TenantRole
    tenant_id: TenantId

    @classmethod
    def create(
        cls,
        email: EmailAddress,
        password_hash: str,
        tenant_id: TenantId,
        role: TenantRole = TenantRole.MEMBER,
    ) -> User:
        """Factory method for provisioning a new user."""
        return cls(
            id=UserId.generate(),
            email=email,
            password_hash=password_hash,
            role=role,
            tenant_id=tenant_id,
        )

    @property
    def is_admin(self) -> bool:
        """Whether the user administers their tenant."""
        return self.role == TenantRole.ADMIN

    def join_tenant(self, tenant_id: TenantId, role: TenantRole) -> None:
        """Move the user into a tenant with the given role.

        Leaves the previous tenant implicitly; users never hold more than
        one membership.
        """
        self.tenant_id = tenant_id
        self.role = role

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.email})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
