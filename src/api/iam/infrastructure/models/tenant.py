"""SQLAlchemy ORM model for the tenants table."""

from sqlalchemy import CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

TENANT_SLUG_CONSTRAINT = "uq_tenants_slug"


class TenantModel(Base, TimestampMixin):
    """ORM model for tenants table.

    Tenants are the top-level isolation boundary. The plan column is read
    under a row lock when gating note creation.
    """

    __tablename__ = "tenants"
    __table_args__ = (
        UniqueConstraint("slug", name=TENANT_SLUG_CONSTRAINT),
        CheckConstraint("plan IN ('free', 'pro')", name="plan_valid"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    plan: Mapped[str] = mapped_column(String(16), nullable=False, default="free")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantModel(id={self.id}, slug={self.slug}, plan={self.plan})>"
