"""SQLAlchemy ORM model for the invitations table."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

INVITATION_TOKEN_CONSTRAINT = "uq_invitations_token"
PENDING_INVITATION_INDEX = "ix_invitations_pending_email_tenant"

_PENDING = text("status = 'pending'")


class InvitationModel(Base, TimestampMixin):
    """ORM model for invitations table.

    Constraints:
    - token is globally unique
    - at most one pending row per (email, tenant_id), via a partial unique
      index; lapsed pending rows are flipped to 'expired' before a new
      invitation is inserted for the same pair
    - expires_at is indexed for lazy expiry filtering and purging
    """

    __tablename__ = "invitations"
    __table_args__ = (
        UniqueConstraint("token", name=INVITATION_TOKEN_CONSTRAINT),
        Index(
            PENDING_INVITATION_INDEX,
            "email",
            "tenant_id",
            unique=True,
            postgresql_where=_PENDING,
            sqlite_where=_PENDING,
        ),
        CheckConstraint(
            "status IN ('pending', 'accepted', 'expired')", name="status_valid"
        ),
        CheckConstraint("role IN ('admin', 'member')", name="role_valid"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    tenant_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    invited_by: Mapped[str] = mapped_column(String(26), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    token: Mapped[str] = mapped_column(String(128), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    accepted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<InvitationModel(id={self.id}, tenant_id={self.tenant_id}, "
            f"status={self.status})>"
        )
