"""SQLAlchemy ORM model for the users table."""

from sqlalchemy import CheckConstraint, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

USER_EMAIL_CONSTRAINT = "uq_users_email"


class UserModel(Base, TimestampMixin):
    """ORM model for users table.

    Notes:
    - email is unique across the whole system, not per tenant
    - tenant_id is a mutable foreign key; a user belongs to one tenant at a time
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name=USER_EMAIL_CONSTRAINT),
        CheckConstraint("role IN ('admin', 'member')", name="role_valid"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="member")
    tenant_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("tenants.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserModel(id={self.id}, email={self.email}, role={self.role})>"
