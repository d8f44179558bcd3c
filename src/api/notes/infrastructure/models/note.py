"""SQLAlchemy ORM model for the notes table."""

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class NoteModel(Base, TimestampMixin):
    """ORM model for notes table.

    tenant_id is written once at insert; every query filters on it.
    """

    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_tenant_id_created_at", "tenant_id", "created_at"),
        Index("ix_notes_tenant_id_user_id", "tenant_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<NoteModel(id={self.id}, tenant_id={self.tenant_id})>"
