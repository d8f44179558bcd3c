"""create notes table

Revision ID: 6b90f4c1e5d7
Revises: d5e7a0b3c218
Create Date: 2026-10-16 09:26:18.744052

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "6b90f4c1e5d7"
down_revision: Union[str, Sequence[str], None] = "d5e7a0b3c218"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "notes",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("user_id", sa.String(length=26), nullable=False),
        sa.Column("tenant_id", sa.String(length=26), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_notes"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_notes_user_id_users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["tenant_id"],
            ["tenants.id"],
            name="fk_notes_tenant_id_tenants",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_notes_tenant_id_created_at", "notes", ["tenant_id", "created_at"]
    )
    op.create_index("ix_notes_tenant_id_user_id", "notes", ["tenant_id", "user_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_notes_tenant_id_user_id", table_name="notes")
    op.drop_index("ix_notes_tenant_id_created_at", table_name="notes")
    op.drop_table("notes")
