"""create entries table

Revision ID: 8e4d2b6a9f31
Revises: 3c1f9a7e2b10
Create Date: 2026-10-19 09:14:37.902114

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "8e4d2b6a9f31"
down_revision: Union[str, Sequence[str], None] = "3c1f9a7e2b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "entries",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column(
            "category", sa.String(length=32), server_default="Book", nullable=False
        ),
        sa.Column(
            "status",
            sa.String(length=32),
            server_default="Want to Read",
            nullable=False,
        ),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column(
            "genres", sa.JSON(), server_default=sa.text("'[]'"), nullable=False
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "rating IS NULL OR (rating >= 0 AND rating <= 5)",
            name="ck_entries_rating_range",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.external_id"],
            name="fk_entries_user_id_users",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Owner-scoped listing ordered by recency
    op.create_index(
        "ix_entries_user_id_updated_at",
        "entries",
        ["user_id", "updated_at"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_entries_user_id_updated_at", table_name="entries")
    op.drop_table("entries")
