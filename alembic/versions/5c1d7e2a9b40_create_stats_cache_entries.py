"""create stats cache entries

Revision ID: 5c1d7e2a9b40
Revises:
Create Date: 2026-10-18 10:12:04.318220

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5c1d7e2a9b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "stats_cache_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cache_key", sa.String(length=150), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cache_key", name="uq_stats_cache_entries_cache_key"),
    )
    op.create_index(
        "ix_stats_cache_entries_id", "stats_cache_entries", ["id"], unique=False
    )
    op.create_index(
        "ix_stats_cache_entries_expires_at",
        "stats_cache_entries",
        ["expires_at"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_stats_cache_entries_expires_at", table_name="stats_cache_entries")
    op.drop_index("ix_stats_cache_entries_id", table_name="stats_cache_entries")
    op.drop_table("stats_cache_entries")
