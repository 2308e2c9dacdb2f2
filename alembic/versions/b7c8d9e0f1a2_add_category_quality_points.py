"""Add per-category quality points to daily summaries.

Revision ID: b7c8d9e0f1a2
Revises: a1b2c3d4e5f6
Create Date: 2026-02-02
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "b7c8d9e0f1a2"
down_revision: str | None = "a1b2c3d4e5f6"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add category_quality_points column."""
    op.add_column(
        "daily_summaries",
        sa.Column(
            "category_quality_points",
            sa.JSON(),
            nullable=False,
            server_default=sa.text("'{}'"),
            comment="Quality points per category, all eight categories present",
        ),
    )


def downgrade() -> None:
    """Remove category_quality_points column."""
    op.drop_column("daily_summaries", "category_quality_points")
