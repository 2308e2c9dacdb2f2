"""Initial schema: activities, activity logs and daily summaries.

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-01-13
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create catalog, log and summary tables."""
    op.create_table(
        "activities",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("family_id", sa.String(255), nullable=False, comment="Family ID"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("icon", sa.String(16), nullable=False),
        sa.Column("color", sa.String(7), nullable=False, comment="Hex color #RRGGBB"),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column(
            "category",
            sa.String(20),
            nullable=False,
            comment="One of the eight ActivityCategory values",
        ),
        sa.Column(
            "coefficient",
            sa.Float(),
            nullable=False,
            comment="Quality points per minute (0.5-5.0)",
        ),
        sa.Column(
            "suggested_durations",
            sa.JSON(),
            nullable=False,
            comment="Quick-select durations in minutes",
        ),
        sa.Column("is_preset", sa.Boolean(), nullable=False),
        sa.Column("is_archived", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.String(20), nullable=False),
        *_timestamps(),
        comment="Family activity catalog with quality coefficients",
    )
    op.create_index("ix_activities_family_id", "activities", ["family_id"])
    op.create_index("ix_activities_category", "activities", ["category"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False, comment="Child user ID"),
        sa.Column("family_id", sa.String(255), nullable=False, comment="Family ID"),
        sa.Column("activity_id", sa.String(36), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column(
            "quality_score",
            sa.Float(),
            nullable=False,
            comment="duration_minutes * activity_coefficient",
        ),
        sa.Column("logged_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "activity_date",
            sa.Date(),
            nullable=False,
            comment="Calendar day this entry counts toward",
        ),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("mood", sa.Integer(), nullable=True),
        sa.Column("activity_name", sa.String(100), nullable=False),
        sa.Column("activity_category", sa.String(20), nullable=False),
        sa.Column("activity_icon", sa.String(16), nullable=False),
        sa.Column("activity_color", sa.String(7), nullable=False),
        sa.Column("activity_coefficient", sa.Float(), nullable=False),
        *_timestamps(),
        comment="Logged activity time with a frozen activity snapshot",
    )
    op.create_index("ix_activity_logs_user_id", "activity_logs", ["user_id"])
    op.create_index("ix_activity_logs_family_id", "activity_logs", ["family_id"])
    op.create_index("ix_activity_logs_user_date", "activity_logs", ["user_id", "activity_date"])
    op.create_index("ix_activity_logs_user_activity", "activity_logs", ["user_id", "activity_id"])

    op.create_table(
        "daily_summaries",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False, comment="Child user ID"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("total_minutes", sa.Integer(), nullable=False),
        sa.Column(
            "category_breakdown",
            sa.JSON(),
            nullable=False,
            comment="Minutes per category, all eight categories present",
        ),
        sa.Column("activities_logged", sa.Integer(), nullable=False),
        sa.Column("unique_activities", sa.Integer(), nullable=False),
        sa.Column("total_quality_points", sa.Float(), nullable=False),
        sa.Column("average_quality", sa.Float(), nullable=False),
        sa.Column("diversity_score", sa.Integer(), nullable=False),
        sa.Column("quality_score", sa.Integer(), nullable=False),
        sa.Column("variety_score", sa.Integer(), nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("badges_earned", sa.JSON(), nullable=False),
        sa.Column(
            "streak",
            sa.Integer(),
            nullable=False,
            comment="Consecutive active days ending at this date",
        ),
        sa.Column(
            "calculated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When this summary was last calculated",
        ),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "date", name="uq_daily_summary_user_date"),
        comment="Per-day balance score, category breakdown, badges and streak",
    )
    op.create_index("ix_daily_summaries_user_id", "daily_summaries", ["user_id"])
    op.create_index("ix_daily_summaries_date", "daily_summaries", ["date"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("daily_summaries")
    op.drop_table("activity_logs")
    op.drop_table("activities")
