"""Daily summary model."""

from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from kids_balance_server.models.base import Base, TimestampMixin, UserScopedMixin, generate_uuid


class DailySummary(Base, UserScopedMixin, TimestampMixin):
    """Persisted aggregation of one child's logs for one calendar day.

    Always derived from the day's activity logs; never edited directly.
    Rows are recomputed in place whenever the day's logs change.
    """

    __tablename__ = "daily_summaries"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_summary_user_date"),
        {"comment": "Per-day balance score, category breakdown, badges and streak"},
    )

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )

    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Totals
    total_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_breakdown: Mapped[dict[str, int]] = mapped_column(
        JSON,
        nullable=False,
        comment="Minutes per category, all eight categories present",
    )
    category_quality_points: Mapped[dict[str, float]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Quality points per category, all eight categories present",
    )
    activities_logged: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unique_activities: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_quality_points: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    average_quality: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # Balance score components
    diversity_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    quality_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    variety_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    badges_earned: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    streak: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Consecutive active days ending at this date",
    )

    calculated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When this summary was last calculated",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<DailySummary(user_id={self.user_id}, date={self.date}, "
            f"total_score={self.total_score}, streak={self.streak})>"
        )
