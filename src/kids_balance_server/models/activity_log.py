"""Activity log model."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from kids_balance_server.models.base import (
    Base,
    FamilyScopedMixin,
    TimestampMixin,
    UserScopedMixin,
    generate_uuid,
)


class ActivityLog(Base, UserScopedMixin, FamilyScopedMixin, TimestampMixin):
    """One logged occurrence of an activity by a child.

    The activity's name, category, icon, color and coefficient are copied
    onto the log when it is created. Later catalog edits do not touch
    existing logs unless an explicit recalculation is run.
    """

    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("ix_activity_logs_user_date", "user_id", "activity_date"),
        Index("ix_activity_logs_user_activity", "user_id", "activity_id"),
        {"comment": "Logged activity time with a frozen activity snapshot"},
    )

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )

    activity_id: Mapped[str] = mapped_column(String(36), nullable=False)

    # Time spent
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    quality_score: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="duration_minutes * activity_coefficient",
    )
    logged_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    activity_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Calendar day this entry counts toward",
    )

    # Optional child input
    notes: Mapped[str | None] = mapped_column(String(500))
    mood: Mapped[int | None] = mapped_column(Integer)

    # Snapshot of the activity at logging time
    activity_name: Mapped[str] = mapped_column(String(100), nullable=False)
    activity_category: Mapped[str] = mapped_column(String(20), nullable=False)
    activity_icon: Mapped[str] = mapped_column(String(16), nullable=False)
    activity_color: Mapped[str] = mapped_column(String(7), nullable=False)
    activity_coefficient: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ActivityLog(user_id={self.user_id}, date={self.activity_date}, "
            f"activity={self.activity_name}, minutes={self.duration_minutes})>"
        )
