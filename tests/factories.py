"""Builders for log entries and stored summaries used across tests."""

from datetime import UTC, date, datetime
from typing import Any

from kids_balance_server.models.activity import ActivityCategory
from kids_balance_server.models.daily_summary import DailySummary
from kids_balance_server.schemas.stats import LogEntry
from kids_balance_server.services.scoring import empty_breakdown

FAMILY_ID = "family-1"
CHILD_ID = "child-1"


def make_log(
    activity_id: str,
    category: ActivityCategory | str,
    duration_minutes: int,
    coefficient: float = 1.0,
    **extra: Any,
) -> LogEntry:
    """Build a scoring-engine log entry."""
    return LogEntry(
        activity_id=activity_id,
        activity_category=category,
        duration_minutes=duration_minutes,
        quality_score=duration_minutes * coefficient,
        **extra,
    )


def make_summary(user_id: str, day: date, total_minutes: int = 60) -> DailySummary:
    """Build a stored daily summary with only the totals that streaks read."""
    return DailySummary(
        user_id=user_id,
        date=day,
        total_minutes=total_minutes,
        category_breakdown=empty_breakdown(),
        activities_logged=1 if total_minutes else 0,
        unique_activities=1 if total_minutes else 0,
        total_quality_points=float(total_minutes),
        average_quality=1.0 if total_minutes else 0.0,
        diversity_score=0,
        quality_score=0,
        variety_score=0,
        total_score=0,
        badges_earned=[],
        streak=0,
        calculated_at=datetime.now(UTC),
    )
