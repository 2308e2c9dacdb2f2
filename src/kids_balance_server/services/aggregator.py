"""Daily and weekly stats aggregation.

Pure functions: callers fetch the logs (already filtered to one user and
one date) and persist the result.
"""

from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, timedelta
from typing import Any

from pydantic import ValidationError

from kids_balance_server.models.daily_summary import DailySummary
from kids_balance_server.schemas.stats import BalanceScore, DailyStats, LogEntry, WeeklyStats
from kids_balance_server.services.badges import evaluate_badges
from kids_balance_server.services.scoring import (
    calculate_balance_score,
    category_minutes,
    category_quality,
    empty_breakdown,
)


class InvalidLogEntryError(ValueError):
    """A log entry handed to the aggregator is malformed."""

    def __init__(self, index: int, entry_id: str | None, reason: str) -> None:
        """Initialize with the offending entry's position and id."""
        super().__init__(f"Invalid log entry at index {index} (id={entry_id}): {reason}")
        self.index = index
        self.entry_id = entry_id
        self.reason = reason


def parse_date(value: date | str) -> date:
    """Accept a date or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def validate_log_entries(logs: Iterable[Any]) -> list[LogEntry]:
    """Coerce logs into validated LogEntry values.

    Accepts LogEntry instances, dicts, or objects with matching attributes
    (ActivityLog rows).

    Raises:
        InvalidLogEntryError: If any entry has an unknown category, a
            non-positive duration or a negative quality score
    """
    entries: list[LogEntry] = []
    for index, log in enumerate(logs):
        try:
            entries.append(LogEntry.model_validate(log, from_attributes=True))
        except ValidationError as e:
            entry_id = log.get("id") if isinstance(log, dict) else getattr(log, "id", None)
            reasons = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise InvalidLogEntryError(index, entry_id, reasons) from e
    return entries


def aggregate_daily_stats(
    logs: Sequence[Any],
    date: date | str,
    calculated_at: datetime | None = None,
) -> DailyStats:
    """Aggregate one child's logs for one calendar date.

    Args:
        logs: Every log for the user and date, in any order
        date: The calendar date being aggregated
        calculated_at: Timestamp to stamp on the result (defaults to now)

    Returns:
        DailyStats with balance score and badges; streak is left unset

    Raises:
        InvalidLogEntryError: If any log entry is malformed
    """
    entries = validate_log_entries(logs)

    total_minutes = sum(entry.duration_minutes for entry in entries)
    total_quality_points = sum(entry.quality_score for entry in entries)
    average_quality = total_quality_points / total_minutes if total_minutes > 0 else 0.0

    stats = DailyStats(
        date=parse_date(date),
        total_minutes=total_minutes,
        category_breakdown=category_minutes(entries),
        category_quality_points=category_quality(entries),
        activities_logged=len(entries),
        unique_activities=len({entry.activity_id for entry in entries}),
        total_quality_points=total_quality_points,
        average_quality=average_quality,
        balance_score=calculate_balance_score(entries),
        calculated_at=calculated_at or datetime.now(UTC),
    )

    # Badges read the balance score, so evaluate them on the finished stats
    stats.badges_earned = evaluate_badges(stats)

    return stats


def summary_to_stats(summary: DailySummary) -> DailyStats:
    """Convert a persisted DailySummary back into DailyStats."""
    return DailyStats(
        date=summary.date,
        total_minutes=summary.total_minutes,
        category_breakdown=dict(summary.category_breakdown),
        category_quality_points={
            **{category: 0.0 for category in empty_breakdown()},
            **(summary.category_quality_points or {}),
        },
        activities_logged=summary.activities_logged,
        unique_activities=summary.unique_activities,
        total_quality_points=summary.total_quality_points,
        average_quality=summary.average_quality,
        balance_score=BalanceScore(
            diversity_score=summary.diversity_score,
            quality_score=summary.quality_score,
            variety_score=summary.variety_score,
            total_score=summary.total_score,
        ),
        badges_earned=list(summary.badges_earned),
        streak=summary.streak,
        calculated_at=summary.calculated_at,
    )


def week_start_for(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def summarize_week(
    daily_stats: Sequence[DailyStats],
    week_start: date | str,
    calculated_at: datetime | None = None,
) -> WeeklyStats:
    """Roll up the daily stats falling in one Monday-starting week.

    Days outside the week are ignored. The average score is taken over
    active days only, so an idle day does not drag the week down.
    """
    start = week_start_for(parse_date(week_start))
    end = start + timedelta(days=6)

    in_week = sorted(
        (stats for stats in daily_stats if start <= stats.date <= end),
        key=lambda stats: stats.date,
    )
    active = [stats for stats in in_week if stats.total_minutes > 0]

    badges: list[str] = []
    for stats in active:
        for badge_id in stats.badges_earned:
            if badge_id not in badges:
                badges.append(badge_id)

    average_score = (
        round(sum(stats.balance_score.total_score for stats in active) / len(active), 1)
        if active
        else 0.0
    )

    return WeeklyStats(
        week_start_date=start,
        total_minutes=sum(stats.total_minutes for stats in in_week),
        average_daily_score=average_score,
        days_active=len(active),
        badges_earned=badges,
        calculated_at=calculated_at or datetime.now(UTC),
    )
