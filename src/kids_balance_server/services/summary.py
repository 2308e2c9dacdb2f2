"""Daily summary service: re-aggregates and stores a child's day."""

from datetime import UTC, date, datetime, timedelta

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server.models.activity_log import ActivityLog
from kids_balance_server.models.daily_summary import DailySummary
from kids_balance_server.schemas.stats import DailyStats, WeeklyStats
from kids_balance_server.services.aggregator import (
    aggregate_daily_stats,
    summarize_week,
    summary_to_stats,
    week_start_for,
)
from kids_balance_server.services.streak import StreakService

logger = structlog.get_logger()


class DailySummaryService:
    """Service for computing and storing daily summaries.

    Recalculation always starts from the full set of the day's logs, so
    running it again (after a retry or a concurrent edit) converges on the
    same result.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize daily summary service.

        Args:
            session: Database session
        """
        self.session = session
        self.logger = logger.bind(service="daily_summary")
        self.streak_service = StreakService(session)

    async def get_logs_for_date(self, user_id: str, day: date) -> list[ActivityLog]:
        """All of a child's logs that count toward ``day``, oldest first."""
        stmt = (
            select(ActivityLog)
            .where(ActivityLog.user_id == user_id)
            .where(ActivityLog.activity_date == day)
            .order_by(ActivityLog.logged_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def recalculate_day(self, user_id: str, day: date) -> DailyStats:
        """Re-aggregate a child's day and upsert its summary.

        Args:
            user_id: User identifier
            day: Calendar date to recalculate

        Returns:
            The freshly computed DailyStats, including streak

        Raises:
            InvalidLogEntryError: If a stored log is malformed; nothing is written
        """
        logs = await self.get_logs_for_date(user_id, day)
        stats = aggregate_daily_stats(logs, day)

        if stats.total_minutes > 0:
            stats.streak = await self.streak_service.get_streak(user_id, day)
        else:
            stats.streak = 0

        await self._upsert_summary(user_id, stats)

        self.logger.info(
            "Daily summary recalculated",
            user_id=user_id,
            date=str(day),
            total_minutes=stats.total_minutes,
            total_score=stats.balance_score.total_score,
            badges=stats.badges_earned,
            streak=stats.streak,
        )
        return stats

    async def _upsert_summary(self, user_id: str, stats: DailyStats) -> DailySummary:
        """Insert or update the summary row for (user_id, stats.date)."""
        summary_data = {
            "total_minutes": stats.total_minutes,
            "category_breakdown": stats.category_breakdown,
            "category_quality_points": stats.category_quality_points,
            "activities_logged": stats.activities_logged,
            "unique_activities": stats.unique_activities,
            "total_quality_points": stats.total_quality_points,
            "average_quality": stats.average_quality,
            "diversity_score": stats.balance_score.diversity_score,
            "quality_score": stats.balance_score.quality_score,
            "variety_score": stats.balance_score.variety_score,
            "total_score": stats.balance_score.total_score,
            "badges_earned": stats.badges_earned,
            "streak": stats.streak or 0,
            "calculated_at": stats.calculated_at,
        }

        summary = await self.get_summary(user_id, stats.date)
        if summary is None:
            summary = DailySummary(user_id=user_id, date=stats.date, **summary_data)
            self.session.add(summary)
        else:
            for key, value in summary_data.items():
                setattr(summary, key, value)

        await self.session.flush()
        return summary

    async def get_summary(self, user_id: str, day: date) -> DailySummary | None:
        """Get the stored summary row for a day."""
        stmt = (
            select(DailySummary)
            .where(DailySummary.user_id == user_id)
            .where(DailySummary.date == day)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_daily_stats(self, user_id: str, day: date) -> DailyStats | None:
        """Last stored stats for a day, or None if it was never calculated."""
        summary = await self.get_summary(user_id, day)
        if summary is None:
            return None
        return summary_to_stats(summary)

    async def get_summaries(self, user_id: str, start: date, end: date) -> list[DailyStats]:
        """Stored stats between two dates (inclusive), oldest first."""
        stmt = (
            select(DailySummary)
            .where(DailySummary.user_id == user_id)
            .where(DailySummary.date >= start)
            .where(DailySummary.date <= end)
            .order_by(DailySummary.date.asc())
        )
        result = await self.session.execute(stmt)
        return [summary_to_stats(summary) for summary in result.scalars().all()]

    async def get_weekly_stats(self, user_id: str, week_start: date) -> WeeklyStats:
        """Roll up the Monday-starting week containing ``week_start``."""
        start = week_start_for(week_start)
        summaries = await self.get_summaries(user_id, start, start + timedelta(days=6))
        return summarize_week(summaries, start, calculated_at=datetime.now(UTC))
