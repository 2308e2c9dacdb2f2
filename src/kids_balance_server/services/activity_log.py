"""Activity log service: logging, editing and bulk recalculation."""

from datetime import UTC, date, datetime
from typing import Any
from zoneinfo import ZoneInfo

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server.core.config import settings
from kids_balance_server.models.activity import MAX_COEFFICIENT, MIN_COEFFICIENT
from kids_balance_server.models.activity_log import ActivityLog
from kids_balance_server.schemas.stats import DailyStats
from kids_balance_server.services.activity import (
    ActivityArchivedError,
    ActivityService,
    InvalidActivityError,
)
from kids_balance_server.services.aggregator import InvalidLogEntryError
from kids_balance_server.services.summary import DailySummaryService

logger = structlog.get_logger()

# Smallest quality-score change worth rewriting during a recalculation
RECALCULATION_TOLERANCE = 0.01


class LogNotFoundError(LookupError):
    """No activity log exists with the requested id."""

    def __init__(self, log_id: str) -> None:
        """Initialize with the missing log id."""
        super().__init__(f"Activity log not found: {log_id}")
        self.log_id = log_id


class InvalidDurationError(ValueError):
    """Duration is outside 1..max_log_duration_minutes."""


def validate_duration(duration_minutes: int) -> int:
    """Check a logged duration against the configured bounds.

    Raises:
        InvalidDurationError: If the duration is not a whole number of
            minutes between 1 and settings.max_log_duration_minutes
    """
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidDurationError("Duration must be a whole number of minutes")
    if not 1 <= duration_minutes <= settings.max_log_duration_minutes:
        raise InvalidDurationError(
            f"Duration must be between 1 and {settings.max_log_duration_minutes} minutes"
        )
    return duration_minutes


def activity_date_for(logged_at: datetime, timezone: str | None = None) -> date:
    """Calendar day a timestamp counts toward in the configured timezone.

    Naive timestamps are treated as UTC.
    """
    if logged_at.tzinfo is None:
        logged_at = logged_at.replace(tzinfo=UTC)
    return logged_at.astimezone(ZoneInfo(timezone or settings.default_timezone)).date()


class ActivityLogService:
    """Service for a child's activity logs.

    Every change to a log re-aggregates the day it belongs to.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize activity log service.

        Args:
            session: Database session
        """
        self.session = session
        self.logger = logger.bind(service="activity_log")
        self.activity_service = ActivityService(session)
        self.summary_service = DailySummaryService(session)

    async def get_log(self, log_id: str) -> ActivityLog:
        """Get a log by id.

        Raises:
            LogNotFoundError: If no such log exists
        """
        log = await self.session.get(ActivityLog, log_id)
        if log is None:
            raise LogNotFoundError(log_id)
        return log

    async def get_logs_for_date(self, user_id: str, day: date) -> list[ActivityLog]:
        """A child's logs for one day, oldest first."""
        return await self.summary_service.get_logs_for_date(user_id, day)

    async def log_activity(
        self,
        user_id: str,
        family_id: str,
        activity_id: str,
        duration_minutes: int,
        logged_at: datetime | None = None,
        notes: str | None = None,
        mood: int | None = None,
    ) -> ActivityLog:
        """Record time spent on an activity.

        Copies the activity's current name, category, icon, color and
        coefficient onto the log, then refreshes the day's summary.

        Raises:
            ActivityNotFoundError: If the activity does not exist
            ActivityArchivedError: If the activity has been archived
            InvalidDurationError: If the duration is out of bounds
        """
        validate_duration(duration_minutes)
        activity = await self.activity_service.get_activity(activity_id)
        if activity.is_archived:
            raise ActivityArchivedError(activity_id)

        logged_at = logged_at or datetime.now(UTC)
        log = ActivityLog(
            user_id=user_id,
            family_id=family_id,
            activity_id=activity.id,
            duration_minutes=duration_minutes,
            quality_score=duration_minutes * activity.coefficient,
            logged_at=logged_at,
            activity_date=activity_date_for(logged_at),
            notes=notes,
            mood=mood,
            activity_name=activity.name,
            activity_category=activity.category,
            activity_icon=activity.icon,
            activity_color=activity.color,
            activity_coefficient=activity.coefficient,
        )
        self.session.add(log)
        await self.session.flush()

        self.logger.info(
            "Activity logged",
            user_id=user_id,
            log_id=log.id,
            activity=activity.name,
            duration_minutes=duration_minutes,
            quality_score=log.quality_score,
        )

        await self._refresh_day(user_id, log.activity_date)
        return log

    async def update_duration(self, log_id: str, duration_minutes: int) -> ActivityLog:
        """Change a log's duration.

        The quality score is recomputed with the coefficient captured on
        the log, not the activity's current one.

        Raises:
            LogNotFoundError: If the log does not exist
            InvalidDurationError: If the duration is out of bounds
        """
        validate_duration(duration_minutes)
        log = await self.get_log(log_id)

        log.duration_minutes = duration_minutes
        log.quality_score = duration_minutes * log.activity_coefficient
        await self.session.flush()

        self.logger.info(
            "Activity log duration updated",
            user_id=log.user_id,
            log_id=log_id,
            duration_minutes=duration_minutes,
        )

        await self._refresh_day(log.user_id, log.activity_date)
        return log

    async def delete_log(self, log_id: str) -> None:
        """Delete a log and refresh its day.

        Raises:
            LogNotFoundError: If the log does not exist
        """
        log = await self.get_log(log_id)
        user_id, day = log.user_id, log.activity_date

        await self.session.delete(log)
        await self.session.flush()

        self.logger.info("Activity log deleted", user_id=user_id, log_id=log_id)

        await self._refresh_day(user_id, day)

    async def recalculate_activity_logs(
        self,
        user_id: str,
        activity_id: str,
        new_coefficient: float,
    ) -> dict[str, Any]:
        """Apply a new coefficient to a child's historical logs of one activity.

        This is an explicit bulk operation; editing an activity never does
        it implicitly. Every log takes the new coefficient, but only logs whose
        score moves by more than RECALCULATION_TOLERANCE are counted as
        updated and have their day re-aggregated (once per day).

        Args:
            user_id: User whose logs are rewritten
            activity_id: Activity whose logs are rewritten
            new_coefficient: Coefficient to apply (0.5-5.0)

        Returns:
            Dict with the number of updated logs and the refreshed dates

        Raises:
            InvalidActivityError: If the coefficient is out of range
        """
        if not MIN_COEFFICIENT <= new_coefficient <= MAX_COEFFICIENT:
            raise InvalidActivityError(
                f"Coefficient must be between {MIN_COEFFICIENT} and {MAX_COEFFICIENT}"
            )

        stmt = (
            select(ActivityLog)
            .where(ActivityLog.user_id == user_id)
            .where(ActivityLog.activity_id == activity_id)
        )
        result = await self.session.execute(stmt)
        logs = result.scalars().all()

        affected_dates: set[date] = set()
        updated = 0
        for log in logs:
            new_score = log.duration_minutes * new_coefficient
            # Later duration edits rescale with the snapshot, so keep it current
            log.activity_coefficient = new_coefficient
            if abs(new_score - log.quality_score) <= RECALCULATION_TOLERANCE:
                continue
            log.quality_score = new_score
            affected_dates.add(log.activity_date)
            updated += 1

        await self.session.flush()

        self.logger.info(
            "Activity logs recalculated",
            user_id=user_id,
            activity_id=activity_id,
            coefficient=new_coefficient,
            logs_updated=updated,
            days_affected=len(affected_dates),
        )

        for day in sorted(affected_dates):
            await self._refresh_day(user_id, day)

        return {
            "logs_updated": updated,
            "dates_recalculated": [str(day) for day in sorted(affected_dates)],
        }

    async def _refresh_day(self, user_id: str, day: date) -> DailyStats | None:
        """Re-aggregate a day without letting a bad log block the caller.

        A malformed stored log leaves the day's last good summary in place.
        """
        try:
            return await self.summary_service.recalculate_day(user_id, day)
        except InvalidLogEntryError as e:
            self.logger.warning(
                "Daily summary not recalculated",
                user_id=user_id,
                date=str(day),
                error=str(e),
            )
            return None
