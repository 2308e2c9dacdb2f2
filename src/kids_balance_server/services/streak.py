"""Activity streak calculation."""

from collections.abc import Sequence
from datetime import date, timedelta

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server.core.config import settings
from kids_balance_server.models.daily_summary import DailySummary

logger = structlog.get_logger()


def calculate_streak(target_date: date, prior_dates: Sequence[date]) -> int:
    """Count consecutive active days ending at ``target_date``.

    The target day always counts as one. The chain only extends into
    history when the day immediately before the target is present, and it
    stops at the first missing day.

    Args:
        target_date: Day the streak ends on
        prior_dates: Active days strictly before the target, most recent first

    Returns:
        Streak length, at least 1
    """
    if not prior_dates or prior_dates[0] != target_date - timedelta(days=1):
        return 1

    streak = 2
    for previous, current in zip(prior_dates, prior_dates[1:]):
        if current != previous - timedelta(days=1):
            break
        streak += 1

    return streak


class StreakService:
    """Look up prior daily summaries and compute a child's streak.

    The streak is display-only, so lookup failures never propagate.
    """

    def __init__(self, session: AsyncSession, lookback: int | None = None) -> None:
        """Initialize streak service.

        Args:
            session: Database session
            lookback: Maximum number of prior summaries to inspect
                (defaults to settings.streak_lookback_days)
        """
        self.session = session
        self.lookback = lookback or settings.streak_lookback_days
        self.logger = logger.bind(service="streak")

    async def get_prior_active_dates(self, user_id: str, target_date: date) -> list[date]:
        """Dates of active summaries strictly before the target, newest first."""
        stmt = (
            select(DailySummary.date)
            .where(DailySummary.user_id == user_id)
            .where(DailySummary.date < target_date)
            .where(DailySummary.total_minutes > 0)
            .order_by(DailySummary.date.desc())
            .limit(self.lookback)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_streak(self, user_id: str, target_date: date) -> int:
        """Streak ending at ``target_date``, falling back to 1 on lookup errors.

        The lookup runs inside a SAVEPOINT, so a failed query leaves the
        caller's transaction usable for the summary write that follows.

        Args:
            user_id: User identifier
            target_date: Day the streak ends on (assumed active)

        Returns:
            Streak length, at least 1
        """
        try:
            async with self.session.begin_nested():
                prior_dates = await self.get_prior_active_dates(user_id, target_date)
        except SQLAlchemyError as e:
            self.logger.warning(
                "Streak lookup failed, defaulting to 1",
                user_id=user_id,
                target_date=str(target_date),
                error=str(e),
            )
            return 1

        return calculate_streak(target_date, prior_dates)
