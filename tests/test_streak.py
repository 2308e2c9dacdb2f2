"""Tests for streak calculation."""

from datetime import UTC, date, datetime, timedelta

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server.models.activity_log import ActivityLog
from kids_balance_server.services.streak import StreakService, calculate_streak
from kids_balance_server.services.summary import DailySummaryService
from tests.factories import CHILD_ID, FAMILY_ID, make_summary

TARGET = date(2026, 1, 13)


def days_before(target: date, *offsets: int) -> list[date]:
    """Dates ``offset`` days before the target, in the given order."""
    return [target - timedelta(days=offset) for offset in offsets]


class TestCalculateStreak:
    """Tests for the pure streak calculation."""

    def test_no_history(self):
        """Test a first active day has a streak of 1."""
        assert calculate_streak(TARGET, []) == 1

    def test_yesterday_missing(self):
        """Test older history does not count when yesterday is missing."""
        assert calculate_streak(TARGET, days_before(TARGET, 2, 3, 4)) == 1

    def test_gap_after_yesterday(self):
        """Test yesterday followed by a gap gives a streak of 2."""
        assert calculate_streak(TARGET, days_before(TARGET, 1, 3, 4)) == 2

    def test_three_consecutive_prior_days(self):
        """Test three consecutive prior days give a streak of 4."""
        assert calculate_streak(TARGET, days_before(TARGET, 1, 2, 3)) == 4

    def test_stops_at_first_gap(self):
        """Test days beyond the first gap are ignored."""
        assert calculate_streak(TARGET, days_before(TARGET, 1, 2, 4, 5, 6)) == 3


class TestStreakService:
    """Tests for StreakService."""

    async def test_streak_from_stored_summaries(self, async_session: AsyncSession):
        """Test the streak is built from stored summaries."""
        for day in days_before(TARGET, 1, 2, 3, 5):
            async_session.add(make_summary(CHILD_ID, day))
        await async_session.commit()

        streak = await StreakService(async_session).get_streak(CHILD_ID, TARGET)

        assert streak == 4

    async def test_idle_summaries_break_streak(self, async_session: AsyncSession):
        """Test a stored day with zero minutes does not extend the streak."""
        async_session.add(make_summary(CHILD_ID, TARGET - timedelta(days=1), total_minutes=0))
        async_session.add(make_summary(CHILD_ID, TARGET - timedelta(days=2)))
        await async_session.commit()

        streak = await StreakService(async_session).get_streak(CHILD_ID, TARGET)

        assert streak == 1

    async def test_ignores_other_users_and_later_days(self, async_session: AsyncSession):
        """Test only the child's own earlier summaries are considered."""
        async_session.add(make_summary("other-child", TARGET - timedelta(days=1)))
        async_session.add(make_summary(CHILD_ID, TARGET))
        async_session.add(make_summary(CHILD_ID, TARGET + timedelta(days=1)))
        await async_session.commit()

        streak = await StreakService(async_session).get_streak(CHILD_ID, TARGET)

        assert streak == 1

    async def test_lookback_caps_streak(self, async_session: AsyncSession):
        """Test the streak cannot exceed the lookback window plus today."""
        for offset in range(1, 11):
            async_session.add(make_summary(CHILD_ID, TARGET - timedelta(days=offset)))
        await async_session.commit()

        service = StreakService(async_session, lookback=5)

        assert await service.get_streak(CHILD_ID, TARGET) == 6

    async def test_lookup_failure_defaults_to_one(self, async_session: AsyncSession, monkeypatch):
        """Test a database error degrades the streak to 1 instead of raising."""
        monkeypatch.setattr(StreakService, "get_prior_active_dates", query_missing_table)

        streak = await StreakService(async_session).get_streak(CHILD_ID, TARGET)

        assert streak == 1

    async def test_lookup_failure_keeps_summary_write(
        self, async_session: AsyncSession, monkeypatch
    ):
        """Test a failed lookup still lets the day's summary be stored."""
        async_session.add(make_summary(CHILD_ID, TARGET - timedelta(days=1)))
        async_session.add(
            ActivityLog(
                user_id=CHILD_ID,
                family_id=FAMILY_ID,
                activity_id="a1",
                duration_minutes=30,
                quality_score=90.0,
                logged_at=datetime(2026, 1, 13, 9, 0, tzinfo=UTC),
                activity_date=TARGET,
                activity_name="Riding Bike",
                activity_category="physical",
                activity_icon="🚴",
                activity_color="#10B981",
                activity_coefficient=3.0,
            )
        )
        await async_session.flush()
        monkeypatch.setattr(StreakService, "get_prior_active_dates", query_missing_table)

        stats = await DailySummaryService(async_session).recalculate_day(CHILD_ID, TARGET)
        await async_session.commit()

        summary = await DailySummaryService(async_session).get_summary(CHILD_ID, TARGET)
        assert stats.streak == 1
        assert summary is not None
        assert summary.total_minutes == 30
        assert summary.streak == 1


async def query_missing_table(self, user_id: str, target_date: date) -> list[date]:
    """Stand-in lookup whose query fails inside the database."""
    await self.session.execute(text("SELECT date FROM no_such_table"))
    return []
