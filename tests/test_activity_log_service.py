"""Tests for logging activities and keeping daily summaries current."""

from datetime import UTC, date, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server.models.activity_log import ActivityLog
from kids_balance_server.services.activity import (
    ActivityArchivedError,
    ActivityNotFoundError,
    ActivityService,
    InvalidActivityError,
)
from kids_balance_server.services.activity_log import (
    ActivityLogService,
    InvalidDurationError,
    LogNotFoundError,
    activity_date_for,
)
from kids_balance_server.services.summary import DailySummaryService
from tests.factories import CHILD_ID, FAMILY_ID

DAY = date(2026, 1, 13)
MORNING = datetime(2026, 1, 13, 9, 0, tzinfo=UTC)


async def log(service: ActivityLogService, activity, minutes: int, at: datetime = MORNING):
    """Log an activity for the test child."""
    return await service.log_activity(
        user_id=CHILD_ID,
        family_id=FAMILY_ID,
        activity_id=activity.id,
        duration_minutes=minutes,
        logged_at=at,
    )


class TestLogActivity:
    """Tests for ActivityLogService.log_activity."""

    @pytest.mark.asyncio
    async def test_snapshot_and_quality(self, async_session: AsyncSession, reading):
        """Test the activity is frozen onto the log and quality = minutes x coefficient."""
        service = ActivityLogService(async_session)

        entry = await log(service, reading, 30)

        assert entry.quality_score == 120.0
        assert entry.activity_date == DAY
        assert entry.activity_name == "Reading Books"
        assert entry.activity_category == "educational"
        assert entry.activity_icon == "📚"
        assert entry.activity_color == "#059669"
        assert entry.activity_coefficient == 4.0

    @pytest.mark.asyncio
    async def test_creates_daily_summary(self, async_session: AsyncSession, reading, youtube):
        """Test logging refreshes the day's stored summary."""
        service = ActivityLogService(async_session)

        await log(service, reading, 60)
        await log(service, youtube, 60, at=MORNING + timedelta(hours=3))
        await async_session.commit()

        stats = await DailySummaryService(async_session).get_daily_stats(CHILD_ID, DAY)

        assert stats is not None
        assert stats.total_minutes == 120
        assert stats.activities_logged == 2
        assert stats.category_breakdown["educational"] == 60
        assert stats.category_breakdown["screen"] == 60
        assert stats.category_quality_points["educational"] == 240.0
        assert stats.category_quality_points["screen"] == 60.0
        assert stats.average_quality == 2.5
        # diversity 21, quality 25, variety 8
        assert stats.balance_score.total_score == 54
        assert stats.streak == 1

    @pytest.mark.asyncio
    async def test_streak_across_days(self, async_session: AsyncSession, reading):
        """Test consecutive active days build a streak."""
        service = ActivityLogService(async_session)

        await log(service, reading, 20, at=MORNING - timedelta(days=2))
        await log(service, reading, 20, at=MORNING - timedelta(days=1))
        await log(service, reading, 20)

        stats = await DailySummaryService(async_session).get_daily_stats(CHILD_ID, DAY)

        assert stats is not None
        assert stats.streak == 3

    @pytest.mark.asyncio
    async def test_snapshot_survives_catalog_edit(self, async_session: AsyncSession, reading):
        """Test editing the activity leaves existing logs untouched."""
        service = ActivityLogService(async_session)
        entry = await log(service, reading, 30)

        await ActivityService(async_session).update_activity(
            reading.id, name="Comics", coefficient=2.0
        )
        await async_session.refresh(entry)

        assert entry.activity_name == "Reading Books"
        assert entry.activity_coefficient == 4.0
        assert entry.quality_score == 120.0

    @pytest.mark.asyncio
    async def test_archived_activity_rejected(self, async_session: AsyncSession, reading):
        """Test archived activities cannot be logged."""
        await ActivityService(async_session).archive_activity(reading.id)

        with pytest.raises(ActivityArchivedError):
            await log(ActivityLogService(async_session), reading, 30)

    @pytest.mark.asyncio
    async def test_unknown_activity_rejected(self, async_session: AsyncSession):
        """Test logging an unknown activity raises."""
        service = ActivityLogService(async_session)

        with pytest.raises(ActivityNotFoundError):
            await service.log_activity(
                user_id=CHILD_ID,
                family_id=FAMILY_ID,
                activity_id="missing",
                duration_minutes=10,
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("minutes", [0, -5, 481])
    async def test_duration_bounds(self, async_session: AsyncSession, reading, minutes):
        """Test durations outside 1-480 minutes are rejected."""
        with pytest.raises(InvalidDurationError):
            await log(ActivityLogService(async_session), reading, minutes)

    @pytest.mark.asyncio
    async def test_bad_stored_log_does_not_block_logging(
        self, async_session: AsyncSession, reading
    ):
        """Test a malformed stored log leaves the summary alone but still logs."""
        async_session.add(
            ActivityLog(
                user_id=CHILD_ID,
                family_id=FAMILY_ID,
                activity_id="legacy",
                duration_minutes=30,
                quality_score=30.0,
                logged_at=MORNING,
                activity_date=DAY,
                activity_name="Legacy",
                activity_category="gaming",
                activity_icon="🕹️",
                activity_color="#000000",
                activity_coefficient=1.0,
            )
        )
        await async_session.flush()

        entry = await log(ActivityLogService(async_session), reading, 15)

        assert entry.id
        summary = await DailySummaryService(async_session).get_summary(CHILD_ID, DAY)
        assert summary is None


class TestEditLogs:
    """Tests for editing and deleting logs."""

    @pytest.mark.asyncio
    async def test_update_duration_uses_captured_coefficient(
        self, async_session: AsyncSession, reading
    ):
        """Test a duration edit rescales quality with the log's own coefficient."""
        service = ActivityLogService(async_session)
        entry = await log(service, reading, 30)
        await ActivityService(async_session).update_activity(reading.id, coefficient=2.0)

        updated = await service.update_duration(entry.id, 45)

        assert updated.duration_minutes == 45
        assert updated.quality_score == 180.0
        stats = await DailySummaryService(async_session).get_daily_stats(CHILD_ID, DAY)
        assert stats is not None
        assert stats.total_minutes == 45

    @pytest.mark.asyncio
    async def test_delete_last_log_zeroes_summary(self, async_session: AsyncSession, reading):
        """Test deleting the day's only log leaves an idle summary with no streak."""
        service = ActivityLogService(async_session)
        entry = await log(service, reading, 30)

        await service.delete_log(entry.id)

        assert await service.get_logs_for_date(CHILD_ID, DAY) == []
        stats = await DailySummaryService(async_session).get_daily_stats(CHILD_ID, DAY)
        assert stats is not None
        assert stats.total_minutes == 0
        assert stats.balance_score.total_score == 0
        assert stats.badges_earned == []
        assert stats.streak == 0

    @pytest.mark.asyncio
    async def test_missing_log(self, async_session: AsyncSession):
        """Test editing or deleting an unknown log raises."""
        service = ActivityLogService(async_session)

        with pytest.raises(LogNotFoundError):
            await service.update_duration("missing", 10)
        with pytest.raises(LogNotFoundError):
            await service.delete_log("missing")


class TestRecalculateActivityLogs:
    """Tests for bulk coefficient recalculation."""

    @pytest.mark.asyncio
    async def test_rewrites_history_and_summaries(self, async_session: AsyncSession, youtube):
        """Test every log of the activity is rescored and each day refreshed once."""
        service = ActivityLogService(async_session)
        await log(service, youtube, 60, at=MORNING - timedelta(days=1))
        await log(service, youtube, 30)
        await log(service, youtube, 30, at=MORNING + timedelta(hours=4))

        result = await service.recalculate_activity_logs(CHILD_ID, youtube.id, 2.0)

        assert result == {
            "logs_updated": 3,
            "dates_recalculated": ["2026-01-12", "2026-01-13"],
        }
        logs = await service.get_logs_for_date(CHILD_ID, DAY)
        assert [entry.quality_score for entry in logs] == [60.0, 60.0]
        assert all(entry.activity_coefficient == 2.0 for entry in logs)
        stats = await DailySummaryService(async_session).get_daily_stats(CHILD_ID, DAY)
        assert stats is not None
        assert stats.average_quality == 2.0

    @pytest.mark.asyncio
    async def test_unchanged_coefficient_is_noop(self, async_session: AsyncSession, youtube):
        """Test logs already at the coefficient are skipped."""
        service = ActivityLogService(async_session)
        await log(service, youtube, 60)

        result = await service.recalculate_activity_logs(CHILD_ID, youtube.id, 1.0)

        assert result == {"logs_updated": 0, "dates_recalculated": []}

    @pytest.mark.asyncio
    async def test_small_change_still_updates_snapshot(
        self, async_session: AsyncSession, youtube
    ):
        """Test a sub-tolerance change still moves the captured coefficient."""
        service = ActivityLogService(async_session)
        entry = await log(service, youtube, 1)

        result = await service.recalculate_activity_logs(CHILD_ID, youtube.id, 1.005)

        assert result["logs_updated"] == 0
        assert entry.activity_coefficient == 1.005
        assert entry.quality_score == 1.0

        updated = await service.update_duration(entry.id, 200)

        assert updated.quality_score == pytest.approx(201.0)

    @pytest.mark.asyncio
    async def test_rejects_out_of_range_coefficient(self, async_session: AsyncSession, youtube):
        """Test the coefficient bounds apply to recalculation too."""
        with pytest.raises(InvalidActivityError):
            await ActivityLogService(async_session).recalculate_activity_logs(
                CHILD_ID, youtube.id, 6.0
            )


class TestActivityDate:
    """Tests for assigning timestamps to calendar days."""

    def test_uses_timezone(self):
        """Test a late-evening UTC timestamp can fall on the next local day."""
        late = datetime(2026, 1, 13, 23, 30, tzinfo=UTC)

        assert activity_date_for(late, "UTC") == date(2026, 1, 13)
        assert activity_date_for(late, "America/New_York") == date(2026, 1, 13)
        assert activity_date_for(late, "Asia/Tokyo") == date(2026, 1, 14)

    def test_naive_timestamp_is_utc(self):
        """Test naive timestamps are read as UTC."""
        assert activity_date_for(datetime(2026, 1, 13, 23, 30), "UTC") == date(2026, 1, 13)
