"""Pydantic schemas for the scoring engine and stats API responses."""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from kids_balance_server.models.activity import ActivityCategory


class LogEntry(BaseModel):
    """One logged activity as seen by the scoring engine.

    Built from persisted ActivityLog rows (``from_attributes``) or directly
    in tests. Instances are revalidated whenever they enter the aggregator.
    """

    model_config = ConfigDict(from_attributes=True, revalidate_instances="always")

    id: str | None = Field(default=None, description="Log identifier")
    activity_id: str = Field(description="Logged activity identifier")
    user_id: str | None = Field(default=None, description="Child user identifier")
    family_id: str | None = Field(default=None, description="Family identifier")
    duration_minutes: int = Field(gt=0, description="Minutes spent on the activity")
    quality_score: float = Field(ge=0, description="duration_minutes * coefficient")
    logged_at: dt.datetime | None = Field(
        default=None, description="When the activity was logged"
    )
    activity_name: str = Field(default="", description="Activity name at logging time")
    activity_category: ActivityCategory = Field(description="Activity category at logging time")
    activity_icon: str = Field(default="", description="Activity icon at logging time")
    activity_color: str = Field(default="", description="Activity color at logging time")


class BalanceScore(BaseModel):
    """Composite 0-100 balance score for one day."""

    diversity_score: int = Field(default=0, description="0-30, penalizes one dominant category")
    quality_score: int = Field(default=0, description="0-50, minutes-weighted coefficient")
    variety_score: int = Field(default=0, description="0-20, distinct activities tried")
    total_score: int = Field(default=0, description="Sum of the rounded components")


class DailyStats(BaseModel):
    """Aggregated statistics for one child on one calendar date."""

    date: dt.date = Field(description="Calendar date")
    total_minutes: int = Field(description="Minutes logged across all activities")
    category_breakdown: dict[str, int] = Field(description="Minutes per category (all eight)")
    category_quality_points: dict[str, float] = Field(
        default_factory=dict, description="Quality points per category (all eight)"
    )
    activities_logged: int = Field(description="Number of log entries")
    unique_activities: int = Field(description="Number of distinct activities")
    total_quality_points: float = Field(description="Sum of quality scores")
    average_quality: float = Field(description="Quality points per minute (0 when idle)")
    balance_score: BalanceScore = Field(description="Composite balance score")
    badges_earned: list[str] = Field(default_factory=list, description="Earned badge ids")
    streak: int | None = Field(
        default=None, description="Consecutive active days ending at this date"
    )
    calculated_at: dt.datetime = Field(description="When these stats were computed")


class WeeklyStats(BaseModel):
    """Roll-up of the daily summaries of one Monday-starting week."""

    week_start_date: dt.date = Field(description="Monday of the week")
    total_minutes: int = Field(description="Minutes logged during the week")
    average_daily_score: float = Field(description="Mean total score over active days")
    days_active: int = Field(description="Days with at least one minute logged")
    badges_earned: list[str] = Field(
        default_factory=list, description="Distinct badges earned during the week"
    )
    calculated_at: dt.datetime = Field(description="When this roll-up was computed")


class QualityTier(BaseModel):
    """Display tier derived from a day's average quality."""

    tier: str
    emoji: str
    message: str
    color: str


class BalanceStatus(str, Enum):
    """Coarse daily balance rating from quality points and categories used."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    NEEDS_WORK = "needs_work"
