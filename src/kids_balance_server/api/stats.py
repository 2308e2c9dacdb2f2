"""Balance stats, streak and badge API endpoints."""

from datetime import UTC, datetime
from typing import Annotated, Any

from litestar import Router, get, post
from litestar.exceptions import NotFoundException, ValidationException
from litestar.params import Parameter
from litestar.status_codes import HTTP_200_OK
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server.api.validation import parse_date_param, validate_id
from kids_balance_server.schemas.stats import DailyStats
from kids_balance_server.services.aggregator import InvalidLogEntryError
from kids_balance_server.services.badges import BADGES, Badge, get_badge_by_id
from kids_balance_server.services.scoring import (
    category_percentages,
    get_balance_status,
    get_quality_tier,
)
from kids_balance_server.services.streak import StreakService
from kids_balance_server.services.summary import DailySummaryService


def stats_to_dict(stats: DailyStats) -> dict[str, Any]:
    """Serialize daily stats with the quality tier and balance status attached."""
    categories_used = sum(1 for minutes in stats.category_breakdown.values() if minutes > 0)
    return {
        "status": "calculated",
        **stats.model_dump(mode="json"),
        "category_percentages": category_percentages(
            stats.category_breakdown, stats.total_minutes
        ),
        "quality_tier": get_quality_tier(stats.average_quality).model_dump(mode="json"),
        "balance_status": get_balance_status(stats.total_quality_points, categories_used).value,
    }


@get("/users/{user_id:str}/stats/{target_date:str}", status_code=HTTP_200_OK)
async def get_daily_stats(
    user_id: str,
    target_date: str,
    session: AsyncSession,
) -> dict[str, Any]:
    """Get the stored balance stats for one day.

    Returns ``{"status": "not_calculated"}`` when the day has never been
    aggregated.

    Example response:
    ```json
    {
      "status": "calculated",
      "date": "2026-01-13",
      "total_minutes": 120,
      "category_breakdown": {"physical": 60, "creative": 60, "...": 0},
      "balance_score": {
        "diversity_score": 21,
        "quality_score": 35,
        "variety_score": 8,
        "total_score": 64
      },
      "badges_earned": [],
      "streak": 3
    }
    ```
    """
    validate_id(user_id)
    day = parse_date_param(target_date, "target_date")
    service = DailySummaryService(session)
    stats = await service.get_daily_stats(user_id, day)

    if stats is None:
        return {"status": "not_calculated", "user_id": user_id, "date": str(day)}

    return stats_to_dict(stats)


@post("/users/{user_id:str}/stats/{target_date:str}/recalculate", status_code=HTTP_200_OK)
async def recalculate_daily_stats(
    user_id: str,
    target_date: str,
    session: AsyncSession,
) -> dict[str, Any]:
    """Re-aggregate one day from its logs and store the result.

    Safe to call repeatedly; the result only depends on the day's logs.
    """
    validate_id(user_id)
    day = parse_date_param(target_date, "target_date")
    service = DailySummaryService(session)
    try:
        stats = await service.recalculate_day(user_id, day)
    except InvalidLogEntryError as e:
        raise ValidationException(str(e)) from e
    return stats_to_dict(stats)


@get("/users/{user_id:str}/stats/week/{week_start:str}", status_code=HTTP_200_OK)
async def get_weekly_stats(
    user_id: str,
    week_start: str,
    session: AsyncSession,
) -> dict[str, Any]:
    """Roll up the Monday-starting week containing ``week_start``."""
    validate_id(user_id)
    day = parse_date_param(week_start, "week_start")
    service = DailySummaryService(session)
    weekly = await service.get_weekly_stats(user_id, day)
    return {"user_id": user_id, **weekly.model_dump(mode="json")}


@get("/users/{user_id:str}/streak", status_code=HTTP_200_OK)
async def get_streak(
    user_id: str,
    session: AsyncSession,
    target_date: Annotated[str | None, Parameter(query="date", default=None)] = None,
) -> dict[str, Any]:
    """Get the streak ending at ``date`` (defaults to today).

    Looks back over at most ``STREAK_LOOKBACK_DAYS`` prior summaries.
    """
    validate_id(user_id)
    day = (
        parse_date_param(target_date, "date") if target_date else datetime.now(UTC).date()
    )
    service = StreakService(session)
    streak = await service.get_streak(user_id, day)
    return {
        "user_id": user_id,
        "date": str(day),
        "streak": streak,
        "lookback_days": service.lookback,
    }


def badge_to_dict(badge: Badge) -> dict[str, str]:
    """Serialize a badge definition without its condition."""
    return {
        "id": badge.id,
        "name": badge.name,
        "description": badge.description,
        "emoji": badge.emoji,
        "color": badge.color,
    }


@get("/badges", status_code=HTTP_200_OK, sync_to_thread=False)
def list_badges() -> list[dict[str, str]]:
    """List the badge catalog in evaluation order."""
    return [badge_to_dict(badge) for badge in BADGES]


@get("/badges/{badge_id:str}", status_code=HTTP_200_OK, sync_to_thread=False)
def get_badge(badge_id: str) -> dict[str, str]:
    """Get one badge definition, e.g. to render an id from ``badges_earned``."""
    badge = get_badge_by_id(badge_id)
    if badge is None:
        raise NotFoundException(f"Badge not found: {badge_id}")
    return badge_to_dict(badge)


# Router for stats endpoints
stats_router = Router(
    path="/",
    route_handlers=[
        get_daily_stats,
        recalculate_daily_stats,
        get_weekly_stats,
        get_streak,
        list_badges,
        get_badge,
    ],
    tags=["Stats"],
)
