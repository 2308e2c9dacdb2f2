"""Balance score calculation.

The balance score rewards a day that is spread across categories
(diversity, 0-30), spent on high-coefficient activities (quality, 0-50)
and made up of several distinct activities (variety, 0-20).
"""

import math
from collections.abc import Sequence

from kids_balance_server.models.activity import MAX_COEFFICIENT, ActivityCategory
from kids_balance_server.schemas.stats import BalanceScore, BalanceStatus, LogEntry, QualityTier

MAX_DIVERSITY_SCORE = 30
MAX_QUALITY_SCORE = 50
MAX_VARIETY_SCORE = 20

# A category may fill this share of the day before diversity points are lost
DIVERSITY_FREE_SHARE = 0.3
POINTS_PER_UNIQUE_ACTIVITY = 4

# (status, minimum quality points, minimum categories used), best first
BALANCE_THRESHOLDS: tuple[tuple[BalanceStatus, float, int], ...] = (
    (BalanceStatus.EXCELLENT, 300, 4),
    (BalanceStatus.GOOD, 200, 3),
    (BalanceStatus.FAIR, 100, 2),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 rounding up.

    The built-in round() rounds halves to even, which would shift scores
    that sit exactly on a half point.
    """
    return math.floor(value + 0.5)


def empty_breakdown() -> dict[str, int]:
    """Minutes per category with every category present."""
    return {category.value: 0 for category in ActivityCategory}


def category_minutes(logs: Sequence[LogEntry]) -> dict[str, int]:
    """Sum minutes per category."""
    breakdown = empty_breakdown()
    for log in logs:
        breakdown[ActivityCategory(log.activity_category).value] += log.duration_minutes
    return breakdown


def category_quality(logs: Sequence[LogEntry]) -> dict[str, float]:
    """Sum quality points per category."""
    points = {category.value: 0.0 for category in ActivityCategory}
    for log in logs:
        points[ActivityCategory(log.activity_category).value] += log.quality_score
    return points


def category_percentages(breakdown: dict[str, int], total_minutes: int) -> dict[str, int]:
    """Whole-number share of the day's minutes per category (all zero when idle)."""
    if total_minutes == 0:
        return {category: 0 for category in breakdown}
    return {
        category: round_half_up(minutes / total_minutes * 100)
        for category, minutes in breakdown.items()
    }


def diversity_points(breakdown: dict[str, int], total_minutes: int) -> float:
    """Unrounded diversity score (0-30)."""
    max_share = max(minutes / total_minutes for minutes in breakdown.values())
    if max_share <= DIVERSITY_FREE_SHARE:
        return float(MAX_DIVERSITY_SCORE)
    return MAX_DIVERSITY_SCORE * (
        1 - (max_share - DIVERSITY_FREE_SHARE) / (1 - DIVERSITY_FREE_SHARE)
    )


def quality_points(total_quality_points: float, total_minutes: int) -> float:
    """Unrounded quality score (0-50)."""
    average_quality = total_quality_points / total_minutes
    return (average_quality / MAX_COEFFICIENT) * MAX_QUALITY_SCORE


def variety_points(unique_activities: int) -> int:
    """Variety score (0-20)."""
    return min(MAX_VARIETY_SCORE, unique_activities * POINTS_PER_UNIQUE_ACTIVITY)


def calculate_balance_score(logs: Sequence[LogEntry]) -> BalanceScore:
    """Calculate the balance score for one child's logs over one period.

    Args:
        logs: Log entries for a single user and day, in any order

    Returns:
        BalanceScore; all zeros when no minutes were logged
    """
    total_minutes = sum(log.duration_minutes for log in logs)
    if total_minutes == 0:
        return BalanceScore()

    diversity = round_half_up(diversity_points(category_minutes(logs), total_minutes))
    quality = round_half_up(
        quality_points(sum(log.quality_score for log in logs), total_minutes)
    )
    variety = variety_points(len({log.activity_id for log in logs}))

    return BalanceScore(
        diversity_score=diversity,
        quality_score=quality,
        variety_score=variety,
        total_score=diversity + quality + variety,
    )


def get_quality_tier(average_quality: float) -> QualityTier:
    """Map a day's average quality onto a display tier."""
    if average_quality >= 4.0:
        return QualityTier(
            tier="Exceptional",
            emoji="🌟",
            message="Amazing! You did lots of valuable activities!",
            color="#FBBF24",
        )
    elif average_quality >= 3.0:
        return QualityTier(
            tier="Great",
            emoji="⭐",
            message="Great balance of fun and learning!",
            color="#60A5FA",
        )
    elif average_quality >= 2.0:
        return QualityTier(
            tier="Good",
            emoji="✨",
            message="Good mix today! Try adding more creative activities.",
            color="#A78BFA",
        )
    else:
        return QualityTier(
            tier="Room to Grow",
            emoji="💫",
            message="You had fun! Tomorrow, mix in some learning or creative time.",
            color="#F472B6",
        )


def get_balance_status(total_quality_points: float, categories_used: int) -> BalanceStatus:
    """Rate a day by its quality points and the number of categories with time logged."""
    for status, min_points, min_categories in BALANCE_THRESHOLDS:
        if total_quality_points >= min_points and categories_used >= min_categories:
            return status
    return BalanceStatus.NEEDS_WORK
