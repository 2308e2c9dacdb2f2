"""Badge catalog and evaluation."""

from collections.abc import Callable
from dataclasses import dataclass

from kids_balance_server.models.activity import ActivityCategory
from kids_balance_server.schemas.stats import DailyStats

# Minutes in a single category needed for a category badge
CATEGORY_BADGE_MINUTES = 120


@dataclass(frozen=True)
class Badge:
    """A badge definition.

    Attributes:
        id: Stable identifier stored on daily summaries
        name: Display name
        description: What the child did to earn it
        emoji: Display glyph
        color: Hex display color
        condition: Predicate over a fully populated DailyStats
    """

    id: str
    name: str
    description: str
    emoji: str
    color: str
    condition: Callable[[DailyStats], bool]


def _category_minutes_at_least(category: ActivityCategory) -> Callable[[DailyStats], bool]:
    def condition(stats: DailyStats) -> bool:
        return stats.category_breakdown.get(category.value, 0) >= CATEGORY_BADGE_MINUTES

    return condition


BADGES: tuple[Badge, ...] = (
    Badge(
        id="balanced-day",
        name="Balanced Day",
        description="Perfect balance across all categories",
        emoji="⚖️",
        color="#10B981",
        condition=lambda stats: stats.balance_score.total_score >= 80,
    ),
    Badge(
        id="quality-master",
        name="Quality Master",
        description="Average quality score above 4.0",
        emoji="🌟",
        color="#FBBF24",
        condition=lambda stats: stats.average_quality >= 4.0,
    ),
    Badge(
        id="variety-explorer",
        name="Variety Explorer",
        description="Tried 5+ different activities",
        emoji="🎯",
        color="#8B5CF6",
        condition=lambda stats: stats.unique_activities >= 5,
    ),
    Badge(
        id="active-day",
        name="Active Day",
        description="Logged 3+ hours of activities",
        emoji="💪",
        color="#EF4444",
        condition=lambda stats: stats.total_minutes >= 180,
    ),
    Badge(
        id="creative-genius",
        name="Creative Genius",
        description="2+ hours of creative activities",
        emoji="🎨",
        color="#EC4899",
        condition=_category_minutes_at_least(ActivityCategory.CREATIVE),
    ),
    Badge(
        id="learning-champion",
        name="Learning Champion",
        description="2+ hours of educational activities",
        emoji="📚",
        color="#059669",
        condition=_category_minutes_at_least(ActivityCategory.EDUCATIONAL),
    ),
    Badge(
        id="social-butterfly",
        name="Social Butterfly",
        description="2+ hours of social activities",
        emoji="🦋",
        color="#3B82F6",
        condition=_category_minutes_at_least(ActivityCategory.SOCIAL),
    ),
    Badge(
        id="physical-power",
        name="Physical Power",
        description="2+ hours of physical activities",
        emoji="🏃",
        color="#10B981",
        condition=_category_minutes_at_least(ActivityCategory.PHYSICAL),
    ),
)

_BADGES_BY_ID = {badge.id: badge for badge in BADGES}


def evaluate_badges(stats: DailyStats) -> list[str]:
    """Return the id of every badge whose condition holds, in catalog order."""
    return [badge.id for badge in BADGES if badge.condition(stats)]


def get_badge_by_id(badge_id: str) -> Badge | None:
    """Look up a badge definition."""
    return _BADGES_BY_ID.get(badge_id)
