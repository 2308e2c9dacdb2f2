"""Activity catalog service."""

import re
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server.models.activity import (
    DEFAULT_COEFFICIENT,
    MAX_COEFFICIENT,
    MIN_COEFFICIENT,
    Activity,
    ActivityCategory,
    ActivityCreator,
)

logger = structlog.get_logger()

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

# Fields a parent may change on an existing activity
EDITABLE_FIELDS = ("name", "category", "coefficient", "icon", "color", "description")
REQUIRED_FIELDS = ("name", "category", "coefficient", "icon", "color")

PRESET_ACTIVITIES: tuple[dict[str, Any], ...] = (
    {
        "name": "Watching YouTube",
        "category": ActivityCategory.SCREEN,
        "icon": "📺",
        "color": "#FF0000",
        "coefficient": 1.0,
        "suggested_durations": [30, 60, 120],
    },
    {
        "name": "Playing Video Games",
        "category": ActivityCategory.SCREEN,
        "icon": "🎮",
        "color": "#8B5CF6",
        "coefficient": 1.5,
        "suggested_durations": [30, 60, 90],
    },
    {
        "name": "Reading Books",
        "category": ActivityCategory.EDUCATIONAL,
        "icon": "📚",
        "color": "#059669",
        "coefficient": 4.0,
        "suggested_durations": [15, 30, 60],
    },
    {
        "name": "Playing Piano",
        "category": ActivityCategory.EDUCATIONAL,
        "icon": "🎹",
        "color": "#8B5CF6",
        "coefficient": 4.0,
        "suggested_durations": [15, 30, 45, 60],
    },
    {
        "name": "Playing Outside",
        "category": ActivityCategory.PHYSICAL,
        "icon": "🏃",
        "color": "#10B981",
        "coefficient": 3.0,
        "suggested_durations": [30, 60, 90, 120],
    },
    {
        "name": "Riding Bike",
        "category": ActivityCategory.PHYSICAL,
        "icon": "🚴",
        "color": "#10B981",
        "coefficient": 3.5,
        "suggested_durations": [30, 60, 90],
    },
    {
        "name": "Drawing",
        "category": ActivityCategory.CREATIVE,
        "icon": "🎨",
        "color": "#EC4899",
        "coefficient": 4.0,
        "suggested_durations": [15, 30, 60],
    },
    {
        "name": "Building with Blocks",
        "category": ActivityCategory.CREATIVE,
        "icon": "🧱",
        "color": "#F59E0B",
        "coefficient": 3.0,
        "suggested_durations": [15, 30, 45, 60],
    },
    {
        "name": "Playing with Friends",
        "category": ActivityCategory.SOCIAL,
        "icon": "👫",
        "color": "#3B82F6",
        "coefficient": 3.5,
        "suggested_durations": [30, 60, 90, 120],
    },
    {
        "name": "Board Games",
        "category": ActivityCategory.SOCIAL,
        "icon": "🎲",
        "color": "#6366F1",
        "coefficient": 2.5,
        "suggested_durations": [30, 60, 90],
    },
    {
        "name": "Writing Stories",
        "category": ActivityCategory.CREATIVE,
        "icon": "✍️",
        "color": "#EC4899",
        "coefficient": 5.0,
        "suggested_durations": [15, 30, 45, 60],
    },
    {
        "name": "Science Projects",
        "category": ActivityCategory.EDUCATIONAL,
        "icon": "🔬",
        "color": "#059669",
        "coefficient": 5.0,
        "suggested_durations": [30, 60, 90],
    },
)


class ActivityNotFoundError(LookupError):
    """No activity exists with the requested id."""

    def __init__(self, activity_id: str) -> None:
        """Initialize with the missing activity id."""
        super().__init__(f"Activity not found: {activity_id}")
        self.activity_id = activity_id


class ActivityArchivedError(ValueError):
    """The activity is archived and cannot be logged."""

    def __init__(self, activity_id: str) -> None:
        """Initialize with the archived activity id."""
        super().__init__(f"Activity is archived: {activity_id}")
        self.activity_id = activity_id


class InvalidActivityError(ValueError):
    """Activity fields violate the catalog invariants."""


def validate_activity_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Check and normalize activity fields.

    Args:
        fields: Any subset of the activity's editable fields

    Returns:
        The fields with category normalized to its string value

    Raises:
        InvalidActivityError: On an unknown category, an out-of-range
            coefficient, a malformed color or an empty name
    """
    validated = dict(fields)

    for key in REQUIRED_FIELDS:
        if key in validated and validated[key] is None:
            raise InvalidActivityError(f"Activity {key} cannot be empty")

    if "category" in validated:
        try:
            validated["category"] = ActivityCategory(validated["category"]).value
        except ValueError as e:
            raise InvalidActivityError(f"Unknown category: {validated['category']}") from e

    if "coefficient" in validated:
        coefficient = float(validated["coefficient"])
        if not MIN_COEFFICIENT <= coefficient <= MAX_COEFFICIENT:
            raise InvalidActivityError(
                f"Coefficient must be between {MIN_COEFFICIENT} and {MAX_COEFFICIENT}"
            )
        validated["coefficient"] = coefficient

    if "color" in validated and not COLOR_PATTERN.match(validated["color"]):
        raise InvalidActivityError(f"Invalid color: {validated['color']}")

    if "name" in validated and not str(validated["name"]).strip():
        raise InvalidActivityError("Activity name is required")

    return validated


class ActivityService:
    """Service for managing a family's activity catalog."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize activity service.

        Args:
            session: Database session
        """
        self.session = session
        self.logger = logger.bind(service="activity")

    async def get_activity(self, activity_id: str) -> Activity:
        """Get an activity by id, archived or not.

        Raises:
            ActivityNotFoundError: If no such activity exists
        """
        activity = await self.session.get(Activity, activity_id)
        if activity is None:
            raise ActivityNotFoundError(activity_id)
        return activity

    async def list_activities(
        self,
        family_id: str,
        include_archived: bool = False,
    ) -> list[Activity]:
        """List a family's activities ordered by category, then name."""
        stmt = select(Activity).where(Activity.family_id == family_id)
        if not include_archived:
            stmt = stmt.where(Activity.is_archived.is_(False))
        stmt = stmt.order_by(Activity.category.asc(), Activity.name.asc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_activity(
        self,
        family_id: str,
        name: str,
        category: ActivityCategory | str,
        icon: str,
        color: str,
        coefficient: float = DEFAULT_COEFFICIENT,
        description: str | None = None,
        suggested_durations: list[int] | None = None,
        created_by: ActivityCreator | str = ActivityCreator.PARENT,
    ) -> Activity:
        """Add an activity to a family's catalog.

        Raises:
            InvalidActivityError: If any field violates the catalog invariants
        """
        fields = validate_activity_fields(
            {
                "name": name,
                "category": category,
                "coefficient": coefficient,
                "icon": icon,
                "color": color,
                "description": description,
            }
        )
        activity = Activity(
            family_id=family_id,
            suggested_durations=list(suggested_durations or []),
            created_by=ActivityCreator(created_by).value,
            is_preset=False,
            is_archived=False,
            **fields,
        )
        self.session.add(activity)
        await self.session.flush()

        self.logger.info(
            "Activity created",
            family_id=family_id,
            activity_id=activity.id,
            category=activity.category,
            coefficient=activity.coefficient,
        )
        return activity

    async def update_activity(self, activity_id: str, **changes: Any) -> Activity:
        """Edit an activity.

        Existing logs keep their snapshot; use
        ActivityLogService.recalculate_activity_logs to apply a new
        coefficient to history.

        Raises:
            ActivityNotFoundError: If no such activity exists
            InvalidActivityError: If a change violates the catalog invariants
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise InvalidActivityError(f"Fields not editable: {', '.join(sorted(unknown))}")

        activity = await self.get_activity(activity_id)
        for key, value in validate_activity_fields(changes).items():
            setattr(activity, key, value)
        await self.session.flush()

        self.logger.info("Activity updated", activity_id=activity_id, fields=sorted(changes))
        return activity

    async def archive_activity(self, activity_id: str) -> Activity:
        """Soft-delete an activity; its logs stay attributable."""
        activity = await self.get_activity(activity_id)
        activity.is_archived = True
        await self.session.flush()

        self.logger.info("Activity archived", activity_id=activity_id)
        return activity

    async def seed_presets(self, family_id: str, created_by: str) -> list[Activity]:
        """Create the preset catalog for a family.

        Does nothing if the family already has preset activities.

        Args:
            family_id: Family to seed
            created_by: User id of the parent triggering the seed

        Returns:
            The newly created activities (empty if already seeded)
        """
        stmt = (
            select(Activity.id)
            .where(Activity.family_id == family_id)
            .where(Activity.is_preset.is_(True))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        if result.scalar() is not None:
            self.logger.debug("Presets already seeded", family_id=family_id)
            return []

        activities = [
            Activity(
                family_id=family_id,
                name=preset["name"],
                category=preset["category"].value,
                icon=preset["icon"],
                color=preset["color"],
                coefficient=preset["coefficient"],
                suggested_durations=list(preset["suggested_durations"]),
                is_preset=True,
                is_archived=False,
                created_by=ActivityCreator.SYSTEM.value,
            )
            for preset in PRESET_ACTIVITIES
        ]
        self.session.add_all(activities)
        await self.session.flush()

        self.logger.info(
            "Preset activities seeded",
            family_id=family_id,
            created_by=created_by,
            count=len(activities),
        )
        return activities
