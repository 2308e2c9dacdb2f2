"""Activity catalog API endpoints."""

from typing import Annotated, Any

from litestar import Router, get, patch, post
from litestar.exceptions import NotFoundException, ValidationException
from litestar.params import Parameter
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server.api.validation import validate_id
from kids_balance_server.models.activity import Activity
from kids_balance_server.schemas.requests import (
    ActivityCreateRequest,
    ActivityUpdateRequest,
    RecalculateRequest,
)
from kids_balance_server.services.activity import (
    ActivityNotFoundError,
    ActivityService,
    InvalidActivityError,
)
from kids_balance_server.services.activity_log import ActivityLogService


def activity_to_dict(activity: Activity) -> dict[str, Any]:
    """Serialize an activity for API responses."""
    return {
        "id": activity.id,
        "family_id": activity.family_id,
        "name": activity.name,
        "category": activity.category,
        "coefficient": activity.coefficient,
        "icon": activity.icon,
        "color": activity.color,
        "description": activity.description,
        "suggested_durations": activity.suggested_durations,
        "is_preset": activity.is_preset,
        "is_archived": activity.is_archived,
        "created_by": activity.created_by,
    }


@get("/families/{family_id:str}/activities", status_code=HTTP_200_OK)
async def list_activities(
    family_id: str,
    session: AsyncSession,
    include_archived: Annotated[
        bool, Parameter(query="include_archived", default=False)
    ] = False,
) -> list[dict[str, Any]]:
    """List a family's activity catalog, ordered by category then name."""
    validate_id(family_id, "family_id")
    service = ActivityService(session)
    activities = await service.list_activities(family_id, include_archived=include_archived)
    return [activity_to_dict(a) for a in activities]


@post("/families/{family_id:str}/activities", status_code=HTTP_201_CREATED)
async def create_activity(
    family_id: str,
    data: ActivityCreateRequest,
    session: AsyncSession,
) -> dict[str, Any]:
    """Add an activity to a family's catalog.

    The coefficient (0.5-5.0) is the number of quality points earned per
    logged minute.
    """
    validate_id(family_id, "family_id")
    service = ActivityService(session)
    try:
        activity = await service.create_activity(
            family_id=family_id,
            name=data.name,
            category=data.category,
            icon=data.icon,
            color=data.color,
            coefficient=data.coefficient,
            description=data.description,
            suggested_durations=data.suggested_durations,
            created_by=data.created_by,
        )
    except InvalidActivityError as e:
        raise ValidationException(str(e)) from e
    return activity_to_dict(activity)


@post("/families/{family_id:str}/activities/seed", status_code=HTTP_200_OK)
async def seed_activities(
    family_id: str,
    session: AsyncSession,
    created_by: Annotated[str, Parameter(query="created_by", default="system")] = "system",
) -> dict[str, Any]:
    """Seed the preset activity catalog for a family (no-op if already seeded)."""
    validate_id(family_id, "family_id")
    service = ActivityService(session)
    created = await service.seed_presets(family_id, created_by)
    return {
        "family_id": family_id,
        "activities_created": len(created),
    }


@patch("/activities/{activity_id:str}", status_code=HTTP_200_OK)
async def update_activity(
    activity_id: str,
    data: ActivityUpdateRequest,
    session: AsyncSession,
) -> dict[str, Any]:
    """Edit an activity.

    Existing logs keep the coefficient captured when they were logged. Call
    the recalculate endpoint to apply a new coefficient to history.
    """
    service = ActivityService(session)
    changes = data.model_dump(exclude_unset=True)
    try:
        activity = await service.update_activity(activity_id, **changes)
    except ActivityNotFoundError as e:
        raise NotFoundException(str(e)) from e
    except InvalidActivityError as e:
        raise ValidationException(str(e)) from e
    return activity_to_dict(activity)


@post("/activities/{activity_id:str}/archive", status_code=HTTP_200_OK)
async def archive_activity(
    activity_id: str,
    session: AsyncSession,
) -> dict[str, Any]:
    """Archive an activity so it can no longer be logged."""
    service = ActivityService(session)
    try:
        activity = await service.archive_activity(activity_id)
    except ActivityNotFoundError as e:
        raise NotFoundException(str(e)) from e
    return activity_to_dict(activity)


@post(
    "/users/{user_id:str}/activities/{activity_id:str}/recalculate",
    status_code=HTTP_200_OK,
)
async def recalculate_activity_logs(
    user_id: str,
    activity_id: str,
    data: RecalculateRequest,
    session: AsyncSession,
) -> dict[str, Any]:
    """Rewrite a child's historical logs of an activity with a new coefficient.

    Every affected day's summary is recalculated.
    """
    validate_id(user_id)
    service = ActivityLogService(session)
    try:
        result = await service.recalculate_activity_logs(user_id, activity_id, data.coefficient)
    except InvalidActivityError as e:
        raise ValidationException(str(e)) from e
    return {
        "user_id": user_id,
        "activity_id": activity_id,
        "coefficient": data.coefficient,
        **result,
    }


# Router for activity catalog endpoints
activities_router = Router(
    path="/",
    route_handlers=[
        list_activities,
        create_activity,
        seed_activities,
        update_activity,
        archive_activity,
        recalculate_activity_logs,
    ],
    tags=["Activities"],
)
