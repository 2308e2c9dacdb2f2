"""Activity log API endpoints."""

from typing import Any

from litestar import Router, delete, get, patch, post
from litestar.exceptions import NotFoundException, ValidationException
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED, HTTP_204_NO_CONTENT
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server.api.validation import parse_date_param, validate_id
from kids_balance_server.models.activity_log import ActivityLog
from kids_balance_server.schemas.requests import LogCreateRequest, LogUpdateRequest
from kids_balance_server.services.activity import ActivityArchivedError, ActivityNotFoundError
from kids_balance_server.services.activity_log import (
    ActivityLogService,
    InvalidDurationError,
    LogNotFoundError,
)


def log_to_dict(log: ActivityLog) -> dict[str, Any]:
    """Serialize an activity log for API responses."""
    return {
        "id": log.id,
        "user_id": log.user_id,
        "family_id": log.family_id,
        "activity_id": log.activity_id,
        "duration_minutes": log.duration_minutes,
        "quality_score": log.quality_score,
        "logged_at": log.logged_at.isoformat(),
        "activity_date": str(log.activity_date),
        "notes": log.notes,
        "mood": log.mood,
        "activity_name": log.activity_name,
        "activity_category": log.activity_category,
        "activity_icon": log.activity_icon,
        "activity_color": log.activity_color,
        "activity_coefficient": log.activity_coefficient,
    }


@get("/users/{user_id:str}/logs/{target_date:str}", status_code=HTTP_200_OK)
async def get_logs_for_date(
    user_id: str,
    target_date: str,
    session: AsyncSession,
) -> list[dict[str, Any]]:
    """Get a child's logs for one day, oldest first."""
    validate_id(user_id)
    day = parse_date_param(target_date, "target_date")
    service = ActivityLogService(session)
    logs = await service.get_logs_for_date(user_id, day)
    return [log_to_dict(log) for log in logs]


@post("/users/{user_id:str}/logs", status_code=HTTP_201_CREATED)
async def create_log(
    user_id: str,
    data: LogCreateRequest,
    session: AsyncSession,
) -> dict[str, Any]:
    """Log time spent on an activity.

    The activity's current name, category, icon, color and coefficient are
    frozen onto the log, and the day's summary is recalculated.
    """
    validate_id(user_id)
    service = ActivityLogService(session)
    try:
        log = await service.log_activity(
            user_id=user_id,
            family_id=data.family_id,
            activity_id=data.activity_id,
            duration_minutes=data.duration_minutes,
            logged_at=data.logged_at,
            notes=data.notes,
            mood=data.mood,
        )
    except ActivityNotFoundError as e:
        raise NotFoundException(str(e)) from e
    except (ActivityArchivedError, InvalidDurationError) as e:
        raise ValidationException(str(e)) from e
    return log_to_dict(log)


@patch("/logs/{log_id:str}", status_code=HTTP_200_OK)
async def update_log(
    log_id: str,
    data: LogUpdateRequest,
    session: AsyncSession,
) -> dict[str, Any]:
    """Change a log's duration and recalculate its day."""
    service = ActivityLogService(session)
    try:
        log = await service.update_duration(log_id, data.duration_minutes)
    except LogNotFoundError as e:
        raise NotFoundException(str(e)) from e
    except InvalidDurationError as e:
        raise ValidationException(str(e)) from e
    return log_to_dict(log)


@delete("/logs/{log_id:str}", status_code=HTTP_204_NO_CONTENT)
async def delete_log(
    log_id: str,
    session: AsyncSession,
) -> None:
    """Delete a log and recalculate its day."""
    service = ActivityLogService(session)
    try:
        await service.delete_log(log_id)
    except LogNotFoundError as e:
        raise NotFoundException(str(e)) from e


# Router for activity log endpoints
logs_router = Router(
    path="/",
    route_handlers=[
        get_logs_for_date,
        create_log,
        update_log,
        delete_log,
    ],
    tags=["Logs"],
)
