"""Pydantic request bodies for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from kids_balance_server.models.activity import (
    DEFAULT_COEFFICIENT,
    MAX_COEFFICIENT,
    MIN_COEFFICIENT,
    ActivityCategory,
    ActivityCreator,
)

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class ActivityCreateRequest(BaseModel):
    """New catalog activity."""

    name: str = Field(min_length=1, max_length=100, description="Display name")
    category: ActivityCategory = Field(description="Activity category")
    coefficient: float = Field(
        default=DEFAULT_COEFFICIENT,
        ge=MIN_COEFFICIENT,
        le=MAX_COEFFICIENT,
        description="Quality points per minute",
    )
    icon: str = Field(min_length=1, max_length=16, description="Emoji icon")
    color: str = Field(pattern=HEX_COLOR, description="Hex color #RRGGBB")
    description: str | None = Field(default=None, max_length=500)
    suggested_durations: list[int] = Field(
        default_factory=list, description="Quick-select durations in minutes"
    )
    created_by: ActivityCreator = Field(default=ActivityCreator.PARENT)


class ActivityUpdateRequest(BaseModel):
    """Partial edit of a catalog activity; omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    category: ActivityCategory | None = None
    coefficient: float | None = Field(default=None, ge=MIN_COEFFICIENT, le=MAX_COEFFICIENT)
    icon: str | None = Field(default=None, min_length=1, max_length=16)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    description: str | None = Field(default=None, max_length=500)


class LogCreateRequest(BaseModel):
    """New activity log for a child."""

    activity_id: str = Field(min_length=1, description="Activity being logged")
    family_id: str = Field(min_length=1, description="Child's family")
    duration_minutes: int = Field(ge=1, le=480, description="Minutes spent (max 8 hours)")
    logged_at: datetime | None = Field(
        default=None, description="When the activity happened (defaults to now)"
    )
    notes: str | None = Field(default=None, max_length=500)
    mood: int | None = Field(default=None, ge=1, le=5)


class LogUpdateRequest(BaseModel):
    """Duration change for an existing log."""

    duration_minutes: int = Field(ge=1, le=480, description="Minutes spent (max 8 hours)")


class RecalculateRequest(BaseModel):
    """Apply a coefficient to a child's historical logs of one activity."""

    coefficient: float = Field(ge=MIN_COEFFICIENT, le=MAX_COEFFICIENT)
