"""Activity catalog model."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from kids_balance_server.models.base import (
    Base,
    FamilyScopedMixin,
    TimestampMixin,
    generate_uuid,
)

MIN_COEFFICIENT = 0.5
MAX_COEFFICIENT = 5.0
DEFAULT_COEFFICIENT = 1.0


class ActivityCategory(str, Enum):
    """The fixed set of activity categories.

    Every daily breakdown carries all eight keys, in this order.
    """

    PHYSICAL = "physical"
    CREATIVE = "creative"
    EDUCATIONAL = "educational"
    SOCIAL = "social"
    SCREEN = "screen"
    CHORES = "chores"
    REST = "rest"
    OTHER = "other"


class ActivityCreator(str, Enum):
    """Who added an activity to the catalog."""

    PARENT = "parent"
    CHILD = "child"
    SYSTEM = "system"


class Activity(Base, FamilyScopedMixin, TimestampMixin):
    """A named activity a child can log time against.

    The coefficient is the number of quality points earned per minute.
    Activities are archived rather than deleted so that historical logs
    stay attributable.
    """

    __tablename__ = "activities"
    __table_args__ = ({"comment": "Family activity catalog with quality coefficients"},)

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )

    # Display
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    icon: Mapped[str] = mapped_column(String(16), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False, comment="Hex color #RRGGBB")
    description: Mapped[str | None] = mapped_column(String(500))

    # Scoring
    category: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
        comment="One of the eight ActivityCategory values",
    )
    coefficient: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=DEFAULT_COEFFICIENT,
        comment="Quality points per minute (0.5-5.0)",
    )

    # Logging shortcuts
    suggested_durations: Mapped[list[int]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Quick-select durations in minutes",
    )

    # Lifecycle
    is_preset: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ActivityCreator.PARENT.value,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Activity(family_id={self.family_id}, name={self.name}, "
            f"category={self.category}, coefficient={self.coefficient})>"
        )
