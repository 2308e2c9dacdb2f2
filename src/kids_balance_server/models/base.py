"""Base database model."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base model for all database tables."""

    pass


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


class UserScopedMixin:
    """Mixin for per-child data.

    Every log and summary row belongs to exactly one user; all queries
    filter on user_id.
    """

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Child user ID",
    )


class FamilyScopedMixin:
    """Mixin for data shared by every member of a family."""

    family_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Family ID",
    )


def generate_uuid() -> str:
    """Generate a UUID for primary keys."""
    return str(uuid4())
