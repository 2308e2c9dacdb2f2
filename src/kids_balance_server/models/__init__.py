"""Database models."""

from kids_balance_server.models.activity import Activity, ActivityCategory
from kids_balance_server.models.activity_log import ActivityLog
from kids_balance_server.models.base import Base
from kids_balance_server.models.daily_summary import DailySummary

__all__ = [
    "Base",
    "Activity",
    "ActivityCategory",
    "ActivityLog",
    "DailySummary",
]
