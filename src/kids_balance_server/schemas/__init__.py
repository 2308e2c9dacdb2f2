"""Pydantic schemas for the scoring engine and API payloads."""

from kids_balance_server.schemas.requests import (
    ActivityCreateRequest,
    ActivityUpdateRequest,
    LogCreateRequest,
    LogUpdateRequest,
    RecalculateRequest,
)
from kids_balance_server.schemas.stats import (
    BalanceScore,
    BalanceStatus,
    DailyStats,
    LogEntry,
    QualityTier,
    WeeklyStats,
)

__all__ = [
    "ActivityCreateRequest",
    "ActivityUpdateRequest",
    "BalanceScore",
    "BalanceStatus",
    "DailyStats",
    "LogCreateRequest",
    "LogEntry",
    "LogUpdateRequest",
    "QualityTier",
    "RecalculateRequest",
    "WeeklyStats",
]
