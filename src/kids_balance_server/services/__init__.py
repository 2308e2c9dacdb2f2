"""Application services."""

from kids_balance_server.services.activity import ActivityService
from kids_balance_server.services.activity_log import ActivityLogService
from kids_balance_server.services.aggregator import aggregate_daily_stats, summarize_week
from kids_balance_server.services.badges import evaluate_badges
from kids_balance_server.services.scoring import calculate_balance_score
from kids_balance_server.services.streak import StreakService, calculate_streak
from kids_balance_server.services.summary import DailySummaryService

__all__ = [
    "ActivityLogService",
    "ActivityService",
    "DailySummaryService",
    "StreakService",
    "aggregate_daily_stats",
    "calculate_balance_score",
    "calculate_streak",
    "evaluate_badges",
    "summarize_week",
]
