"""API routes."""

from litestar import Router

from kids_balance_server.api.activities import activities_router
from kids_balance_server.api.health import health_router
from kids_balance_server.api.logs import logs_router
from kids_balance_server.api.stats import stats_router
from kids_balance_server.core.config import settings

# Versioned API routers get the configured prefix (default /api/v1)
_v1_routers = [
    activities_router,  # Family activity catalog
    logs_router,  # Child activity logs
    stats_router,  # Daily/weekly stats, streaks, badges
]

api_v1_router = Router(path=settings.api_prefix, route_handlers=_v1_routers)

# Export: health (root), v1 (prefixed)
# - health_router: /health - no version prefix
# - api_v1_router: /api/v1/* - all family and child endpoints
api_routers = [health_router, api_v1_router]

__all__ = ["api_routers"]
