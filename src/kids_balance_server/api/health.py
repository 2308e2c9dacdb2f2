"""Health check endpoint."""

import structlog
from litestar import Router, get
from litestar.status_codes import HTTP_200_OK
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kids_balance_server import __version__

logger = structlog.get_logger()


@get("/health", status_code=HTTP_200_OK)
async def health_check(session: AsyncSession) -> dict[str, str]:
    """Health check endpoint.

    Reports ``degraded`` instead of failing when the database is unreachable.

    Returns:
        Status, version and database connectivity
    """
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.warning("Health check database ping failed", error=str(e))
        database = "unavailable"

    return {
        "status": "ok" if database == "ok" else "degraded",
        "version": __version__,
        "database": database,
    }


health_router = Router(path="/", route_handlers=[health_check])
