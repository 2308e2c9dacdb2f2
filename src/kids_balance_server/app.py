"""Litestar application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from advanced_alchemy.config.asyncio import AsyncSessionConfig
from advanced_alchemy.extensions.litestar import SQLAlchemyAsyncConfig, SQLAlchemyPlugin
from litestar import Litestar
from litestar.datastructures import State
from litestar.openapi import OpenAPIConfig
from sqlalchemy.ext.asyncio import AsyncEngine

from kids_balance_server import __version__
from kids_balance_server.api import api_routers
from kids_balance_server.core.config import settings
from kids_balance_server.core.database import close_database, engine, init_database
from kids_balance_server.routes import root_redirect

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: Litestar) -> AsyncIterator[None]:
    """Application lifespan manager.

    Checks migrations on startup and closes database connections on shutdown.
    """
    logger.info(
        "Starting kids-balance-server",
        version=__version__,
        timezone=settings.default_timezone,
        streak_lookback_days=settings.streak_lookback_days,
    )

    db_engine: AsyncEngine = app.state.db_engine
    await init_database(db_engine)
    logger.info("Database initialized")

    yield

    await close_database(db_engine)
    logger.info("Shutdown complete")


def create_app(db_engine: AsyncEngine | None = None) -> Litestar:
    """Create Litestar application.

    Args:
        db_engine: Engine to serve requests from (defaults to the configured one)

    Returns:
        Configured Litestar app instance
    """
    db_engine = db_engine or engine

    return Litestar(
        route_handlers=[root_redirect, *api_routers],
        lifespan=[lifespan],
        state=State({"db_engine": db_engine}),
        openapi_config=OpenAPIConfig(
            title="kids-balance-server API",
            version=__version__,
            description="Balance scoring and daily aggregation for family activity tracking",
        ),
        plugins=[
            SQLAlchemyPlugin(
                config=SQLAlchemyAsyncConfig(
                    engine_instance=db_engine,
                    session_dependency_key="session",
                    session_config=AsyncSessionConfig(expire_on_commit=False),
                    # Services only flush; commit on 2xx, roll back otherwise
                    before_send_handler="autocommit",
                ),
            ),
        ],
        debug=settings.log_level == "DEBUG",
    )


# Application instance
app = create_app()
