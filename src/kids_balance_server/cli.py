"""CLI entry point for kids-balance-server."""

import asyncio
from datetime import date

import typer
import uvicorn

from kids_balance_server import __version__
from kids_balance_server.core.config import settings
from kids_balance_server.core.database import close_database, get_session
from kids_balance_server.services.activity import ActivityService
from kids_balance_server.services.aggregator import InvalidLogEntryError
from kids_balance_server.services.summary import DailySummaryService

app = typer.Typer(
    name="kids-balance-server",
    help="Balance scoring and daily aggregation for family activity tracking",
    no_args_is_help=True,
)


@app.command()
def serve(
    host: str = typer.Option(None, help="Host to bind to (overrides config)"),
    port: int = typer.Option(None, help="Port to bind to (overrides config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload for development"),
) -> None:
    """Start the API server.

    Example:
        kids-balance-server serve
        kids-balance-server serve --host 0.0.0.0 --port 8080 --reload
    """
    uvicorn.run(
        "kids_balance_server.app:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"kids-balance-server v{__version__}")


@app.command()
def recalculate(
    user_id: str = typer.Argument(..., help="Child user ID"),
    day: str = typer.Argument(..., help="Day to re-aggregate (YYYY-MM-DD)"),
) -> None:
    """Re-aggregate one day's summary from its logs.

    Example:
        kids-balance-server recalculate child-1 2026-01-13
    """
    try:
        target = date.fromisoformat(day)
    except ValueError as e:
        raise typer.BadParameter("expected YYYY-MM-DD", param_hint="DAY") from e

    async def _run() -> None:
        try:
            async with get_session() as session:
                stats = await DailySummaryService(session).recalculate_day(user_id, target)
        except InvalidLogEntryError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1) from e
        finally:
            await close_database()
        score = stats.balance_score
        typer.echo(
            f"{target}: {stats.total_minutes} min, score {score.total_score} "
            f"(diversity {score.diversity_score}, quality {score.quality_score}, "
            f"variety {score.variety_score}), streak {stats.streak}"
        )
        if stats.badges_earned:
            typer.echo(f"Badges: {', '.join(stats.badges_earned)}")

    asyncio.run(_run())


@app.command()
def seed(
    family_id: str = typer.Argument(..., help="Family to seed"),
) -> None:
    """Seed the preset activity catalog for a family."""

    async def _run() -> int:
        try:
            async with get_session() as session:
                created = await ActivityService(session).seed_presets(family_id, "system")
        finally:
            await close_database()
        return len(created)

    count = asyncio.run(_run())
    typer.echo(f"Seeded {count} activities for family {family_id}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
