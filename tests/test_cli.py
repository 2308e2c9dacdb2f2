"""CLI tests."""

from typer.testing import CliRunner

from kids_balance_server import __version__
from kids_balance_server.cli import app

runner = CliRunner()


def test_version() -> None:
    """Test the version command prints the package version."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_recalculate_rejects_bad_date() -> None:
    """Test a malformed day is a usage error, not a database call."""
    result = runner.invoke(app, ["recalculate", "child-1", "13/01/2026"])

    assert result.exit_code == 2
