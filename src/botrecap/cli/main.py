"""botrecap CLI — Typer 기반."""

import json
import logging
from pathlib import Path

import typer

from botrecap.config import AppConfig
from botrecap.exceptions import BotRecapError
from botrecap.logging_config import setup_file_logging, setup_logging
from botrecap.models import ActivityKind, activity_to_dict, status_report_to_dict
from botrecap.services import factory
from botrecap.services.filters import ActivityFilter, count_by_status, filter_activities
from botrecap.services.status import DEFAULT_MAX_AGE_HOURS, check_cache_health

logger = logging.getLogger(__name__)
_file_logger = logging.getLogger("botrecap.cli.output")

app = typer.Typer(help="Fixer-bot activity feed from GitHub issue/PR comments")


def _echo(msg: str = "", err: bool = False) -> None:
    """Echo to terminal AND log to file."""
    typer.echo(msg, err=err)
    if msg:
        level = logging.ERROR if err else logging.INFO
        _file_logger.log(level, msg)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging"),
) -> None:
    """Fixer-bot activity feed from GitHub issue/PR comments."""
    setup_logging(logging.DEBUG if verbose else _get_config().log_level)
    setup_file_logging(Path(".log"), prefix="cli")


def _get_config() -> AppConfig:
    return AppConfig()


def _handle_error(e: BotRecapError) -> None:
    _echo(f"Error: {e}", err=True)
    raise typer.Exit(code=1)


def _progress(msg: str) -> None:
    """진행 상황 콜백."""
    _echo(msg)


@app.command()
def build(
    since: str = typer.Option(None, help="ISO 8601 lower bound (default: 30 days ago)"),
) -> None:
    """Fetch activities from GitHub and rebuild the cache + status files."""
    logger.info("Command: build since=%s", since)
    config = _get_config()
    try:
        activities = factory.run_cache_build(config, since, progress=_progress)
    except BotRecapError as e:
        _handle_error(e)
        return
    _echo(f"Cache built: {len(activities)} activities → {config.cache_path}")


@app.command()
def activities(
    since: str = typer.Option(None, help="ISO 8601 lower bound (live fetch only)"),
    type: ActivityKind = typer.Option(None, "--type", "-t", help="issue or pr"),
    status: str = typer.Option(None, "--status", "-s", help="Filter by status value"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List bot activities (cache when enabled and fresh, otherwise live)."""
    config = _get_config()
    try:
        result = factory.build_activity_service(config).fetch_bot_activities(since)
    except BotRecapError as e:
        _handle_error(e)
        return

    result = filter_activities(result, ActivityFilter(kind=type, status=status))
    if as_json:
        _echo(json.dumps([activity_to_dict(a) for a in result], ensure_ascii=False, indent=2))
        return

    for a in result:
        _echo(f"{a.timestamp}  {a.kind.value:<5}  {a.status.value:<9}  {a.title}  {a.url}")
    counts = ", ".join(f"{k}={v}" for k, v in sorted(count_by_status(result).items()))
    _echo(f"{len(result)} activities ({counts})" if result else "No activities.")


@app.command()
def status() -> None:
    """Show the last build status report."""
    config = _get_config()
    report = factory.build_status_store(config).load()
    if report is None:
        _echo(f"No status report at {config.status_path}", err=True)
        raise typer.Exit(code=1)
    _echo(json.dumps(status_report_to_dict(report), indent=2))


@app.command()
def monitor(
    max_age_hours: float = typer.Option(
        DEFAULT_MAX_AGE_HOURS, "--max-age-hours", help="Fail if the last success is older"
    ),
) -> None:
    """Health check: fail (exit 1) when the cache is stale or empty."""
    config = _get_config()
    report = factory.build_status_store(config).load()
    entry = factory.build_cache(config).load_entry()

    _echo("Cache Status Report:")
    _echo("-------------------")
    if report is not None:
        _echo(f"Status: {report.status.value}")
        _echo(f"Last Successful Update: {report.last_successful_update or 'Never'}")
        if report.error:
            _echo(f"Last Error: {report.error}", err=True)
    _echo(f"Activities in Cache: {len(entry.activities) if entry else 0}")

    try:
        hours = check_cache_health(report, entry, max_age_hours=max_age_hours)
    except BotRecapError as e:
        _echo("Cache Health Check Failed!", err=True)
        _handle_error(e)
        return
    _echo(f"Hours Since Last Update: {hours:.2f}")
    _echo("Cache status is healthy ✓")
