"""Command-line interface for the focus tracker."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .config import INTERVAL_ENVVAR, MIN_SAMPLE_SECONDS, TrackerSettings
from .errors import StorageWriteError, TrackerError
from .paths import get_stats_path

app = typer.Typer(help="Local-first application and browser tab tracker.")
logger = logging.getLogger(__name__)


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command()
def collect(
    stats_path: Optional[Path] = typer.Option(
        None,
        "--file",
        path_type=Path,
        help="Location of the session history CSV.",
    ),
    sample_seconds: float = typer.Option(
        2.0,
        "--interval",
        min=MIN_SAMPLE_SECONDS,
        envvar=INTERVAL_ENVVAR,
        help="Sampling interval in seconds.",
    ),
    show_summary: bool = typer.Option(
        True,
        "--summary/--no-summary",
        help="Print a usage summary after stopping.",
    ),
) -> None:
    """Track focus until interrupted, then save the sessions."""
    from .collector import FocusCollector
    from .reporting import print_usage_summary

    stats_path = stats_path or get_stats_path()
    settings = TrackerSettings.from_intervals(sample_seconds=sample_seconds)
    try:
        collector = FocusCollector(stats_path=stats_path, settings=settings)
        history = collector.run_forever()
    except StorageWriteError as exc:
        logger.error("Session data was not saved: %s", exc)
        raise typer.Exit(code=1) from exc
    except TrackerError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1) from exc

    if show_summary:
        print_usage_summary(history)
        print(f"Stats saved to: {stats_path}")


@app.command()
def summary(
    date: Optional[str] = typer.Option(
        None,
        "--date",
        help="Only include sessions starting on this date (YYYY-MM-DD).",
    ),
    stats_path: Optional[Path] = typer.Option(
        None,
        "--file",
        path_type=Path,
        help="Location of the session history CSV.",
    ),
) -> None:
    """Print a summary of the recorded sessions."""
    from .reporting import SummaryPrinter

    try:
        target = datetime.strptime(date, "%Y-%m-%d") if date else None
    except ValueError as exc:
        raise typer.BadParameter("Expected a date in YYYY-MM-DD format.", param_hint="--date") from exc
    summary_printer = SummaryPrinter(stats_path=stats_path or get_stats_path())
    summary_printer.print_summary(target)
