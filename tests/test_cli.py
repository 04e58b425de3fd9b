"""Tests for the typer command-line interface."""

from typer.testing import CliRunner

from focus_tracker import collector as collector_module
from focus_tracker.cli import app
from focus_tracker.errors import StorageWriteError
from focus_tracker.models import Session
from focus_tracker.storage import write_sessions
from tests.helpers import at

runner = CliRunner()


def test_summary_command(stats_path):
    write_sessions(
        stats_path,
        [
            Session(
                start=at(0),
                end=at(45),
                app_name="Slack",
                bundle_id="com.tinyspeck.slackmacgap",
                category="Communication",
            )
        ],
    )

    result = runner.invoke(app, ["summary", "--file", str(stats_path)])

    assert result.exit_code == 0
    assert "Communication" in result.output
    assert "00:00:45" in result.output


def test_summary_command_rejects_bad_date(stats_path):
    result = runner.invoke(app, ["summary", "--file", str(stats_path), "--date", "May 1"])

    assert result.exit_code == 2


def test_collect_reports_write_failure(stats_path, monkeypatch):
    class FailingCollector:
        def __init__(self, stats_path, settings):
            self.settings = settings

        def run_forever(self):
            raise StorageWriteError("disk full")

    monkeypatch.setattr(collector_module, "FocusCollector", FailingCollector)

    result = runner.invoke(app, ["collect", "--file", str(stats_path)])

    assert result.exit_code == 1


def test_collect_reads_interval_from_environment(stats_path, monkeypatch):
    seen = {}

    class RecordingCollector:
        def __init__(self, stats_path, settings):
            seen["interval"] = settings.sample_interval.total_seconds()

        def run_forever(self):
            return []

    monkeypatch.setattr(collector_module, "FocusCollector", RecordingCollector)

    result = runner.invoke(
        app,
        ["collect", "--file", str(stats_path), "--no-summary"],
        env={"FOCUS_TRACKER_INTERVAL": "7.5"},
    )

    assert result.exit_code == 0
    assert seen["interval"] == 7.5
