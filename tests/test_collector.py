"""End-to-end scenarios for the sampling loop."""

import threading
from datetime import timedelta

import pytest

from focus_tracker.collector import FocusCollector
from focus_tracker.config import TrackerSettings
from focus_tracker.errors import ProbeUnavailable, StorageWriteError
from focus_tracker.models import Session
from focus_tracker.storage import SessionStore, write_sessions
from tests.helpers import CHROME, TERMINAL, ScriptedProbe, at, snap


def make_collector(stats_path, settings, probe, stop_seconds):
    return FocusCollector(
        stats_path=stats_path,
        settings=settings,
        probe=probe,
        clock=lambda: at(stop_seconds),
    )


def describe(sessions):
    return [(s.start, s.end, s.app_name, s.url, s.category) for s in sessions]


def test_browser_tab_switch_creates_two_sessions(stats_path, fast_settings, stop_event):
    probe = ScriptedProbe(
        [
            snap(CHROME, 0, url="a.com"),
            snap(CHROME, 1, url="a.com"),
            snap(CHROME, 2, url="b.com"),
        ],
        stop_event,
    )
    collector = make_collector(stats_path, fast_settings, probe, stop_seconds=3)

    history = collector.run_until_stopped(stop_event)

    assert describe(history) == [
        (at(0), at(2), "Google Chrome", "a.com", "Browser"),
        (at(2), at(3), "Google Chrome", "b.com", "Browser"),
    ]
    assert SessionStore(stats_path).load() == history


def test_unchanged_app_is_one_session(stats_path, fast_settings, stop_event):
    probe = ScriptedProbe([snap(TERMINAL, 0), snap(TERMINAL, 1)], stop_event)
    collector = make_collector(stats_path, fast_settings, probe, stop_seconds=2)

    history = collector.run_until_stopped(stop_event)

    assert describe(history) == [(at(0), at(2), "Terminal", None, "Terminal")]


def test_probe_failure_leaves_open_session_untouched(stats_path, fast_settings, stop_event):
    probe = ScriptedProbe(
        [snap(TERMINAL, 0), ProbeUnavailable("no frontmost process"), snap(TERMINAL, 2)],
        stop_event,
    )
    collector = make_collector(stats_path, fast_settings, probe, stop_seconds=3)

    history = collector.run_until_stopped(stop_event)

    assert probe.calls == 3
    assert describe(history) == [(at(0), at(3), "Terminal", None, "Terminal")]


def test_stop_before_first_sample_keeps_prior_history(stats_path, fast_settings, stop_event):
    prior = [
        Session(
            start=at(-100),
            end=at(-40),
            app_name="Slack",
            bundle_id="com.tinyspeck.slackmacgap",
            category="Communication",
        )
    ]
    write_sessions(stats_path, prior)
    before = stats_path.read_bytes()
    probe = ScriptedProbe([snap(TERMINAL, 0)], threading.Event())
    stop_event.set()
    collector = make_collector(stats_path, fast_settings, probe, stop_seconds=1)

    history = collector.run_until_stopped(stop_event)

    assert probe.calls == 0
    assert collector.tracker.history == []
    assert history == prior
    assert stats_path.read_bytes() == before


def test_new_sessions_are_appended_after_prior_history(stats_path, fast_settings, stop_event):
    prior = [
        Session(
            start=at(-100),
            end=at(-40),
            app_name="Slack",
            bundle_id="com.tinyspeck.slackmacgap",
            category="Communication",
        )
    ]
    write_sessions(stats_path, prior)
    probe = ScriptedProbe([snap(TERMINAL, 0)], stop_event)
    collector = make_collector(stats_path, fast_settings, probe, stop_seconds=5)

    history = collector.run_until_stopped(stop_event)

    assert history[0] == prior[0]
    assert describe(history[1:]) == [(at(0), at(5), "Terminal", None, "Terminal")]
    assert SessionStore(stats_path).load() == history


def test_flush_failure_propagates(tmp_path, fast_settings, stop_event):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    probe = ScriptedProbe([snap(TERMINAL, 0)], stop_event)
    collector = make_collector(blocker / "usage_stats.csv", fast_settings, probe, stop_seconds=1)

    with pytest.raises(StorageWriteError):
        collector.run_until_stopped(stop_event)


def test_stop_is_noticed_within_one_interval(stats_path, stop_event):
    settings = TrackerSettings(sample_interval=timedelta(seconds=30))
    probe = ScriptedProbe([snap(TERMINAL, 0), snap(TERMINAL, 1)], threading.Event())
    collector = make_collector(stats_path, settings, probe, stop_seconds=2)
    timer = threading.Timer(0.2, stop_event.set)
    timer.start()
    try:
        worker = threading.Thread(target=collector.run_until_stopped, args=(stop_event,))
        worker.start()
        worker.join(timeout=5)
    finally:
        timer.cancel()

    assert not worker.is_alive()
    assert probe.calls == 1
    assert describe(collector.tracker.history) == [(at(0), at(2), "Terminal", None, "Terminal")]
