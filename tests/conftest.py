"""Shared pytest fixtures."""

from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from focus_tracker.config import TrackerSettings


@pytest.fixture
def stats_path(tmp_path):
    return tmp_path / "usage_stats.csv"


@pytest.fixture
def fast_settings():
    return TrackerSettings(sample_interval=timedelta(0))


@pytest.fixture
def stop_event():
    return threading.Event()
