"""Helpers for locating the session history file."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "FocusTracker"
APP_AUTHOR = "FocusTracker"
STATS_FILENAME = "usage_stats.csv"


def _dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)


def get_data_dir() -> Path:
    """Return the base directory for persistent data."""
    path = Path(_dirs().user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_stats_path() -> Path:
    """Return the session history file, on the Desktop when there is one."""
    desktop = Path(_dirs().user_desktop_path)
    if desktop.is_dir():
        return desktop / STATS_FILENAME
    return get_data_dir() / STATS_FILENAME
