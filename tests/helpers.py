"""Snapshot builders and a scripted probe for tests."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Optional, Union

from focus_tracker.models import FocusSnapshot
from focus_tracker.probe import FocusProbe

CHROME = ("Google Chrome", "com.google.Chrome")
TERMINAL = ("Terminal", "com.apple.Terminal")
SLACK = ("Slack", "com.tinyspeck.slackmacgap")

T0 = datetime(2024, 5, 1, 9, 0, 0)


def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


def snap(app: tuple[str, str], seconds: float, url: Optional[str] = None) -> FocusSnapshot:
    app_name, bundle_id = app
    return FocusSnapshot(app_name=app_name, bundle_id=bundle_id, url=url, sampled_at=at(seconds))


class ScriptedProbe(FocusProbe):
    """Replays snapshots (or exceptions) and requests a stop when exhausted."""

    def __init__(
        self,
        script: list[Union[FocusSnapshot, Exception]],
        stop_event: threading.Event,
    ) -> None:
        super().__init__()
        self._script = list(script)
        self._stop_event = stop_event
        self.calls = 0

    def get_active_app(self) -> tuple[str, str]:
        raise NotImplementedError

    def query_focus(self) -> FocusSnapshot:
        self.calls += 1
        item = self._script.pop(0)
        if not self._script:
            self._stop_event.set()
        if isinstance(item, Exception):
            raise item
        return item
