"""Sampling loop driving the session tracker."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .config import TrackerSettings
from .errors import ProbeUnavailable
from .models import Session
from .probe import FocusProbe, create_default_probe
from .shutdown import ShutdownCoordinator
from .storage import SessionStore
from .tracker import SessionTracker

logger = logging.getLogger(__name__)


class FocusCollector:
    """Samples foreground focus at a fixed interval and records sessions."""

    def __init__(
        self,
        stats_path: Path,
        settings: TrackerSettings,
        probe: Optional[FocusProbe] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings
        self.store = SessionStore(Path(stats_path))
        self._probe = probe or create_default_probe(
            timeout=settings.probe_timeout.total_seconds()
        )
        self._clock = clock
        self._tracker = SessionTracker()
        self._previous: list[Session] = []

    @property
    def tracker(self) -> SessionTracker:
        return self._tracker

    def run_forever(self) -> list[Session]:
        """Run until SIGINT/SIGTERM, then flush and return the full history."""
        with ShutdownCoordinator() as coordinator:
            return self.run_until_stopped(coordinator.stop_event)

    def run_until_stopped(self, stop_event: threading.Event) -> list[Session]:
        """Run the collector until the provided event is set."""
        self._previous = self.store.load()
        try:
            self._run_loop(stop_event)
        finally:
            history = self._shutdown()
        return history

    def sample_once(self) -> Optional[Session]:
        try:
            snapshot = self._probe.query_focus()
        except ProbeUnavailable as exc:
            logger.debug("Skipping tick: %s", exc)
            return None
        closed = self._tracker.observe(snapshot)
        if closed is not None:
            logger.debug(
                "Switched from %s (%s) after %.1fs",
                closed.app_name,
                closed.url or closed.bundle_id,
                closed.duration_seconds,
            )
        return closed

    def _run_loop(self, stop_event: threading.Event) -> None:
        logger.info("Starting collector; writing to %s", self.store.path)
        interval = self.settings.sample_interval.total_seconds()
        while not stop_event.is_set():
            self.sample_once()
            # Sleep in an interruptible manner.
            stop_event.wait(interval)

    def _shutdown(self) -> list[Session]:
        self._tracker.stop(self._clock())
        history = self._previous + self._tracker.history
        self.store.flush(history)
        logger.info(
            "Collector stopped; recorded %d new sessions.", len(self._tracker.history)
        )
        return history
