"""Session state machine turning focus snapshots into usage sessions."""

from __future__ import annotations

import enum
import logging
from datetime import datetime
from typing import Optional

from .categories import categorize
from .models import FocusSnapshot, Session

logger = logging.getLogger(__name__)


class TrackerState(enum.Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    STOPPED = "stopped"


class SessionTracker:
    """Holds at most one open session and the sessions closed during this run.

    Each snapshot either extends the open session implicitly (same bundle id
    and URL), or closes it at the snapshot's timestamp and opens the next one.
    """

    def __init__(self) -> None:
        self._state = TrackerState.IDLE
        self._current: Optional[Session] = None
        self._history: list[Session] = []

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def current(self) -> Optional[Session]:
        return self._current

    @property
    def history(self) -> list[Session]:
        return list(self._history)

    def observe(self, snapshot: FocusSnapshot) -> Optional[Session]:
        """Feed one snapshot; return the session it closed, if any."""
        if self._state is TrackerState.STOPPED:
            logger.debug("Ignoring snapshot received after stop: %s", snapshot)
            return None

        current = self._current
        if current is None:
            self._open(snapshot, snapshot.sampled_at)
            return None

        if current.identity == snapshot.identity:
            return None

        closed = self._close(current, snapshot.sampled_at)
        self._open(snapshot, max(snapshot.sampled_at, closed.end))
        return closed

    def stop(self, now: datetime) -> Optional[Session]:
        """Close the open session (if any) and refuse further snapshots."""
        if self._state is TrackerState.STOPPED:
            return None
        closed = self._close(self._current, now) if self._current is not None else None
        self._state = TrackerState.STOPPED
        logger.debug("Tracker stopped with %d closed sessions.", len(self._history))
        return closed

    def _open(self, snapshot: FocusSnapshot, start: datetime) -> None:
        self._current = Session(
            start=start,
            app_name=snapshot.app_name,
            bundle_id=snapshot.bundle_id,
            category=categorize(snapshot.app_name, snapshot.bundle_id),
            url=snapshot.url,
        )
        self._state = TrackerState.TRACKING
        logger.debug(
            "Started tracking: app=%s bundle=%s url=%s category=%s",
            self._current.app_name,
            self._current.bundle_id,
            self._current.url,
            self._current.category,
        )

    def _close(self, session: Session, end: datetime) -> Session:
        session.close(end)
        self._history.append(session)
        self._current = None
        logger.debug(
            "Closed session: app=%s url=%s duration=%.1fs",
            session.app_name,
            session.url,
            session.duration_seconds,
        )
        return session
