"""Translate termination signals into a stop flag for the collector."""

from __future__ import annotations

import logging
import signal
import threading
from types import FrameType
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ShutdownCoordinator:
    """Sets ``stop_event`` when SIGINT or SIGTERM arrives.

    The handlers only set the event; the collector notices it at the top of
    its next iteration. Previous handlers are restored on exit.
    """

    def __init__(self, stop_event: Optional[threading.Event] = None) -> None:
        self.stop_event = stop_event or threading.Event()
        self._previous: dict[int, Any] = {}

    @staticmethod
    def _signals() -> list[int]:
        signals = [signal.SIGINT]
        if hasattr(signal, "SIGTERM"):
            signals.append(signal.SIGTERM)
        return signals

    def _handle(self, signum: int, frame: Optional[FrameType]) -> None:
        self.stop_event.set()

    def request_stop(self) -> None:
        self.stop_event.set()

    def __enter__(self) -> "ShutdownCoordinator":
        for signum in self._signals():
            self._previous[signum] = signal.signal(signum, self._handle)
        return self

    def __exit__(self, *exc_info: object) -> None:
        for signum, handler in self._previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()
        if self.stop_event.is_set():
            logger.info("Stop requested; shutting down.")
