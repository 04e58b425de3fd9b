"""Domain models for focus observations and usage sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class FocusSnapshot:
    """A single observation of the application holding focus."""

    app_name: str
    bundle_id: str
    url: Optional[str]
    sampled_at: datetime

    @property
    def identity(self) -> tuple[str, Optional[str]]:
        return self.bundle_id, self.url


@dataclass(slots=True)
class Session:
    """A contiguous block of time during which the focus identity did not change."""

    start: datetime
    app_name: str
    bundle_id: str
    category: str
    url: Optional[str] = None
    end: Optional[datetime] = None

    @property
    def identity(self) -> tuple[str, Optional[str]]:
        return self.bundle_id, self.url

    @property
    def is_open(self) -> bool:
        return self.end is None

    @property
    def duration_seconds(self) -> float:
        if self.end is None:
            raise ValueError("Open sessions have no duration yet.")
        return (self.end - self.start).total_seconds()

    def close(self, end: datetime) -> None:
        """Set the end time; a session is closed exactly once."""
        if self.end is not None:
            raise ValueError("Session is already closed.")
        # Wall clock may step backwards between samples.
        self.end = max(end, self.start)
