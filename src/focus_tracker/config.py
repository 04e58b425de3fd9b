"""Configuration models and helpers for the focus tracker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

INTERVAL_ENVVAR = "FOCUS_TRACKER_INTERVAL"
MIN_SAMPLE_SECONDS = 0.5


@dataclass(slots=True)
class TrackerSettings:
    """Runtime configuration for the focus collector."""

    sample_interval: timedelta = timedelta(seconds=2)
    probe_timeout: timedelta = timedelta(seconds=5)

    @classmethod
    def from_intervals(
        cls,
        sample_seconds: float,
        probe_timeout_seconds: float | None = None,
    ) -> "TrackerSettings":
        if sample_seconds < MIN_SAMPLE_SECONDS:
            raise ValueError(
                f"Sampling interval must be at least {MIN_SAMPLE_SECONDS} seconds."
            )
        timeout = (
            probe_timeout_seconds
            if probe_timeout_seconds is not None
            else max(sample_seconds * 2, 5.0)
        )
        return cls(
            sample_interval=timedelta(seconds=sample_seconds),
            probe_timeout=timedelta(seconds=timeout),
        )
