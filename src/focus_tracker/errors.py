"""Error types raised by the focus tracker."""

from __future__ import annotations

from typing import Any, Optional


class TrackerError(Exception):
    """Base class for focus tracker errors."""

    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ProbeUnavailable(TrackerError):
    """The focused application could not be determined for this tick."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("probe_unavailable", message, details)


class StorageReadError(TrackerError):
    """The session history file could not be read."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("storage_read_error", message, details)


class StorageWriteError(TrackerError):
    """The session history could not be written; session data is lost."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("storage_write_error", message, details)
