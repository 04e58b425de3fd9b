"""Track foreground applications and browser tabs as usage sessions."""

from .categories import categorize
from .collector import FocusCollector
from .errors import ProbeUnavailable, StorageReadError, StorageWriteError, TrackerError
from .models import FocusSnapshot, Session
from .storage import SessionStore
from .tracker import SessionTracker, TrackerState

__all__ = [
    "FocusCollector",
    "FocusSnapshot",
    "ProbeUnavailable",
    "Session",
    "SessionStore",
    "SessionTracker",
    "StorageReadError",
    "StorageWriteError",
    "TrackerError",
    "TrackerState",
    "categorize",
]

__version__ = "0.1.0"
