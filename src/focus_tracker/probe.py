"""Focus probes reporting the foreground application (and browser tab URL)."""

from __future__ import annotations

import ctypes
import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import PurePath
from typing import Callable, Optional

import psutil

from .errors import ProbeUnavailable, TrackerError
from .models import FocusSnapshot

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ScriptRunner = Callable[[str], str]


class FocusProbe(ABC):
    """Platform-independent interface to the foreground application."""

    def __init__(self, clock: Clock = datetime.now) -> None:
        self._clock = clock

    @abstractmethod
    def get_active_app(self) -> tuple[str, str]:
        """Return ``(app_name, bundle_id)``; raise ProbeUnavailable on failure."""

    def get_active_url(self, bundle_id: str) -> Optional[str]:
        """Return the active tab URL for browsers, ``None`` otherwise."""
        return None

    def query_focus(self) -> FocusSnapshot:
        sampled_at = self._clock()
        app_name, bundle_id = self.get_active_app()
        return FocusSnapshot(
            app_name=app_name,
            bundle_id=bundle_id,
            url=self.get_active_url(bundle_id),
            sampled_at=sampled_at,
        )


_FRONT_APP_SCRIPT = """
tell application "System Events"
    set frontProc to first application process whose frontmost is true
    set bundleId to bundle identifier of frontProc
    if bundleId is missing value then set bundleId to ""
    return bundleId & linefeed & (name of frontProc)
end tell
"""

_CHROMIUM_URL_SCRIPT = 'tell application id "{bundle_id}" to get URL of active tab of front window'
_SAFARI_URL_SCRIPT = 'tell application id "{bundle_id}" to get URL of current tab of front window'

_URL_SCRIPTS: dict[str, str] = {
    "com.google.Chrome": _CHROMIUM_URL_SCRIPT,
    "com.google.Chrome.canary": _CHROMIUM_URL_SCRIPT,
    "com.brave.Browser": _CHROMIUM_URL_SCRIPT,
    "com.microsoft.edgemac": _CHROMIUM_URL_SCRIPT,
    "com.apple.Safari": _SAFARI_URL_SCRIPT,
}

_MISSING_VALUE = "missing value"


def run_osascript(script: str, timeout: float = 5.0) -> str:
    """Run an AppleScript snippet and return its trimmed stdout."""
    try:
        result = subprocess.run(
            ["osascript", "-e", script],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ProbeUnavailable(f"Failed to execute osascript: {exc}") from exc
    if result.returncode != 0:
        raise ProbeUnavailable(
            f"osascript error: {result.stderr.strip()}",
            details={"returncode": result.returncode},
        )
    return result.stdout.strip()


class MacOSFocusProbe(FocusProbe):
    """Queries System Events and the supported browsers through ``osascript``."""

    def __init__(
        self,
        clock: Clock = datetime.now,
        runner: Optional[ScriptRunner] = None,
        timeout: float = 5.0,
    ) -> None:
        super().__init__(clock)
        self._run = runner or (lambda script: run_osascript(script, timeout=timeout))

    def get_active_app(self) -> tuple[str, str]:
        output = self._run(_FRONT_APP_SCRIPT)
        bundle_id, sep, app_name = output.partition("\n")
        if not sep:
            raise ProbeUnavailable(f"Unexpected System Events output: {output!r}")
        bundle_id = bundle_id.strip()
        app_name = app_name.strip()
        if bundle_id == _MISSING_VALUE:
            bundle_id = ""
        if not bundle_id and not app_name:
            raise ProbeUnavailable("System Events reported no frontmost process.")
        return app_name, bundle_id

    def get_active_url(self, bundle_id: str) -> Optional[str]:
        template = _URL_SCRIPTS.get(bundle_id)
        if template is None:
            return None
        try:
            url = self._run(template.format(bundle_id=bundle_id))
        except ProbeUnavailable as exc:
            # No window or no tab is common; report the app without a URL.
            logger.debug("Could not read URL for %s: %s", bundle_id, exc)
            return None
        if not url or url == _MISSING_VALUE:
            return None
        return url


class WindowsFocusProbe(FocusProbe):
    """Retrieves the foreground window's process through Win32 and psutil."""

    def __init__(self, clock: Clock = datetime.now) -> None:
        super().__init__(clock)
        from ctypes import wintypes

        self._wintypes = wintypes
        self._user32 = ctypes.windll.user32  # type: ignore[attr-defined]

    def get_active_app(self) -> tuple[str, str]:
        hwnd = self._user32.GetForegroundWindow()
        if not hwnd:
            raise ProbeUnavailable("No foreground window.")

        pid = self._wintypes.DWORD()
        self._user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
        if not pid.value:
            raise ProbeUnavailable("Foreground window has no owning process.")
        try:
            executable = psutil.Process(pid.value).name()
        except (psutil.Error, ProcessLookupError) as exc:
            raise ProbeUnavailable(f"Cannot inspect process {pid.value}: {exc}") from exc
        return PurePath(executable).stem, executable


def create_default_probe(timeout: float = 5.0) -> FocusProbe:
    """Return the probe for the running platform."""
    if sys.platform == "darwin":
        return MacOSFocusProbe(timeout=timeout)
    if sys.platform == "win32":
        return WindowsFocusProbe()
    raise TrackerError(
        "unsupported_platform",
        f"Focus tracking is not supported on {sys.platform}.",
    )
