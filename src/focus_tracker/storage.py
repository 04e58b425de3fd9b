"""CSV persistence for usage sessions."""

from __future__ import annotations

import csv
import logging
import os
import re
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from .categories import categorize
from .errors import StorageReadError, StorageWriteError
from .models import Session

logger = logging.getLogger(__name__)


DATETIME_FMT = "%Y-%m-%d %H:%M:%S.%f"

CSV_HEADER = (
    "Start Time",
    "End Time",
    "Duration (seconds)",
    "App Name",
    "Bundle ID",
    "Category",
    "URL",
)

# Sub-microsecond digits, as written by earlier releases.
_EXTRA_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")


def format_timestamp(value: datetime) -> str:
    return value.strftime(DATETIME_FMT)


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp into naive local time.

    Files written by earlier releases carry RFC 3339 timestamps with an
    offset; those are converted to local time.
    """
    value = value.strip()
    try:
        return datetime.strptime(value, DATETIME_FMT)
    except ValueError:
        parsed = datetime.fromisoformat(_EXTRA_FRACTION_PATTERN.sub(r"\1", value))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def session_to_row(session: Session) -> list[str]:
    if session.end is None:
        raise ValueError("Cannot persist an open session.")
    return [
        format_timestamp(session.start),
        format_timestamp(session.end),
        str(int(session.duration_seconds)),
        session.app_name,
        session.bundle_id,
        session.category,
        session.url or "",
    ]


def row_to_session(row: dict[str, str]) -> Session:
    missing = [name for name in CSV_HEADER if row.get(name) is None]
    if missing:
        raise ValueError(f"Row is missing cells for {', '.join(missing)}: {row!r}")
    start = parse_timestamp(row["Start Time"])
    end = parse_timestamp(row["End Time"])
    if end < start:
        raise ValueError(f"End Time precedes Start Time: {row!r}")
    app_name = row["App Name"] or ""
    bundle_id = row["Bundle ID"] or ""
    return Session(
        start=start,
        end=end,
        app_name=app_name,
        bundle_id=bundle_id,
        category=categorize(app_name, bundle_id),
        url=row.get("URL") or None,
    )


def read_sessions(path: Path) -> list[Session]:
    """Read every session from ``path``; raise StorageReadError on bad input."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as handle:
            reader = csv.DictReader(handle)
            if reader.fieldnames is None:
                return []
            missing = [name for name in CSV_HEADER if name not in reader.fieldnames]
            if missing:
                raise StorageReadError(
                    f"{path} is missing columns: {', '.join(missing)}",
                    details={"path": str(path), "missing": missing},
                )
            return [row_to_session(row) for row in reader]
    except StorageReadError:
        raise
    except (OSError, UnicodeDecodeError, csv.Error, KeyError, TypeError, ValueError) as exc:
        raise StorageReadError(
            f"Could not read sessions from {path}: {exc}", details={"path": str(path)}
        ) from exc


def write_sessions(path: Path, sessions: Iterable[Session]) -> None:
    """Replace ``path`` with the given sessions in a single atomic rename."""
    path = Path(path)
    tmp_name: Optional[str] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle)
            writer.writerow(CSV_HEADER)
            writer.writerows(session_to_row(session) for session in sessions)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise StorageWriteError(
            f"Failed to write sessions to {path}: {exc}", details={"path": str(path)}
        ) from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning("Could not remove temporary file %s", tmp_name)


class SessionStore:
    """Loads prior history and writes the combined history back at shutdown."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._needs_backup = False

    def load(self) -> list[Session]:
        """Return previously persisted sessions, or an empty list."""
        self._needs_backup = False
        if not self.path.exists():
            return []
        try:
            sessions = read_sessions(self.path)
        except StorageReadError as exc:
            logger.warning("Could not load existing sessions; starting empty. %s", exc)
            self._needs_backup = True
            return []
        logger.info("Loaded %d sessions from %s", len(sessions), self.path)
        return sessions

    def flush(self, history: Iterable[Session]) -> None:
        """Write ``history`` as the complete contents of the store."""
        sessions = list(history)
        if self._needs_backup and self.path.exists():
            self._backup_unreadable_file()
        write_sessions(self.path, sessions)
        self._needs_backup = False
        logger.info("Wrote %d sessions to %s", len(sessions), self.path)

    def _backup_unreadable_file(self) -> None:
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            shutil.copy2(self.path, backup)
        except OSError as exc:
            raise StorageWriteError(
                f"Refusing to overwrite unreadable {self.path}; backup failed: {exc}",
                details={"path": str(self.path), "backup": str(backup)},
            ) from exc
        logger.warning("Saved unreadable session file to %s", backup)
