"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from .models import Session
from .storage import SessionStore


@dataclass(slots=True)
class AppUsage:
    app_name: str
    bundle_id: str
    category: str
    seconds: float


@dataclass(slots=True)
class UsageSummary:
    total_seconds: float = 0.0
    by_category: list[tuple[str, float]] = field(default_factory=list)
    by_app: list[AppUsage] = field(default_factory=list)

    def share(self, seconds: float) -> float:
        if self.total_seconds <= 0:
            return 0.0
        return seconds / self.total_seconds * 100.0


def summarize(sessions: Iterable[Session]) -> UsageSummary:
    categories: defaultdict[str, float] = defaultdict(float)
    apps: dict[tuple[str, str], AppUsage] = {}
    total = 0.0
    for session in sessions:
        seconds = session.duration_seconds
        total += seconds
        categories[session.category] += seconds
        key = (session.bundle_id, session.app_name)
        usage = apps.get(key)
        if usage is None:
            apps[key] = AppUsage(
                session.app_name, session.bundle_id, session.category, seconds
            )
        else:
            usage.seconds += seconds
    return UsageSummary(
        total_seconds=total,
        by_category=sorted(categories.items(), key=lambda item: item[1], reverse=True),
        by_app=sorted(apps.values(), key=lambda usage: usage.seconds, reverse=True),
    )


def sessions_for_day(sessions: Iterable[Session], day: datetime) -> list[Session]:
    target = day.date()
    return [session for session in sessions if session.start.date() == target]


class SummaryPrinter:
    """Render human-readable summaries in the console."""

    def __init__(self, stats_path: Path) -> None:
        self.store = SessionStore(Path(stats_path))

    def print_summary(self, day: Optional[datetime] = None) -> None:
        sessions = self.store.load()
        if day is not None:
            sessions = sessions_for_day(sessions, day)
        print_usage_summary(sessions, heading=_heading(day))


def _heading(day: Optional[datetime]) -> str:
    if day is None:
        return "Usage summary"
    return f"Usage summary for {day.strftime('%Y-%m-%d')}"


def print_usage_summary(sessions: Iterable[Session], heading: str = "Usage summary") -> None:
    summary = summarize(sessions)
    if not summary.by_app:
        print("No activity recorded.")
        return

    print(heading)
    print("-" * 40)
    print("By category:")
    for category, seconds in summary.by_category:
        print(
            f"  {category:<20} {format_duration(seconds)} ({summary.share(seconds):.1f}%)"
        )

    print()
    print("By application:")
    for usage in summary.by_app:
        label = f"{usage.app_name} ({usage.bundle_id or 'unknown'})"
        print(
            f"  {label[:45]:<45} {usage.category:<14} "
            f"{format_duration(usage.seconds)} ({summary.share(usage.seconds):.1f}%)"
        )

    print()
    print(f"Total tracked time: {format_duration(summary.total_seconds)}")


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
