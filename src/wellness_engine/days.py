"""Calendar-day bucketing in the user's local timezone."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable

from wellness_engine.models import MoodEntry

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def local_date(ts: datetime, tz: tzinfo | None = None) -> date:
    """Return the local calendar day of a timestamp.

    Aware timestamps are converted to tz (None = system local zone).
    Naive timestamps are taken as already being local wall-clock time.
    """
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(tz).date()


def parse_timestamp(ts: str) -> datetime | None:
    """Parse ISO 8601 timestamp."""
    if not ts:
        return None
    try:
        return datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Failed to parse timestamp: %s", ts)
        return None


def days_with_entries(entries: Iterable[MoodEntry], tz: tzinfo | None = None) -> set[date]:
    """Set of local days that contain at least one entry."""
    return {local_date(e.timestamp, tz) for e in entries}


def group_by_day(
    entries: Iterable[MoodEntry], tz: tzinfo | None = None
) -> dict[date, list[MoodEntry]]:
    """Group entries by local day, days in ascending order."""
    by_day: dict[date, list[MoodEntry]] = defaultdict(list)
    for entry in entries:
        by_day[local_date(entry.timestamp, tz)].append(entry)
    return {day: by_day[day] for day in sorted(by_day)}


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5
