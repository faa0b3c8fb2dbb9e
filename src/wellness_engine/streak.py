"""Consecutive-day logging streaks.

Recomputed from the full entry set on every call, never stored, so deleting
or backdating an entry always yields the right answer.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Iterable

from wellness_engine.days import ONE_DAY, days_with_entries, local_date
from wellness_engine.models import MoodEntry, StreakState


def compute_streak(
    entries: Iterable[MoodEntry],
    as_of: datetime,
    tz: tzinfo | None = None,
) -> int:
    """Count consecutive days with an entry ending today or yesterday.

    Args:
        entries: Mood entries in any order; same-day duplicates count once.
        as_of: The instant whose local day is "today".
        tz: Local timezone used for day bucketing.

    Returns:
        Current streak length, 0 if neither today nor yesterday has an entry.
    """
    days = days_with_entries(entries, tz)
    if not days:
        return 0

    day = local_date(as_of, tz)
    if day not in days:
        day -= ONE_DAY
        if day not in days:
            return 0

    count = 0
    while day in days:
        count += 1
        day -= ONE_DAY
    return count


def longest_streak(entries: Iterable[MoodEntry], tz: tzinfo | None = None) -> int:
    """Longest run of consecutive logged days anywhere in the history."""
    days = days_with_entries(entries, tz)
    longest = 0
    for day in days:
        # Only start counting at the first day of a run
        if day - ONE_DAY in days:
            continue
        run = 0
        while day in days:
            run += 1
            day += ONE_DAY
        longest = max(longest, run)
    return longest


def streak_state(
    entries: Iterable[MoodEntry],
    as_of: datetime,
    tz: tzinfo | None = None,
) -> StreakState:
    entries = list(entries)
    return StreakState(
        current_streak=compute_streak(entries, as_of, tz),
        longest_streak=longest_streak(entries, tz),
    )
