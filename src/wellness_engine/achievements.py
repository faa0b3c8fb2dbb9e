"""Badge rules evaluated against a log + ledger snapshot.

Every predicate is monotonic in log growth: adding entries or points can
only unlock badges. Streak badges therefore use the longest streak ever
reached rather than the current one, which resets with time.
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Iterable

from wellness_engine.models import Badge, LogStats, MoodEntry, ProgressionLedger
from wellness_engine.streak import longest_streak

logger = logging.getLogger(__name__)


def _entries_badge(badge_id: str, name: str, n: int) -> Badge:
    return Badge(
        id=badge_id,
        name=name,
        description=f"Log {n} mood{'s' if n != 1 else ''}",
        category="entries",
        predicate=lambda s: s.entry_count >= n,
    )


def _streak_badge(badge_id: str, name: str, n: int) -> Badge:
    return Badge(
        id=badge_id,
        name=name,
        description=f"Reach a {n}-day logging streak",
        category="streak",
        predicate=lambda s: s.longest_streak >= n,
    )


def _variety_badge(badge_id: str, name: str, description: str, n: int) -> Badge:
    return Badge(
        id=badge_id,
        name=name,
        description=description,
        category="variety",
        predicate=lambda s: s.distinct_moods >= n,
    )


def _notes_badge(badge_id: str, name: str, n: int) -> Badge:
    return Badge(
        id=badge_id,
        name=name,
        description=f"Add notes to {n} mood entries",
        category="notes",
        predicate=lambda s: s.noted_entries >= n,
    )


def _level_badge(badge_id: str, name: str, n: int) -> Badge:
    return Badge(
        id=badge_id,
        name=name,
        description=f"Reach level {n}",
        category="level",
        predicate=lambda s: s.level >= n,
    )


BADGES: tuple[Badge, ...] = (
    _entries_badge("first-mood", "First Mood", 1),
    _entries_badge("getting-started", "Getting Started", 5),
    _entries_badge("mood-tracker", "Mood Tracker", 20),
    _entries_badge("mood-master", "Mood Master", 50),
    _entries_badge("centurion", "Centurion", 100),
    _entries_badge("year-of-moods", "Year of Moods", 365),
    _streak_badge("consistent", "Consistent", 3),
    _streak_badge("week-warrior", "Week Warrior", 7),
    _streak_badge("two-week-streak", "Two Week Streak", 14),
    _streak_badge("monthly-master", "Monthly Master", 30),
    _streak_badge("century-streak", "Century Streak", 100),
    _variety_badge("emotionally-aware", "Emotionally Aware", "Track 3 different moods", 3),
    _variety_badge("emotional-range", "Emotional Range", "Experience the full mood spectrum", 5),
    _notes_badge("reflector", "Reflector", 5),
    _notes_badge("journal-keeper", "Journal Keeper", 20),
    _level_badge("rising-star", "Rising Star", 5),
    _level_badge("wellness-veteran", "Wellness Veteran", 10),
)

_BY_ID = {badge.id: badge for badge in BADGES}


def badge_by_id(badge_id: str) -> Badge | None:
    return _BY_ID.get(badge_id)


def collect_stats(
    entries: Iterable[MoodEntry],
    ledger: ProgressionLedger,
    tz: tzinfo | None = None,
) -> LogStats:
    """Aggregate the counts badge predicates look at."""
    entries = list(entries)
    return LogStats(
        entry_count=len(entries),
        longest_streak=longest_streak(entries, tz),
        distinct_moods=len({e.mood for e in entries}),
        noted_entries=sum(1 for e in entries if e.has_note),
        total_points=ledger.total_points,
        level=ledger.level,
    )


def evaluate(
    entries: Iterable[MoodEntry],
    ledger: ProgressionLedger,
    badges: Iterable[Badge] = BADGES,
    tz: tzinfo | None = None,
) -> frozenset[str]:
    """Return the ids of every badge whose predicate holds for this snapshot."""
    stats = collect_stats(entries, ledger, tz)
    unlocked = frozenset(badge.id for badge in badges if badge.predicate(stats))
    logger.debug("Evaluated badges: %d unlocked", len(unlocked))
    return unlocked


def describe(badge_ids: Iterable[str]) -> list[Badge]:
    """Badge objects for the given ids, in table order. Unknown ids are skipped."""
    wanted = set(badge_ids)
    return [badge for badge in BADGES if badge.id in wanted]
