"""Journal operations: log an entry, award points, re-evaluate badges."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .achievements import describe, evaluate
from .config import Config
from .models import AwardResult, Badge, MoodEntry
from .parser import parse_entry
from .progression import award_entry
from .snapshot import Snapshot
from .store import JournalStore

logger = logging.getLogger(__name__)


@dataclass
class LogResult:
    """Everything that changed because one entry was logged."""

    entry: MoodEntry
    award: AwardResult
    unlocked: frozenset[str] = frozenset()
    newly_unlocked: list[Badge] = field(default_factory=list)


def open_store(config: Config) -> JournalStore:
    return JournalStore(config.store_file, band_size=config.band_size)


def log_entry(
    store: JournalStore,
    payload: dict,
    now: float,
    config: Config,
) -> LogResult:
    """Validate and append a mood entry, then award points and badges.

    Args:
        store: Journal to write to.
        payload: Raw submission (see parser.parse_entry).
        now: Monotonic clock reading for the award debounce.
        config: Vocabularies, point table and debounce settings.

    Returns:
        LogResult with the new entry, the award outcome and the badges
        unlocked for the first time by this entry.

    Raises:
        InvalidEntryError: If the payload is not a valid entry.
    """
    entry = parse_entry(payload, activities=config.activities, labels=config.custom_moods)
    store.append(entry)
    logger.info("Logged %s mood (%s)", entry.mood.label, entry.id)

    result = award_entry(
        store.ledger(),
        entry,
        now,
        points_table=config.points_table,
        debounce_seconds=config.debounce_seconds,
    )
    if result.debounced:
        logger.debug("Award for %s debounced", entry.id)
    else:
        store.save_ledger(result.ledger)

    previous = store.unlocked()
    current = evaluate(store.entries(), result.ledger, tz=config.tzinfo)
    # Unlocks are permanent even if entries are later deleted
    unlocked = previous | current
    fresh = describe(current - previous)
    if fresh:
        store.save_unlocked(unlocked)
        logger.info("Unlocked badge(s): %s", ", ".join(b.name for b in fresh))

    return LogResult(entry=entry, award=result, unlocked=unlocked, newly_unlocked=fresh)


def delete_entry(store: JournalStore, entry_id: str) -> bool:
    """Delete an entry. Points and unlocked badges are kept."""
    return store.delete(entry_id)


def build_snapshot(
    store: JournalStore,
    as_of: datetime | None,
    config: Config,
) -> Snapshot:
    return Snapshot(
        entries=tuple(store.entries()),
        ledger=store.ledger(),
        as_of=as_of or datetime.now(timezone.utc),
        tz=config.tzinfo,
        unlocked=store.unlocked(),
    )
