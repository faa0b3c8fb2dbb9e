"""Tests for badge evaluation."""

from __future__ import annotations

from datetime import datetime, timedelta

from wellness_engine.achievements import (
    BADGES,
    badge_by_id,
    collect_stats,
    describe,
    evaluate,
)
from wellness_engine.models import MoodCategory, MoodEntry, ProgressionLedger

START = datetime(2026, 1, 1, 9, 0)


def _entries(n: int, moods: list[MoodCategory] | None = None, note: str = "") -> list[MoodEntry]:
    """n entries on n consecutive days."""
    moods = moods or [MoodCategory.GOOD]
    return [
        MoodEntry(
            id=f"e{i}",
            timestamp=START + timedelta(days=i),
            mood=moods[i % len(moods)],
            note=note,
        )
        for i in range(n)
    ]


def test_badge_ids_unique() -> None:
    ids = [b.id for b in BADGES]
    assert len(ids) == len(set(ids))


def test_no_entries_no_badges() -> None:
    assert evaluate([], ProgressionLedger()) == frozenset()


def test_first_mood() -> None:
    assert evaluate(_entries(1), ProgressionLedger()) == {"first-mood"}


def test_streak_and_count_badges() -> None:
    unlocked = evaluate(_entries(7), ProgressionLedger())
    assert {"first-mood", "getting-started", "consistent", "week-warrior"} <= unlocked
    assert "two-week-streak" not in unlocked


def test_variety_badges() -> None:
    entries = _entries(5, moods=list(MoodCategory))
    unlocked = evaluate(entries, ProgressionLedger())
    assert "emotionally-aware" in unlocked
    assert "emotional-range" in unlocked


def test_notes_badge() -> None:
    assert "reflector" in evaluate(_entries(5, note="felt fine"), ProgressionLedger())
    assert "reflector" not in evaluate(_entries(5), ProgressionLedger())


def test_level_badge() -> None:
    assert "rising-star" in evaluate([], ProgressionLedger(total_points=400))
    assert "rising-star" not in evaluate([], ProgressionLedger(total_points=399))


def test_monotonic_as_log_grows() -> None:
    entries = _entries(40, moods=[MoodCategory.GOOD, MoodCategory.BAD, MoodCategory.OKAY], note="n")
    previous: frozenset[str] = frozenset()
    for n in range(1, len(entries) + 1):
        ledger = ProgressionLedger(total_points=n * 33)
        current = evaluate(entries[:n], ledger)
        assert previous <= current
        previous = current


def test_streak_badge_kept_after_streak_breaks() -> None:
    entries = _entries(3)
    entries.append(
        MoodEntry(id="late", timestamp=START + timedelta(days=20), mood=MoodCategory.OKAY)
    )
    assert "consistent" in evaluate(entries, ProgressionLedger())


def test_collect_stats() -> None:
    stats = collect_stats(_entries(4, note="x"), ProgressionLedger(total_points=150))
    assert stats.entry_count == 4
    assert stats.longest_streak == 4
    assert stats.distinct_moods == 1
    assert stats.noted_entries == 4
    assert stats.level == 2


def test_describe_table_order_and_unknown_ids() -> None:
    badges = describe({"week-warrior", "first-mood", "no-such-badge"})
    assert [b.id for b in badges] == ["first-mood", "week-warrior"]
    assert badge_by_id("centurion").name == "Centurion"
    assert badge_by_id("nope") is None
