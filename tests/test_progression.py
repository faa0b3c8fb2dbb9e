"""Tests for the points ledger."""

from __future__ import annotations

from datetime import datetime

import pytest

from wellness_engine.models import MoodCategory, MoodEntry, ProgressionLedger
from wellness_engine.progression import (
    MINIMUM_AWARD,
    POINTS_TABLE,
    ReasonCode,
    award,
    award_entry,
    award_many,
    entry_reasons,
    level_of,
    new_ledger,
    normalize_reason,
    points_by_reason,
    points_for,
)


def _entry(**kwargs) -> MoodEntry:
    defaults = dict(id="e1", timestamp=datetime(2026, 3, 1, 9, 0), mood=MoodCategory.GOOD)
    defaults.update(kwargs)
    return MoodEntry(**defaults)


def test_points_table_values() -> None:
    assert POINTS_TABLE[ReasonCode.LOG_MOOD] == 15
    assert POINTS_TABLE["add-note"] == 10
    assert POINTS_TABLE["complete-goal"] == 50
    assert POINTS_TABLE["monthly-streak"] == 100
    assert len(POINTS_TABLE) == len(ReasonCode)


def test_normalize_reason() -> None:
    assert normalize_reason("LOG_MOOD") == "log-mood"
    assert normalize_reason(" Add-Note ") == "add-note"


def test_points_for_unknown_reason_gets_minimum() -> None:
    assert points_for("log_mood") == 15
    assert points_for("made-tea") == MINIMUM_AWARD


def test_new_ledger_rejects_bad_band() -> None:
    with pytest.raises(ValueError):
        new_ledger(0)


def test_level_of() -> None:
    assert level_of(0) == 1
    assert level_of(199) == 2
    assert level_of(250, band_size=50) == 6


class TestAward:
    def test_level_up(self) -> None:
        ledger = ProgressionLedger(total_points=95)
        result = award(ledger, 10, "log-mood", "Logged a mood", now=100.0)
        assert result.ledger.total_points == 105
        assert result.ledger.level == 2
        assert result.ledger.next_level_threshold == 200
        assert result.points_awarded == 10
        assert result.leveled_up

    def test_table_lookup_when_amount_is_none(self) -> None:
        result = award(new_ledger(), None, "complete-habit", "Habit", now=0.0)
        assert result.points_awarded == 20

    def test_history_row_appended(self) -> None:
        stamp = datetime(2026, 3, 1, 12, 0)
        result = award(new_ledger(), None, "ADD_TAGS", "Tagged", now=0.0, logged_at=stamp)
        (event,) = result.ledger.history
        assert event.reason == "add-tags"
        assert event.amount == 5
        assert event.timestamp == stamp

    def test_input_ledger_not_mutated(self) -> None:
        ledger = new_ledger()
        award(ledger, 10, "log-mood", "", now=0.0)
        assert ledger.total_points == 0
        assert ledger.history == ()

    def test_negative_amount_clamped(self) -> None:
        result = award(ProgressionLedger(total_points=50), -30, "log-mood", "", now=0.0)
        assert result.ledger.total_points == 50
        assert result.points_awarded == 0

    def test_second_award_within_debounce_is_noop(self) -> None:
        first = award(new_ledger(), 15, "log-mood", "", now=10.0)
        second = award(first.ledger, 15, "log-mood", "", now=10.5)
        assert second.debounced
        assert second.points_awarded == 0
        assert second.ledger is first.ledger
        assert second.ledger.total_points == 15

    def test_award_after_debounce_window(self) -> None:
        first = award(new_ledger(), 15, "log-mood", "", now=10.0)
        second = award(first.ledger, 15, "log-mood", "", now=11.0)
        assert not second.debounced
        assert second.ledger.total_points == 30

    def test_custom_points_table(self) -> None:
        table = dict(POINTS_TABLE, **{"log-mood": 40})
        result = award(new_ledger(), None, "log-mood", "", now=0.0, points_table=table)
        assert result.points_awarded == 40

    def test_level_matches_points_after_many_awards(self) -> None:
        ledger = new_ledger()
        for i in range(30):
            ledger = award(ledger, 17, "log-mood", "", now=float(i * 2)).ledger
            assert ledger.level == 1 + ledger.total_points // 100


def test_award_many_is_single_action() -> None:
    result = award_many(
        new_ledger(),
        [("log-mood", None, "a"), ("add-note", None, "b")],
        now=5.0,
    )
    assert result.points_awarded == 25
    assert len(result.ledger.history) == 2
    assert result.ledger.last_award_time == 5.0


def test_entry_reasons() -> None:
    assert entry_reasons(_entry()) == ["log-mood"]
    rich = _entry(note="long day", activities=frozenset({"work"}), tags=frozenset({"tired"}))
    assert entry_reasons(rich) == ["log-mood", "add-note", "add-activities", "add-tags"]


def test_award_entry_with_bonuses() -> None:
    entry = _entry(note="good walk", activities=frozenset({"outdoors"}))
    result = award_entry(new_ledger(), entry, now=0.0)
    assert result.points_awarded == 15 + 10 + 8
    assert all(e.timestamp == entry.timestamp for e in result.ledger.history)


def test_points_by_reason() -> None:
    ledger = new_ledger()
    ledger = award(ledger, None, "log-mood", "", now=0.0).ledger
    ledger = award(ledger, None, "log-mood", "", now=2.0).ledger
    ledger = award(ledger, None, "complete-goal", "", now=4.0).ledger
    assert points_by_reason(ledger) == {"complete-goal": 50, "log-mood": 30}
