"""Tests for note themes and activity correlations."""

from __future__ import annotations

from datetime import datetime, timedelta

from wellness_engine.models import InsufficientData, MoodCategory, MoodEntry, PatternReport
from wellness_engine.patterns import (
    THEME_INSIGHTS,
    Theme,
    analyze,
    correlate_activities,
    count_theme_matches,
    theme_insights,
)

START = datetime(2026, 2, 1, 9, 0)


def _entry(i: int, mood: MoodCategory = MoodCategory.OKAY, note: str = "", activities=()) -> MoodEntry:
    return MoodEntry(
        id=f"e{i}",
        timestamp=START + timedelta(hours=i),
        mood=mood,
        note=note,
        activities=frozenset(activities),
    )


def test_stress_keywords_count_per_note() -> None:
    matches = count_theme_matches(
        [
            "Feeling stressed about the deadline",
            "so much pressure today",
            "quiet evening",
        ]
    )
    assert matches[0].theme == "stress"
    assert matches[0].match_count == 3


def test_no_false_positive_substrings() -> None:
    # "will", "update" and "brunch" must not hit health, relationships or exercise
    matches = count_theme_matches(["I will update you after brunch"])
    assert matches == []


def test_ties_keep_table_order() -> None:
    matches = count_theme_matches(["work was fine", "could not sleep"])
    assert [m.theme for m in matches] == ["sleep", "work"]


def test_analyze_needs_three_noted_entries() -> None:
    entries = [_entry(0, note="tired"), _entry(1, note="work"), _entry(2)]
    result = analyze(entries)
    assert isinstance(result, InsufficientData)
    assert result.required == 3
    assert result.found == 2


def test_analyze_report() -> None:
    entries = [
        _entry(0, note="stressed about work"),
        _entry(1, note="deadline pressure"),
        _entry(2, note="grateful for friends"),
    ]
    report = analyze(entries)
    assert isinstance(report, PatternReport)
    assert report.noted_entries == 3
    assert report.themes[0].theme == Theme.STRESS


class TestCorrelateActivities:
    def test_positive_activity_found(self) -> None:
        entries = [
            _entry(0, MoodCategory.GREAT, activities=["exercise"]),
            _entry(1, MoodCategory.GOOD, activities=["exercise"]),
            _entry(2, MoodCategory.OKAY, activities=["exercise"]),
        ]
        (corr,) = correlate_activities(entries)
        assert corr.activity == "exercise"
        assert corr.occurrences == 3
        assert abs(corr.positive_ratio - 2 / 3) < 1e-9

    def test_below_threshold_excluded(self) -> None:
        entries = [
            _entry(0, MoodCategory.GOOD, activities=["work"]),
            _entry(1, MoodCategory.BAD, activities=["work"]),
            _entry(2, MoodCategory.OKAY, activities=["work"]),
        ]
        assert correlate_activities(entries) == []

    def test_too_few_occurrences_excluded(self) -> None:
        entries = [
            _entry(0, MoodCategory.GREAT, activities=["music"]),
            _entry(1, MoodCategory.GREAT, activities=["music"]),
        ]
        assert correlate_activities(entries) == []

    def test_sorted_by_ratio(self) -> None:
        entries = [_entry(i, MoodCategory.GREAT, activities=["reading", "work"]) for i in range(3)]
        entries.append(_entry(3, MoodCategory.BAD, activities=["work"]))
        assert [c.activity for c in correlate_activities(entries)] == ["reading", "work"]


def test_theme_insights() -> None:
    entries = [
        _entry(i, MoodCategory.GREAT, note="a long walk with a friend", activities=["outdoors"])
        for i in range(3)
    ]
    report = analyze(entries)
    insights = theme_insights(report)
    assert insights[0] == THEME_INSIGHTS[Theme.RELATIONSHIPS]
    assert insights[1] == THEME_INSIGHTS[Theme.EXERCISE]
    assert insights[2] == "Outdoors goes with a good mood 100% of the time."


def test_loneliness_keywords_at_end_of_note() -> None:
    matches = count_theme_matches(["I really miss you", "missing home tonight"])
    assert [(m.theme, m.match_count) for m in matches] == [("loneliness", 2)]
