"""Keyword themes in notes and activity/mood correlations.

A bag-of-keywords heuristic, not NLP: a theme scores one match for every
(keyword, note) pair where the note contains the keyword as a
case-insensitive substring. Keywords are stems, so "stress" also covers
"stressed" and "stressful".
"""

from __future__ import annotations

import logging
from collections import Counter
from enum import StrEnum
from typing import Iterable

from wellness_engine.models import (
    POSITIVE_MOODS,
    ActivityCorrelation,
    InsufficientData,
    MoodEntry,
    PatternReport,
    ThemeMatch,
)

logger = logging.getLogger(__name__)

MIN_NOTED_ENTRIES = 3
MIN_ACTIVITY_OCCURRENCES = 3
POSITIVE_RATIO_THRESHOLD = 0.6


class Theme(StrEnum):
    STRESS = "stress"
    ANXIETY = "anxiety"
    SLEEP = "sleep"
    WORK = "work"
    RELATIONSHIPS = "relationships"
    EXERCISE = "exercise"
    HEALTH = "health"
    GRATITUDE = "gratitude"
    LONELINESS = "loneliness"
    ACCOMPLISHMENT = "accomplishment"


# Declaration order breaks ties when ranking
THEME_KEYWORDS: dict[Theme, tuple[str, ...]] = {
    Theme.STRESS: ("stress", "pressure", "overwhelm", "deadline", "burnout", "frazzled"),
    Theme.ANXIETY: ("anxi", "worr", "nervous", "panic", "uneasy", "restless"),
    Theme.SLEEP: ("sleep", "tired", "exhausted", "insomnia", "fatigue", "restless night"),
    Theme.WORK: ("work", "job", "meeting", "boss", "office", "project", "colleague"),
    Theme.RELATIONSHIPS: ("friend", "family", "partner", "relationship", "argument", "dating"),
    Theme.EXERCISE: ("exercise", "gym", "running", "walk", "yoga", "training", "hike"),
    Theme.HEALTH: ("sick", "headache", "pain", "doctor", "illness", "medication"),
    Theme.GRATITUDE: ("grateful", "thankful", "appreciat", "blessed", "lucky"),
    Theme.LONELINESS: ("lonely", "alone", "isolated", "left out", "missing", "miss you"),
    Theme.ACCOMPLISHMENT: ("accomplish", "proud", "achiev", "finished", "progress"),
}

THEME_INSIGHTS: dict[Theme, str] = {
    Theme.STRESS: "Stress comes up often in your notes; short breaks and breathing exercises may help.",
    Theme.ANXIETY: "Worry and anxiety appear in your notes; grounding techniques can take the edge off.",
    Theme.SLEEP: "Sleep and tiredness are recurring themes; a steady bedtime routine may lift your mood.",
    Theme.WORK: "Work is on your mind a lot; remember to set boundaries and take breaks.",
    Theme.RELATIONSHIPS: "The people around you feature in your notes; connection clearly matters to you.",
    Theme.EXERCISE: "Movement shows up in your notes; keep it in your routine.",
    Theme.HEALTH: "Physical health is a recurring theme; be gentle with yourself while you recover.",
    Theme.GRATITUDE: "You often note things you are grateful for; that habit supports wellbeing.",
    Theme.LONELINESS: "Feeling alone appears in your notes; reaching out to someone you trust can help.",
    Theme.ACCOMPLISHMENT: "You are recording your wins; celebrate that progress.",
}


def count_theme_matches(notes: Iterable[str]) -> list[ThemeMatch]:
    """Rank themes by keyword matches across notes.

    Returns:
        ThemeMatch list sorted by match count descending, ties in table
        order. Themes without matches are omitted.
    """
    lowered = [n.lower() for n in notes if n and n.strip()]
    matches: list[ThemeMatch] = []
    for theme, keywords in THEME_KEYWORDS.items():
        count = sum(1 for kw in keywords for note in lowered if kw in note)
        if count:
            matches.append(ThemeMatch(theme=theme.value, match_count=count))
    # sorted() is stable, so equal counts keep declaration order
    return sorted(matches, key=lambda m: -m.match_count)


def correlate_activities(entries: Iterable[MoodEntry]) -> list[ActivityCorrelation]:
    """Activities whose entries are mostly Good/Great.

    Only activities seen in at least MIN_ACTIVITY_OCCURRENCES entries are
    considered; those with a positive ratio >= POSITIVE_RATIO_THRESHOLD are
    returned, highest ratio first.
    """
    totals: Counter[str] = Counter()
    positives: Counter[str] = Counter()
    for entry in entries:
        for activity in entry.activities:
            totals[activity] += 1
            if entry.mood in POSITIVE_MOODS:
                positives[activity] += 1

    correlations = []
    for activity, total in totals.items():
        if total < MIN_ACTIVITY_OCCURRENCES:
            continue
        ratio = positives[activity] / total
        if ratio >= POSITIVE_RATIO_THRESHOLD:
            correlations.append(
                ActivityCorrelation(activity=activity, positive_ratio=ratio, occurrences=total)
            )

    correlations.sort(key=lambda c: (-c.positive_ratio, -c.occurrences, c.activity))
    return correlations


def analyze(entries: Iterable[MoodEntry]) -> PatternReport | InsufficientData:
    """Extract note themes and activity correlations.

    Needs at least MIN_NOTED_ENTRIES entries with a non-empty note;
    otherwise returns InsufficientData.
    """
    entries = list(entries)
    noted = [e for e in entries if e.has_note]
    if len(noted) < MIN_NOTED_ENTRIES:
        logger.debug("Pattern analysis skipped: %d noted entries", len(noted))
        return InsufficientData(
            reason="Add notes to at least 3 mood entries to see patterns.",
            required=MIN_NOTED_ENTRIES,
            found=len(noted),
        )

    return PatternReport(
        themes=count_theme_matches(e.note for e in noted),
        activity_correlations=correlate_activities(entries),
        noted_entries=len(noted),
    )


def theme_insights(report: PatternReport, limit: int = 2) -> list[str]:
    """Templated insight lines for the top themes and best activity."""
    insights = [THEME_INSIGHTS[Theme(m.theme)] for m in report.themes[:limit]]
    if report.activity_correlations:
        best = report.activity_correlations[0]
        insights.append(
            f"{best.activity.capitalize()} goes with a good mood "
            f"{best.positive_ratio:.0%} of the time."
        )
    return insights
