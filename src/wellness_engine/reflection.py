"""Weekly reflection: templated summary of the last seven days.

Pure composition of fixed templates over computed statistics. No text
generation happens here.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, tzinfo
from statistics import mean
from typing import Iterable

from wellness_engine.days import ONE_DAY, local_date
from wellness_engine.models import (
    POSITIVE_MOODS,
    InsufficientData,
    MoodCategory,
    MoodEntry,
    PatternReport,
    WeeklyReflection,
)
from wellness_engine.patterns import analyze, theme_insights
from wellness_engine.streak import compute_streak

logger = logging.getLogger(__name__)

WINDOW_DAYS = 7
MIN_ENTRIES = 3
TREND_THRESHOLD = 0.5
TOP_ACTIVITIES = 3

_BUCKETS = (
    (4.5, "excellent"),
    (3.5, "good"),
    (2.5, "okay"),
    (1.5, "challenging"),
)

_BUCKET_INSIGHTS = {
    "excellent": "You had an excellent week. Keep doing what works for you.",
    "good": "Your week was mostly good. Notice what made the best days work.",
    "okay": "It was a mixed week. Small routines can help steady things.",
    "challenging": "This week was challenging. Be kind to yourself and lean on support.",
    "difficult": "This week was difficult. Consider reaching out to someone you trust.",
}

_TREND_INSIGHTS = {
    "improving": "Your mood improved over the course of the week.",
    "declining": "Your mood dipped later in the week; plan something restorative.",
    "stable": "Your mood stayed fairly steady this week.",
}


def mood_bucket(average: float) -> str:
    for lower, bucket in _BUCKETS:
        if average >= lower:
            return bucket
    return "difficult"


def mood_trend(entries: list[MoodEntry]) -> str:
    """Compare the first and second half of the week, in logging order."""
    ordered = sorted(entries, key=lambda e: e.timestamp)
    half = len(ordered) // 2
    if half == 0:
        return "stable"
    first = mean(int(e.mood) for e in ordered[:half])
    second = mean(int(e.mood) for e in ordered[half:])
    diff = second - first
    if diff > TREND_THRESHOLD:
        return "improving"
    if diff < -TREND_THRESHOLD:
        return "declining"
    return "stable"


def entries_in_window(
    entries: Iterable[MoodEntry],
    as_of: datetime,
    days: int = WINDOW_DAYS,
    tz: tzinfo | None = None,
) -> list[MoodEntry]:
    """Entries whose local day falls within the trailing window ending at as_of."""
    end = local_date(as_of, tz)
    start = end - (days - 1) * ONE_DAY
    return [e for e in entries if start <= local_date(e.timestamp, tz) <= end]


def summarize(
    entries_in_window: Iterable[MoodEntry],
    as_of: datetime | None = None,
    tz: tzinfo | None = None,
    current_streak: int | None = None,
) -> WeeklyReflection | InsufficientData:
    """Build the weekly reflection.

    Args:
        entries_in_window: Entries already restricted to the trailing 7 days.
        as_of: Instant the streak is measured from (default: latest entry).
        tz: Local timezone used for day bucketing.
        current_streak: Streak over the full log. When omitted it is
            computed from the window entries alone, which caps it at 7.

    Returns:
        WeeklyReflection, or InsufficientData for fewer than 3 entries.
    """
    entries = list(entries_in_window)
    if len(entries) < MIN_ENTRIES:
        return InsufficientData(
            reason="Log at least 3 moods this week to get a reflection.",
            required=MIN_ENTRIES,
            found=len(entries),
        )

    average = mean(int(e.mood) for e in entries)
    bucket = mood_bucket(average)
    trend = mood_trend(entries)
    positive = sum(1 for e in entries if e.mood in POSITIVE_MOODS)
    positive_percentage = round(positive / len(entries) * 100)

    activity_counts: Counter[str] = Counter()
    for entry in sorted(entries, key=lambda e: e.timestamp):
        activity_counts.update(sorted(entry.activities))
    top_activities = activity_counts.most_common(TOP_ACTIVITIES)

    distribution = Counter(e.mood for e in entries)
    mood_distribution = {
        category.label: distribution[category]
        for category in sorted(MoodCategory, reverse=True)
        if distribution[category]
    }

    if current_streak is not None:
        streak = current_streak
    else:
        if as_of is None:
            as_of = max(e.timestamp for e in entries)
        streak = compute_streak(entries, as_of, tz)

    patterns = analyze(entries)
    report = patterns if isinstance(patterns, PatternReport) else None

    summary = (
        f"This week you logged {len(entries)} moods with an average of "
        f"{average:.1f}/5 ({bucket}). Your mood was {trend}, and "
        f"{positive_percentage}% of your check-ins were positive."
    )

    insights = [_BUCKET_INSIGHTS[bucket], _TREND_INSIGHTS[trend]]
    if top_activities:
        activity, count = top_activities[0]
        insights.append(f"Your most frequent activity was {activity} ({count}x).")
    if streak >= 2:
        insights.append(f"You are on a {streak}-day logging streak.")
    if report is not None:
        insights.extend(theme_insights(report))

    logger.debug("Weekly reflection: %d entries, avg %.2f, %s", len(entries), average, trend)
    return WeeklyReflection(
        entry_count=len(entries),
        average_mood=round(float(average), 2),
        mood_bucket=bucket,
        trend=trend,
        positive_percentage=positive_percentage,
        top_activities=top_activities,
        mood_distribution=mood_distribution,
        current_streak=streak,
        summary=summary,
        insights=insights,
        patterns=report,
    )
