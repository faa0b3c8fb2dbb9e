"""Heuristic next-day mood forecast.

Not a statistical model. The confidence is a fixed constant that says which
branch produced the prediction, not an error bound. The weekday/weekend
thresholds are tunable and have not been validated.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from statistics import mean
from typing import Iterable

from wellness_engine.days import ONE_DAY, group_by_day, is_weekend, local_date
from wellness_engine.models import Forecast, InsufficientData, MoodCategory, MoodEntry

logger = logging.getLogger(__name__)

WINDOW_DAYS = 14
RECENT_DAYS = 3
MIN_ENTRIES = 5
MIN_DAYS_WITH_DATA = 5
MIN_RECENT_DAYS = 2

WEEKLY_PATTERN_DIFF = 0.7
MIN_WEEKDAY_DAYS = 3
MIN_WEEKEND_DAYS = 2

PATTERN_CONFIDENCE = 0.7
RECENT_CONFIDENCE = 0.5

# (lower bound, category), checked top-down
_BREAKPOINTS = (
    (4.5, MoodCategory.GREAT),
    (3.5, MoodCategory.GOOD),
    (2.5, MoodCategory.OKAY),
    (1.5, MoodCategory.BAD),
)


def category_for_value(value: float) -> MoodCategory:
    """Map a continuous mood value back onto the nearest category."""
    for lower, category in _BREAKPOINTS:
        if value >= lower:
            return category
    return MoodCategory.TERRIBLE


def daily_averages(
    entries: Iterable[MoodEntry],
    today: date,
    tz: tzinfo | None = None,
    window_days: int = WINDOW_DAYS,
) -> dict[date, float]:
    """Average mood value per day for the trailing window ending today."""
    start = today - (window_days - 1) * ONE_DAY
    return {
        day: mean(int(e.mood) for e in day_entries)
        for day, day_entries in group_by_day(entries, tz).items()
        if start <= day <= today
    }


def forecast(
    entries: Iterable[MoodEntry],
    now: datetime,
    tz: tzinfo | None = None,
) -> Forecast | InsufficientData:
    """Predict tomorrow's mood category.

    Args:
        entries: Mood entries in any order.
        now: Current instant; its local day is "today".
        tz: Local timezone used for day bucketing.

    Returns:
        Forecast, or InsufficientData with fewer than 5 entries, fewer than
        5 days with data in the trailing 14 days, or fewer than 2 days with
        data in the last 3.
    """
    entries = list(entries)
    if len(entries) < MIN_ENTRIES:
        return InsufficientData(
            reason="Log at least 5 moods to see a forecast.",
            required=MIN_ENTRIES,
            found=len(entries),
        )

    today = local_date(now, tz)
    per_day = daily_averages(entries, today, tz)
    if len(per_day) < MIN_DAYS_WITH_DATA:
        return InsufficientData(
            reason="Log moods on at least 5 of the last 14 days to see a forecast.",
            required=MIN_DAYS_WITH_DATA,
            found=len(per_day),
        )

    recent_start = today - (RECENT_DAYS - 1) * ONE_DAY
    recent = [value for day, value in per_day.items() if day >= recent_start]
    if len(recent) < MIN_RECENT_DAYS:
        return InsufficientData(
            reason="Log moods on at least 2 of the last 3 days to see a forecast.",
            required=MIN_RECENT_DAYS,
            found=len(recent),
        )
    recent_average = mean(recent)

    weekday = [value for day, value in per_day.items() if not is_weekend(day)]
    weekend = [value for day, value in per_day.items() if is_weekend(day)]
    weekday_avg = mean(weekday) if weekday else 0.0
    weekend_avg = mean(weekend) if weekend else 0.0

    weekly_pattern = (
        len(weekday) >= MIN_WEEKDAY_DAYS
        and len(weekend) >= MIN_WEEKEND_DAYS
        and abs(weekday_avg - weekend_avg) > WEEKLY_PATTERN_DIFF
    )

    if weekly_pattern:
        tomorrow = today + ONE_DAY
        value = weekend_avg if is_weekend(tomorrow) else weekday_avg
        confidence = PATTERN_CONFIDENCE
    else:
        value = recent_average
        confidence = RECENT_CONFIDENCE

    logger.debug(
        "Forecast from %d day(s): value=%.2f weekly_pattern=%s",
        len(per_day),
        value,
        weekly_pattern,
    )
    return Forecast(
        predicted=category_for_value(value),
        confidence=confidence,
        predicted_value=float(value),
        weekly_pattern=weekly_pattern,
        days_with_data=len(per_day),
    )
