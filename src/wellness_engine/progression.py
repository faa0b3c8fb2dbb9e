"""Points ledger and level banding.

Every operation takes a ledger and returns a new one; nothing is mutated.
The debounce clock is supplied by the caller (a monotonic reading), so the
same sequence of calls behaves identically in tests and in production.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from enum import StrEnum
from typing import Mapping

from wellness_engine.models import AwardResult, MoodEntry, PointsEvent, ProgressionLedger

logger = logging.getLogger(__name__)

DEFAULT_BAND_SIZE = 100
DEBOUNCE_SECONDS = 1.0
MINIMUM_AWARD = 1


class ReasonCode(StrEnum):
    LOG_MOOD = "log-mood"
    ADD_NOTE = "add-note"
    ADD_ACTIVITIES = "add-activities"
    ADD_TAGS = "add-tags"
    COMPLETE_HABIT = "complete-habit"
    COMPLETE_MILESTONE = "complete-milestone"
    COMPLETE_GOAL = "complete-goal"
    COMPLETE_CHALLENGE = "complete-challenge"
    CHAT_ENGAGEMENT = "chat-engagement"
    DAILY_STREAK = "daily-streak"
    WEEKLY_STREAK = "weekly-streak"
    MONTHLY_STREAK = "monthly-streak"
    WELLNESS_INSIGHT = "wellness-insight"
    SELF_CARE_ACTIVITY = "self-care-activity"


POINTS_TABLE: dict[str, int] = {
    ReasonCode.LOG_MOOD: 15,
    ReasonCode.ADD_NOTE: 10,
    ReasonCode.ADD_ACTIVITIES: 8,
    ReasonCode.ADD_TAGS: 5,
    ReasonCode.COMPLETE_HABIT: 20,
    ReasonCode.COMPLETE_MILESTONE: 25,
    ReasonCode.COMPLETE_GOAL: 50,
    ReasonCode.COMPLETE_CHALLENGE: 15,
    ReasonCode.CHAT_ENGAGEMENT: 5,
    ReasonCode.DAILY_STREAK: 15,
    ReasonCode.WEEKLY_STREAK: 40,
    ReasonCode.MONTHLY_STREAK: 100,
    ReasonCode.WELLNESS_INSIGHT: 12,
    ReasonCode.SELF_CARE_ACTIVITY: 18,
}

_DESCRIPTIONS = {
    ReasonCode.LOG_MOOD: "Logged a mood",
    ReasonCode.ADD_NOTE: "Added a reflection note",
    ReasonCode.ADD_ACTIVITIES: "Tracked activities",
    ReasonCode.ADD_TAGS: "Tagged emotions",
}


def new_ledger(band_size: int = DEFAULT_BAND_SIZE) -> ProgressionLedger:
    if band_size <= 0:
        raise ValueError(f"band_size must be positive, got {band_size}")
    return ProgressionLedger(band_size=band_size)


def level_of(points: int, band_size: int = DEFAULT_BAND_SIZE) -> int:
    """Level for a point total: 1 + floor(points / band_size)."""
    return 1 + max(points, 0) // band_size


def normalize_reason(reason: str) -> str:
    """Normalize "LOG_MOOD" / "log_mood" / "Log-Mood" to "log-mood"."""
    return reason.strip().lower().replace("_", "-")


def points_for(reason: str, points_table: Mapping[str, int] | None = None) -> int:
    """Look up the award for a reason code. Unknown codes get MINIMUM_AWARD."""
    table = POINTS_TABLE if points_table is None else points_table
    code = normalize_reason(reason)
    if code in table:
        return table[code]
    logger.warning("Unknown reason code %r, awarding %d point(s)", reason, MINIMUM_AWARD)
    return MINIMUM_AWARD


def _is_debounced(ledger: ProgressionLedger, now: float, debounce_seconds: float) -> bool:
    if ledger.last_award_time is None:
        return False
    return (now - ledger.last_award_time) < debounce_seconds


def award(
    ledger: ProgressionLedger,
    amount: int | None,
    reason: str,
    description: str,
    now: float,
    logged_at: datetime | None = None,
    points_table: Mapping[str, int] | None = None,
    debounce_seconds: float = DEBOUNCE_SECONDS,
) -> AwardResult:
    """Award points for a single logical user action.

    Args:
        ledger: Current ledger.
        amount: Points to award; None looks the reason code up in the table.
        reason: Reason code, e.g. "log-mood".
        description: Human-readable history text.
        now: Monotonic clock reading in seconds, used for the debounce.
        logged_at: Wall-clock time for the history row (default: now, UTC).
        points_table: Optional reason -> points table replacing POINTS_TABLE.
        debounce_seconds: Minimum gap between two awards.

    Returns:
        AwardResult. A debounced call returns the ledger unchanged with
        points_awarded == 0 and debounced == True.
    """
    return award_many(
        ledger,
        [(reason, amount, description)],
        now,
        logged_at=logged_at,
        points_table=points_table,
        debounce_seconds=debounce_seconds,
    )


def award_many(
    ledger: ProgressionLedger,
    items: list[tuple[str, int | None, str]],
    now: float,
    logged_at: datetime | None = None,
    points_table: Mapping[str, int] | None = None,
    debounce_seconds: float = DEBOUNCE_SECONDS,
) -> AwardResult:
    """Award several (reason, amount, description) items as one debounced action."""
    previous_level = ledger.level

    if _is_debounced(ledger, now, debounce_seconds):
        logger.debug(
            "Award debounced: %.3fs since last award",
            now - ledger.last_award_time,
        )
        return AwardResult(
            ledger=ledger,
            points_awarded=0,
            previous_level=previous_level,
            debounced=True,
        )

    stamp = logged_at or datetime.now(timezone.utc)
    events: list[PointsEvent] = []
    for reason, amount, description in items:
        if amount is None:
            amount = points_for(reason, points_table)
        # Points never go down
        amount = max(int(amount), 0)
        events.append(
            PointsEvent(
                timestamp=stamp,
                amount=amount,
                reason=normalize_reason(reason),
                description=description,
            )
        )

    gained = sum(e.amount for e in events)
    updated = replace(
        ledger,
        total_points=ledger.total_points + gained,
        history=ledger.history + tuple(events),
        last_award_time=now,
    )

    if updated.level > previous_level:
        logger.info("Level up: %d -> %d", previous_level, updated.level)

    return AwardResult(
        ledger=updated,
        points_awarded=gained,
        previous_level=previous_level,
    )


def entry_reasons(entry: MoodEntry) -> list[str]:
    """Reason codes earned by logging this entry."""
    reasons = [ReasonCode.LOG_MOOD.value]
    if entry.has_note:
        reasons.append(ReasonCode.ADD_NOTE.value)
    if entry.activities:
        reasons.append(ReasonCode.ADD_ACTIVITIES.value)
    if entry.tags:
        reasons.append(ReasonCode.ADD_TAGS.value)
    return reasons


def award_entry(
    ledger: ProgressionLedger,
    entry: MoodEntry,
    now: float,
    points_table: Mapping[str, int] | None = None,
    debounce_seconds: float = DEBOUNCE_SECONDS,
) -> AwardResult:
    """Award the base check-in points plus note/activity/tag bonuses for an entry."""
    items = [
        (reason, None, _DESCRIPTIONS.get(reason, reason))
        for reason in entry_reasons(entry)
    ]
    return award_many(
        ledger,
        items,
        now,
        logged_at=entry.timestamp,
        points_table=points_table,
        debounce_seconds=debounce_seconds,
    )


def points_by_reason(ledger: ProgressionLedger) -> dict[str, int]:
    """Total points earned per reason code, largest first."""
    totals: Counter[str] = Counter()
    for event in ledger.history:
        totals[event.reason] += event.amount
    return dict(totals.most_common())
