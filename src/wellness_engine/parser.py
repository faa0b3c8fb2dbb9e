"""Validate raw mood submissions into MoodEntry records."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from .days import parse_timestamp
from .models import InvalidEntryError, MoodCategory, MoodEntry

MAX_TAGS = 5
MAX_TAG_LEN = 20
MAX_LABEL_LEN = 30
MAX_NOTE_LEN = 500
MIN_INTENSITY = 1
MAX_INTENSITY = 10


def _parse_intensity(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidEntryError(f"Intensity must be an integer, got {value!r}")
    try:
        intensity = int(value)
    except (TypeError, ValueError):
        raise InvalidEntryError(f"Intensity must be an integer, got {value!r}") from None
    if intensity != value and not isinstance(value, str):
        raise InvalidEntryError(f"Intensity must be an integer, got {value!r}")
    if not MIN_INTENSITY <= intensity <= MAX_INTENSITY:
        raise InvalidEntryError(
            f"Intensity must be between {MIN_INTENSITY} and {MAX_INTENSITY}, got {intensity}"
        )
    return intensity


def _parse_time(value: Any) -> datetime:
    if value is None or value == "":
        return datetime.now(timezone.utc)
    ts = value if isinstance(value, datetime) else parse_timestamp(str(value))
    if ts is None:
        raise InvalidEntryError(f"Invalid timestamp: {value!r}")
    # Naive input is local wall-clock time; stored timestamps are always aware
    if ts.tzinfo is None:
        ts = ts.astimezone()
    return ts


def _string_set(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise InvalidEntryError(f"{field_name} must be a list of strings")
    return [str(v).strip() for v in value if str(v).strip()]


def _parse_activities(value: Any, vocabulary: Iterable[str] | None) -> frozenset[str]:
    activities = [a.lower() for a in _string_set(value, "activities")]
    if vocabulary is not None:
        allowed = set(vocabulary)
        unknown = sorted(set(activities) - allowed)
        if unknown:
            raise InvalidEntryError(f"Unknown activities: {', '.join(unknown)}")
    return frozenset(activities)


def _parse_tags(value: Any) -> frozenset[str]:
    tags = frozenset(_string_set(value, "tags"))
    if len(tags) > MAX_TAGS:
        raise InvalidEntryError(f"At most {MAX_TAGS} tags allowed, got {len(tags)}")
    for tag in tags:
        if len(tag) > MAX_TAG_LEN:
            raise InvalidEntryError(f"Tag longer than {MAX_TAG_LEN} characters: {tag!r}")
    return tags


def parse_entry(
    record: dict,
    activities: Iterable[str] | None = None,
    labels: Iterable[str] | None = None,
) -> MoodEntry:
    """Build a validated MoodEntry from a raw record.

    Accepts "mood" (or "moodCategory"), "intensity", "note", "activities",
    "tags", "custom_label" (or "customMood"), "timestamp" (or "date") and
    "id". A missing id gets a fresh one; a missing timestamp means now.

    Args:
        record: Raw submission, e.g. decoded JSON or CLI arguments.
        activities: Allowed activity vocabulary. None accepts any activity.
        labels: Allowed custom mood labels. None or empty accepts any label.

    Raises:
        InvalidEntryError: For an unknown mood, out-of-range intensity, too
            many tags, over-long text or a value outside the configured
            activity or custom label vocabulary.
    """
    if not isinstance(record, dict):
        raise InvalidEntryError(f"Expected a mapping, got {type(record).__name__}")

    mood_value = record.get("mood", record.get("moodCategory"))
    if mood_value is None:
        raise InvalidEntryError("Missing mood category")
    mood = MoodCategory.parse(mood_value)

    label = str(record.get("custom_label", record.get("customMood")) or "").strip()
    if len(label) > MAX_LABEL_LEN:
        raise InvalidEntryError(f"Custom label longer than {MAX_LABEL_LEN} characters")
    if label and labels and label.lower() not in {m.lower() for m in labels}:
        raise InvalidEntryError(f"Unknown custom mood: {label!r}")

    note = str(record.get("note") or "").strip()
    if len(note) > MAX_NOTE_LEN:
        raise InvalidEntryError(f"Note longer than {MAX_NOTE_LEN} characters")

    return MoodEntry(
        id=str(record.get("id") or uuid.uuid4().hex),
        timestamp=_parse_time(record.get("timestamp", record.get("date"))),
        mood=mood,
        custom_label=label,
        intensity=_parse_intensity(record.get("intensity", 5)),
        note=note,
        activities=_parse_activities(record.get("activities"), activities),
        tags=_parse_tags(record.get("tags")),
    )
