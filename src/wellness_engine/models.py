"""Data models for the wellness engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Callable


class InvalidEntryError(ValueError):
    """Raised when raw input cannot become a valid MoodEntry."""


class MoodCategory(IntEnum):
    """Ordinal mood scale. The value is the mood score used in averages."""

    TERRIBLE = 1
    BAD = 2
    OKAY = 3
    GOOD = 4
    GREAT = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: object) -> MoodCategory:
        """Resolve an enum member, ordinal or name. Never falls back to a default."""
        if isinstance(value, MoodCategory):
            return value
        if isinstance(value, bool):
            raise InvalidEntryError(f"Unknown mood category: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidEntryError(f"Unknown mood category: {value!r}") from None
        if isinstance(value, str):
            key = value.strip().upper()
            if key.isdigit():
                return cls.parse(int(key))
            if key in cls.__members__:
                return cls[key]
        raise InvalidEntryError(f"Unknown mood category: {value!r}")


POSITIVE_MOODS = frozenset({MoodCategory.GOOD, MoodCategory.GREAT})


@dataclass(frozen=True)
class MoodEntry:
    """A single logged emotional state. Immutable once created."""

    id: str
    timestamp: datetime
    mood: MoodCategory
    custom_label: str = ""
    intensity: int = 5  # 1-10
    note: str = ""
    activities: frozenset[str] = field(default_factory=frozenset)
    tags: frozenset[str] = field(default_factory=frozenset)  # max 5

    @property
    def has_note(self) -> bool:
        return bool(self.note and self.note.strip())


@dataclass(frozen=True)
class PointsEvent:
    """One row of the points history."""

    timestamp: datetime
    amount: int
    reason: str
    description: str = ""


@dataclass(frozen=True)
class ProgressionLedger:
    """Cumulative gamification state.

    Level and band boundaries are derived from total_points on access, so
    they cannot disagree with the point total.
    """

    total_points: int = 0
    history: tuple[PointsEvent, ...] = ()
    last_award_time: float | None = None  # monotonic seconds
    band_size: int = 100

    @property
    def level(self) -> int:
        return 1 + self.total_points // self.band_size

    @property
    def current_level_floor(self) -> int:
        return (self.level - 1) * self.band_size

    @property
    def next_level_threshold(self) -> int:
        return self.level * self.band_size

    @property
    def points_to_next_level(self) -> int:
        return self.next_level_threshold - self.total_points

    @property
    def level_progress(self) -> float:
        """Fraction of the current band already earned (0.0-1.0)."""
        return (self.total_points - self.current_level_floor) / self.band_size


@dataclass(frozen=True)
class AwardResult:
    """Outcome of a single award call."""

    ledger: ProgressionLedger
    points_awarded: int
    previous_level: int
    debounced: bool = False

    @property
    def leveled_up(self) -> bool:
        return self.ledger.level > self.previous_level


@dataclass(frozen=True)
class StreakState:
    current_streak: int = 0
    longest_streak: int = 0


@dataclass(frozen=True)
class LogStats:
    """Aggregate counts that badge predicates are evaluated against."""

    entry_count: int = 0
    longest_streak: int = 0
    distinct_moods: int = 0
    noted_entries: int = 0
    total_points: int = 0
    level: int = 1


@dataclass(frozen=True)
class Badge:
    """A permanently unlockable achievement."""

    id: str
    name: str
    description: str
    category: str
    predicate: Callable[[LogStats], bool] = field(compare=False, repr=False)


@dataclass(frozen=True)
class ThemeMatch:
    theme: str
    match_count: int


@dataclass(frozen=True)
class ActivityCorrelation:
    activity: str
    positive_ratio: float
    occurrences: int


@dataclass
class PatternReport:
    """Themes found in notes plus activities correlated with good moods."""

    themes: list[ThemeMatch] = field(default_factory=list)
    activity_correlations: list[ActivityCorrelation] = field(default_factory=list)
    noted_entries: int = 0


@dataclass(frozen=True)
class Forecast:
    predicted: MoodCategory
    confidence: float  # 0.5 or 0.7
    predicted_value: float
    weekly_pattern: bool = False
    days_with_data: int = 0


@dataclass
class WeeklyReflection:
    """Templated weekly summary."""

    entry_count: int
    average_mood: float
    mood_bucket: str  # excellent/good/okay/challenging/difficult
    trend: str  # improving/declining/stable
    positive_percentage: int
    top_activities: list[tuple[str, int]] = field(default_factory=list)
    mood_distribution: dict[str, int] = field(default_factory=dict)
    current_streak: int = 0
    summary: str = ""
    insights: list[str] = field(default_factory=list)
    patterns: PatternReport | None = None


@dataclass(frozen=True)
class InsufficientData:
    """Explicit "not enough history yet" result. Falsy so callers can branch on it."""

    reason: str
    required: int = 0
    found: int = 0

    def __bool__(self) -> bool:
        return False
