"""Immutable view over the journal with memoized derived values.

A Snapshot never changes; any mutation of the log or ledger produces a new
Snapshot, so cached values can never go stale.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from functools import cached_property

from wellness_engine.achievements import evaluate
from wellness_engine.days import local_date
from wellness_engine.forecast import forecast as predict
from wellness_engine.models import (
    Forecast,
    InsufficientData,
    MoodEntry,
    PatternReport,
    ProgressionLedger,
    StreakState,
    WeeklyReflection,
)
from wellness_engine.patterns import analyze
from wellness_engine.reflection import entries_in_window, summarize
from wellness_engine.streak import streak_state


@dataclass(frozen=True)
class Snapshot:
    entries: tuple[MoodEntry, ...]
    ledger: ProgressionLedger
    as_of: datetime
    tz: tzinfo | None = None
    # Badge ids already persisted; unlocks are permanent
    unlocked: frozenset[str] = frozenset()

    @cached_property
    def streak(self) -> StreakState:
        return streak_state(self.entries, self.as_of, self.tz)

    @cached_property
    def badges(self) -> frozenset[str]:
        return self.unlocked | evaluate(self.entries, self.ledger, tz=self.tz)

    @cached_property
    def local_day(self) -> date:
        return local_date(self.as_of, self.tz)

    @cached_property
    def patterns(self) -> PatternReport | InsufficientData:
        return analyze(self.entries)

    @cached_property
    def forecast(self) -> Forecast | InsufficientData:
        return predict(self.entries, self.as_of, self.tz)

    @cached_property
    def week(self) -> list[MoodEntry]:
        return entries_in_window(self.entries, self.as_of, tz=self.tz)

    @cached_property
    def reflection(self) -> WeeklyReflection | InsufficientData:
        return summarize(
            self.week, self.as_of, self.tz, current_streak=self.streak.current_streak
        )
