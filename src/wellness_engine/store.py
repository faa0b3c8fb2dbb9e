"""JSON-file journal: the mood log, the points ledger and unlocked badges."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from .models import InvalidEntryError, MoodEntry, PointsEvent, ProgressionLedger
from .parser import parse_entry
from .progression import new_ledger

logger = logging.getLogger(__name__)


def entry_to_record(entry: MoodEntry) -> dict:
    return {
        "id": entry.id,
        "timestamp": entry.timestamp.isoformat(),
        "mood": entry.mood.name,
        "custom_label": entry.custom_label,
        "intensity": entry.intensity,
        "note": entry.note,
        "activities": sorted(entry.activities),
        "tags": sorted(entry.tags),
    }


def ledger_to_record(ledger: ProgressionLedger) -> dict:
    # last_award_time is a monotonic reading and means nothing across processes
    return {
        "total_points": ledger.total_points,
        "band_size": ledger.band_size,
        "history": [
            {
                "timestamp": e.timestamp.isoformat(),
                "amount": e.amount,
                "reason": e.reason,
                "description": e.description,
            }
            for e in ledger.history
        ],
    }


def ledger_from_record(data: dict, band_size: int) -> ProgressionLedger:
    history = tuple(
        PointsEvent(
            timestamp=datetime.fromisoformat(row["timestamp"]),
            amount=int(row["amount"]),
            reason=str(row["reason"]),
            description=str(row.get("description", "")),
        )
        for row in data.get("history", [])
    )
    return ProgressionLedger(
        total_points=int(data.get("total_points", 0)),
        history=history,
        band_size=band_size,
    )


class JournalStore:
    """Single-writer JSON store.

    The whole document is read on every access and rewritten atomically on
    every change; journals are small.
    """

    def __init__(self, path: Path, band_size: int = 100):
        self.path = path
        self.band_size = band_size
        # Debounce clock for this process only
        self._last_award_time: float | None = None

    def _load(self) -> dict:
        if self.path.exists():
            try:
                with open(self.path, encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
                logger.warning("Unexpected journal format in %s, starting fresh", self.path)
            except (json.JSONDecodeError, OSError):
                logger.warning("Corrupt journal file %s, starting fresh", self.path)
        return {}

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".journal-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def entries(self) -> list[MoodEntry]:
        """All entries in chronological order. Invalid records are skipped."""
        entries = []
        for record in self._load().get("entries", []):
            if not isinstance(record, dict):
                logger.warning("Skipping malformed stored entry: %r", record)
                continue
            try:
                entries.append(parse_entry(record))
            except InvalidEntryError as e:
                logger.warning("Skipping invalid stored entry %s: %s", record.get("id"), e)
        entries.sort(key=lambda e: e.timestamp)
        return entries

    def append(self, entry: MoodEntry) -> None:
        data = self._load()
        records = data.setdefault("entries", [])
        if any(isinstance(r, dict) and r.get("id") == entry.id for r in records):
            raise ValueError(f"Duplicate entry id: {entry.id}")
        records.append(entry_to_record(entry))
        self._save(data)
        logger.debug("Appended entry %s", entry.id)

    def delete(self, entry_id: str) -> bool:
        data = self._load()
        records = data.get("entries", [])
        kept = [r for r in records if not (isinstance(r, dict) and r.get("id") == entry_id)]
        if len(kept) == len(records):
            return False
        data["entries"] = kept
        self._save(data)
        logger.info("Deleted entry %s", entry_id)
        return True

    def ledger(self) -> ProgressionLedger:
        data = self._load().get("ledger")
        ledger = new_ledger(self.band_size)
        if data:
            try:
                ledger = ledger_from_record(data, self.band_size)
            except (AttributeError, KeyError, TypeError, ValueError):
                logger.warning("Corrupt ledger in %s, starting fresh", self.path)
        return replace(ledger, last_award_time=self._last_award_time)

    def save_ledger(self, ledger: ProgressionLedger) -> None:
        self._last_award_time = ledger.last_award_time
        data = self._load()
        data["ledger"] = ledger_to_record(ledger)
        self._save(data)

    def unlocked(self) -> frozenset[str]:
        return frozenset(self._load().get("unlocked", []))

    def save_unlocked(self, badge_ids: frozenset[str]) -> None:
        data = self._load()
        data["unlocked"] = sorted(badge_ids)
        self._save(data)
