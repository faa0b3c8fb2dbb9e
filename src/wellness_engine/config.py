"""Configuration management for wellness-engine."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .progression import DEBOUNCE_SECONDS, DEFAULT_BAND_SIZE, POINTS_TABLE, normalize_reason

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "wellness-engine"

DEFAULT_ACTIVITIES = (
    "exercise",
    "work",
    "social",
    "family",
    "reading",
    "meditation",
    "rest",
    "outdoors",
    "hobby",
    "music",
    "cooking",
    "travel",
    "gaming",
    "shopping",
    "cleaning",
)


@dataclass
class Config:
    store_file: Path = field(default_factory=lambda: _DEFAULT_CONFIG_DIR / "journal.json")
    timezone: str = ""  # IANA name; empty = system local zone
    band_size: int = DEFAULT_BAND_SIZE
    debounce_seconds: float = DEBOUNCE_SECONDS
    activities: tuple[str, ...] = DEFAULT_ACTIVITIES
    custom_moods: tuple[str, ...] = ()
    points: dict[str, int] = field(default_factory=dict)  # overrides over POINTS_TABLE
    verbose: bool = False

    @property
    def tzinfo(self) -> tzinfo | None:
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except ZoneInfoNotFoundError:
            logger.warning("Unknown timezone %r, using system local time", self.timezone)
            return None

    @property
    def points_table(self) -> dict[str, int]:
        table = dict(POINTS_TABLE)
        table.update(self.points)
        return table

    @classmethod
    def load(cls, overrides: dict | None = None, config_path: Path | None = None) -> Config:
        """Load config from TOML file, then apply CLI overrides."""
        config = cls()

        # Try loading from config file
        config_path = config_path or _DEFAULT_CONFIG_DIR / "config.toml"
        if config_path.exists():
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            config = cls._apply_dict(config, data)

        # Apply CLI overrides
        if overrides:
            config = cls._apply_dict(config, overrides)

        return config

    @classmethod
    def _apply_dict(cls, config: Config, data: dict) -> Config:
        if "store_file" in data:
            config.store_file = Path(data["store_file"]).expanduser()
        if "timezone" in data:
            config.timezone = str(data["timezone"])
        if "band_size" in data:
            band_size = int(data["band_size"])
            if band_size <= 0:
                raise ValueError(f"band_size must be positive, got {band_size}")
            config.band_size = band_size
        if "debounce_seconds" in data:
            config.debounce_seconds = float(data["debounce_seconds"])
        if "activities" in data:
            config.activities = tuple(str(a).strip().lower() for a in data["activities"])
        if "custom_moods" in data:
            config.custom_moods = tuple(str(m).strip() for m in data["custom_moods"])
        if "verbose" in data:
            config.verbose = bool(data["verbose"])

        # Point overrides live in their own table: [points] log-mood = 20
        if "points" in data:
            for reason, amount in data["points"].items():
                config.points[normalize_reason(reason)] = int(amount)

        return config
