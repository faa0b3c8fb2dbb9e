"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from wellness_engine.config import DEFAULT_ACTIVITIES, Config


def test_defaults(tmp_path: Path) -> None:
    config = Config.load(config_path=tmp_path / "missing.toml")
    assert config.band_size == 100
    assert config.debounce_seconds == 1.0
    assert config.activities == DEFAULT_ACTIVITIES
    assert config.tzinfo is None
    assert config.points_table["log-mood"] == 15


def test_load_from_toml(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        'store_file = "~/moods.json"\n'
        'timezone = "Europe/Berlin"\n'
        "band_size = 250\n"
        'activities = ["Yoga", "work"]\n'
        'custom_moods = ["Drained"]\n'
        "\n"
        "[points]\n"
        "LOG_MOOD = 20\n"
        "made-tea = 2\n"
    )
    config = Config.load(config_path=path)
    assert config.store_file == Path("~/moods.json").expanduser()
    assert config.tzinfo == ZoneInfo("Europe/Berlin")
    assert config.band_size == 250
    assert config.activities == ("yoga", "work")
    assert config.custom_moods == ("Drained",)
    assert config.points_table["log-mood"] == 20
    assert config.points_table["made-tea"] == 2
    assert config.points_table["add-note"] == 10


def test_overrides_win(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('store_file = "/tmp/a.json"\n')
    config = Config.load({"store_file": str(tmp_path / "b.json"), "verbose": True}, config_path=path)
    assert config.store_file == tmp_path / "b.json"
    assert config.verbose


def test_rejects_non_positive_band(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        Config.load({"band_size": 0}, config_path=tmp_path / "missing.toml")


def test_unknown_timezone_falls_back(caplog) -> None:
    config = Config(timezone="Mars/Olympus_Mons")
    assert config.tzinfo is None
    assert "Unknown timezone" in caplog.text
