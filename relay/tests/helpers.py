"""Builders shared by tests."""

import json
from datetime import datetime
from pathlib import Path

FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str):
    with open(FIXTURE_DIR / name, encoding="utf-8") as f:
        return json.load(f)


def fixed_clock(year: int = 2025, month: int = 8, day: int = 30):
    """Return a clock callable pinned to noon on the given local date."""
    moment = datetime(year, month, day, 12, 0)
    return lambda: moment


def daily(date: str, high: str = "26", low: str = "18", **extra) -> dict:
    """Minimal QWeather-style daily record."""
    record = {
        "fxDate": date,
        "tempMax": high,
        "tempMin": low,
        "textDay": "多云",
        "textNight": "阴",
        "windDirDay": "西南风",
        "windScaleDay": "1-3",
        "windDirNight": "东南风",
        "windScaleNight": "1-3",
        "sunrise": "05:00",
        "sunset": "18:21",
    }
    record.update(extra)
    return record
