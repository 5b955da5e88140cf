"""Common types and clock helpers shared across modules."""

import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeAlias

Clock: TypeAlias = Callable[[], datetime]
DailyRecord: TypeAlias = dict[str, Any]


def local_now() -> datetime:
    """Naive local wall-clock time; calendar-day keys are local dates."""
    return datetime.now()


def unix_now() -> float:
    return time.time()


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()
