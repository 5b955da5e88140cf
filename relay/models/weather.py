"""Upstream weather snapshot model."""

from dataclasses import asdict, dataclass, field
from typing import Any

from relay.models.common import DailyRecord


@dataclass(frozen=True)
class UpstreamSnapshot:
    """One fetched bundle of current conditions plus the daily forecast."""

    city: str = ""
    update_time: str = ""
    now: dict[str, Any] = field(default_factory=dict)
    today: DailyRecord | None = None
    daily: list[DailyRecord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> "UpstreamSnapshot":
        """Build a snapshot from loosely-shaped JSON.

        Accepts both ``update_time`` and ``updateTime``. Anything of the wrong
        type is replaced by its empty default.
        """
        if not isinstance(raw, dict):
            return cls()
        now = raw.get("now")
        today = raw.get("today")
        daily = raw.get("daily")
        update_time = raw.get("update_time") or raw.get("updateTime") or ""
        return cls(
            city=str(raw.get("city") or ""),
            update_time=str(update_time),
            now=now if isinstance(now, dict) else {},
            today=today if isinstance(today, dict) else None,
            daily=list(daily) if isinstance(daily, list) else [],
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
