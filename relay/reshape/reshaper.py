"""Reshape upstream weather into the display client's schema.

Besides mapping fields, the reshaper keeps a two-day rolling cache of daily
records so it can report yesterday's weather, which the upstream forecast
endpoint does not return. Each call to ``reshape`` is one cycle:

1. pick today's record from the snapshot
2. resolve which cached record counts as yesterday
3. upsert today, compact the cache to two days, save
4. render the output document
"""

import logging
import threading
from datetime import date
from typing import Any

from relay.models.common import Clock, DailyRecord, local_now
from relay.models.weather import UpstreamSnapshot
from relay.reshape import fields as f
from relay.reshape.date_keys import extract_clock_time, format_key, shift_key, weekday_label
from relay.storage.daily_cache import DEFAULT_KEEP, CacheState, DailyCacheStore

logger = logging.getLogger(__name__)


class WeatherReshaper:
    def __init__(
        self,
        store: DailyCacheStore,
        clock: Clock = local_now,
        keep: int = DEFAULT_KEEP,
    ):
        self.store = store
        self.clock = clock
        self.keep = keep
        self._lock = threading.Lock()

    def reshape(self, snapshot: UpstreamSnapshot) -> dict[str, Any]:
        """Run one cycle. Only ``PersistenceError`` from the store can escape."""
        today_daily = pick_today_daily(snapshot)
        today_key = f.pick_field(today_daily, f.DATE) or format_key(self.clock())
        today_key = str(today_key)

        with self._lock:
            cache = self.store.load()
            yesterday_daily = resolve_yesterday(cache, today_key, self.clock().date())

            if today_daily is not None:
                cache[today_key] = today_daily
            cache = self.store.compact(cache, self.keep)
            self.store.save(cache)

        logger.info(
            "Reshaped snapshot for %s: yesterday=%s, cache=%s",
            today_key,
            f.pick_field(yesterday_daily, f.DATE) or "none",
            sorted(cache),
        )
        return render_document(snapshot, today_daily, yesterday_daily)


def pick_today_daily(snapshot: UpstreamSnapshot) -> DailyRecord | None:
    """Prefer ``snapshot.today`` when it looks like a daily record, else ``daily[0]``."""
    today = snapshot.today
    if isinstance(today, dict) and f.has_any_field(today, f.DATE, f.TEMP_MAX):
        return dict(today)
    daily = snapshot.daily if isinstance(snapshot.daily, list) else []
    if daily and isinstance(daily[0], dict):
        return dict(daily[0])
    return None


def resolve_yesterday(
    cache: CacheState, today_key: str, today: date | None = None
) -> DailyRecord | None:
    """Pick the cached record to report as yesterday.

    In order: the entry exactly one day before ``today_key``; if today is
    already cached (a re-run on the same day), the entry just before it;
    otherwise the latest entry older than ``today_key``.
    """
    yesterday_key = shift_key(today_key, -1, today)
    if yesterday_key in cache:
        return cache[yesterday_key]

    keys = sorted(cache)
    if today_key in cache:
        idx = keys.index(today_key)
        return cache[keys[idx - 1]] if idx > 0 else None

    older = [k for k in keys if k < today_key]
    if older:
        return cache[older[-1]]
    return None


def yesterday_block(daily: DailyRecord | None) -> dict[str, Any]:
    """Shape a daily record as the ``yesterday`` block; all-empty when missing."""
    return {
        "date_1": f.pick_field(daily, f.DATE),
        "high_1": f.pick_field(daily, f.TEMP_MAX),
        "low_1": f.pick_field(daily, f.TEMP_MIN),
        "day_1": {
            "type_1": f.pick_field(daily, f.TEXT_DAY),
            "fx_1": f.pick_field(daily, f.WIND_DIR_DAY),
            "fl_1": f.pick_field(daily, f.WIND_SCALE_DAY),
        },
        "night_1": {
            "type_1": f.pick_field(daily, f.TEXT_NIGHT),
            "fx_1": f.pick_field(daily, f.WIND_DIR_NIGHT),
            "fl_1": f.pick_field(daily, f.WIND_SCALE_NIGHT),
        },
    }


def forecast_entry(daily: Any) -> dict[str, Any]:
    return {
        "date": weekday_label(f.pick_field(daily, f.DATE)),
        "high": f.temp_label(f.pick_field(daily, f.TEMP_MAX), high=True),
        "low": f.temp_label(f.pick_field(daily, f.TEMP_MIN), high=False),
        "day": {
            "type": f.pick_field(daily, f.TEXT_DAY),
            "fengxiang": f.pick_field(daily, f.WIND_DIR_DAY),
            "fengli": f.pick_field(daily, f.WIND_SCALE_DAY),
        },
        "night": {
            "type": f.pick_field(daily, f.TEXT_NIGHT),
            "fengxiang": f.pick_field(daily, f.WIND_DIR_NIGHT),
            "fengli": f.pick_field(daily, f.WIND_SCALE_NIGHT),
        },
    }


def render_document(
    snapshot: UpstreamSnapshot,
    today_daily: DailyRecord | None,
    yesterday_daily: DailyRecord | None,
) -> dict[str, Any]:
    now = snapshot.now if isinstance(snapshot.now, dict) else {}
    daily = snapshot.daily if isinstance(snapshot.daily, list) else []
    first = daily[0] if daily else None

    return {
        "ok": True,
        "data": {
            "city": snapshot.city or "",
            "updatetime": extract_clock_time(
                snapshot.update_time or f.pick_field(now, ("obsTime",))
            ),
            "wendu": f.pick_field(now, ("temp",)),
            "fengli": f.pick_field(now, ("windScale", "windSpeed")),
            "shidu": f.pick_field(now, ("humidity",)),
            "fengxiang": f.pick_field(now, ("windDir",)),
            "sunrise_1": f.pick_field(today_daily, f.SUNRISE) or f.pick_field(first, f.SUNRISE),
            "sunset_1": f.pick_field(today_daily, f.SUNSET) or f.pick_field(first, f.SUNSET),
            "sunrise_2": {},
            "sunset_2": {},
            "yesterday": yesterday_block(yesterday_daily),
            "forecast": {"weather": [forecast_entry(d) for d in daily]},
            "zhishus": {"zhishu": []},
        },
    }
