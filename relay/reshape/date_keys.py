"""Calendar-day keys (YYYY-MM-DD) and display labels for dates and times."""

import re
from datetime import date, datetime, timedelta

KEY_FORMAT = "%Y-%m-%d"
WEEKDAYS = ["星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日"]

_CLOCK_RE = re.compile(r"T?(\d{2}:\d{2})")


def format_key(d: date) -> str:
    """Format a date (or datetime, in its own local time) as a calendar-day key."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_key(key: str) -> date | None:
    """Parse a calendar-day key. Returns None for anything malformed."""
    try:
        return datetime.strptime(key, KEY_FORMAT).date()
    except (ValueError, TypeError):
        return None


def shift_key(key: str, delta_days: int, today: date | None = None) -> str:
    """Shift a key by whole days.

    An unparsable key falls back to ``today`` (or the local date) before
    shifting; the result is only ever used as a lookup key.
    """
    base = parse_key(key)
    if base is None:
        base = today if today is not None else date.today()
    return format_key(base + timedelta(days=delta_days))


def weekday_label(date_string: str) -> str:
    """Render e.g. ``30日星期六``. Unparsable input is passed through."""
    if not date_string:
        return ""
    d = parse_key(str(date_string)[:10])
    if d is None:
        return date_string
    return f"{d.day}日{WEEKDAYS[d.weekday()]}"


def extract_clock_time(timestamp: str) -> str:
    """Extract ``HH:MM`` from ``2025-08-30T15:51+08:00`` or ``2025-08-30 15:51``."""
    if not timestamp:
        return ""
    match = _CLOCK_RE.search(str(timestamp))
    return match.group(1) if match else timestamp
