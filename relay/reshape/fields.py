"""Field aliases for upstream daily records.

Upstream daily entries name the same field differently depending on where
they came from (QWeather camelCase, snake_case from older snapshots). Each
logical field lists its aliases in lookup order.
"""

from typing import Any

DATE = ("fxDate", "date")
TEMP_MAX = ("tempMax", "temp_max")
TEMP_MIN = ("tempMin", "temp_min")
TEXT_DAY = ("textDay", "text_day")
TEXT_NIGHT = ("textNight", "text_night")
WIND_DIR_DAY = ("windDirDay", "wind_dir_day")
WIND_SCALE_DAY = ("windScaleDay", "wind_scale_day")
WIND_DIR_NIGHT = ("windDirNight", "wind_dir_night")
WIND_SCALE_NIGHT = ("windScaleNight", "wind_scale_night")
SUNRISE = ("sunrise",)
SUNSET = ("sunset",)

HIGH_PREFIX = "高温 "
LOW_PREFIX = "低温 "
DEGREE_SUFFIX = "℃"


def _present(value: Any) -> bool:
    return value is not None and value != ""


def pick_field(record: Any, aliases: tuple[str, ...], default: Any = "") -> Any:
    """Return the first present value among ``aliases`` in ``record``.

    Non-dict records have no fields.
    """
    if not isinstance(record, dict):
        return default
    for name in aliases:
        value = record.get(name)
        if _present(value):
            return value
    return default


def has_any_field(record: Any, *alias_groups: tuple[str, ...]) -> bool:
    return any(_present(pick_field(record, aliases, None)) for aliases in alias_groups)


def temp_label(value: Any, high: bool) -> str:
    """``高温 26℃`` / ``低温 18℃``; empty when there is no value."""
    if not _present(value):
        return ""
    prefix = HIGH_PREFIX if high else LOW_PREFIX
    return f"{prefix}{value}{DEGREE_SUFFIX}"
