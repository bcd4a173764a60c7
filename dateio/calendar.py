"""Proleptic Gregorian field arithmetic over epoch milliseconds.

All field conversions happen in the host's local offset. Setters never clamp:
out-of-range fields roll over into the neighbouring unit (month 12 is January of
the next year, day 0 is the last day of the previous month), like the native
date primitive does.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import NamedTuple

from .types import Number

# Largest representable instant, in either direction from the epoch.
MAX_EPOCH_MS = 8.64e15

INVALID = math.nan

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class LocalFields(NamedTuple):
    year: int
    month: int  # 0-based
    day: int
    hour: int
    minute: int
    second: int
    millisecond: int
    weekday: int  # 0 = Sunday


def is_valid(value: Number) -> bool:
    return not (isinstance(value, float) and math.isnan(value))


def _is_finite(n: Number) -> bool:
    # Arbitrarily large ints are finite but overflow math.isfinite.
    return isinstance(n, int) or math.isfinite(n)


def time_clip(value: Number) -> Number:
    """Truncate to whole milliseconds, or INVALID when out of range."""
    if isinstance(value, int):
        return value if abs(value) <= MAX_EPOCH_MS else INVALID
    if not math.isfinite(value) or abs(value) > MAX_EPOCH_MS:
        return INVALID
    return int(value)


def days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 for a 1-based month."""
    y = year - (1 if month <= 2 else 0)
    era = y // 400
    yoe = y - era * 400
    mp = (month + 9) % 12
    doy = (153 * mp + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Inverse of days_from_civil: (year, 1-based month, day)."""
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def local_offset_ms(epoch_ms: int) -> int:
    """Offset of the host time zone at the given instant, in milliseconds.

    Instants the platform cannot localize fall back to the current offset.
    """
    try:
        local = datetime.fromtimestamp(epoch_ms // MS_PER_SECOND, tz=timezone.utc).astimezone()
    except (OverflowError, OSError, ValueError):
        local = datetime.now(timezone.utc).astimezone()
    offset = local.utcoffset()
    return round(offset.total_seconds() * MS_PER_SECOND) if offset else 0


def to_fields(value: Number) -> LocalFields | None:
    """Split an epoch-ms value into local calendar fields (None when invalid)."""
    if not is_valid(value):
        return None
    local = int(value) + local_offset_ms(int(value))
    days, rem = divmod(local, MS_PER_DAY)
    year, month, day = civil_from_days(days)
    hour, rem = divmod(rem, MS_PER_HOUR)
    minute, rem = divmod(rem, MS_PER_MINUTE)
    second, ms = divmod(rem, MS_PER_SECOND)
    return LocalFields(year, month - 1, day, hour, minute, second, ms, (days + 4) % 7)


def local_to_utc(local_ms: int) -> int:
    # Offsets in force a day either side cover any single transition.
    before = local_offset_ms(local_ms - MS_PER_DAY)
    offsets = {before, local_offset_ms(local_ms), local_offset_ms(local_ms + MS_PER_DAY)}
    matches = [local_ms - off for off in offsets if local_offset_ms(local_ms - off) == off]
    if matches:
        # Repeated wall time resolves to the earlier instant.
        return min(matches)
    # Skipped wall time moves forward by the size of the gap.
    return local_ms - before


def from_fields(
    year: Number,
    month: Number,
    day: Number = 1,
    hour: Number = 0,
    minute: Number = 0,
    second: Number = 0,
    millisecond: Number = 0,
) -> Number:
    """Build an epoch-ms value from local fields (0-based month), rolling over out-of-range parts."""
    parts = (year, month, day, hour, minute, second, millisecond)
    if not all(_is_finite(p) for p in parts):
        return INVALID
    y, mo, d, h, mi, s, ms = (int(p) for p in parts)
    y += mo // 12
    mo %= 12
    days = days_from_civil(y, mo + 1, 1) + d - 1
    local = days * MS_PER_DAY + h * MS_PER_HOUR + mi * MS_PER_MINUTE + s * MS_PER_SECOND + ms
    if abs(local) > MAX_EPOCH_MS + MS_PER_DAY:
        return INVALID
    return time_clip(local_to_utc(local))


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Days in a 1-based month."""
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_DAYS[month - 1]
