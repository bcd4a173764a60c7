from __future__ import annotations

import math
import re
import time
from datetime import date, datetime, timedelta, timezone
from typing import Any

from . import calendar
from .types import UNIT_STEP_MS, Amount, FormatSegment, Number, Unit

# Placeholders recognised in format templates. MS/ms win over the single letters.
FORMAT_TOKEN_RE = re.compile(r"MS|ms|[YMDWHISAUymdwhisau]")

# add()/subtract() operands: "7d", "-1m", "10y", "5.5h", "+3", ".5".
ADD_AMOUNT_RE = re.compile(r"^([+-]?(?:\d*\.)?\d+)(ms|[ymdwhis])?$")

# Local date strings, after "-" separators have been turned into "/".
LOCAL_DATE_RE = re.compile(
    r"^(?P<year>\d{1,6})(?:/(?P<month>\d{1,2})(?:/(?P<day>\d{1,2}))?)?"
    r"(?:[T\s]+(?P<hour>\d{1,2}):(?P<minute>\d{1,2})(?::(?P<second>\d{1,2}))?"
    r"(?:(?P<sep>[:.])(?P<ms>\d{1,3}))?)?$",
    re.IGNORECASE,
)

# UTC strings: ISO 8601 with a trailing Z.
UTC_DATE_RE = re.compile(
    r"^(?P<year>[+-]\d{6}|\d{4})-(?P<month>\d{2})(?:-(?P<day>\d{2}))?"
    r"(?:[T ](?P<hour>\d{2}):(?P<minute>\d{2})(?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?)?Z$",
    re.IGNORECASE,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def to_number(value: Any) -> Number | None:
    """Coerce a setter argument to a number; None when it is not a valid number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            f = float(text)
        except ValueError:
            return None
        return None if math.isnan(f) else f
    return None


def _in_range(n: int, lo: int, hi: int) -> bool:
    return lo <= n <= hi


def _parse_local(text: str) -> Number:
    m = LOCAL_DATE_RE.match(text.replace("-", "/"))
    if not m:
        return calendar.INVALID

    year = int(m.group("year"))
    month = int(m.group("month") or 1)
    day = int(m.group("day") or 1)
    hour = int(m.group("hour") or 0)
    minute = int(m.group("minute") or 0)
    second = int(m.group("second") or 0)
    ms_text = m.group("ms") or "0"
    ms = int(ms_text.ljust(3, "0") if m.group("sep") == "." else ms_text)

    if not (_in_range(month, 1, 12) and _in_range(day, 1, 31) and _in_range(hour, 0, 24)):
        return calendar.INVALID
    if not (_in_range(minute, 0, 59) and _in_range(second, 0, 59)):
        return calendar.INVALID
    return calendar.from_fields(year, month - 1, day, hour, minute, second, ms)


def _parse_utc(text: str) -> Number:
    m = UTC_DATE_RE.match(text)
    if not m:
        return calendar.INVALID

    year = int(m.group("year"))
    month = int(m.group("month"))
    day = int(m.group("day") or 1)
    hour = int(m.group("hour") or 0)
    minute = int(m.group("minute") or 0)
    second = int(m.group("second") or 0)
    ms = int((m.group("fraction") or "0")[:3].ljust(3, "0"))

    if not (_in_range(month, 1, 12) and _in_range(day, 1, calendar.days_in_month(year, month))):
        return calendar.INVALID
    if not (_in_range(hour, 0, 24) and _in_range(minute, 0, 59) and _in_range(second, 0, 59)):
        return calendar.INVALID

    days = calendar.days_from_civil(year, month, day)
    return calendar.time_clip(
        days * calendar.MS_PER_DAY
        + hour * calendar.MS_PER_HOUR
        + minute * calendar.MS_PER_MINUTE
        + second * calendar.MS_PER_SECOND
        + ms
    )


def parse_string(text: str) -> Number:
    """Strings ending in Z are UTC; anything else is read as local time."""
    text = text.strip()
    if not text:
        return now_ms()
    if text[-1] in "zZ":
        return _parse_utc(text)
    return _parse_local(text)


def _from_components(parts: list[Any] | tuple[Any, ...]) -> Number:
    numbers = [to_number(p) for p in parts[:7]]
    if any(n is None for n in numbers):
        return calendar.INVALID
    # Years 0-99 in a component list mean 1900-1999.
    if math.isfinite(numbers[0]) and 0 <= int(numbers[0]) <= 99:
        numbers[0] = 1900 + int(numbers[0])
    return calendar.from_fields(*numbers)


def to_epoch_ms(value: Any) -> Number:
    """Normalize any accepted input to epoch milliseconds (nan when invalid).

    - None / "" -> now
    - DateValue -> its value
    - int / float -> epoch ms
    - str -> parse_string()
    - list / tuple of one item -> that item; otherwise (year, month0, day, h, i, s, ms)
    - datetime (aware: exact instant, naive: local fields) / date (local midnight)
    """
    from .value import DateValue

    if value is None:
        return now_ms()
    if isinstance(value, DateValue):
        return value.value
    if isinstance(value, bool):
        return calendar.INVALID
    if isinstance(value, (int, float)):
        return calendar.time_clip(value)
    if isinstance(value, str):
        return parse_string(value)
    if isinstance(value, (list, tuple)):
        if len(value) == 1:
            return to_epoch_ms(value[0])
        if not value:
            return now_ms()
        return _from_components(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None and value.utcoffset() is not None:
            return calendar.time_clip((value - _EPOCH) // timedelta(milliseconds=1))
        return calendar.from_fields(
            value.year,
            value.month - 1,
            value.day,
            value.hour,
            value.minute,
            value.second,
            value.microsecond // 1000,
        )
    if isinstance(value, date):
        return calendar.from_fields(value.year, value.month - 1, value.day)
    return calendar.INVALID


def tokenize_format(template: str) -> list[FormatSegment]:
    """Split a template into literal and placeholder segments."""
    segments: list[FormatSegment] = []
    pos = 0
    for m in FORMAT_TOKEN_RE.finditer(template):
        if m.start() > pos:
            segments.append(FormatSegment(template[pos : m.start()]))
        segments.append(FormatSegment(m.group(0), Unit(m.group(0))))
        pos = m.end()
    if pos < len(template):
        segments.append(FormatSegment(template[pos:]))
    return segments


def parse_amount(raw: Any, fallback: Unit | str | None = None) -> Amount | None:
    """Parse an add() operand; None when it does not look like "<sign><number><unit?>".

    A bare number takes the fallback unit (milliseconds when there is none).
    """
    if isinstance(raw, bool):
        return None
    m = ADD_AMOUNT_RE.match(str(raw))
    if not m:
        return None
    number, suffix = m.groups()
    unit = Unit.parse(suffix or fallback or Unit.MILLISECOND)
    value = float(number) if "." in number else int(number)
    return Amount(value, unit if unit in UNIT_STEP_MS else None)
