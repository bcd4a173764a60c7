"""DateValue: an immutable instant with per-unit accessors and calendar arithmetic.

Every method that looks like it changes the instant (set, add, subtract,
start_of, end_of and the accessors called with values) returns a new DateValue.
Malformed input never raises; it yields an invalid instance (value is nan) or
the unchanged instance.
"""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from . import calendar, parsers
from .i18n import Locale, current_locale
from .types import CALENDAR_UNITS, MONTH_STEP, SETTABLE_UNITS, UNIT_STEP_MS, Number, Unit

DEFAULT_FORMAT = "Y-M-D H:I:S"

# start_of/end_of field order, coarse to fine. Weeks truncate like days.
_BOUNDARY_UNITS = (Unit.YEAR, Unit.MONTH, Unit.DAY, Unit.HOUR, Unit.MINUTE, Unit.SECOND)
# (year, month, day, hour, minute, second, ms) with a 1-based month
_START_FIELDS = (0, 1, 1, 0, 0, 0, 0)
_END_FIELDS = (0, 12, 0, 23, 59, 59, 999)

_FIELD_ORDER = ("year", "month", "day", "hour", "minute", "second", "millisecond")
# How many fields each setter writes, starting at its own.
_SETTER_ARITY = {"year": 3, "month": 2, "day": 1, "hour": 4, "minute": 3, "second": 2, "millisecond": 1}

_WEEKDAY_ABBR = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

INVALID_DATE = "Invalid Date"


def zero_fill(value: Number, width: int = 2) -> str:
    """Left-pad with zeros up to width; never truncates."""
    if not calendar.is_valid(value):
        return "NaN"
    if value < 0:
        return "-" + str(-value).rjust(width, "0")
    return str(value).rjust(width, "0")


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _render(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return "NaN"
    return str(value)


def month_diff(a: DateValue, b: DateValue) -> float:
    """Signed months from b to a.

    The partial month is measured against the length of the month it falls in,
    so fractional results follow real day counts instead of a 30-day month.
    """
    if not (a.is_valid() and b.is_valid()):
        return 0
    whole = (b.y() - a.y()) * 12 + (b.m() - a.m())
    anchor = a._shift_months(whole)
    anchor2 = a._shift_months(whole + (1 if b.value > anchor.value else -1))
    span = abs(anchor2.value - anchor.value)
    if not span:
        return 0
    result = -(whole + (b.value - anchor.value) / span)
    return result if math.isfinite(result) and result else 0


@functools.total_ordering
@dataclass(frozen=True, eq=False, repr=False)
class DateValue:
    """An instant in epoch milliseconds plus the locale table used for labels.

    `value` accepts any input parsers.to_epoch_ms() understands and is stored
    normalized (int epoch ms, or nan when invalid).
    """

    value: Any = None
    locale: Locale = field(default_factory=current_locale)

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", parsers.to_epoch_ms(self.value))

    def _derive(self, value: Any) -> DateValue:
        return DateValue(value, self.locale)

    @functools.cached_property
    def local_fields(self) -> calendar.LocalFields | None:
        return calendar.to_fields(self.value)

    def is_valid(self) -> bool:
        return calendar.is_valid(self.value)

    # -- field access ---------------------------------------------------------

    def _get(self, name: str) -> Number:
        fields = self.local_fields
        if fields is None:
            return calendar.INVALID
        value = getattr(fields, name)
        return value + 1 if name == "month" else value

    def _set(self, name: str, *args: Any) -> DateValue:
        numbers = [parsers.to_number(a) for a in args]
        if any(n is None for n in numbers):
            return self

        fields = self.local_fields
        if fields is None:
            # Only the year setter can revive an invalid instant.
            if name != "year":
                return self
            fields = calendar.LocalFields(1970, 0, 1, 0, 0, 0, 0, 4)

        numbers = numbers[: _SETTER_ARITY[name]]
        if name == "year" and len(numbers) > 1:
            numbers[1] -= 1
        elif name == "month":
            numbers[0] -= 1

        start = _FIELD_ORDER.index(name)
        parts: list[Number] = list(fields[:7])
        parts[start : start + len(numbers)] = numbers
        return self._derive(calendar.from_fields(*parts))

    def _access(self, name: str, args: tuple[Any, ...]) -> Number | DateValue:
        if args and all(a is not None for a in args):
            return self._set(name, *args)
        return self._get(name)

    def _shift_months(self, months: int) -> DateValue:
        return self._set("month", self._get("month") + months)

    # 100...2020; y(year, month, day) sets
    def y(self, *args: Any) -> Number | DateValue:
        return self._access("year", args)

    # 0100...2020
    def Y(self) -> str:
        return zero_fill(self.y(), 4)

    # 1...12; m(month, day) sets
    def m(self, *args: Any) -> Number | DateValue:
        return self._access("month", args)

    # 01...12
    def M(self) -> str:
        return zero_fill(self.m())

    # 1...31
    def d(self, *args: Any) -> Number | DateValue:
        return self._access("day", args)

    # 01...31
    def D(self) -> str:
        return zero_fill(self.d())

    # 0 (Sunday)...6
    def w(self) -> Number:
        return self._get("weekday")

    def W(self) -> str | None:
        if not self.is_valid():
            return None
        return self.locale.weekday(self.w())

    # 0...23; h(hour, minute, second, ms) sets
    def h(self, *args: Any) -> Number | DateValue:
        return self._access("hour", args)

    # 00...23
    def H(self) -> str:
        return zero_fill(self.h())

    # 0...59; i(minute, second, ms) sets
    def i(self, *args: Any) -> Number | DateValue:
        return self._access("minute", args)

    def I(self) -> str:  # noqa: E743
        return zero_fill(self.i())

    # 0...59; s(second, ms) sets
    def s(self, *args: Any) -> Number | DateValue:
        return self._access("second", args)

    def S(self) -> str:
        return zero_fill(self.s())

    # 0...999
    def ms(self, *args: Any) -> Number | DateValue:
        return self._access("millisecond", args)

    def MS(self) -> str:
        return zero_fill(self.ms(), 3)

    def a(self) -> str | None:
        """Day-period label for the current hour."""
        if not self.is_valid():
            return None
        return self.locale.period(self.h())

    def A(self) -> str | None:
        period = self.a()
        return None if period is None else period.upper()

    def u(self, *args: Any) -> Number | DateValue:
        """Epoch milliseconds; u(ms) returns a new instance at that instant."""
        if args and args[0] is not None:
            n = parsers.to_number(args[0])
            return self if n is None else self._derive(n)
        return self.value

    def U(self, *args: Any) -> Number | DateValue:
        """Epoch seconds (rounded); U(seconds) returns a new instance at that instant."""
        if args and args[0] is not None:
            n = parsers.to_number(args[0])
            return self if n is None else self._derive(n * 1000)
        if not self.is_valid():
            return calendar.INVALID
        return math.floor(self.value / 1000 + 0.5)

    def month_name(self, *, short: bool = False) -> str | None:
        if not self.is_valid():
            return None
        return self.locale.month(self.m(), short=short)

    def get(self, unit: Unit | str | None = "") -> Any:
        """Value of any unit token; None for unknown or empty tokens."""
        parsed = Unit.parse(unit)
        if parsed is None:
            return None
        return _ACCESSORS[parsed](self)

    def set(self, unit: Unit | str | None = "", *args: Any) -> DateValue:
        """Set a unit; unknown units or non-numeric values give back this instance."""
        parsed = Unit.parse(unit)
        if parsed not in SETTABLE_UNITS or not args:
            return self
        if any(parsers.to_number(a) is None for a in args):
            return self
        return _ACCESSORS[parsed](self, *args)

    # -- conversion -----------------------------------------------------------

    def to_date(self) -> datetime | None:
        """Aware datetime in the host's offset, or None when it cannot be represented."""
        fields = self.local_fields
        if fields is None or not 1 <= fields.year <= 9999:
            return None
        offset = timedelta(milliseconds=calendar.local_offset_ms(self.value))
        return datetime(
            fields.year,
            fields.month + 1,
            fields.day,
            fields.hour,
            fields.minute,
            fields.second,
            fields.millisecond * 1000,
            tzinfo=timezone(offset),
        )

    def to_string(self) -> str:
        """e.g. "Tue Oct 15 2019 18:44:27 GMT+0800"."""
        fields = self.local_fields
        if fields is None:
            return INVALID_DATE
        offset_min = calendar.local_offset_ms(self.value) // calendar.MS_PER_MINUTE
        sign = "-" if offset_min < 0 else "+"
        hours, minutes = divmod(abs(offset_min), 60)
        return (
            f"{_WEEKDAY_ABBR[fields.weekday]} {_MONTH_ABBR[fields.month]} {self.D()} {self.Y()} "
            f"{self.H()}:{self.I()}:{self.S()} GMT{sign}{hours:02d}{minutes:02d}"
        )

    def to_locale_string(self, fmt: str | None = None) -> str:
        d = self.to_date()
        if d is None:
            return INVALID_DATE
        return d.strftime(fmt or "%c")

    def value_of(self) -> Number:
        return self.value

    def clone(self) -> DateValue:
        return self._derive(self.value)

    def format(self, template: str | None = None) -> str:
        """Replace every unit token in template; other characters pass through."""
        segments = parsers.tokenize_format(str(template or DEFAULT_FORMAT))
        return "".join(_render(self.get(seg.unit)) if seg.is_placeholder else seg.text for seg in segments)

    # -- derivation -----------------------------------------------------------

    def start_of(self, unit: Unit | str | None = None, is_start_of: bool = True) -> DateValue:
        """Earliest (or latest, with is_start_of=False) instant within the current unit.

        Unknown units and anything finer than seconds return this instance.
        """
        parsed = Unit.parse(unit)
        key = Unit.DAY if parsed is Unit.WEEK else parsed
        if key not in _BOUNDARY_UNITS:
            return self

        kept = _BOUNDARY_UNITS[: _BOUNDARY_UNITS.index(key) + 1]
        parts: list[Number] = list(_START_FIELDS if is_start_of else _END_FIELDS)
        parts[: len(kept)] = [self.get(u) for u in kept]

        # Back to a 0-based month. end_of("y"/"m") keeps it 1-based on purpose:
        # day 0 of the following month is the last day of this one.
        if is_start_of or parsed not in CALENDAR_UNITS:
            parts[1] -= 1
        if parsed is Unit.WEEK:
            parts[2] -= self.w() - (0 if is_start_of else 6)
        return self._derive(calendar.from_fields(*parts))

    def end_of(self, unit: Unit | str | None = None) -> DateValue:
        return self.start_of(unit, False)

    def diff(self, other: Any = None, unit: Unit | str | None = None, is_float: bool = False) -> Number:
        """self - other in unit (ms by default), truncated toward zero unless is_float."""
        that = DateValue(other, self.locale)
        parsed = Unit.parse(unit)

        if parsed in CALENDAR_UNITS:
            result: Number = month_diff(self, that) / MONTH_STEP[parsed]
        else:
            step = UNIT_STEP_MS.get(parsed, 1)
            if step == 1 and self.is_valid() and that.is_valid():
                result = self.value - that.value
            else:
                result = (self.value - that.value) / step

        if is_float or isinstance(result, int):
            return result
        return math.trunc(result) if math.isfinite(result) else result

    def add(self, amount: Any, unit: Unit | str | None = None) -> DateValue:
        """Shift by amount: a number (in unit, default ms) or a string such as "7d", "-1.5h", "2y"."""
        parsed = parsers.parse_amount(amount, unit)
        if parsed is None or parsed.unit is None:
            return self

        if parsed.unit in CALENDAR_UNITS:
            months = parsed.value * MONTH_STEP[parsed.unit]
            if parsed.unit is Unit.YEAR:
                whole, rest = _round_half_away(months), 0
            else:
                whole = math.trunc(months)
                rest = months - whole
            shifted = self._shift_months(whole)
            if rest:
                shifted = shifted._derive(shifted.value + rest * UNIT_STEP_MS[Unit.MONTH])
            return shifted

        return self._derive(self.value + parsed.value * UNIT_STEP_MS[parsed.unit])

    def subtract(self, amount: Any, unit: Unit | str | None = None) -> DateValue:
        return self.add(f"-{amount}", unit)

    # -- predicates -----------------------------------------------------------

    def is_leap_year(self) -> bool:
        if not self.is_valid():
            return False
        return calendar.is_leap_year(self.y())

    def days_in_month(self) -> Number:
        if not self.is_valid():
            return calendar.INVALID
        return calendar.days_in_month(self.y(), self.m())

    def is_same(self, other: Any = None, unit: Unit | str | None = None) -> bool:
        """Same instant after truncating both sides to unit (exact ms when unit is None)."""
        return self.start_of(unit).value == DateValue(other, self.locale).start_of(unit).value

    # -- protocol -------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self.value < other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __int__(self) -> int:
        return int(self.value)

    def __float__(self) -> float:
        return float(self.value)

    def __sub__(self, other: Any) -> Number:
        return self.value - DateValue(other, self.locale).value

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        if not self.is_valid():
            return f"DateValue({INVALID_DATE})"
        return f"DateValue({self.format('Y-M-DTH:I:S.MS')!r})"

    toDate = to_date
    toString = to_string
    toLocaleString = to_locale_string
    valueOf = value_of
    startOf = start_of
    endOf = end_of
    isLeapYear = is_leap_year
    daysInMonth = days_in_month
    isSame = is_same


_ACCESSORS: dict[Unit, Callable[..., Any]] = {
    Unit.YEAR: DateValue.y,
    Unit.YEAR_PADDED: DateValue.Y,
    Unit.MONTH: DateValue.m,
    Unit.MONTH_PADDED: DateValue.M,
    Unit.DAY: DateValue.d,
    Unit.DAY_PADDED: DateValue.D,
    Unit.WEEK: DateValue.w,
    Unit.WEEK_LABEL: DateValue.W,
    Unit.HOUR: DateValue.h,
    Unit.HOUR_PADDED: DateValue.H,
    Unit.MINUTE: DateValue.i,
    Unit.MINUTE_PADDED: DateValue.I,
    Unit.SECOND: DateValue.s,
    Unit.SECOND_PADDED: DateValue.S,
    Unit.MILLISECOND: DateValue.ms,
    Unit.MILLISECOND_PADDED: DateValue.MS,
    Unit.PERIOD: DateValue.a,
    Unit.PERIOD_UPPER: DateValue.A,
    Unit.EPOCH_MS: DateValue.u,
    Unit.EPOCH_SECONDS: DateValue.U,
}
