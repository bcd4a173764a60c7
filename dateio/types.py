from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

Number = Union[int, float]


class Unit(str, Enum):
    """Unit tokens. Lowercase reads/writes a number, uppercase is the padded or labelled variant."""

    YEAR = "y"
    YEAR_PADDED = "Y"
    MONTH = "m"
    MONTH_PADDED = "M"
    DAY = "d"
    DAY_PADDED = "D"
    WEEK = "w"  # weekday accessor; a week when used as a step
    WEEK_LABEL = "W"
    HOUR = "h"
    HOUR_PADDED = "H"
    MINUTE = "i"
    MINUTE_PADDED = "I"
    SECOND = "s"
    SECOND_PADDED = "S"
    MILLISECOND = "ms"
    MILLISECOND_PADDED = "MS"
    PERIOD = "a"
    PERIOD_UPPER = "A"
    EPOCH_MS = "u"
    EPOCH_SECONDS = "U"

    @classmethod
    def parse(cls, token: object) -> Unit | None:
        if isinstance(token, Unit):
            return token
        if not isinstance(token, str) or not token:
            return None
        try:
            return cls(token)
        except ValueError:
            return None


SETTABLE_UNITS = frozenset(
    {
        Unit.YEAR,
        Unit.MONTH,
        Unit.DAY,
        Unit.HOUR,
        Unit.MINUTE,
        Unit.SECOND,
        Unit.MILLISECOND,
        Unit.EPOCH_MS,
        Unit.EPOCH_SECONDS,
    }
)

# Units whose size depends on the calendar; they go through the month field.
CALENDAR_UNITS = frozenset({Unit.YEAR, Unit.MONTH})

# Months per calendar unit.
MONTH_STEP: dict[Unit, int] = {Unit.MONTH: 1, Unit.YEAR: 12}

MS_PER_DAY = 864e5

# Fixed millisecond steps. y/m are 365/30 day approximations, only used for fractional remainders.
UNIT_STEP_MS: dict[Unit, float] = {
    Unit.MILLISECOND: 1,
    Unit.SECOND: 1e3,
    Unit.MINUTE: 6e4,
    Unit.HOUR: 36e5,
    Unit.DAY: MS_PER_DAY,
    Unit.WEEK: MS_PER_DAY * 7,
    Unit.MONTH: MS_PER_DAY * 30,
    Unit.YEAR: MS_PER_DAY * 365,
}


@dataclass(frozen=True)
class FormatSegment:
    """One piece of a format template: literal text, or a placeholder when unit is set."""

    text: str
    unit: Unit | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.unit is not None


@dataclass(frozen=True)
class Amount:
    """A parsed add/subtract operand."""

    value: Number
    unit: Unit | None  # None when the fallback unit was not a known step
