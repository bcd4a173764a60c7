"""Immutable date values with unit accessors, formatting and calendar arithmetic.

    >>> from dateio import dateio
    >>> dateio("2020-02-29 10:21").add("1y").format("Y-M-D")
    '2021-03-01'
"""

from __future__ import annotations

from typing import Any

from .i18n import DEFAULT_LOCALE, Locale, current_locale, locale, reset_locale
from .parsers import parse_amount, to_epoch_ms, tokenize_format
from .types import Unit
from .value import DEFAULT_FORMAT, DateValue, month_diff, zero_fill


def dateio(value: Any = None, *, locale: Locale | None = None) -> DateValue:
    """Entry point: build a DateValue from nothing (now), epoch ms, a string, a list, or another DateValue."""
    return DateValue(value, locale or current_locale())


dateio.locale = locale  # type: ignore[attr-defined]

__all__ = [
    "DEFAULT_FORMAT",
    "DEFAULT_LOCALE",
    "DateValue",
    "Locale",
    "Unit",
    "current_locale",
    "dateio",
    "locale",
    "month_diff",
    "parse_amount",
    "reset_locale",
    "to_epoch_ms",
    "tokenize_format",
    "zero_fill",
]
