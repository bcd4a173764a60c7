"""Locale tables (labels for weekdays, months and day periods).

There is one process-wide table that new instances snapshot at construction.
It only changes through locale() and reset_locale(); instances may also be given
an explicit table instead.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from dotenv import load_dotenv

_CONFIG_KEYS = {
    "weekdays": "weekdays",
    "interval": "interval",
    "months": "months",
    "monthsShort": "months_short",
    "months_short": "months_short",
}

_ENV_KEYS = {
    "weekdays": "WEEKDAYS",
    "months": "MONTHS",
    "months_short": "MONTHS_SHORT",
    "interval": "INTERVAL",
}


def _labels(key: str, value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        raise ValueError(f"Locale {key} must be a list of labels, got a string: {value!r}")
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class Locale:
    """Label table used by the W, a/A accessors and month_name()."""

    weekdays: tuple[str, ...] = ("日", "一", "二", "三", "四", "五", "六")
    # The 24-hour day is split into len(interval) equal periods.
    interval: tuple[str, ...] = ("凌晨", "上午", "下午", "晚上")
    months: tuple[str, ...] | None = None
    months_short: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        for key in ("weekdays", "interval", "months", "months_short"):
            object.__setattr__(self, key, _labels(key, getattr(self, key)))

        if self.weekdays is None or len(self.weekdays) != 7:
            raise ValueError(f"Locale weekdays must have 7 labels (Sunday first), got {self.weekdays!r}")
        if not self.interval:
            raise ValueError("Locale interval must have at least one label")
        for key in ("months", "months_short"):
            labels = getattr(self, key)
            if labels is not None and len(labels) != 12:
                raise ValueError(f"Locale {key} must have 12 labels, got {len(labels)}")

    def merged(self, config: Mapping[str, Any] | Locale) -> Locale:
        """Shallow merge: keys present in config replace this table's keys."""
        if isinstance(config, Locale):
            return config
        changes: dict[str, Any] = {}
        for key, value in config.items():
            name = _CONFIG_KEYS.get(key)
            if name is None:
                raise ValueError(f"Unknown locale key: {key!r} (expected one of {sorted(_CONFIG_KEYS)})")
            changes[name] = value
        return replace(self, **changes)

    def weekday(self, index: int) -> str:
        return self.weekdays[index]

    def period(self, hour: int) -> str:
        return self.interval[int(hour / 24 * len(self.interval))]

    def month(self, month: int, *, short: bool = False) -> str | None:
        """Label for a 1-based month, or None when the table has no month names."""
        labels = self.months_short if short else self.months
        if labels is None:
            return None
        return labels[month - 1]

    @classmethod
    def from_env(cls, *, prefix: str = "DATEIO_", base: Locale | None = None) -> Locale:
        """Overlay comma-separated label lists from the environment (or .env) onto base."""
        load_dotenv()
        config: dict[str, list[str]] = {}
        for key, env_key in _ENV_KEYS.items():
            raw = os.environ.get(prefix + env_key, "").strip()
            if raw:
                config[key] = [part.strip() for part in raw.split(",")]
        return (base or current_locale()).merged(config)


DEFAULT_LOCALE = Locale()

_current = DEFAULT_LOCALE


def current_locale() -> Locale:
    return _current


def locale(config: Any = None) -> Locale:
    """Merge a partial table into the process-wide one and return the effective table.

    Anything that is not a mapping or a Locale leaves the table unchanged.
    Unlike the date operations, which report bad input through an invalid
    instance, this raises ValueError when the table is malformed, for example
    an unknown key or a label list of the wrong length.
    """
    global _current
    if isinstance(config, (Mapping, Locale)):
        _current = _current.merged(config)
    return _current


def reset_locale() -> Locale:
    global _current
    _current = DEFAULT_LOCALE
    return _current
