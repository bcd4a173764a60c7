from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterator

import pytest

from dateio import calendar, parsers
from dateio.i18n import reset_locale

# 2019-10-05 06:05:04.321 at +08:00 (a Saturday)
NOW_MS = 1570226704321
OFFSET_MS = 8 * calendar.MS_PER_HOUR


@pytest.fixture(autouse=True)
def _default_locale() -> Iterator[None]:
    reset_locale()
    yield
    reset_locale()


@pytest.fixture
def fixed_offset(monkeypatch: pytest.MonkeyPatch) -> int:
    """Pin the host offset to +08:00 so local-time results do not depend on the machine."""
    monkeypatch.setattr(calendar, "local_offset_ms", lambda epoch_ms: OFFSET_MS)
    return OFFSET_MS


@pytest.fixture
def frozen_now(monkeypatch: pytest.MonkeyPatch, fixed_offset: int) -> int:
    monkeypatch.setattr(parsers, "now_ms", lambda: NOW_MS)
    return NOW_MS


@pytest.fixture
def host_zone() -> Iterator[Callable[[str, int], None]]:
    """Switch the process time zone; skips when the platform or its zone data cannot."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    saved = os.environ.get("TZ")

    def use(name: str, july_offset_hours: int) -> None:
        os.environ["TZ"] = name
        time.tzset()
        # 2019-07-01T00:00Z
        if calendar.local_offset_ms(1561939200000) != july_offset_hours * calendar.MS_PER_HOUR:
            pytest.skip(f"zone data for {name} is not installed")

    yield use
    if saved is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = saved
    time.tzset()
