from __future__ import annotations

import pytest

from dateio import DEFAULT_LOCALE, Locale, current_locale, dateio, locale, reset_locale

EN_WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
EN_MONTHS = ["January", "February", "March", "April", "May", "June", "July",
             "August", "September", "October", "November", "December"]


def test_default_table() -> None:
    loc = current_locale()
    assert loc is DEFAULT_LOCALE
    assert loc.weekdays == ("日", "一", "二", "三", "四", "五", "六")
    assert loc.interval == ("凌晨", "上午", "下午", "晚上")
    assert loc.months is None
    assert loc.month(1) is None


def test_locale_merges_shallowly() -> None:
    merged = locale({"weekdays": EN_WEEKDAYS})
    assert merged.weekdays == tuple(EN_WEEKDAYS)
    assert merged.interval == DEFAULT_LOCALE.interval
    assert current_locale() is merged

    merged = locale({"monthsShort": [m[:3] for m in EN_MONTHS]})
    assert merged.weekdays == tuple(EN_WEEKDAYS)
    assert merged.month(9, short=True) == "Sep"


def test_locale_without_mapping_is_a_read() -> None:
    before = current_locale()
    assert locale() is before
    assert locale("en") is before
    assert locale(42) is before
    assert dateio.locale is locale


def test_locale_accepts_a_full_table() -> None:
    table = Locale(weekdays=tuple(EN_WEEKDAYS), interval=("am", "pm"))
    assert locale(table) is table


def test_reset_locale() -> None:
    locale({"interval": ["day"]})
    assert reset_locale() is DEFAULT_LOCALE
    assert current_locale().interval == DEFAULT_LOCALE.interval


@pytest.mark.parametrize(
    "config",
    [
        {"weekday": EN_WEEKDAYS},
        {"weekdays": EN_WEEKDAYS[:6]},
        {"months": EN_MONTHS[:11]},
        {"interval": []},
        {"interval": "am,pm"},
    ],
)
def test_bad_config_raises(config: dict) -> None:
    with pytest.raises(ValueError):
        locale(config)
    assert current_locale() is DEFAULT_LOCALE


def test_period_partitions_the_day() -> None:
    loc = Locale(interval=("am", "pm"))
    assert [loc.period(h) for h in (0, 11, 12, 23)] == ["am", "am", "pm", "pm"]
    assert [DEFAULT_LOCALE.period(h) for h in (0, 5, 6, 11, 12, 17, 18, 23)] == [
        "凌晨", "凌晨", "上午", "上午", "下午", "下午", "晚上", "晚上",
    ]


@pytest.mark.usefixtures("fixed_offset")
def test_instances_snapshot_the_table() -> None:
    d = dateio("2019-10-05")  # Saturday
    locale({"weekdays": EN_WEEKDAYS})
    assert d.W() == "六"
    assert dateio("2019-10-05").W() == "Sat"
    # derived instances keep their parent's table
    assert d.add("1d").W() == "日"


@pytest.mark.usefixtures("fixed_offset")
def test_explicit_locale_wins() -> None:
    loc = Locale(weekdays=tuple(EN_WEEKDAYS), months=tuple(EN_MONTHS))
    d = dateio("2019-10-05", locale=loc)
    assert d.W() == "Sat"
    assert d.month_name() == "October"
    assert d.month_name(short=True) is None
    assert dateio("2019-10-05").month_name() is None


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATEIO_WEEKDAYS", ",".join(EN_WEEKDAYS))
    monkeypatch.setenv("DATEIO_INTERVAL", "am, pm")
    monkeypatch.delenv("DATEIO_MONTHS", raising=False)
    monkeypatch.delenv("DATEIO_MONTHS_SHORT", raising=False)

    loc = Locale.from_env()
    assert loc.weekdays == tuple(EN_WEEKDAYS)
    assert loc.interval == ("am", "pm")
    assert loc.months is None
    # reading the environment does not touch the process-wide table
    assert current_locale() is DEFAULT_LOCALE


def test_from_env_custom_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CAL_MONTHS", ",".join(EN_MONTHS))
    loc = Locale.from_env(prefix="CAL_", base=Locale(interval=("x",)))
    assert loc.months == tuple(EN_MONTHS)
    assert loc.interval == ("x",)
