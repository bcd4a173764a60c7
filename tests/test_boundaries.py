from __future__ import annotations

import pytest

from dateio import Unit, dateio

pytestmark = pytest.mark.usefixtures("fixed_offset")

FULL = "Y-M-D H:I:S.MS"
BASE = "2019-10-05 06:05:04.321"  # Saturday


@pytest.mark.parametrize(
    "unit,start,end",
    [
        ("y", "2019-01-01 00:00:00.000", "2019-12-31 23:59:59.999"),
        ("m", "2019-10-01 00:00:00.000", "2019-10-31 23:59:59.999"),
        ("w", "2019-09-29 00:00:00.000", "2019-10-05 23:59:59.999"),
        ("d", "2019-10-05 00:00:00.000", "2019-10-05 23:59:59.999"),
        ("h", "2019-10-05 06:00:00.000", "2019-10-05 06:59:59.999"),
        ("i", "2019-10-05 06:05:00.000", "2019-10-05 06:05:59.999"),
        ("s", "2019-10-05 06:05:04.000", "2019-10-05 06:05:04.999"),
    ],
)
def test_start_and_end_of(unit: str, start: str, end: str) -> None:
    d = dateio(BASE)
    assert d.start_of(unit).format(FULL) == start
    assert d.end_of(unit).format(FULL) == end
    assert d.format(FULL) == BASE


def test_year_boundaries_expose_one_based_fields() -> None:
    d = dateio(BASE)
    start = d.startOf("y")
    end = d.endOf("y")
    assert (start.m(), start.d(), start.h(), start.i(), start.s(), start.ms()) == (1, 1, 0, 0, 0, 0)
    assert (end.m(), end.d(), end.h(), end.i(), end.s(), end.ms()) == (12, 31, 23, 59, 59, 999)


def test_end_of_month_tracks_month_length() -> None:
    assert dateio("2020-02-10").end_of("m").format("Y-M-D") == "2020-02-29"
    assert dateio("2019-02-10").end_of("m").format("Y-M-D") == "2019-02-28"
    assert dateio("2019-04-30 23:00").end_of("m").format("Y-M-D") == "2019-04-30"


def test_week_boundaries_cross_months_and_years() -> None:
    wednesday = dateio("2019-10-02 12:00")
    assert wednesday.start_of("w").format("Y-M-D") == "2019-09-29"
    assert wednesday.end_of("w").format("Y-M-D") == "2019-10-05"

    monday = dateio("2019-12-30")
    assert monday.end_of("w").format("Y-M-D") == "2020-01-04"
    assert dateio("2020-01-02").start_of("w").format("Y-M-D") == "2019-12-29"


def test_enum_units() -> None:
    assert dateio(BASE).start_of(Unit.MONTH).format("Y-M-D") == "2019-10-01"


@pytest.mark.parametrize("unit", [None, "", "ms", "x", "Y", "MS"])
def test_unknown_units_are_identity(unit: object) -> None:
    d = dateio(BASE)
    assert d.start_of(unit) is d
    assert d.end_of(unit) is d


def test_invalid_instance_stays_invalid() -> None:
    assert not dateio("nope").start_of("d").is_valid()
    assert not dateio("nope").end_of("y").is_valid()
