#!/usr/bin/env python3
"""Command-line front end for dateio.

Usage:
  python3 scripts/dateio_cmd.py format --input "2019-10-05 06:05:04" --template "Y/M/D W"
  python3 scripts/dateio_cmd.py add 7d --input 1570226704000
  python3 scripts/dateio_cmd.py subtract 1.5 --unit h
  python3 scripts/dateio_cmd.py diff 2021-01-01 --input 2020-01-01 --unit y --float
  python3 scripts/dateio_cmd.py start-of w --template "Y-M-D H:I:S.MS"
  python3 scripts/dateio_cmd.py is-same "2020-01-01 23:59" --input 2020-01-01 --unit d

--input accepts epoch milliseconds or a date string; omitted means now.
Locale labels can be overridden with DATEIO_WEEKDAYS / DATEIO_INTERVAL / ... (env or .env).
"""

from __future__ import annotations

import argparse
import re

from dateio import DEFAULT_FORMAT, Locale, dateio
from dateio.value import DateValue


def _coerce_input(raw: str | None) -> int | str | None:
    """Plain integers are epoch milliseconds; anything else is a date string."""
    if raw is None:
        return None
    if re.fullmatch(r"[+-]?\d+", raw.strip()):
        return int(raw)
    return raw


def _load(raw: str | None, loc: Locale) -> DateValue:
    d = dateio(_coerce_input(raw), locale=loc)
    if not d.is_valid():
        raise SystemExit(f"Invalid date input: {raw!r}")
    return d


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Format, shift and compare dates.")
    sub = ap.add_subparsers(dest="cmd", required=True)

    def with_input(p: argparse.ArgumentParser, *, template: bool = True) -> argparse.ArgumentParser:
        p.add_argument("--input", default=None, help="Epoch ms or date string (default: now).")
        if template:
            p.add_argument("--template", default=DEFAULT_FORMAT)
        return p

    with_input(sub.add_parser("format"))

    for name in ("add", "subtract"):
        p = with_input(sub.add_parser(name))
        p.add_argument("amount", help='e.g. 7d, -1m, 5.5h, or a bare number with --unit')
        p.add_argument("--unit", default=None)

    for name in ("start-of", "end-of"):
        p = with_input(sub.add_parser(name))
        p.add_argument("unit")

    p = with_input(sub.add_parser("diff"), template=False)
    p.add_argument("other")
    p.add_argument("--unit", default=None)
    p.add_argument("--float", dest="is_float", action="store_true")

    p = with_input(sub.add_parser("is-same"), template=False)
    p.add_argument("other")
    p.add_argument("--unit", default=None)

    return ap


def run(args: argparse.Namespace) -> str:
    loc = Locale.from_env()
    d = _load(args.input, loc)

    if args.cmd == "format":
        return d.format(args.template)
    if args.cmd in ("add", "subtract"):
        shifted = d.add(args.amount, args.unit) if args.cmd == "add" else d.subtract(args.amount, args.unit)
        if shifted is d:
            raise SystemExit(f"Unrecognized amount: {args.amount!r}")
        return shifted.format(args.template)
    if args.cmd == "start-of":
        return d.start_of(args.unit).format(args.template)
    if args.cmd == "end-of":
        return d.end_of(args.unit).format(args.template)

    other = _load(args.other, loc)
    if args.cmd == "diff":
        return str(d.diff(other, args.unit, args.is_float))
    return "true" if d.is_same(other, args.unit) else "false"


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    print(run(args))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
