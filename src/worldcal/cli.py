from __future__ import annotations

import argparse
import importlib
import inspect
import re
import sys

from .logging_utils import configure_logging


_DATE_RE = re.compile(r"^(-?\d+)-(\d+)-(\d+)$")
_TIME_RE = re.compile(r"^(\d+):(\d+)(?::(\d+))?$")


def _parse_ymd(s: str) -> tuple[int, int, int]:
    m = _DATE_RE.match(s)
    if not m:
        raise SystemExit(f"Bad date {s!r}; expected YEAR-MONTH-DAY (year may be negative)")
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def _parse_hms(s: str):
    from .core.types import TimeOfDay

    m = _TIME_RE.match(s)
    if not m:
        raise SystemExit(f"Bad time {s!r}; expected HH:MM[:SS]")
    return TimeOfDay(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def add_calendar_args(p: argparse.ArgumentParser) -> None:
    """Options shared by every command that needs a calendar registry."""
    p.add_argument("--calendar", default="gregorian", help="calendar id, optionally base(variant)")
    p.add_argument("--file", action="append", default=[], help="calendar JSON file to load (repeatable)")
    p.add_argument("--variants-file", action="append", default=[], help="external variants JSON file (repeatable)")
    p.add_argument("--verbose", "-v", action="count", default=0)
    p.add_argument("--log-file", action="append", default=[], help="also write log records to this file (repeatable)")


def registry_from_args(args: argparse.Namespace):
    from .core.loader import load_calendar, load_variant_file
    from .engines.factory import build_registry

    configure_logging(args.verbose, args.log_file)
    reg = build_registry()
    for path in args.file:
        reg.load(load_calendar(path), overwrite=True)
    for path in args.variants_file:
        reg.load_external_variants(load_variant_file(path))
    return reg


def format_date(engine, date) -> str:
    defn = engine.definition
    year = f"{defn.year.prefix}{engine.display_year(date.year)}{defn.year.suffix}"
    clock = ""
    if date.time is not None:
        clock = f" {date.time.hour:02d}:{date.time.minute:02d}:{date.time.second:02d}"
    if date.intercalary is not None:
        day = f"{date.intercalary}" if date.day == 1 else f"{date.intercalary}, day {date.day}"
        return f"{day} {year}{clock}"
    weekday = defn.weekdays[date.weekday].name
    month = defn.months[date.month - 1].name
    return f"{weekday}, {date.day} {month} {year}{clock}"


def cmd_list(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="worldcal list", description="List loaded calendars and variants")
    add_calendar_args(p)
    args = p.parse_args(argv)

    reg = registry_from_args(args)
    for cid in reg.list():
        info = reg.get(cid).info()
        lengths = info["year_length"]
        marker = "*" if reg.resolve_default_variant(cid.split("(")[0]) == cid and "(" in cid else " "
        print(f"{marker} {cid:32s} {info['label']:40s} months={info['months']:<3d} "
              f"weekdays={info['weekdays']:<3d} days={lengths['common']}/{lengths['leap']}")
    return 0


def cmd_date(argv: list[str]) -> int:
    from .attributes.standard import standard_attributes

    p = argparse.ArgumentParser(prog="worldcal date", description="World time (seconds) -> calendar date")
    p.add_argument("world_time", type=int)
    p.add_argument("--offset", type=int, default=0, help="world creation offset in seconds")
    p.add_argument("--attr", action="append", default=[], help="attribute name (repeatable)")
    add_calendar_args(p)
    args = p.parse_args(argv)

    reg = registry_from_args(args)
    reg.set_active(args.calendar)
    engine = reg.active_engine()
    date = engine.world_time_to_date(args.world_time, args.offset)
    print(format_date(engine, date))
    if args.attr:
        for key, value in standard_attributes().compute(engine, date, args.attr).items():
            print(f"  {key}: {value}")
    return 0


def cmd_time(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="worldcal time", description="Calendar date -> world time (seconds)")
    p.add_argument("date", help="YEAR-MONTH-DAY")
    p.add_argument("--at", default=None, help="time of day HH:MM[:SS]")
    p.add_argument("--intercalary", default=None, help="intercalary period name (DAY is its position)")
    p.add_argument("--offset", type=int, default=0, help="world creation offset in seconds")
    add_calendar_args(p)
    args = p.parse_args(argv)

    reg = registry_from_args(args)
    reg.set_active(args.calendar)
    engine = reg.active_engine()
    y, m, d = _parse_ymd(args.date)
    tod = _parse_hms(args.at) if args.at else None
    date = engine.make_date(y, m, d, tod, intercalary=args.intercalary)
    print(engine.date_to_world_time(date, args.offset))
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="worldcal", description="Fantasy and real-world calendar arithmetic.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list", help="List calendars and variants", add_help=False)
    sub.add_parser("date", help="World time -> calendar date", add_help=False)
    sub.add_parser("time", help="Calendar date -> world time", add_help=False)

    p_diag = sub.add_parser("diag", help="Diagnostics tools")
    p_diag.add_argument(
        "tool",
        choices=["round-trip", "year-table"],
        help="Which diagnostic to run",
    )

    args, rest = p.parse_known_args(argv)

    if args.cmd == "list":
        return cmd_list(rest)

    if args.cmd == "date":
        return cmd_date(rest)

    if args.cmd == "time":
        return cmd_time(rest)

    if args.cmd == "diag":
        tool_map = {
            "round-trip": "worldcal.diagnostics.round_trip",
            "year-table": "worldcal.diagnostics.year_table",
        }
        return _run_module_main(tool_map[args.tool], rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
