#!/usr/bin/env python3
from __future__ import annotations

import argparse

import numpy as np

from ..engines.factory import build_registry


def year_stats(engine, y0: int, y1: int):
    """
    Per-year arrays over [y0, y1]: lengths, leap flags and the weekday of
    day 1 of month 1.
    """
    years = np.arange(y0, y1 + 1)
    lengths = np.array([engine.year_length(int(y)) for y in years], dtype=np.int64)
    leap = np.array([engine.is_leap_year(int(y)) for y in years], dtype=bool)
    first_weekday = np.array([engine.calculate_weekday(int(y), 1, 1) for y in years], dtype=np.int64)
    return years, lengths, leap, first_weekday


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        description="Year length statistics and new-year weekday histogram for a calendar."
    )
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("--from-year", type=int, default=1600)
    p.add_argument("--to-year", type=int, default=2400)
    p.add_argument("--rows", type=int, default=12, help="Print the first N years as a table (0 = none).")
    args = p.parse_args(argv)

    if args.to_year < args.from_year:
        raise SystemExit("--to-year must be >= --from-year")

    engine = build_registry().get(args.calendar)
    defn = engine.definition
    years, lengths, leap, first_wd = year_stats(engine, args.from_year, args.to_year)

    if args.rows:
        print("Year    Days  Leap  New year weekday")
        print("-" * 38)
        for y, n, lp, wd in list(zip(years, lengths, leap, first_wd))[: args.rows]:
            print(f"{int(y):<6d}  {int(n):<4d}  {'yes' if lp else 'no':<4s}  {defn.weekdays[int(wd)].name}")
        print()

    span = len(years)
    print(f"{defn.label}: years {args.from_year}..{args.to_year} ({span} years)")
    print(f"  leap years       : {int(leap.sum())} ({leap.mean():.4%})")
    print(f"  mean year length : {lengths.mean():.6f} days")
    print(f"  min / max        : {int(lengths.min())} / {int(lengths.max())}")

    counts = np.bincount(first_wd, minlength=len(defn.weekdays))
    print("\nNew year weekday histogram:")
    for wd, c in zip(defn.weekdays, counts):
        print(f"  {wd.name:14s} {int(c):5d}  {'#' * int(round(40 * c / counts.max()))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
