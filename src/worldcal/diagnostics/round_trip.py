from __future__ import annotations

import argparse
import random
from typing import List

from ..core.types import TimeOfDay
from ..engines.factory import build_registry


def parse_calendars(s: str) -> List[str]:
    # "gregorian,harptos" -> ["gregorian", "harptos"]
    return [x.strip() for x in s.split(",") if x.strip()]


def roundtrip_test(
    engine,
    N: int,
    year_from: int,
    year_to: int,
    seed: int,
    *,
    max_failures: int,
) -> int:
    """
    Two directions per trial: world time -> date -> world time, and
    date -> world time -> date for a random valid month day.
    """
    random.seed(seed)
    failures = 0
    t0 = engine.date_to_world_time(engine.make_date(year_from, 1, 1))
    t1 = engine.date_to_world_time(engine.make_date(year_to, 1, 1))
    n_months = len(engine.definition.months)
    cfg = engine.definition.time

    for _ in range(N):
        t = random.randint(min(t0, t1), max(t0, t1))
        d = engine.world_time_to_date(t)
        back = engine.date_to_world_time(d)
        if back != t:
            failures += 1
            print("\nFAIL (time -> date -> time)")
            print("t:", t)
            print("date:", d)
            print("back:", back)
            if failures >= max_failures:
                return failures

        y = random.randint(min(year_from, year_to), max(year_from, year_to))
        m = random.randint(1, n_months)
        length = engine.month_length(m, y)
        if length == 0:
            continue
        tod = TimeOfDay(
            random.randrange(cfg.hours_in_day),
            random.randrange(cfg.minutes_in_hour),
            random.randrange(cfg.seconds_in_minute),
        )
        d0 = engine.make_date(y, m, random.randint(1, length), tod)
        d1 = engine.world_time_to_date(engine.date_to_world_time(d0))
        if d1 != d0:
            failures += 1
            print("\nFAIL (date -> time -> date)")
            print("d0:", d0)
            print("d1:", d1)
            if failures >= max_failures:
                return failures

    return failures


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Random round-trip tests: world time <-> calendar date.")
    p.add_argument("--calendars", type=str, default="gregorian,harptos",
                   help="Comma-separated calendar ids.")
    p.add_argument("--N", type=int, default=2000, help="Trials per calendar.")
    p.add_argument("--from-year", type=int, default=-2000)
    p.add_argument("--to-year", type=int, default=3000)
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures per calendar.")
    args = p.parse_args(argv)

    reg = build_registry()
    total_fail = 0
    for cid in parse_calendars(args.calendars):
        print(f"Testing {cid} ...")
        f = roundtrip_test(reg.get(cid), N=args.N, year_from=args.from_year, year_to=args.to_year,
                           seed=args.seed, max_failures=args.max_failures)
        total_fail += f

    if total_fail == 0:
        print("All round-trip tests passed.")
        return 0

    print(f"Round-trip failures: {total_fail}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
