from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from ffm.allocation import MatchAllocator, calculate_variance, get_player_quarter_breakdown, get_subs_for_quarter
from ffm.contracts import Allocation, ConfigurationError
from ffm.core import AllocationError, allocation_random, seeded_random
from ffm.rules import default_match_config, load_rules_file


def _print_grid(allocation: Allocation, roster: list[str]) -> None:
    header = "Player".ljust(16) + "".join(f"Q{q.quarter}".rjust(6) for q in allocation.quarters) + "  Total"
    print(header)
    for player in roster:
        labels = get_player_quarter_breakdown(allocation, player)
        print(player.ljust(16) + "".join(label.rjust(6) for label in labels) + f"  {allocation.summary.get(player, 0):>5}")
    for q in allocation.quarters:
        subs = get_subs_for_quarter(allocation, q.quarter, roster)
        print(f"Q{q.quarter} subs: {', '.join(subs) if subs else '-'}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fair Minutes: fair playing-time allocation for small-sided matches")
    parser.add_argument("--players", nargs="+", required=True, help="roster of player names (5-15)")
    parser.add_argument("--gk", nargs="+", default=None, help="manual goalkeeper per quarter, in order")
    parser.add_argument("--seed", type=int, default=None, help="seed for deterministic allocations")
    parser.add_argument("--rules", type=Path, default=None, help="JSON rules override file")
    parser.add_argument("--db", type=Path, default=None, help="sqlite database to store the fixture in")
    parser.add_argument("--opponent", default="TBC", help="opponent name when storing the fixture")
    parser.add_argument("--date", default=None, help="fixture date (YYYY-MM-DD) when storing the fixture")
    parser.add_argument("--season", default=None, help="season label when storing the fixture")
    parser.add_argument("--heatmap", type=Path, default=None, help="write a minutes heat map PNG")
    parser.add_argument("--log-level", default="WARNING", help="logging level (DEBUG, INFO, WARNING...)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_rules_file(args.rules) if args.rules else default_match_config()
        random_source = seeded_random(args.seed) if args.seed is not None else allocation_random()
        allocation = MatchAllocator(config, random_source).allocate(args.players, args.gk)
    except (AllocationError, ConfigurationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    _print_grid(allocation, args.players)
    stats = calculate_variance(allocation)
    print(f"Minutes: min={stats.min} max={stats.max} mean={stats.mean:.1f} range={stats.variance}")
    for warning in allocation.warnings:
        print(f"warning: {warning}")

    if args.db is not None:
        from ffm.persistence import AllocationStore

        store = AllocationStore(args.db)
        store.initialize_schema()
        fixture_id = store.create_fixture(
            args.opponent, args.date or date.today().isoformat(), args.players, season=args.season
        )
        store.save_allocation(fixture_id, allocation)
        print(f"Stored fixture {fixture_id} in {args.db}")

    if args.heatmap is not None:
        from ffm.ui import render_minutes_heatmap

        print(f"Heat map written to {render_minutes_heatmap(allocation, args.players, args.heatmap)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
