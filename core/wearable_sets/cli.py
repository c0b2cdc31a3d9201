"""
Command-line interface for wearable sets and rarity.

Provides print utilities and CLI entry point.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from core.app_context import create_app_context
from core.config import Config
from core.constants import TRAIT_COUNT, TRAIT_NAMES
from core.logging_setup import setup_logging
from core.rarity import BRSBreakdown, compute_brs_breakdown, trait_to_brs, traits_to_brs
from core.respec import RespecSimulator, coerce_allocation
from core.wearable_sets.calculator import format_bonus
from core.wearable_sets.catalog import SetCatalog, ValidationError
from core.wearable_sets.models import RankedSet
from core.wearables import WearableDataError
from data_sources.gotchi_api import resolve_respec_base_traits

logger = logging.getLogger(__name__)


def print_ranked_sets(ranked: List[RankedSet], base_score: int) -> None:
    """Pretty-print a best-set ranking."""
    print(f"\n{'='*60}")
    print(f" Best sets (base BRS {base_score})")
    print(f"{'='*60}")

    if not ranked:
        print("  No sets to rank.")
        return

    for i, row in enumerate(ranked, start=1):
        print(f"  {i:2}. {row.set.name} ({row.item_count} items): "
              f"{row.score_after} BRS ({format_bonus(row.delta)})")
        print(f"      {row.bonus_label}")


def print_brs(traits: List[int]) -> None:
    """Pretty-print per-trait BRS."""
    print(f"\n{'='*60}")
    print(" Base rarity score")
    print(f"{'='*60}")
    for name, value in zip(TRAIT_NAMES, traits):
        print(f"  {name:12} {value:4} -> {trait_to_brs(value):4}")
    print(f"  {'Total':12} {'':4}    {traits_to_brs(traits):4}")


def print_breakdown(breakdown: BRSBreakdown) -> None:
    print(f"\n{'='*60}")
    print(f" {breakdown.get_summary()}")
    print(f"{'='*60}")
    print(f"  Trait BRS (base):     {breakdown.trait_base}")
    print(f"  Trait BRS (modified): {breakdown.trait_with_mods}")
    print(f"  Wearable flat BRS:    {format_bonus(breakdown.wearable_flat)}")
    print(f"  Set flat BRS:         {format_bonus(breakdown.set_flat_brs)}")
    print(f"  Set trait delta:      {format_bonus(breakdown.set_trait_delta)}")
    print(f"  Age BRS:              {format_bonus(breakdown.age_brs)}")
    for set_def in breakdown.active_sets:
        print(f"  Active set: {set_def.name}")


def print_catalog(catalog: SetCatalog) -> None:
    print(f"\nAvailable sets ({len(catalog)}):")
    for set_def in catalog:
        mods = " ".join(f"{k.upper()} {format_bonus(v)}" for k, v in set_def.trait_modifiers.to_dict().items())
        print(f"  {set_def.id:28} BRS {format_bonus(set_def.set_bonus_brs)}  {mods}")


def print_respec(traits: List[int], used_skill_points: int, allocation: List[int],
                 respec_base: Optional[List[int]]) -> None:
    simulator = RespecSimulator(reset_key="cli", used_skill_points=used_skill_points)
    simulator.toggle_respec_mode()
    for index, points in enumerate(allocation):
        step = simulator.increment if points > 0 else simulator.decrement
        for _ in range(abs(points)):
            if not step(index):
                break

    sim = simulator.simulate(traits, respec_base_traits=respec_base)
    print(f"\n{'='*60}")
    print(f" Respec ({simulator.used}/{simulator.total_sp} points used)")
    print(f"{'='*60}")
    for name, before, after in zip(TRAIT_NAMES, traits, sim.sim_base):
        print(f"  {name:12} {before:4} -> {after:4}")
    if sim.using_fallback:
        print("  (approximate: contract base traits unavailable, current traits used)")


def cli_main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for set rankings and rarity."""
    parser = argparse.ArgumentParser(
        description="Gotchi Closet - rank wearable sets by rarity gain",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gotchi-closet --traits 10 10 10 10 50 50            # Top sets for these traits
  gotchi-closet --traits 10 10 10 10 50 50 -n 3       # Top 3 only
  gotchi-closet --traits 61 78 27 99 8 77 --brs       # Per-trait BRS
  gotchi-closet --traits 10 10 10 10 50 50 --equipped 7 8 9   # BRS with a set on
  gotchi-closet --traits 10 10 10 10 50 50 --equipped 1 2 3 --wearables wearables.json
  gotchi-closet --list-sets                           # Show the catalog
  gotchi-closet --token-id 4895                       # Contract base traits
  gotchi-closet --traits 40 60 50 50 10 90 --used-sp 3 --allocate 2 -1 0 0
        """
    )

    parser.add_argument("--traits", type=int, nargs=TRAIT_COUNT, metavar="N",
                        help="Six numeric traits (NRG AGG SPK BRN EYS EYC)")
    parser.add_argument("-n", "--limit", type=int, default=None,
                        help="Number of sets to show (default: from config)")
    parser.add_argument("--brs", action="store_true", help="Show per-trait BRS for --traits")
    parser.add_argument("--list-sets", action="store_true", help="List catalog sets")
    parser.add_argument("--equipped", type=int, nargs="+", metavar="ID",
                        help="Equipped wearable ids for a BRS breakdown of --traits")
    parser.add_argument("--wearables", type=Path,
                        help="Wearable records JSON for --equipped (default: from config)")
    parser.add_argument("--age-blocks", type=int, default=None,
                        help="Blocks since claim (age BRS, if enabled in config)")
    parser.add_argument("--token-id", help="Fetch respec base traits for a gotchi")
    parser.add_argument("--used-sp", type=int, default=0, help="Spent skill points to redistribute")
    parser.add_argument("--allocate", type=int, nargs=4, metavar="P",
                        help="Respec point moves for NRG AGG SPK BRN")
    parser.add_argument("--catalog", type=Path, help="Custom set catalog JSON")
    parser.add_argument("--config", type=Path, help="Config file (default: ~/.gotchi_closet/config.json)")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress info messages")

    args = parser.parse_args(argv)

    config = Config(args.config)
    setup_logging(debug=args.debug or config.debug_logging, quiet=args.quiet)

    try:
        if args.catalog:
            config.data["catalog"]["path"] = str(args.catalog)
        if args.wearables:
            config.data["wearables"]["path"] = str(args.wearables)
        ctx = create_app_context(config)
    except ValidationError as exc:
        logger.error(f"Invalid set catalog: {exc}")
        print(f"Invalid set catalog: {exc}", file=sys.stderr)
        return 2
    except WearableDataError as exc:
        logger.error(f"Invalid wearables file: {exc}")
        print(f"Invalid wearables file: {exc}", file=sys.stderr)
        return 2

    with ctx:
        if args.list_sets:
            print_catalog(ctx.catalog)
            return 0

        respec_base: Optional[List[int]] = None
        if args.token_id:
            try:
                respec_base = resolve_respec_base_traits(ctx.gotchi_api, args.token_id)
            except ValueError as exc:
                print(str(exc), file=sys.stderr)
                return 2
            if respec_base is None:
                print(f"Could not fetch base traits for gotchi {args.token_id}; "
                      "respec will use current traits.", file=sys.stderr)
                if not args.traits:
                    return 1
            else:
                print(f"Base traits for gotchi {args.token_id}: {respec_base}")

        traits = args.traits or respec_base
        if not traits:
            parser.print_help()
            return 0

        if args.brs:
            print_brs(traits)

        if args.equipped:
            breakdown = compute_brs_breakdown(
                traits,
                args.equipped,
                ctx.wearables_by_id,
                ctx.catalog,
                blocks_elapsed=args.age_blocks,
                age_enabled=ctx.config.age_brs_enabled,
            )
            print_breakdown(breakdown)

        if args.allocate:
            print_respec(traits, args.used_sp, coerce_allocation(args.allocate), respec_base)

        ranked = ctx.calculator.rank(traits, args.limit)
        print_ranked_sets(ranked, traits_to_brs(traits))

    return 0


if __name__ == "__main__":
    sys.exit(cli_main())
