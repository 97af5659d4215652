"""
Command-line comparison of deterministic and randomized spin-block policies.

Usage:
    python -m spinblock                       # Default two-tier comparison
    python -m spinblock --recover 5 --seed 1  # Different cost ratio / seed
    python -m spinblock --three-tier          # Also compare three-tier policies
    python -m spinblock --list                # List available policies
"""

import argparse
import logging
import sys

from .config import SimulationConfig
from .costs import CostModel
from .errors import SpinBlockError
from .policies import POLICIES
from .simulator import Simulator
from .workloads import builtin_sequences

log = logging.getLogger("spinblock.cli")

TWO_TIER = ("deterministic", "randomized")
THREE_TIER = ("three-tier-deterministic", "three-tier-randomized")


def format_ratios(summaries) -> str:
    return "ratio: " + ", ".join(
        f"{name}={summary.mean_ratio:.2f}" for name, summary in summaries.items()
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spinblock",
        description="Competitive ratios of online keep/discard policies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          Two-tier comparison with built-in access lists
  %(prog)s --trials 500 --seed 3    More Monte-Carlo trials, another seed
  %(prog)s --three-tier             Add the keep/compress/discard policies
  %(prog)s --list                   Show available policies

Every option also reads SPINBLOCK_<OPTION> from the environment.
        """
    )
    parser.add_argument("--hold", type=float, help="Holding cost per idle time unit")
    parser.add_argument("--recover", type=float, help="Recovery cost after a discard")
    parser.add_argument("--compress", type=float, help="One-time compress cost (three-tier)")
    parser.add_argument("--compress-recover", type=float, help="Decompress cost (three-tier)")
    parser.add_argument("--compress-hold", type=float,
                        help="Holding cost per idle unit while compressed (three-tier)")
    parser.add_argument("--trials", type=int, help="Trials per sequence for randomized policies")
    parser.add_argument("--sequences", type=int, help="Number of random access lists")
    parser.add_argument("--length", type=int, help="Accesses drawn per random list")
    parser.add_argument("--max-time", type=int, help="Largest access time in random lists")
    parser.add_argument("--seed", type=int, help="Base seed for access lists and trials")
    parser.add_argument("--three-tier", action="store_true", help="Also compare three-tier policies")
    parser.add_argument("--list", action="store_true", help="List available policies")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def load_config(args) -> SimulationConfig:
    cfg = SimulationConfig.from_env()
    overrides = {
        "hold_cost": args.hold,
        "recover_cost": args.recover,
        "compress_cost": args.compress,
        "compress_recover_cost": args.compress_recover,
        "compress_hold_cost": args.compress_hold,
        "trials": args.trials,
        "sequences": args.sequences,
        "length": args.length,
        "max_time": args.max_time,
        "seed": args.seed,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(cfg, name, value)
    return cfg


def run(cfg: SimulationConfig, three_tier: bool = False):
    """Run the built-in comparison; returns the lines to print."""
    model = CostModel(cfg.hold_cost, cfg.recover_cost)
    sequences = builtin_sequences(cfg, model)
    log.debug("built %d access lists (seed=%s)", len(sequences), cfg.seed)

    lines = [format_ratios(Simulator(model, cfg.trials, cfg.seed).compare(TWO_TIER, sequences))]

    if three_tier:
        model3 = CostModel(
            cfg.hold_cost, cfg.recover_cost,
            compress_cost=cfg.compress_cost,
            compress_recover_cost=cfg.compress_recover_cost,
            compress_hold_cost=cfg.compress_hold_cost,
        )
        sim = Simulator(model3, cfg.trials, cfg.seed)
        lines.append(format_ratios(sim.compare(THREE_TIER, sequences)))
    return lines


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        print("\nAvailable policies:")
        print("-" * 70)
        for name, (_, desc) in sorted(POLICIES.items()):
            print(f"  {name:<26} {desc}")
        print()
        return 0

    try:
        cfg = load_config(args)
    except ValueError as exc:
        log.error("bad configuration: %s", exc)
        return 2

    try:
        for line in run(cfg, three_tier=args.three_tier):
            print(line)
    except SpinBlockError as exc:
        log.error("%s: %s", type(exc).__name__, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
