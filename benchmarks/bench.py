#!/usr/bin/env python3
"""
SPIN-BLOCK BENCHMARK SUITE
==========================
Sweeps the recover/hold cost ratio and reports the mean competitive ratio of
every policy on random and adversarial access lists, next to Karlin's bounds
(2 for deterministic, e/(e-1) ~ 1.58 for randomized).

Usage:
    python bench.py                     # Default sweep
    python bench.py --quick             # Fewer lists and trials
    python bench.py -r 2,3,5,10         # Specific recover/hold ratios
    python bench.py --three-tier        # Include keep/compress/discard policies
    python bench.py --list              # List available policies
"""

import argparse
import random
import sys
import time
from dataclasses import dataclass, field

from spinblock import COMPETITIVE_RATIO, POLICIES, CostModel, Simulator
from spinblock.workloads import adversarial_sequence, random_sequence

# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class BenchConfig:
    ratios: list = field(default_factory=lambda: [2, 3, 5, 10, 20])
    three_tier: bool = False

    # Workload sizes
    sequences: int = 50
    length: int = 20
    max_time: int = 200
    trials: int = 100
    seed: int = 0

    # Three-tier costs, as fractions of the recovery cost
    compress_frac: float = 0.4
    compress_recover_frac: float = 0.15

    # Output
    verbose: bool = True
    color: bool = True


# ============================================================================
# OUTPUT HELPERS
# ============================================================================

class Colors:
    BOLD = '\033[1m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    END = '\033[0m'
    GRAY = '\033[90m'

def c(text, color, cfg):
    """Colorize text if enabled."""
    if cfg.color and sys.stdout.isatty():
        return f"{color}{text}{Colors.END}"
    return text

def p(msg="", cfg=None):
    """Print with flush."""
    if cfg is None or cfg.verbose:
        print(msg, flush=True)


# ============================================================================
# WORKLOADS
# ============================================================================

def build_model(ratio, cfg):
    if not cfg.three_tier:
        return CostModel(hold_cost=1, recover_cost=ratio)
    return CostModel(
        hold_cost=1,
        recover_cost=ratio,
        compress_cost=max(1, cfg.compress_frac * ratio),
        compress_recover_cost=cfg.compress_recover_frac * ratio,
    )

def build_workloads(model, cfg):
    rng = random.Random(cfg.seed)
    return {
        "random": [random_sequence(cfg.length, cfg.max_time, rng) for _ in range(cfg.sequences)],
        "adversarial": [adversarial_sequence(model, cfg.length)],
    }


# ============================================================================
# SWEEP
# ============================================================================

def run_sweep(cfg):
    names = ["deterministic", "randomized"]
    if cfg.three_tier:
        names += ["three-tier-deterministic", "three-tier-randomized"]

    p(f"\n{c('SPIN-BLOCK COMPETITIVE RATIOS', Colors.BOLD, cfg)}", cfg)
    p(f"{cfg.sequences} random lists x {cfg.length} accesses, {cfg.trials} trials, seed={cfg.seed}", cfg)
    p(f"Bounds: deterministic <= 2.00, randomized ~ {COMPETITIVE_RATIO:.2f}", cfg)

    start = time.time()
    header = f"{'R/h':>6} {'workload':<12}" + "".join(f"{n:>26}" for n in names)

    for workload in ("random", "adversarial"):
        p(f"\n{header}", cfg)
        p("-" * len(header), cfg)
        for ratio in cfg.ratios:
            model = build_model(ratio, cfg)
            sequences = build_workloads(model, cfg)[workload]
            sim = Simulator(model, trials=cfg.trials, seed=cfg.seed)
            results = sim.compare(names, sequences)
            best = min(results, key=lambda n: results[n].mean_ratio)

            cells = []
            for name in names:
                s = results[name]
                cell = f"{s.mean_ratio:.3f} [{s.ci_low:.2f},{s.ci_high:.2f}]"
                if name == best:
                    cell = c(cell, Colors.GREEN, cfg)
                cells.append(f"{cell:>26}")
            p(f"{ratio:>6g} {workload:<12}" + "".join(cells), cfg)

    p(f"\n{c(f'Completed in {time.time() - start:.1f}s', Colors.GRAY, cfg)}", cfg)


def main():
    parser = argparse.ArgumentParser(
        description="Spin-block competitive ratio benchmark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --quick                Fast sweep
  %(prog)s -r 3,10 --trials 500   Two ratios, more trials
  %(prog)s --three-tier           Include three-tier policies
        """
    )
    parser.add_argument("--quick", action="store_true", help="Quick mode (10 lists, 20 trials)")
    parser.add_argument("-r", "--ratios", type=str, help="Comma-separated recover/hold ratios")
    parser.add_argument("--trials", type=int, help="Trials per list for randomized policies")
    parser.add_argument("--seed", type=int, help="Base seed")
    parser.add_argument("--three-tier", action="store_true", help="Include three-tier policies")
    parser.add_argument("--list", action="store_true", help="List available policies")
    parser.add_argument("--no-color", action="store_true", help="Disable colors")
    parser.add_argument("-q", "--quiet", action="store_true", help="Less output")
    args = parser.parse_args()

    if args.list:
        print("\nAvailable policies:")
        print("-" * 70)
        for name, (_, desc) in sorted(POLICIES.items()):
            print(f"  {name:<26} {desc}")
        print()
        return

    cfg = BenchConfig()
    if args.quick:
        cfg.sequences = 10
        cfg.trials = 20
    if args.ratios:
        cfg.ratios = [float(r) for r in args.ratios.split(",")]
    if args.trials:
        cfg.trials = args.trials
    if args.seed is not None:
        cfg.seed = args.seed
    cfg.three_tier = args.three_tier
    if args.no_color:
        cfg.color = False
    if args.quiet:
        cfg.verbose = False

    run_sweep(cfg)


if __name__ == "__main__":
    main()
