"""
Monte-Carlo comparison of policies over many access sequences.

Deterministic policies are evaluated once per sequence. Randomized policies
are evaluated `trials` times per sequence, each trial with its own random
source seeded from (seed, trial index), so a trial's outcome does not depend
on which other trials ran before it or in which process.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
from scipy import stats

from .costs import CostModel
from .errors import DegenerateSequence
from .evaluator import evaluate
from .policies import POLICIES, build_policy

log = logging.getLogger("spinblock.simulator")


@dataclass(frozen=True)
class SimulationSummary:
    policy: str
    ratios: Tuple[float, ...]
    mean_ratio: float
    std_ratio: float
    ci_low: float
    ci_high: float
    skipped: int = 0

    @property
    def evaluated(self) -> int:
        return len(self.ratios)


def mean_confidence_interval(values, confidence: float = 0.95) -> Tuple[float, float, float]:
    """Mean and Student-t confidence interval of `values`."""
    a = np.asarray(values, dtype=float)
    n = len(a)
    if n == 0:
        raise ValueError("no values to summarize")
    m = float(np.mean(a))
    if n < 2 or np.all(a == a[0]):
        return m, m, m
    h = float(stats.sem(a) * stats.t.ppf((1 + confidence) / 2.0, n - 1))
    return m, m - h, m + h


class Simulator:
    """
    Runs policies against access sequences and aggregates competitive ratios.

    Usage:
        sim = Simulator(CostModel(hold_cost=1, recover_cost=3), trials=200, seed=7)
        summary = sim.run("randomized", [[0, 4, 8, 12]])
        summary.mean_ratio  # ~1.63
    """

    def __init__(self, model: CostModel, trials: int = 100, seed: Optional[int] = None):
        if trials < 1:
            raise ValueError(f"trials must be >= 1, got {trials}")
        self.model = model
        self.trials = trials
        self.seed = seed

    def trial_rng(self, index: int) -> random.Random:
        if self.seed is None:
            return random.Random()
        return random.Random(f"{self.seed}-{index}")

    def _trials_for(self, policy_name: str) -> int:
        cls, _ = POLICIES[policy_name]
        return self.trials if cls.randomized else 1

    def run(self, policy_name: str, sequences: Iterable[Iterable[int]]) -> SimulationSummary:
        """
        Evaluate one policy on every sequence.

        Each sequence is materialized once, so generators can be replayed
        by every trial.

        Raises:
            DegenerateSequence: If no sequence could be evaluated
            InvalidCostModel: If the policy cannot run with this model
            SamplingExhausted: If a threshold could not be drawn
        """
        if policy_name not in POLICIES:
            raise ValueError(
                f"unknown policy {policy_name!r}, expected one of {sorted(POLICIES)}"
            )
        n_trials = self._trials_for(policy_name)
        ratios: List[float] = []
        skipped = 0
        trial_index = 0

        for seq_index, sequence in enumerate(sequences):
            sequence = list(sequence)
            seq_ratios = []
            try:
                for _ in range(n_trials):
                    policy = build_policy(policy_name, self.trial_rng(trial_index))
                    trial_index += 1
                    seq_ratios.append(evaluate(policy, sequence, self.model).ratio)
            except DegenerateSequence as exc:
                skipped += 1
                log.warning("%s: skipping sequence %d: %s", policy_name, seq_index, exc)
                continue
            ratios.extend(seq_ratios)

        if not ratios:
            raise DegenerateSequence(0, 0.0)

        mean, low, high = mean_confidence_interval(ratios)
        std = float(np.std(ratios, ddof=1)) if len(ratios) > 1 else 0.0
        log.info("%s: mean ratio %.4f (std %.4f) over %d evaluations, %d skipped",
                 policy_name, mean, std, len(ratios), skipped)
        return SimulationSummary(policy_name, tuple(ratios), mean, std, low, high, skipped)

    def compare(self, policy_names: Iterable[str],
                sequences: Iterable[Iterable[int]]) -> Dict[str, SimulationSummary]:
        """Run several policies on the same sequences."""
        sequences = [list(s) for s in sequences]
        return {name: self.run(name, sequences) for name in policy_names}
