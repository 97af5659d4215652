"""
Competitive-ratio evaluation of a policy against one access sequence.

The sequence is replayed gap by gap. Within a gap of length g the policy is
asked for a decision at idle times 1..g; when the next access arrives the
node pays the recovery cost of its state and returns to KEEP. The offline
optimum pays, for each gap, the cheapest of keeping, compressing or
discarding for the whole gap.
"""

import logging
import numbers
from typing import Iterable, Iterator, Tuple

from .costs import CostModel, EvaluationResult, NodeState
from .errors import DegenerateSequence

log = logging.getLogger("spinblock.evaluator")


def iter_gaps(access_sequence: Iterable[int]) -> Iterator[Tuple[int, int]]:
    """
    Yield (previous_access, gap) for each pair of consecutive accesses.

    Raises:
        ValueError: If a timestamp is negative, not an integer, or not
            strictly greater than the previous one
    """
    prev = None
    for t in access_sequence:
        if isinstance(t, bool) or not isinstance(t, numbers.Integral):
            raise ValueError(f"access time must be an integer, got {t!r}")
        t = int(t)
        if t < 0:
            raise ValueError(f"access time must be >= 0, got {t}")
        if prev is not None:
            if t <= prev:
                raise ValueError(
                    f"access times must be strictly increasing, got {t} after {prev}"
                )
            yield prev, t - prev
        prev = t


def offline_optimal_cost(access_sequence: Iterable[int], model: CostModel) -> float:
    """Cost of the omniscient policy that knows every gap in advance."""
    return sum(model.interval_cost(gap) for _, gap in iter_gaps(access_sequence))


def _replay_gap(policy, gap: int, model: CostModel) -> float:
    policy.on_access(model)
    state = NodeState.KEEP
    cost = 0.0
    for elapsed in range(1, gap + 1):
        decision = policy.decide(elapsed, state, model)
        state = decision.next_state
        cost += decision.cost_incurred
        if state is NodeState.DISCARD:
            # Nothing more to pay until the access
            break
    return cost + model.recovery_cost(state)


def evaluate(policy, access_sequence: Iterable[int], model: CostModel) -> EvaluationResult:
    """
    Replay `access_sequence` under `policy` and compare with the offline optimum.

    Args:
        policy: Any registered policy (see spinblock.policies)
        access_sequence: Strictly increasing non-negative access times; lists
            and generators are both consumed lazily
        model: Cost parameters

    Returns:
        EvaluationResult with ratio = policy_cost / offline_optimal_cost

    Raises:
        DegenerateSequence: If the sequence has fewer than two accesses
        InvalidCostModel: If the policy cannot run with `model`
        SamplingExhausted: If a randomized policy fails to draw a threshold
    """
    policy_cost = 0.0
    offline_cost = 0.0
    gaps = 0

    for _, gap in iter_gaps(access_sequence):
        gaps += 1
        policy_cost += _replay_gap(policy, gap, model)
        offline_cost += model.interval_cost(gap)

    if offline_cost <= 0:
        raise DegenerateSequence(gaps, offline_cost)

    ratio = policy_cost / offline_cost
    log.debug("%r: policy=%.3f offline=%.3f ratio=%.4f over %d gaps",
              policy, policy_cost, offline_cost, ratio, gaps)
    return EvaluationResult(policy_cost, offline_cost, ratio)
