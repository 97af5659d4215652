"""
Online keep / compress / discard policies.

Every policy answers the same question once per idle time unit: given how
long the node has been idle and what state it is in, what state should it be
in for the next unit and what does that unit cost?

The variants share no base class. Each exposes:

    name, randomized             registry metadata
    on_access(model)             a new idle cycle starts (thresholds redrawn)
    decide(elapsed, state, model) -> PolicyDecision

so the evaluator does not care how many tiers a policy uses.
"""

import math
import random
from typing import Callable, Dict, Optional, Tuple, Union

from .costs import CostModel, NodeState, PolicyDecision
from .errors import InvalidCostModel
from .karlin import Sampler, scale


# ============================================================================
# POLICY REGISTRY
# ============================================================================

POLICIES: Dict[str, Tuple[Callable, str]] = {}  # name -> (class, description)


def register(name: str, desc: str = ""):
    """Decorator to register a policy."""
    def decorator(cls):
        cls.name = name
        POLICIES[name] = (cls, desc)
        return cls
    return decorator


def build_policy(name: str, rng: Optional[random.Random] = None):
    """Construct a registered policy; randomized ones get `rng`."""
    try:
        cls, _ = POLICIES[name]
    except KeyError:
        raise ValueError(
            f"unknown policy {name!r}, expected one of {sorted(POLICIES)}"
        ) from None
    if cls.randomized:
        return cls(rng=rng)
    return cls()


# ============================================================================
# SHARED STEP LOGIC
# ============================================================================

def _step(elapsed: int, state: NodeState, model: CostModel,
          compress_at: Optional[float], discard_at: float) -> PolicyDecision:
    """Advance one idle unit given the cycle's compress/discard thresholds."""
    if elapsed < 1:
        raise ValueError(f"time_since_last_access must be >= 1, got {elapsed}")

    # Discarded data stays discarded until the next access
    if state is NodeState.DISCARD or elapsed > discard_at:
        return PolicyDecision(NodeState.DISCARD, 0.0)

    if compress_at is not None and elapsed > compress_at:
        cost = model.compress_hold_cost
        if state is not NodeState.COMPRESS:
            cost += model.compress_cost
        return PolicyDecision(NodeState.COMPRESS, cost)

    if state is NodeState.COMPRESS:
        # Thresholds are monotone within a cycle, so this is a caller bug
        raise ValueError(f"cannot return from COMPRESS to KEEP at elapsed={elapsed}")
    return PolicyDecision(NodeState.KEEP, model.hold_cost)


def _require_three_tier(model: CostModel) -> None:
    if not model.three_tier:
        raise InvalidCostModel(
            "compress_cost", model.compress_cost,
            "three-tier policies need compress_cost and compress_recover_cost",
        )


def _require_cost_model(model) -> None:
    if not isinstance(model, CostModel):
        raise InvalidCostModel("model", model, "expected a CostModel")
    model.validate()


# ============================================================================
# TWO-TIER POLICIES
# ============================================================================

@register("deterministic", "Discard once idle longer than recover/hold (2-competitive)")
class DeterministicPolicy:
    __slots__ = ()
    randomized = False

    def on_access(self, model: CostModel) -> None:
        _require_cost_model(model)

    def decide(self, time_since_last_access: int, current_state: NodeState,
               model: CostModel) -> PolicyDecision:
        return _step(time_since_last_access, current_state, model,
                     None, model.break_even)

    def __repr__(self):
        return "DeterministicPolicy()"


@register("randomized", "Karlin threshold redrawn after every access (e/(e-1)-competitive)")
class RandomizedPolicy:
    """
    Discards once idle longer than a threshold D drawn from the Karlin
    distribution scaled to the break-even time. D is redrawn on every access.
    """

    __slots__ = ('sampler', 'threshold')
    randomized = True

    def __init__(self, rng: Optional[random.Random] = None,
                 sampler: Optional[Sampler] = None):
        self.sampler = sampler if sampler is not None else Sampler(rng)
        self.threshold = None

    def on_access(self, model: CostModel) -> None:
        _require_cost_model(model)
        self.threshold = self.sampler.sample(scale(model.break_even))

    def decide(self, time_since_last_access: int, current_state: NodeState,
               model: CostModel) -> PolicyDecision:
        if self.threshold is None:
            self.on_access(model)
        return _step(time_since_last_access, current_state, model,
                     None, self.threshold)

    def __repr__(self):
        return f"RandomizedPolicy(threshold={self.threshold})"


# ============================================================================
# THREE-TIER POLICIES
# ============================================================================

@register("three-tier-deterministic", "Follow the lower envelope of keep/compress/discard")
class ThreeTierDeterministicPolicy:
    """
    Keeps until the compress line drops below the keep line, then compresses
    until the discard line drops below the compress line. When compression is
    never worthwhile this is the two-tier deterministic policy.
    """

    __slots__ = ()
    randomized = False

    def on_access(self, model: CostModel) -> None:
        _require_cost_model(model)
        _require_three_tier(model)

    def decide(self, time_since_last_access: int, current_state: NodeState,
               model: CostModel) -> PolicyDecision:
        _require_three_tier(model)
        return _step(time_since_last_access, current_state, model,
                     model.compress_threshold, model.discard_threshold)

    def __repr__(self):
        return "ThreeTierDeterministicPolicy()"


@register("three-tier-randomized", "Independent Karlin thresholds for compress and discard")
class ThreeTierRandomizedPolicy:
    """
    Draws two thresholds independently on every access:

        compress_at ~ Karlin scaled to the compress threshold
        discard_at  = compress threshold + Karlin scaled to the time spent
                      compressed before discarding breaks even

    so compress_at <= discard_at always holds. With a free compressed state
    the node never discards.
    """

    __slots__ = ('sampler', 'compress_at', 'discard_at')
    randomized = True

    def __init__(self, rng: Optional[random.Random] = None,
                 sampler: Optional[Sampler] = None):
        self.sampler = sampler if sampler is not None else Sampler(rng)
        self.compress_at = None
        self.discard_at = None

    def on_access(self, model: CostModel) -> None:
        _require_cost_model(model)
        _require_three_tier(model)

        compress_threshold = model.compress_threshold
        discard_threshold = model.discard_threshold
        if compress_threshold is None:
            self.compress_at = None
            self.discard_at = self.sampler.sample(scale(discard_threshold))
            return

        self.compress_at = self.sampler.sample(scale(compress_threshold))
        if math.isinf(discard_threshold):
            self.discard_at = math.inf
        else:
            window = scale(discard_threshold - compress_threshold)
            self.discard_at = compress_threshold + self.sampler.sample(window)

    def decide(self, time_since_last_access: int, current_state: NodeState,
               model: CostModel) -> PolicyDecision:
        if self.discard_at is None:
            self.on_access(model)
        return _step(time_since_last_access, current_state, model,
                     self.compress_at, self.discard_at)

    def __repr__(self):
        return (f"ThreeTierRandomizedPolicy(compress_at={self.compress_at}, "
                f"discard_at={self.discard_at})")


Policy = Union[
    DeterministicPolicy,
    RandomizedPolicy,
    ThreeTierDeterministicPolicy,
    ThreeTierRandomizedPolicy,
]
