"""
spinblock - Online keep/compress/discard policies for an idle storage node

Usage:
    from spinblock import CostModel, build_policy, evaluate

    model = CostModel(hold_cost=1, recover_cost=3)
    result = evaluate(build_policy("deterministic"), [0, 4, 8, 12], model)
    result.ratio  # 2.0, Karlin's deterministic bound
"""

from .costs import CostModel, EvaluationResult, NodeState, PolicyDecision
from .errors import DegenerateSequence, InvalidCostModel, SamplingExhausted, SpinBlockError
from .evaluator import evaluate, offline_optimal_cost
from .karlin import COMPETITIVE_RATIO, Sampler, cdf, pdf, sample
from .policies import (
    POLICIES,
    DeterministicPolicy,
    RandomizedPolicy,
    ThreeTierDeterministicPolicy,
    ThreeTierRandomizedPolicy,
    build_policy,
)
from .simulator import SimulationSummary, Simulator

__version__ = "1.0.0"
__all__ = [
    "CostModel",
    "EvaluationResult",
    "NodeState",
    "PolicyDecision",
    "SpinBlockError",
    "InvalidCostModel",
    "SamplingExhausted",
    "DegenerateSequence",
    "evaluate",
    "offline_optimal_cost",
    "COMPETITIVE_RATIO",
    "Sampler",
    "pdf",
    "cdf",
    "sample",
    "POLICIES",
    "DeterministicPolicy",
    "RandomizedPolicy",
    "ThreeTierDeterministicPolicy",
    "ThreeTierRandomizedPolicy",
    "build_policy",
    "Simulator",
    "SimulationSummary",
]
