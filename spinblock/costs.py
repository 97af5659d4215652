"""
Cost model for the spin-block (keep / compress / discard) problem.

A node that is idle pays a continuous holding cost while it keeps its data.
It may instead discard the data for free and pay a one-time recovery cost on
the next access, or (three-tier mode) compress it for a one-time compress
cost and pay a smaller recovery cost on the next access.

Offline cost of one idle gap of length g, as a function of g:

    keep:      hold_cost * g
    compress:  compress_cost + compress_hold_cost * g + compress_recover_cost
    discard:   recover_cost

The optimal offline algorithm follows the lower envelope of these lines.
"""

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from .errors import InvalidCostModel


class NodeState(Enum):
    """Mode of a node between two accesses."""

    KEEP = "keep"
    COMPRESS = "compress"
    DISCARD = "discard"


class PolicyDecision(NamedTuple):
    next_state: NodeState
    cost_incurred: float


@dataclass(frozen=True)
class EvaluationResult:
    policy_cost: float
    offline_optimal_cost: float
    ratio: float


def _check_finite(name: str, value: float) -> None:
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        raise InvalidCostModel(name, value, "must be a real number")
    if not math.isfinite(value):
        raise InvalidCostModel(name, value, "must be finite")


@dataclass(frozen=True)
class CostModel:
    """
    Cost parameters of one experiment.

    Args:
        hold_cost: Cost per idle time unit of keeping the data (> 0)
        recover_cost: One-time cost to recover discarded data (> hold_cost)
        compress_cost: One-time cost to compress; None for a two-tier model
        compress_recover_cost: Cost to decompress on the next access
        compress_hold_cost: Cost per idle time unit while compressed

    Raises:
        InvalidCostModel: If the parameters violate
            0 < hold_cost <= compress_cost < recover_cost,
            0 <= compress_recover_cost < recover_cost and
            0 <= compress_hold_cost < hold_cost
    """

    hold_cost: float
    recover_cost: float
    compress_cost: Optional[float] = None
    compress_recover_cost: Optional[float] = None
    compress_hold_cost: float = 0.0

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise InvalidCostModel unless the cost ordering invariants hold."""
        _check_finite("hold_cost", self.hold_cost)
        _check_finite("recover_cost", self.recover_cost)
        if self.hold_cost <= 0:
            raise InvalidCostModel("hold_cost", self.hold_cost, "must be > 0")
        if self.recover_cost <= self.hold_cost:
            raise InvalidCostModel(
                "recover_cost", self.recover_cost,
                f"must be > hold_cost ({self.hold_cost})",
            )

        if self.compress_cost is None:
            if self.compress_recover_cost is not None:
                raise InvalidCostModel(
                    "compress_recover_cost", self.compress_recover_cost,
                    "requires compress_cost",
                )
            return

        _check_finite("compress_cost", self.compress_cost)
        if self.compress_recover_cost is None:
            raise InvalidCostModel(
                "compress_recover_cost", None, "required when compress_cost is set"
            )
        _check_finite("compress_recover_cost", self.compress_recover_cost)
        _check_finite("compress_hold_cost", self.compress_hold_cost)

        if not self.hold_cost <= self.compress_cost < self.recover_cost:
            raise InvalidCostModel(
                "compress_cost", self.compress_cost,
                f"must lie in [hold_cost, recover_cost) = "
                f"[{self.hold_cost}, {self.recover_cost})",
            )
        if not 0 <= self.compress_recover_cost < self.recover_cost:
            raise InvalidCostModel(
                "compress_recover_cost", self.compress_recover_cost,
                f"must lie in [0, recover_cost) = [0, {self.recover_cost})",
            )
        if not 0 <= self.compress_hold_cost < self.hold_cost:
            raise InvalidCostModel(
                "compress_hold_cost", self.compress_hold_cost,
                f"must lie in [0, hold_cost) = [0, {self.hold_cost})",
            )

    @property
    def three_tier(self) -> bool:
        return self.compress_cost is not None

    @property
    def break_even(self) -> float:
        """Idle time after which keeping costs as much as one recovery (D*)."""
        return self.recover_cost / self.hold_cost

    @property
    def compress_threshold(self) -> Optional[float]:
        """
        Idle time where the compress line crosses below the keep line.

        None for two-tier models and for models where compressing is never
        strictly cheaper than both keeping and discarding.
        """
        if not self.three_tier:
            return None
        one_time = self.compress_cost + self.compress_recover_cost
        crossing = one_time / (self.hold_cost - self.compress_hold_cost)
        if self.hold_cost * crossing >= self.recover_cost:
            return None
        return crossing

    @property
    def discard_threshold(self) -> float:
        """Idle time after which the lower envelope is the discard line."""
        if self.compress_threshold is None:
            return self.break_even
        if self.compress_hold_cost == 0:
            return math.inf
        remaining = self.recover_cost - self.compress_cost - self.compress_recover_cost
        return remaining / self.compress_hold_cost

    def interval_cost(self, gap: int) -> float:
        """Offline optimal cost of one idle gap of length `gap`."""
        options = [self.hold_cost * gap, self.recover_cost]
        if self.three_tier:
            options.append(
                self.compress_cost
                + self.compress_hold_cost * gap
                + self.compress_recover_cost
            )
        return min(options)

    def recovery_cost(self, state: NodeState) -> float:
        """Cost paid when an access arrives while the node is in `state`."""
        if state is NodeState.DISCARD:
            return self.recover_cost
        if state is NodeState.COMPRESS:
            if not self.three_tier:
                raise InvalidCostModel(
                    "compress_cost", None, "COMPRESS state needs a three-tier model"
                )
            return self.compress_recover_cost
        return 0.0
