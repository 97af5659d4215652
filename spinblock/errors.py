"""Exceptions raised by spinblock."""

from typing import Any, Optional


class SpinBlockError(Exception):
    """Base class for every failure spinblock reports."""


class InvalidCostModel(SpinBlockError, ValueError):
    """A cost parameter violates the ordering the problem needs."""

    def __init__(self, parameter: str, value: Any, reason: str):
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"invalid {parameter}={value!r}: {reason}")


class SamplingExhausted(SpinBlockError, RuntimeError):
    """Rejection sampling gave up without accepting a draw."""

    def __init__(self, iterations: int, cost: int):
        self.iterations = iterations
        self.cost = cost
        super().__init__(
            f"could not accept a sample for cost={cost} in {iterations} iterations"
        )


class DegenerateSequence(SpinBlockError, ValueError):
    """The access sequence is too short to define an offline optimum."""

    def __init__(self, gaps: int, offline_cost: Optional[float] = None):
        self.gaps = gaps
        self.offline_cost = offline_cost
        super().__init__(
            f"access sequence has {gaps} idle intervals "
            f"(offline optimal cost {offline_cost}); need at least two accesses"
        )
