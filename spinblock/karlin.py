"""
Karlin's optimal randomized discard-time distribution.

For the spin-block problem with break-even time `cost` (recovery cost over
holding cost), discarding after a threshold D drawn from

    pdf(x) = exp(x / cost) / ((e - 1) * cost),    0 <= x <= cost

is e / (e - 1) ~ 1.58 competitive against the offline optimum, versus 2 for
the best deterministic threshold.

pdf and cdf accept scalars or array-likes so they can be plotted directly:

    >>> import numpy as np
    >>> from spinblock import karlin
    >>> xs = np.linspace(0, 3, 301)
    >>> ys = karlin.pdf(xs, 3)
"""

import logging
import math
import random
from typing import Callable, Optional

import numpy as np

from .errors import SamplingExhausted

log = logging.getLogger("spinblock.karlin")

COMPETITIVE_RATIO = math.e / (math.e - 1)
MAX_ITERS = 10_000


def _check_cost(cost):
    if not cost > 0:
        raise ValueError(f"cost must be > 0, got {cost}")


def _result(values, x):
    # Scalars in, Python floats out.
    if np.ndim(x) == 0:
        return float(values)
    return values


def pdf(x, cost):
    """Density of the optimal discard threshold, zero outside [0, cost]."""
    _check_cost(cost)
    xs = np.asarray(x, dtype=float)
    inside = (xs >= 0) & (xs <= cost)
    values = np.where(inside, np.exp(np.clip(xs, 0, cost) / cost), 0.0)
    return _result(values / ((math.e - 1) * cost), x)


def cdf(x, cost):
    """Cumulative distribution of the optimal discard threshold."""
    _check_cost(cost)
    xs = np.clip(np.asarray(x, dtype=float), 0, cost)
    return _result((np.exp(xs / cost) - 1) / (math.e - 1), x)


def expected_value(cost) -> float:
    """Mean discard threshold, cost / (e - 1)."""
    _check_cost(cost)
    return cost / (math.e - 1)


def scale(value: float) -> int:
    """Round a real-valued break-even time onto the integer sampling grid."""
    if not value > 0 or math.isinf(value):
        raise ValueError(f"scale needs a finite value > 0, got {value}")
    return max(1, int(round(value)))


class Sampler:
    """
    Draws integer discard thresholds by rejection ("box") sampling.

    Usage:
        sampler = Sampler(random.Random(42))
        threshold = sampler.sample(3)  # integer in [0, 3]

    The envelope is the maximum of `density` over the integer grid, so any
    density shape is sampled without bias, not only monotone ones.
    """

    __slots__ = ('rng', 'density', 'max_iters', '_envelopes')

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        density: Callable = pdf,
        max_iters: int = MAX_ITERS,
    ):
        if max_iters < 1:
            raise ValueError(f"max_iters must be >= 1, got {max_iters}")
        self.rng = rng if rng is not None else random.Random()
        self.density = density
        self.max_iters = max_iters
        self._envelopes = {}  # cost -> max density on 0..cost

    def envelope(self, cost: int) -> float:
        if cost not in self._envelopes:
            grid = np.arange(cost + 1)
            self._envelopes[cost] = float(np.max(self.density(grid, cost)))
        return self._envelopes[cost]

    def sample(self, cost: int) -> int:
        """
        Draw one threshold in [0, cost].

        Raises:
            ValueError: If cost is not a non-negative integer
            SamplingExhausted: If no draw is accepted within max_iters
        """
        if isinstance(cost, bool) or not isinstance(cost, (int, np.integer)) or cost < 0:
            raise ValueError(f"cost must be a non-negative integer, got {cost!r}")
        cost = int(cost)
        if cost == 0:
            return 0

        max_value = self.envelope(cost)
        if not max_value > 0:
            raise SamplingExhausted(0, cost)

        for _ in range(self.max_iters):
            rand_x = self.rng.randint(0, cost)
            rand_y = max_value * self.rng.random()
            if rand_y <= self.density(rand_x, cost):
                return rand_x

        log.error("rejection sampling exhausted: cost=%d iters=%d", cost, self.max_iters)
        raise SamplingExhausted(self.max_iters, cost)


def sample(cost: int, rng: Optional[random.Random] = None) -> int:
    """Draw one discard threshold in [0, cost] from the Karlin distribution."""
    return Sampler(rng).sample(cost)
