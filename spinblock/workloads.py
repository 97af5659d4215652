"""Access-sequence generators."""

import math
import random
from typing import Iterator, List, Optional

from .costs import CostModel


def random_sequence(length: int, max_time: int,
                    rng: Optional[random.Random] = None) -> List[int]:
    """
    Access at time 0 followed by up to `length` distinct uniform times in 1..max_time.

    Duplicate draws collapse, so the result may hold fewer than length + 1 accesses.
    """
    if length < 1:
        raise ValueError(f"length must be >= 1, got {length}")
    if max_time < 1:
        raise ValueError(f"max_time must be >= 1, got {max_time}")
    rng = rng if rng is not None else random.Random()
    times = sorted({rng.randint(1, max_time) for _ in range(length)})
    return [0] + times


def periodic_sequence(gap: int, gaps: int, start: int = 0) -> Iterator[int]:
    """Yield `gaps + 1` accesses spaced `gap` apart."""
    if gap < 1:
        raise ValueError(f"gap must be >= 1, got {gap}")
    for i in range(gaps + 1):
        yield start + i * gap


def adversarial_sequence(model: CostModel, gaps: int, start: int = 0) -> List[int]:
    """
    Accesses arriving one unit after the deterministic policy discards.

    Every gap costs the deterministic policy its threshold in holding plus a
    recovery, twice the offline optimum when recover/hold is integral.
    """
    gap = math.floor(model.break_even) + 1
    return list(periodic_sequence(gap, gaps, start))


def builtin_sequences(cfg, model: CostModel,
                      rng: Optional[random.Random] = None) -> List[List[int]]:
    """The CLI's access lists: `cfg.sequences` random lists plus one adversarial list."""
    rng = rng if rng is not None else random.Random(cfg.seed)
    sequences = [random_sequence(cfg.length, cfg.max_time, rng)
                 for _ in range(cfg.sequences)]
    sequences.append(adversarial_sequence(model, cfg.length))
    return sequences
