"""Default simulation parameters, overridable from SPINBLOCK_* environment variables."""

import os
from dataclasses import dataclass, fields
from typing import Optional

ENV_PREFIX = "SPINBLOCK_"


@dataclass
class SimulationConfig:
    # Cost model
    hold_cost: float = 1.0
    recover_cost: float = 3.0
    compress_cost: float = 1.2
    compress_recover_cost: float = 0.5
    compress_hold_cost: float = 0.0

    # Built-in access lists
    sequences: int = 100
    length: int = 10
    max_time: int = 100

    # Monte-Carlo
    trials: int = 100
    seed: Optional[int] = 0

    @classmethod
    def from_env(cls, environ=None) -> "SimulationConfig":
        """Build a config, taking each field from SPINBLOCK_<FIELD> when set.

        Raises:
            ValueError: If a variable cannot be converted, naming the variable
        """
        environ = os.environ if environ is None else environ
        cfg = cls()
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            kind = int if f.name == "seed" else type(getattr(cfg, f.name))
            try:
                if f.name == "seed" and raw.lower() == "none":
                    value = None
                else:
                    value = kind(raw)
            except ValueError:
                raise ValueError(
                    f"{ENV_PREFIX}{f.name.upper()}={raw!r}: expected {kind.__name__}"
                ) from None
            setattr(cfg, f.name, value)
        return cfg
