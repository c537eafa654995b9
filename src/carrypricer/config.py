"""Engine tunables.

Every pricing function takes these as keyword arguments; ``EngineSettings``
gathers the defaults in one place so entry points can override them from
flags or ``CARRYPRICER_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

__all__ = ["EngineSettings", "DEFAULT_SETTINGS"]

_ENV_PREFIX = "CARRYPRICER_"


@dataclass(frozen=True)
class EngineSettings:
    default_steps: int = 500
    max_steps: int = 5000             # lattice ceiling: cost is O(steps**2) per price
    bisection_epsilon: float = 1e-4
    bisection_max_iterations: int = 100
    bs_vol_upper: float = 4.0
    lattice_vol_upper: float = 4.0
    bs93_vol_upper: float = 3.0
    bump: float = 0.01                # finite-difference step for bumped Greeks

    def __post_init__(self):
        if self.default_steps <= 1:
            raise ValueError(f"default_steps must be > 1, got {self.default_steps}")
        if self.max_steps < self.default_steps:
            raise ValueError("max_steps must be >= default_steps")
        if self.bisection_epsilon <= 0:
            raise ValueError("bisection_epsilon must be positive")
        if self.bisection_max_iterations <= 0:
            raise ValueError("bisection_max_iterations must be positive")
        if self.bump <= 0:
            raise ValueError("bump must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        """Build settings, overriding defaults with ``CARRYPRICER_<FIELD>`` values."""
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = environ.get(_ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            cast = int if f.type in (int, "int") else float
            try:
                overrides[f.name] = cast(raw)
            except ValueError as e:
                raise ValueError(
                    f"{_ENV_PREFIX + f.name.upper()} must be {cast.__name__}, got {raw!r}"
                ) from e
        return cls(**overrides)


DEFAULT_SETTINGS = EngineSettings()
