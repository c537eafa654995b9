"""Cox-Ross-Rubinstein lattice with cost of carry and futures margining.

Price, delta, gamma and theta are read off the tree itself; vega and rho
come from re-pricing the whole tree with ``sigma`` or ``r`` bumped by 0.01
and reporting ``(P(+h) - P(-h)) / 2``, i.e. the change per 1% move.  This
differs from the Black-Scholes module, which divides by 100.

Gamma and the ``C21`` node used for theta come from level 2 of the tree.  A
two-step tree has no interior level 2, so both are read from the terminal
payoff layer instead of being left at zero.
"""

from __future__ import annotations
import logging
import numbers
from math import exp, sqrt

import numpy as np

from .carry import LATTICE_STYLES, CostOfCarry, carry_for
from .config import DEFAULT_SETTINGS
from .core import (
    FUTURE, MATBA_ROFEX_STYLE, OptionContract, Signal,
    PRIMA, DELTA, GAMMA, THETA, VEGA, RHO,
)
from .errors import InvalidStepCount
from .greeks import central_difference

__all__ = ["validate_steps", "tree_values", "greeks", "price"]

logger = logging.getLogger(__name__)

_TREE_PARAMS = (PRIMA, DELTA, GAMMA, THETA)
_BUMPED_PARAMS = (VEGA, RHO)


def validate_steps(steps, max_steps: int | None = DEFAULT_SETTINGS.max_steps) -> int:
    """Fail with ``InvalidStepCount`` unless ``1 < steps <= max_steps``."""
    if isinstance(steps, bool) or not isinstance(steps, numbers.Integral) or steps <= 1:
        raise InvalidStepCount(f"steps must be an integer greater than 1, got {steps!r}")
    if max_steps is not None and steps > max_steps:
        raise InvalidStepCount(f"steps={steps} exceeds the configured ceiling {max_steps}")
    return int(steps)


def _expiry_values(opt: OptionContract) -> dict[str, float]:
    payoff = opt.intrinsic()
    delta = float(opt.z) if payoff > 0 else 0.0
    return {PRIMA: payoff, DELTA: delta, GAMMA: 0.0, THETA: 0.0}


def _level_gamma(s, u, d, V) -> float:
    """Gamma from the three nodes of level 2 (unequal spacing)."""
    S_uu, S_um, S_dd = s * u * u, s * u * d, s * d * d
    C_dd, C_um, C_uu = V[0], V[1], V[2]
    return ((C_uu - C_um) / (S_uu - S_um) - (C_um - C_dd) / (S_um - S_dd)) / ((S_uu - S_dd) / 2)


def tree_values(
    opt: OptionContract, carry: CostOfCarry, american: bool, steps: int
) -> dict[str, float]:
    """Backward induction; returns prima, delta, gamma and theta."""
    if opt.T <= 0:
        return _expiry_values(opt)

    s, k, z = opt.s, opt.k, opt.z
    b, r = carry.b, carry.r_eff
    dt = opt.T / steps
    u  = exp(opt.sigma * sqrt(dt))
    d  = 1.0 / u
    p  = (exp(b * dt) - d) / (u - d)
    disc = exp(-r * dt)
    accrual = exp(r * dt) - 1.0
    daily_accrual = opt.underlying == FUTURE and opt.settlement == MATBA_ROFEX_STYLE
    if not (0.0 < p < 1.0):
        logger.debug("risk-neutral probability p=%.6f outside (0,1) (sigma=%g, steps=%d)",
                     p, opt.sigma, steps)

    # Payoff at maturity
    j = np.arange(steps + 1)
    V = np.maximum(0.0, z * (s * u ** j * d ** (steps - j) - k))

    delta = gamma = 0.0
    c21 = 0.0
    if steps == 2:
        gamma, c21 = _level_gamma(s, u, d, V), float(V[1])

    # Backward induction
    for level in range(steps - 1, -1, -1):
        i = np.arange(level + 1)
        intrinsic = np.maximum(0.0, z * (s * u ** i * d ** (level - i) - k))
        continuation = p * V[1:] + (1.0 - p) * V[:-1]
        if daily_accrual:
            # the margin account earns interest on the day's intrinsic value
            expected = disc * (intrinsic * accrual + continuation)
        else:
            expected = disc * continuation
        V = np.maximum(intrinsic, expected) if american else expected

        if level == 2:
            gamma, c21 = _level_gamma(s, u, d, V), float(V[1])
        elif level == 1:
            delta = (V[1] - V[0]) / (s * u - s * d)

    c00 = float(V[0])
    return {
        PRIMA: c00,
        DELTA: float(delta),
        GAMMA: float(gamma),
        THETA: (c21 - c00) / (2 * dt),
    }


def _premium_pricer(american: bool, steps: int):
    def pricer(opt: OptionContract) -> float:
        return tree_values(opt, carry_for(opt, allowed_styles=LATTICE_STYLES),
                           american, steps)[PRIMA]
    return pricer


def _bumped(parameter: str, opt: OptionContract, american: bool, steps: int, bump: float) -> float:
    field = "sigma" if parameter == VEGA else "r"
    return central_difference(_premium_pricer(american, steps), opt, field, bump,
                              denominator=2.0)


def greeks(
    opt: OptionContract,
    american: bool = False,
    steps: int = DEFAULT_SETTINGS.default_steps,
    *,
    max_steps: int | None = DEFAULT_SETTINGS.max_steps,
    bump: float = DEFAULT_SETTINGS.bump,
) -> dict[str, float]:
    """All lattice outputs: prima, delta, gamma, theta, vega, rho."""
    steps = validate_steps(steps, max_steps)
    carry = carry_for(opt, allowed_styles=LATTICE_STYLES)
    logger.debug("pricing %s %s on %d-step tree", "american" if american else "european",
                 opt.kind, steps)
    values = tree_values(opt, carry, american, steps)
    for parameter in _BUMPED_PARAMS:
        values[parameter] = _bumped(parameter, opt, american, steps, bump)
    return values


def price(
    parameter: str,
    opt: OptionContract,
    american: bool = False,
    steps: int = DEFAULT_SETTINGS.default_steps,
    *,
    max_steps: int | None = DEFAULT_SETTINGS.max_steps,
    bump: float = DEFAULT_SETTINGS.bump,
) -> float | Signal:
    """Return one of prima, delta, gamma, theta, vega, rho from the lattice.

    Raises
    ------
    InvalidStepCount
        ``steps`` is not an integer in ``(1, max_steps]``.
    InvalidSettlementStyle
        A future without a settlement style.
    """
    steps = validate_steps(steps, max_steps)
    carry = carry_for(opt, allowed_styles=LATTICE_STYLES)
    parameter = str(parameter).lower()

    if parameter in _TREE_PARAMS:
        return tree_values(opt, carry, american, steps)[parameter]
    if parameter in _BUMPED_PARAMS:
        return _bumped(parameter, opt, american, steps, bump)
    logger.debug("unsupported parameter %r for the binomial lattice", parameter)
    return Signal.INVALID_PARAMETER
