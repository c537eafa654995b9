"""Implied volatility by bisection.

One solver, ``bisect``, inverts any premium function that is increasing in
volatility.  The per-model wrappers only differ in the upper bracket and in
which underlying/settlement combinations they accept.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from . import binomial, bjerksund_stensland, black_scholes
from .carry import BS_STYLES, BS93_STYLES, LATTICE_STYLES, carry_for
from .config import DEFAULT_SETTINGS
from .core import EQUITY_STYLE, PRIMA, OptionContract, Signal
from .errors import InvalidSettlementStyle, InvalidUnderlyingKind

__all__ = ["bisect", "bs_implied_vol", "binomial_implied_vol", "bs93_implied_vol"]

logger = logging.getLogger(__name__)


def bisect(
    pricing_fn: Callable[[float], float],
    target: float,
    low: float = 0.0,
    high: float = DEFAULT_SETTINGS.bs_vol_upper,
    *,
    epsilon: float = DEFAULT_SETTINGS.bisection_epsilon,
    max_iterations: int = DEFAULT_SETTINGS.bisection_max_iterations,
) -> float | Signal:
    """Find sigma in ``[low, high]`` with ``pricing_fn(sigma) == target``.

    Assumes ``pricing_fn(low) <= target <= pricing_fn(high)`` without
    checking it.  Returns the bracket midpoint once the bracket is no wider
    than ``epsilon``, or ``Signal.NON_CONVERGENCE`` after ``max_iterations``
    evaluations.  A bracket that collapses onto the initial ``high`` means
    every trial premium stayed at or below ``target``; there is no root
    inside the bounds and ``Signal.NON_CONVERGENCE`` is returned as well.
    """
    iterations = 0
    upper_moved = False
    while high - low > epsilon:
        iterations += 1
        if iterations > max_iterations:
            logger.warning("implied vol did not converge after %d iterations "
                           "(target=%g, bracket=[%g, %g])", max_iterations, target, low, high)
            return Signal.NON_CONVERGENCE
        mid = 0.5 * (low + high)
        if pricing_fn(mid) > target:
            high = mid
            upper_moved = True
        else:
            low = mid
    if not upper_moved:
        logger.warning("target premium %g not reached below sigma=%g", target, high)
        return Signal.NON_CONVERGENCE
    logger.debug("implied vol converged in %d iterations", iterations)
    return 0.5 * (low + high)


def _solve(opt, premium, pricer, high, epsilon, max_iterations, carry_kwargs):
    try:
        carry_for(opt, **carry_kwargs)
    except (InvalidUnderlyingKind, InvalidSettlementStyle) as e:
        logger.debug("implied vol unavailable: %s", e)
        return Signal.NON_CONVERGENCE
    if premium <= 0 or opt.T <= 0:
        return 0.0

    def premium_at(sigma: float) -> float:
        return pricer(replace(opt, sigma=sigma))

    return bisect(premium_at, premium, 0.0, high,
                  epsilon=epsilon, max_iterations=max_iterations)


def bs_implied_vol(
    opt: OptionContract,
    premium: float,
    *,
    high: float = DEFAULT_SETTINGS.bs_vol_upper,
    epsilon: float = DEFAULT_SETTINGS.bisection_epsilon,
    max_iterations: int = DEFAULT_SETTINGS.bisection_max_iterations,
) -> float | Signal:
    """Generalized Black-Scholes implied vol.  ``opt.sigma`` is ignored."""
    return _solve(opt, premium, lambda c: black_scholes.price(PRIMA, c), high,
                  epsilon, max_iterations, {"allowed_styles": BS_STYLES})


def binomial_implied_vol(
    opt: OptionContract,
    premium: float,
    american: bool = False,
    steps: int = DEFAULT_SETTINGS.default_steps,
    *,
    max_steps: int | None = DEFAULT_SETTINGS.max_steps,
    high: float = DEFAULT_SETTINGS.lattice_vol_upper,
    epsilon: float = DEFAULT_SETTINGS.bisection_epsilon,
    max_iterations: int = DEFAULT_SETTINGS.bisection_max_iterations,
) -> float | Signal:
    """Lattice implied vol.  ``opt.sigma`` is ignored.

    Raises
    ------
    InvalidStepCount
        Before any tree is built.
    """
    steps = binomial.validate_steps(steps, max_steps)
    pricer = lambda c: binomial.price(PRIMA, c, american, steps, max_steps=max_steps)  # noqa: E731
    return _solve(opt, premium, pricer, high, epsilon, max_iterations,
                  {"allowed_styles": LATTICE_STYLES})


def bs93_implied_vol(
    opt: OptionContract,
    premium: float,
    *,
    high: float = DEFAULT_SETTINGS.bs93_vol_upper,
    epsilon: float = DEFAULT_SETTINGS.bisection_epsilon,
    max_iterations: int = DEFAULT_SETTINGS.bisection_max_iterations,
) -> float | Signal:
    """Bjerksund-Stensland implied vol.  ``opt.sigma`` is ignored."""
    return _solve(opt, premium, bjerksund_stensland.premium, high, epsilon, max_iterations,
                  {"allowed_styles": BS93_STYLES, "default_style": EQUITY_STYLE})
