"""Generalized Black-Scholes (cost-of-carry) European pricer and Greeks.

Conventions
-----------
* ``vega`` and ``rho`` are per 1 percentage point (divided by 100).
* ``gammap`` is gamma scaled to a 1% spot move: ``gamma * s / 100``.
* ``theta`` is per year.
"""

from __future__ import annotations
import logging
from math import exp, log, sqrt

from .carry import BS_STYLES, carry_for
from .core import (
    CALL, FUTURE, EQUITY_STYLE, OptionContract, Signal,
    PRIMA, DELTA, GAMMA, GAMMAP, THETA, VEGA, RHO,
)
from .normal import cdf as N, density as n

__all__ = ["european_call", "european_value", "greeks", "price"]

logger = logging.getLogger(__name__)


def _d1_d2(S, K, T, b, sigma):
    srt = sigma * sqrt(T)
    d1 = (log(S / K) + (b + 0.5 * sigma * sigma) * T) / srt
    return d1, d1 - srt


def european_value(kind: str, S, K, T, r, b, sigma) -> float:
    """Plain closed-form European premium with carry ``b`` and discount rate ``r``."""
    d1, d2 = _d1_d2(S, K, T, b, sigma)
    df_b = exp((b - r) * T)
    df_r = exp(-r * T)
    if kind == CALL:
        return S * df_b * N(d1) - K * df_r * N(d2)
    return K * df_r * N(-d2) - S * df_b * N(-d1)


def european_call(S, K, T, r, b, sigma) -> float:
    return european_value(CALL, S, K, T, r, b, sigma)


def _expiry_values(opt: OptionContract) -> dict[str, float]:
    if opt.kind == CALL:
        delta = 1.0 if opt.s > opt.k else 0.0
    else:
        delta = -1.0 if opt.s < opt.k else 0.0
    return {
        PRIMA: opt.intrinsic(), DELTA: delta, GAMMA: 0.0, GAMMAP: 0.0,
        THETA: 0.0, VEGA: 0.0, RHO: 0.0,
    }


def greeks(opt: OptionContract) -> dict[str, float]:
    """Premium and all analytic Greeks for ``opt``.

    Raises
    ------
    InvalidSettlementStyle
        For a future whose settlement style is missing or matba_rofex_style.
    """
    carry = carry_for(opt, allowed_styles=BS_STYLES)
    if opt.T <= 0:
        return _expiry_values(opt)

    s, k, T, sigma = opt.s, opt.k, opt.T, opt.sigma
    b, r = carry.b, carry.r_eff
    d1, d2 = _d1_d2(s, k, T, b, sigma)
    df_b = exp((b - r) * T)
    df_r = exp(-r * T)
    sqrt_T = sqrt(T)
    n_d1 = n(d1)

    # Common
    gamma = df_b * n_d1 / (s * sigma * sqrt_T)
    vega  = s * df_b * n_d1 * sqrt_T / 100
    decay = -s * df_b * n_d1 * sigma / (2 * sqrt_T)

    if opt.kind == CALL:
        prima = s * df_b * N(d1) - k * df_r * N(d2)
        delta = df_b * N(d1)
        theta = decay + (b - r) * s * df_b * N(d1) - r * k * df_r * N(d2)
        rho   = T * k * df_r * N(d2) / 100
    else:
        prima = k * df_r * N(-d2) - s * df_b * N(-d1)
        delta = -df_b * N(-d1)
        theta = decay + (b - r) * s * df_b * N(-d1) + r * k * df_r * N(-d2)
        rho   = -T * k * df_r * N(-d2) / 100

    if opt.underlying == FUTURE:
        # Only the up-front premium of an equity-style future is discounted.
        rho = -T * prima / 100 if opt.settlement == EQUITY_STYLE else 0.0

    return {
        PRIMA: prima, DELTA: delta, GAMMA: gamma, GAMMAP: gamma * s / 100,
        THETA: theta, VEGA: vega, RHO: rho,
    }


def price(parameter: str, opt: OptionContract) -> float | Signal:
    """Return one of prima, delta, gamma, gammap, theta, vega, rho."""
    values = greeks(opt)
    try:
        return values[str(parameter).lower()]
    except KeyError:
        logger.debug("unsupported parameter %r for Black-Scholes", parameter)
        return Signal.INVALID_PARAMETER
