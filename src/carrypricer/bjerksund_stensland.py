"""Bjerksund-Stensland (1993) closed-form approximation for American options.

Puts are priced through the put-call transformation
``P(S, X, T, r, b, sigma) = C(X, S, T, r - b, -b, sigma)``.  Greeks are
centered finite differences on the premium with a 0.01 bump; vega and rho
are reported per 1 percentage point.
"""

from __future__ import annotations
import logging
from math import exp, inf, log, sqrt

from .black_scholes import european_call
from .carry import BS93_STYLES, carry_for
from .config import DEFAULT_SETTINGS
from .core import (
    CALL, PUT, EQUITY_STYLE, OptionContract, Signal,
    PRIMA, DELTA, GAMMA, THETA, VEGA, RHO,
)
from .errors import InvalidOptionKind
from .greeks import central_difference, second_difference
from .normal import cdf as N

__all__ = ["trigger_price", "american_call", "american_option", "premium", "greeks", "price"]

logger = logging.getLogger(__name__)

_MIN_THETA_BUMP = 1e-6
# largest argument math.exp accepts without OverflowError
_MAX_EXP = 709.0


def _phi(S, T, gamma, H, I, r, b, sigma, scale=1.0):
    """phi of the 1993 paper divided by scale**gamma."""
    sig2 = sigma * sigma
    srt  = sigma * sqrt(T)
    lam  = -r + gamma * b + 0.5 * gamma * (gamma - 1.0) * sig2
    d    = -(log(S / H) + (b + (gamma - 0.5) * sig2) * T) / srt
    kappa = 2.0 * b / sig2 + (2.0 * gamma - 1.0)
    growth = lam * T + gamma * log(S / scale)
    return exp(growth) * N(d) - exp(growth + kappa * log(I / S)) * N(
        d - 2.0 * log(I / S) / srt
    )


def _beta(r, b, sigma):
    sig2 = sigma * sigma
    return (0.5 - b / sig2) + sqrt((b / sig2 - 0.5) ** 2 + 2.0 * r / sig2)


def trigger_price(X, T, r, b, sigma) -> float:
    """Flat early-exercise boundary ``I``; only meaningful when ``b < r``."""
    beta = _beta(r, b, sigma)
    B_inf = beta / (beta - 1.0) * X
    B0 = max(X, r / (r - b) * X)
    hT = -(b * T + 2.0 * sigma * sqrt(T)) * B0 / (B_inf - B0)
    # at very low vol hT explodes; the boundary then drops to -inf (exercise now)
    growth = exp(hT) if hT < _MAX_EXP else inf
    return B0 + (B_inf - B0) * (1.0 - growth)


def american_call(S, X, T, r, b, sigma) -> float:
    if b >= r:
        # early exercise is never optimal
        return european_call(S, X, T, r, b, sigma)

    beta = _beta(r, b, sigma)
    I = trigger_price(X, T, r, b, sigma)
    if S >= I:
        return S - X

    # alpha * S**beta with alpha = (I - X) * I**-beta, kept in ratio form
    alpha = I - X
    return (
        alpha * (S / I) ** beta
        - alpha * _phi(S, T, beta, I, I, r, b, sigma, scale=I)
        + _phi(S, T, 1.0, I, I, r, b, sigma)
        - _phi(S, T, 1.0, X, I, r, b, sigma)
        - X * _phi(S, T, 0.0, I, I, r, b, sigma)
        + X * _phi(S, T, 0.0, X, I, r, b, sigma)
    )


def american_option(kind: str, S, X, T, r, b, sigma) -> float:
    """Raw pricer on explicit carry ``b`` and discount rate ``r``."""
    if kind not in (CALL, PUT):
        raise InvalidOptionKind(f"kind must be 'call' or 'put', got {kind!r}")
    if T <= 0:
        return max(0.0, (S - X) if kind == CALL else (X - S))
    if kind == PUT:
        return american_call(X, S, T, r - b, -b, sigma)
    return american_call(S, X, T, r, b, sigma)


def premium(opt: OptionContract) -> float:
    """American premium for a contract; ``b`` follows ``r`` for equities."""
    carry = carry_for(opt, allowed_styles=BS93_STYLES, default_style=EQUITY_STYLE)
    return float(american_option(opt.kind, opt.s, opt.k, opt.T, carry.r_eff, carry.b, opt.sigma))


def _expiry_values(opt: OptionContract) -> dict[str, float]:
    if opt.kind == CALL:
        delta = 1.0 if opt.s > opt.k else 0.0
    else:
        delta = -1.0 if opt.s < opt.k else 0.0
    return {PRIMA: opt.intrinsic(), DELTA: delta, GAMMA: 0.0, THETA: 0.0, VEGA: 0.0, RHO: 0.0}


def _greek(parameter: str, opt: OptionContract, h: float) -> float:
    if parameter == PRIMA:
        return premium(opt)
    if parameter == DELTA:
        return central_difference(premium, opt, "s", h)
    if parameter == GAMMA:
        return second_difference(premium, opt, "s", h)
    if parameter == THETA:
        # keep T - hT positive; theta is the per-year decay
        hT = min(h, max(_MIN_THETA_BUMP, 0.5 * opt.T))
        return -central_difference(premium, opt, "T", hT)
    if parameter == VEGA:
        return central_difference(premium, opt, "sigma", h) / 100
    # RHO: the repricer re-resolves b, so it tracks r for equities and stays 0 for futures
    return central_difference(premium, opt, "r", h) / 100


_PARAMS = (PRIMA, DELTA, GAMMA, THETA, VEGA, RHO)


def greeks(opt: OptionContract, *, bump: float = DEFAULT_SETTINGS.bump) -> dict[str, float]:
    carry_for(opt, allowed_styles=BS93_STYLES, default_style=EQUITY_STYLE)
    if opt.T <= 0:
        return _expiry_values(opt)
    return {parameter: _greek(parameter, opt, bump) for parameter in _PARAMS}


def price(
    parameter: str, opt: OptionContract, *, bump: float = DEFAULT_SETTINGS.bump
) -> float | Signal:
    """Return one of prima, delta, gamma, theta, vega, rho.

    Unknown selectors give ``Signal.INVALID_PARAMETER``.
    """
    carry_for(opt, allowed_styles=BS93_STYLES, default_style=EQUITY_STYLE)
    parameter = str(parameter).lower()
    if parameter not in _PARAMS:
        logger.debug("unsupported parameter %r for Bjerksund-Stensland", parameter)
        return Signal.INVALID_PARAMETER
    if opt.T <= 0:
        return _expiry_values(opt)[parameter]
    return _greek(parameter, opt, bump)
