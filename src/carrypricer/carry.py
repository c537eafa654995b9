"""Cost-of-carry resolution.

Every engine turns (underlying, settlement style, r, q) into a carry ``b``
and an effective discount rate ``r_eff`` before doing any numerical work:

* equity                  -> b = r - q, r_eff = r (settlement ignored)
* future, futures_style   -> b = 0,     r_eff = 0 (daily margining replaces discounting)
* future, equity_style    -> b = 0,     r_eff = r
* future, matba_rofex     -> b = 0,     r_eff = r (rate drives the daily accrual)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .core import (
    EQUITY, FUTURE, FUTURES_STYLE, EQUITY_STYLE, MATBA_ROFEX_STYLE,
    SETTLEMENT_STYLES, OptionContract,
)
from .errors import InvalidSettlementStyle, InvalidUnderlyingKind

__all__ = [
    "CostOfCarry", "resolve_carry", "carry_for",
    "BS_STYLES", "LATTICE_STYLES", "BS93_STYLES",
]


@dataclass(frozen=True)
class CostOfCarry:
    b: float
    r_eff: float


def resolve_carry(
    underlying: str,
    settlement: Optional[str],
    r: float,
    q: float,
    *,
    allowed_styles: Sequence[str] = SETTLEMENT_STYLES,
    default_style: Optional[str] = None,
) -> CostOfCarry:
    """Derive ``(b, r_eff)`` for one pricing call.

    Parameters
    ----------
    allowed_styles : sequence of str
        Settlement styles the calling model supports for futures.
    default_style : str, optional
        Style assumed for a future when ``settlement`` is ``None``.  When
        unset, a future without a style is rejected.
    """
    if underlying == EQUITY:
        return CostOfCarry(b=r - q, r_eff=r)
    if underlying != FUTURE:
        raise InvalidUnderlyingKind(
            f"underlying must be 'equity' or 'future', got {underlying!r}"
        )

    style = settlement if settlement is not None else default_style
    if style not in allowed_styles:
        raise InvalidSettlementStyle(
            f"settlement style for futures must be one of {tuple(allowed_styles)}, "
            f"got {settlement!r}"
        )
    if style == FUTURES_STYLE:
        return CostOfCarry(b=0.0, r_eff=0.0)
    # equity_style / matba_rofex_style keep the rate
    return CostOfCarry(b=0.0, r_eff=r)


def carry_for(contract: OptionContract, **kwargs) -> CostOfCarry:
    return resolve_carry(
        contract.underlying, contract.settlement, contract.r, contract.q, **kwargs
    )


# Styles accepted per model
BS_STYLES      = (FUTURES_STYLE, EQUITY_STYLE)
LATTICE_STYLES = (FUTURES_STYLE, EQUITY_STYLE, MATBA_ROFEX_STYLE)
BS93_STYLES    = (FUTURES_STYLE, EQUITY_STYLE)
