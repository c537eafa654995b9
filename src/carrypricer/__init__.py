# carrypricer: option premium, Greeks and implied vol with cost of carry
# Public API

from .core import (
    OptionContract, Signal,
    CALL, PUT, EQUITY, FUTURE,
    FUTURES_STYLE, EQUITY_STYLE, MATBA_ROFEX_STYLE,
    EUROPEAN, AMERICAN,
    PRIMA, DELTA, GAMMA, GAMMAP, THETA, VEGA, RHO,
    parse_kind, parse_underlying, parse_settlement, parse_exercise,
)
from .errors import (
    PricingError, InvalidUnderlyingKind, InvalidSettlementStyle,
    InvalidOptionKind, InvalidStepCount,
)
from .carry import CostOfCarry, resolve_carry
from .config import EngineSettings, DEFAULT_SETTINGS

# Pricing engines
from .black_scholes import price as bs_price, greeks as bs_greeks
from .binomial import price as binomial_price, greeks as binomial_greeks
from .bjerksund_stensland import (
    price as bs93_price, greeks as bs93_greeks, american_option,
)

# Implied volatility
from .implied_vol import bisect, bs_implied_vol, binomial_implied_vol, bs93_implied_vol

__all__ = [
    # Data model
    "OptionContract", "Signal",
    "CALL", "PUT", "EQUITY", "FUTURE",
    "FUTURES_STYLE", "EQUITY_STYLE", "MATBA_ROFEX_STYLE",
    "EUROPEAN", "AMERICAN",
    "PRIMA", "DELTA", "GAMMA", "GAMMAP", "THETA", "VEGA", "RHO",
    "parse_kind", "parse_underlying", "parse_settlement", "parse_exercise",
    # Errors
    "PricingError", "InvalidUnderlyingKind", "InvalidSettlementStyle",
    "InvalidOptionKind", "InvalidStepCount",
    # Carry & config
    "CostOfCarry", "resolve_carry", "EngineSettings", "DEFAULT_SETTINGS",
    # Engines
    "bs_price", "bs_greeks",
    "binomial_price", "binomial_greeks",
    "bs93_price", "bs93_greeks", "american_option",
    # Implied vol
    "bisect", "bs_implied_vol", "binomial_implied_vol", "bs93_implied_vol",
]

__version__ = "0.1.0"
