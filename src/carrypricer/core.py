from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidOptionKind, InvalidSettlementStyle, InvalidUnderlyingKind

CALL = "call"
PUT  = "put"

EQUITY = "equity"
FUTURE = "future"

FUTURES_STYLE     = "futures_style"
EQUITY_STYLE      = "equity_style"
MATBA_ROFEX_STYLE = "matba_rofex_style"
SETTLEMENT_STYLES = (FUTURES_STYLE, EQUITY_STYLE, MATBA_ROFEX_STYLE)

EUROPEAN = "european"
AMERICAN = "american"

# Greek selectors
PRIMA  = "prima"
DELTA  = "delta"
GAMMA  = "gamma"
GAMMAP = "gammap"
THETA  = "theta"
VEGA   = "vega"
RHO    = "rho"


class Signal(enum.Enum):
    """Non-numeric outcomes returned (never raised) by pricing operations."""
    NON_CONVERGENCE = "NA"
    INVALID_PARAMETER = "Parámetro inválido"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OptionContract:
    """Terms of a single vanilla option, fixed for one pricing call.

    ``settlement`` only matters for futures; which styles a model accepts
    is checked when the contract is priced.
    """
    s: float
    k: float
    T: float          # years
    r: float          # continuous risk-free
    sigma: float
    q: float = 0.0    # continuous dividend / carry yield
    kind: str = CALL
    underlying: str = EQUITY
    settlement: Optional[str] = None

    def __post_init__(self):
        if self.s <= 0:
            raise ValueError(f"s must be positive, got {self.s}")
        if self.k <= 0:
            raise ValueError(f"k must be positive, got {self.k}")
        if self.sigma <= 0:
            raise ValueError(f"sigma must be positive, got {self.sigma}")
        if self.kind not in (CALL, PUT):
            raise InvalidOptionKind(f"kind must be 'call' or 'put', got {self.kind!r}")
        if self.underlying not in (EQUITY, FUTURE):
            raise InvalidUnderlyingKind(
                f"underlying must be 'equity' or 'future', got {self.underlying!r}"
            )
        if self.settlement is not None and self.settlement not in SETTLEMENT_STYLES:
            raise InvalidSettlementStyle(
                f"settlement must be one of {SETTLEMENT_STYLES}, got {self.settlement!r}"
            )

    @property
    def z(self) -> int:
        """Payoff sign: +1 for calls, -1 for puts."""
        return 1 if self.kind == CALL else -1

    def intrinsic(self) -> float:
        return max(0.0, self.z * (self.s - self.k))


# ---------------------------------------------------------------------------
# Boundary normalisation: case-insensitive, Spanish aliases accepted
# ---------------------------------------------------------------------------
_KIND_ALIASES = {"call": CALL, "c": CALL, "put": PUT, "p": PUT}
_UNDERLYING_ALIASES = {
    "equity": EQUITY, "accion": EQUITY, "acción": EQUITY,
    "future": FUTURE, "futuro": FUTURE,
}
_EXERCISE_ALIASES = {
    "european": EUROPEAN, "europea": EUROPEAN,
    "american": AMERICAN, "americana": AMERICAN,
}


def _clean(value) -> str:
    return str(value).strip().lower()


def parse_kind(value) -> str:
    try:
        return _KIND_ALIASES[_clean(value)]
    except KeyError:
        raise InvalidOptionKind(f"kind must be 'call' or 'put', got {value!r}") from None


def parse_underlying(value) -> str:
    try:
        return _UNDERLYING_ALIASES[_clean(value)]
    except KeyError:
        raise InvalidUnderlyingKind(
            f"underlying must be 'accion'/'equity' or 'futuro'/'future', got {value!r}"
        ) from None


def parse_settlement(value) -> Optional[str]:
    """Normalise a settlement style; blank input means "not given"."""
    if value is None or _clean(value) == "":
        return None
    style = _clean(value)
    if style not in SETTLEMENT_STYLES:
        raise InvalidSettlementStyle(
            f"settlement must be one of {SETTLEMENT_STYLES}, got {value!r}"
        )
    return style


def parse_exercise(value) -> str:
    try:
        return _EXERCISE_ALIASES[_clean(value)]
    except KeyError:
        raise ValueError(
            f"exercise must be 'europea'/'european' or 'americana'/'american', got {value!r}"
        ) from None
