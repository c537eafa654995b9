"""Caller-misuse errors raised at call entry, before any numerical work."""

from __future__ import annotations

__all__ = [
    "PricingError",
    "InvalidUnderlyingKind",
    "InvalidSettlementStyle",
    "InvalidOptionKind",
    "InvalidStepCount",
]


class PricingError(ValueError):
    """Base class for invalid contract or model arguments."""


class InvalidUnderlyingKind(PricingError):
    pass


class InvalidSettlementStyle(PricingError):
    pass


class InvalidOptionKind(PricingError):
    pass


class InvalidStepCount(PricingError):
    pass
