"""Bump-and-reprice Greek estimation.

The lattice and the Bjerksund-Stensland engine get their bumped Greeks by
evaluating a ``pricer(contract) -> float`` at perturbed contracts.  The
pricer is injected, so these helpers never call back into an engine's
public ``price`` entry point.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from .core import OptionContract

__all__ = [
    "Pricer",
    "reprice",
    "bump_points",
    "bumped_pair",
    "central_difference",
    "second_difference",
]

Pricer = Callable[[OptionContract], float]

# fields the contract requires to stay positive; the down-bump is clamped here
_FLOORS = {"s": 1e-6, "sigma": 1e-6}


def reprice(pricer: Pricer, contract: OptionContract, **changes) -> float:
    """Price ``contract`` with some fields replaced."""
    return pricer(replace(contract, **changes) if changes else contract)


def bump_points(contract: OptionContract, field: str, h: float) -> tuple[float, float]:
    """Return ``(x + h, x - h)``, with ``x - h`` kept inside the valid domain.

    ``s`` and ``sigma`` must stay positive, so their down point is clamped to
    ``max(x - h, 1e-6)`` (or ``x / 2`` when ``x`` itself is below the floor).
    """
    x = getattr(contract, field)
    down = x - h
    floor = _FLOORS.get(field)
    if floor is not None:
        down = max(down, min(floor, 0.5 * x))
    return x + h, down


def bumped_pair(
    pricer: Pricer, contract: OptionContract, field: str, h: float
) -> tuple[float, float]:
    """Return ``(P(x + h), P(x - h))`` for the contract field ``field``."""
    up, down = bump_points(contract, field, h)
    return (
        reprice(pricer, contract, **{field: up}),
        reprice(pricer, contract, **{field: down}),
    )


def central_difference(
    pricer: Pricer,
    contract: OptionContract,
    field: str,
    h: float,
    *,
    denominator: float | None = None,
) -> float:
    """Centered first difference ``(P(x+h) - P(x-h)) / denominator``.

    ``denominator`` defaults to ``2 h``; the lattice passes ``2`` to report
    the change per ``h`` move instead of a derivative.  When the down point
    is clamped the denominator is rescaled to the actual spread.
    """
    x_up, x_down = bump_points(contract, field, h)
    up, down = bumped_pair(pricer, contract, field, h)
    spread = x_up - x_down
    if denominator is None:
        return (up - down) / spread
    return (up - down) / (denominator * spread / (2.0 * h))


def second_difference(
    pricer: Pricer, contract: OptionContract, field: str, h: float
) -> float:
    """Centered second difference ``(P(x+h) - 2 P(x) + P(x-h)) / h**2``.

    A clamped down point falls back to the three-point formula on uneven
    spacing.
    """
    x = getattr(contract, field)
    x_up, x_down = bump_points(contract, field, h)
    up, down = bumped_pair(pricer, contract, field, h)
    mid = pricer(contract)
    h_up, h_down = x_up - x, x - x_down
    return 2.0 * (h_down * up - (h_up + h_down) * mid + h_up * down) / (
        h_up * h_down * (h_up + h_down)
    )
