# normal.py
# Standard normal density and CDF shared by every closed-form pricer.
# The CDF uses the Abramowitz-Stegun 7.1.26 error-function approximation
# (|error| < 1.5e-7 on erf). Functions accept scalars *or* NumPy arrays.

from __future__ import annotations
import math
import numpy as np

__all__ = ["erf", "cdf", "density"]

_P  = 0.3275911
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429

_INV_SQRT_2    = 1.0 / math.sqrt(2.0)
_INV_SQRT_2PI  = 1.0 / math.sqrt(2.0 * math.pi)


def _out(x: np.ndarray):
    """Scalars in, Python floats out; arrays stay arrays."""
    return float(x) if x.ndim == 0 else x


def erf(x):
    x = np.asarray(x, dtype=float)
    sign = np.sign(x)
    ax = np.abs(x)
    t = 1.0 / (1.0 + _P * ax)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    return _out(sign * (1.0 - poly * np.exp(-ax * ax)))


def cdf(x):
    """Standard normal cumulative distribution N(x)."""
    x = np.asarray(x, dtype=float)
    return _out(0.5 * (1.0 + np.asarray(erf(x * _INV_SQRT_2))))


def density(x):
    """Standard normal density phi(x)."""
    x = np.asarray(x, dtype=float)
    return _out(_INV_SQRT_2PI * np.exp(-0.5 * x * x))
