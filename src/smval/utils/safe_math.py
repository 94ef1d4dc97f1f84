"""Safe math helpers that return NaN instead of raising."""

from __future__ import annotations

import math

import numpy as np


def finite_or_nan(value: float) -> float:
    v = float(value)
    return v if math.isfinite(v) else math.nan


def to_decibels(ratio: float) -> float:
    """10*log10(ratio); NaN for zero, negative or non-finite ratios."""

    r = float(ratio)
    if not math.isfinite(r) or r <= 0.0:
        return math.nan
    return 10.0 * math.log10(r)


def is_degenerate(cov: float, var_i: float, var_j: float, rel_eps: float = 1e-12) -> bool:
    """True when a covariance cannot be used as a divisor.

    The threshold is relative to sqrt(var_i * var_j) so it does not depend on units.
    """

    c = float(cov)
    if not math.isfinite(c) or c == 0.0:
        return True
    scale = math.sqrt(max(float(var_i), 0.0) * max(float(var_j), 0.0))
    if not math.isfinite(scale) or scale == 0.0:
        return True
    return abs(c) <= rel_eps * scale


def safe_ratio(num: float, den: float) -> float:
    """num / den, NaN when the result is not finite."""

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        out = np.float64(num) / np.float64(den)
    return finite_or_nan(out)
