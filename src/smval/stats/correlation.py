"""Pearson correlation with a local success/failure result."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.stats import pearsonr


@dataclass(frozen=True)
class CorrelationOutcome:
    r: float
    p_value: float


def pearson(x: np.ndarray, y: np.ndarray) -> CorrelationOutcome | None:
    """Pearson R and two-sided p-value, or None when the pair is degenerate.

    Degenerate means fewer than two samples, non-finite values, or a constant
    series. The p-value may still be NaN when scipy cannot evaluate it.
    """

    xx = np.asarray(x, dtype=float)
    yy = np.asarray(y, dtype=float)
    if xx.shape != yy.shape or xx.size < 2:
        return None
    if not (np.all(np.isfinite(xx)) and np.all(np.isfinite(yy))):
        return None
    if np.ptp(xx) == 0.0 or np.ptp(yy) == 0.0:
        return None
    try:
        res = pearsonr(xx, yy)
    except (ValueError, FloatingPointError):
        return None
    r = float(res.statistic)
    if not np.isfinite(r):
        return None
    p = float(res.pvalue)
    return CorrelationOutcome(r=r, p_value=p if np.isfinite(p) else float("nan"))
