"""Run summary payloads for metrics and TCA results."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np

from smval.core.types import MetricsResult, TCAResult

logger = logging.getLogger(__name__)


def _stat(values: np.ndarray, func) -> float | None:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return None
    return float(func(finite))


def _describe(values: np.ndarray) -> dict[str, Any]:
    return {
        "defined": int(np.isfinite(values).sum()),
        "median": _stat(values, np.median),
        "min": _stat(values, np.min),
        "max": _stat(values, np.max),
    }


def build_metrics_summary(result: MetricsResult) -> dict[str, Any]:
    return {
        "locations": len(result),
        "computed": int((result.n > 0).sum()),
        "R": _describe(result.R),
        "Bias": _describe(result.bias),
        "RMSE": _describe(result.rmse),
        "ubRMSE": _describe(result.ubrmse),
    }


def build_tca_summary(result: TCAResult, names: Sequence[str]) -> dict[str, Any]:
    """Per-dataset statistics plus counts of negative error variances.

    Negative error variances mean the collocation model does not hold at that
    location. They are counted and logged here, never altered.
    """

    per_dataset: dict[str, Any] = {}
    for k, name in enumerate(names):
        err = result.err_var[:, k]
        negative = int((err < 0).sum())
        if negative:
            logger.warning(
                "%s: %d locations have negative TCA error variance (reported as computed)",
                name,
                negative,
            )
        per_dataset[str(name)] = {
            "ErrorVar": _describe(err),
            "SNRdB": _describe(result.snr_db[:, k]),
            "fMSE": _describe(result.fmse[:, k]),
            "negative_error_variance": negative,
        }

    undefined_corr = int((np.isfinite(result.valid_obs) & np.isnan(result.corr).all(axis=1)).sum())
    return {
        "locations": len(result),
        "computed": int(np.isfinite(result.valid_obs).sum()),
        "datasets": per_dataset,
        "undefined_correlations": undefined_corr,
    }
