"""Per-location agreement metrics between a reference and a satellite matrix."""

from __future__ import annotations

import logging

import numpy as np

from smval.core.types import MetricsResult
from smval.data.validators import check_same_shape
from smval.stats.correlation import pearson
from smval.utils.parallel import map_locations

logger = logging.getLogger(__name__)


def compute_metrics(
    reference: np.ndarray,
    satellite: np.ndarray,
    min_samples: int = 2,
    workers: int | None = None,
    chunk_size: int = 512,
) -> MetricsResult:
    """R, bias, RMSE, ubRMSE, p-value and sample count for every location row.

    Bias and errors are satellite minus reference. Locations with fewer than
    ``min_samples`` paired non-NaN samples keep NaN statistics and ``n == 0``.
    Raises ``ShapeMismatch`` before any work when the shapes differ.
    """

    ref, sat = check_same_shape(reference, satellite, names=["reference", "satellite"])
    result = MetricsResult.empty(ref.shape[0])

    def one(i: int) -> None:
        obs = ref[i]
        est = sat[i]
        valid = ~np.isnan(obs) & ~np.isnan(est)
        obs = obs[valid]
        est = est[valid]
        if obs.size < max(min_samples, 2):
            return

        diff = est - obs
        anomaly_diff = (est - est.mean()) - (obs - obs.mean())
        result.n[i] = obs.size
        result.bias[i] = diff.mean()
        result.rmse[i] = np.sqrt(np.mean(diff**2))
        result.ubrmse[i] = np.sqrt(np.mean(anomaly_diff**2))

        outcome = pearson(obs, est)
        if outcome is not None:
            result.R[i] = outcome.r
            result.p_value[i] = outcome.p_value

    map_locations(one, ref.shape[0], workers=workers, chunk_size=chunk_size)

    computed = int((result.n > 0).sum())
    logger.info(
        "Metrics: %d locations, %d computed, %d skipped (< %d paired samples)",
        len(result),
        computed,
        len(result) - computed,
        max(min_samples, 2),
    )
    return result
