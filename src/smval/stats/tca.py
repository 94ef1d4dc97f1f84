"""Triple Collocation analysis for three collocated datasets.

Model: each dataset observes a common signal with its own scale and offset plus an
error that is independent of the signal and of the other two datasets' errors.
Under that model the error variance of dataset ``a`` is

    errVar_a = var_a - cov_ab * cov_ac / cov_bc

and analogously for ``b`` and ``c``. The signal-to-noise ratio is the explained
part over the error part,

    SNR_a = (cov_ab * cov_ac / cov_bc) / errVar_a

and the fractional mean square error is ``fMSE = 1 / (1 + SNR)``.

Nothing here checks the model assumptions. Negative error variances are returned
as computed so that model violations stay visible to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from smval.core.types import TCAResult
from smval.data.validators import check_same_shape
from smval.stats.correlation import pearson
from smval.utils.parallel import map_locations
from smval.utils.safe_math import is_degenerate, safe_ratio, to_decibels

logger = logging.getLogger(__name__)

MIN_JOINT_SAMPLES = 100

# (own, other1, other2): dataset index followed by the two datasets it is paired with
_TRIPLETS = ((0, 1, 2), (1, 0, 2), (2, 0, 1))
_PAIRS = ((0, 1), (0, 2), (1, 2))


@dataclass(frozen=True)
class TCAEstimate:
    err_var: np.ndarray
    snr: np.ndarray
    snr_db: np.ndarray
    fmse: np.ndarray


def joint_covariance(q: np.ndarray) -> np.ndarray:
    """Unbiased (N-1) 3x3 covariance of a ``[N, 3]`` block without missing values."""

    return np.cov(np.asarray(q, dtype=float), rowvar=False, ddof=1)


def tca_from_covariance(cov: np.ndarray, degenerate_rel_eps: float = 1e-12) -> TCAEstimate:
    """Closed-form TCA quantities from one 3x3 covariance matrix.

    A quantity whose divisor covariance is zero or degenerate is NaN for that
    dataset only. SNR in dB is NaN when SNR is not strictly positive.
    """

    C = np.asarray(cov, dtype=float)
    err_var = np.full(3, np.nan)
    snr = np.full(3, np.nan)

    for k, i, j in _TRIPLETS:
        # divisor is the covariance between the other two datasets
        cov_ki, cov_kj, cov_ij = C[k, i], C[k, j], C[i, j]
        if is_degenerate(cov_ij, C[i, i], C[j, j], degenerate_rel_eps):
            continue
        explained = safe_ratio(cov_ki * cov_kj, cov_ij)
        if np.isnan(explained):
            continue
        err_var[k] = C[k, k] - explained
        snr[k] = safe_ratio(explained, err_var[k])

    snr_db = np.array([to_decibels(s) for s in snr])
    with np.errstate(divide="ignore", invalid="ignore"):
        fmse = 1.0 / (1.0 + snr)
    fmse[~np.isfinite(fmse)] = np.nan
    return TCAEstimate(err_var=err_var, snr=snr, snr_db=snr_db, fmse=fmse)


def pairwise_correlations(q: np.ndarray) -> np.ndarray:
    """R12, R13, R23, P12, P13, P23; all six NaN if any pair is degenerate."""

    out = np.full(6, np.nan)
    for slot, (i, j) in enumerate(_PAIRS):
        outcome = pearson(q[:, i], q[:, j])
        if outcome is None:
            return np.full(6, np.nan)
        out[slot] = outcome.r
        out[slot + 3] = outcome.p_value
    return out


def triple_collocation(
    a: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    min_samples: int = MIN_JOINT_SAMPLES,
    degenerate_rel_eps: float = 1e-12,
    workers: int | None = None,
    chunk_size: int = 512,
) -> TCAResult:
    """Per-location error variance, SNR (dB), fMSE, pairwise correlations and counts.

    Only time steps valid in all three datasets are used. Locations with fewer than
    ``min_samples`` such steps are left entirely NaN, including ``valid_obs``.
    Raises ``ShapeMismatch`` before any work when the shapes differ.
    """

    A, B, Cm = check_same_shape(a, b, c, names=["a", "b", "c"])
    data = np.stack([A, B, Cm], axis=-1)
    result = TCAResult.empty(A.shape[0])

    def one(i: int) -> None:
        q = data[i]
        q = q[~np.isnan(q).any(axis=1)]
        n = q.shape[0]
        if n < min_samples or n < 2:
            return

        result.valid_obs[i] = n
        est = tca_from_covariance(joint_covariance(q), degenerate_rel_eps)
        result.err_var[i] = est.err_var
        result.snr_db[i] = est.snr_db
        result.fmse[i] = est.fmse
        result.corr[i] = pairwise_correlations(q)

    map_locations(one, A.shape[0], workers=workers, chunk_size=chunk_size)

    computed = int(np.isfinite(result.valid_obs).sum())
    logger.info(
        "TCA: %d locations, %d computed, %d skipped (< %d joint samples)",
        len(result),
        computed,
        len(result) - computed,
        min_samples,
    )
    return result
