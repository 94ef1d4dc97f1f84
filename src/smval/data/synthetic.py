"""Synthetic dataset triplets with a shared signal and independent errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np


@dataclass(frozen=True)
class SyntheticTriplet:
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    meta: dict[str, Any] = field(default_factory=dict)


def orthonormal_components(n: int, k: int, rng: np.random.Generator) -> np.ndarray:
    """``k`` zero-mean, mutually orthogonal unit-norm columns of length ``n``."""

    if n < k + 1:
        raise ValueError(f"Need at least {k + 1} samples for {k} orthogonal components, got {n}")
    draws = np.column_stack([np.ones(n), rng.standard_normal((n, k))])
    q, _ = np.linalg.qr(draws)
    return q[:, 1:]


def simulate_location(
    n_valid: int,
    signal_var: float,
    err_var: tuple[float, float, float],
    mean: float,
    rng: np.random.Generator,
    exact: bool = True,
) -> np.ndarray:
    """``[n_valid, 3]`` block of signal + error for one location.

    With ``exact`` the sample (ddof=1) covariance equals the model covariance: every
    pair of datasets covaries by ``signal_var`` and the diagonal adds ``err_var``.
    """

    if exact:
        comps = orthonormal_components(n_valid, 4, rng) * np.sqrt(n_valid - 1)
    else:
        comps = rng.standard_normal((n_valid, 4))
    signal = mean + comps[:, 0] * np.sqrt(signal_var)
    cols = [signal + comps[:, j + 1] * np.sqrt(err_var[j]) for j in range(3)]
    return np.column_stack(cols)


def make_triplet(
    n_locations: int,
    n_time: int,
    err_var: tuple[float, float, float] = (0.01, 0.02, 0.03),
    signal_var: float = 0.04,
    mean: float = 0.3,
    missing_fraction: float = 0.0,
    exact: bool = True,
    seed: int = 0,
) -> SyntheticTriplet:
    """Three ``[n_locations, n_time]`` matrices with NaN for missing observations.

    Each dataset loses ``missing_fraction`` of its time steps independently; the
    jointly valid subset carries the signal + error model.
    """

    if not 0.0 <= missing_fraction < 1.0:
        raise ValueError("missing_fraction must be in [0, 1)")
    rng = np.random.default_rng(seed)
    out = np.full((3, n_locations, n_time), np.nan)
    joint_counts = np.zeros(n_locations, dtype=np.int64)

    for i in range(n_locations):
        missing = rng.random((3, n_time)) < missing_fraction
        joint = ~missing.any(axis=0)
        n_joint = int(joint.sum())
        joint_counts[i] = n_joint
        if n_joint >= 5:
            out[:, i, joint] = simulate_location(n_joint, signal_var, err_var, mean, rng, exact=exact).T
        partial = ~joint
        n_partial = int(partial.sum())
        if n_partial:
            noise = rng.standard_normal((3, n_partial)) * np.sqrt(np.asarray(err_var, dtype=float))[:, None]
            out[:, i, partial] = mean + rng.standard_normal(n_partial) * np.sqrt(signal_var) + noise
        out[:, i, :][missing] = np.nan

    meta = {
        "n_locations": n_locations,
        "n_time": n_time,
        "err_var": list(err_var),
        "signal_var": signal_var,
        "mean": mean,
        "missing_fraction": missing_fraction,
        "exact": exact,
        "seed": seed,
        "joint_valid": joint_counts.tolist(),
    }
    return SyntheticTriplet(a=out[0], b=out[1], c=out[2], meta=meta)
