"""Core package types shared by the engines, exporters and pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd

CORR_LABELS = ("R12", "R13", "R23", "P12", "P13", "P23")


@dataclass(frozen=True)
class MetricsResult:
    """Per-location agreement statistics between a reference and a satellite matrix.

    Every array has one slot per location. Undefined statistics are NaN; ``n`` is 0
    where fewer than the minimum number of paired samples were available.
    """

    R: np.ndarray
    bias: np.ndarray
    rmse: np.ndarray
    ubrmse: np.ndarray
    p_value: np.ndarray
    n: np.ndarray

    def __len__(self) -> int:
        return int(self.n.shape[0])

    @classmethod
    def empty(cls, n_locations: int) -> "MetricsResult":
        return cls(
            R=np.full(n_locations, np.nan),
            bias=np.full(n_locations, np.nan),
            rmse=np.full(n_locations, np.nan),
            ubrmse=np.full(n_locations, np.nan),
            p_value=np.full(n_locations, np.nan),
            n=np.zeros(n_locations, dtype=np.int64),
        )


@dataclass(frozen=True)
class TCAResult:
    """Per-location Triple Collocation estimates for three datasets.

    ``err_var``, ``snr_db`` and ``fmse`` are ``[L, 3]`` in dataset argument order.
    ``corr`` is ``[L, 6]`` laid out as R12, R13, R23, P12, P13, P23.
    ``valid_obs`` stays NaN (not 0) where the joint-sample gate was not met.
    """

    err_var: np.ndarray
    snr_db: np.ndarray
    fmse: np.ndarray
    valid_obs: np.ndarray
    corr: np.ndarray

    def __len__(self) -> int:
        return int(self.valid_obs.shape[0])

    @classmethod
    def empty(cls, n_locations: int) -> "TCAResult":
        return cls(
            err_var=np.full((n_locations, 3), np.nan),
            snr_db=np.full((n_locations, 3), np.nan),
            fmse=np.full((n_locations, 3), np.nan),
            valid_obs=np.full(n_locations, np.nan),
            corr=np.full((n_locations, 6), np.nan),
        )


@dataclass(frozen=True)
class HovmollerField:
    """Zonally averaged field, rows ordered south to north."""

    values: np.ndarray
    latitudes: np.ndarray
    times: pd.DatetimeIndex


@dataclass(frozen=True)
class ValidationIssue:
    level: str
    code: str
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    issues: Sequence[ValidationIssue]
    shape: tuple[int, ...] | None


@dataclass(frozen=True)
class PipelineResult:
    table: pd.DataFrame
    summary: dict[str, Any]
    metadata: dict[str, Any]
