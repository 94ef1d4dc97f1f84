"""Conversion of engine results to named-column tables and export to disk."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from smval.core.types import CORR_LABELS, MetricsResult, TCAResult

METRICS_COLUMNS = ["R", "Bias", "RMSE", "ubRMSE", "PValue", "N"]


def metrics_to_frame(result: MetricsResult) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "R": result.R,
            "Bias": result.bias,
            "RMSE": result.rmse,
            "ubRMSE": result.ubrmse,
            "PValue": result.p_value,
            "N": result.n.astype(np.int64),
        },
        columns=METRICS_COLUMNS,
    )


def tca_columns(names: Sequence[str]) -> list[str]:
    if len(names) != 3:
        raise ValueError(f"Expected three dataset names, got {list(names)}")
    cols: list[str] = []
    for prefix in ("ErrorVar", "SNRdB", "fMSE"):
        cols.extend(f"{prefix}_{name}" for name in names)
    cols.extend(f"Corr_{label}" for label in CORR_LABELS)
    cols.append("ValidObs")
    return cols


def tca_to_frame(result: TCAResult, names: Sequence[str] = ("SM1", "SM2", "SM3")) -> pd.DataFrame:
    cols = tca_columns(names)
    blocks = [result.err_var, result.snr_db, result.fmse, result.corr]
    data: dict[str, object] = {}
    for col, values in zip(cols, np.concatenate(blocks, axis=1).T):
        data[col] = values
    # nullable integer keeps counts integral while undefined stays missing
    data["ValidObs"] = pd.Series(result.valid_obs).astype("Int64")
    return pd.DataFrame(data, columns=cols)


def with_na_marker(df: pd.DataFrame, na_rep: str = "NaN") -> pd.DataFrame:
    """Object-typed copy where missing cells hold ``na_rep`` instead of staying blank."""

    return df.astype(object).where(df.notna(), na_rep)


def write_table(df: pd.DataFrame, out_path: str | Path, na_rep: str = "NaN") -> Path:
    """Write by suffix: .xlsx, .txt/.tsv (tab), .csv or .parquet."""

    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    suffix = p.suffix.lower()
    if suffix == ".xlsx":
        with pd.ExcelWriter(p, engine="openpyxl") as writer:
            with_na_marker(df, na_rep).to_excel(writer, sheet_name="results", index=False)
    elif suffix in {".txt", ".tsv"}:
        df.to_csv(p, sep="\t", index=False, na_rep=na_rep)
    elif suffix == ".csv":
        df.to_csv(p, index=False, na_rep=na_rep)
    elif suffix == ".parquet":
        df.to_parquet(p, index=False)
    else:
        raise ValueError(f"Unsupported table format '{suffix}': {p}")
    return p
