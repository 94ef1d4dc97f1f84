"""I/O helpers for location x time matrices and run outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from scipy.io import loadmat

MATRIX_SUFFIXES = {".npy", ".npz", ".csv", ".txt", ".tsv", ".parquet", ".mat"}


class DatasetIOError(FileNotFoundError):
    """Raised when an input matrix cannot be located or read."""


def load_matrix(path: str | Path, variable: str | None = None) -> np.ndarray:
    """Load a 2-D float matrix, rows are locations and columns are time steps.

    ``variable`` selects the array inside ``.npz`` and ``.mat`` containers; it may be
    omitted when the container holds exactly one array.
    """

    p = Path(path)
    if not p.exists():
        raise DatasetIOError(f"Input matrix not found: {p}")
    suffix = p.suffix.lower()
    if suffix not in MATRIX_SUFFIXES:
        raise DatasetIOError(f"Unsupported matrix format '{suffix}': {p}")

    if suffix == ".npy":
        arr = np.load(p, allow_pickle=False)
    elif suffix == ".npz":
        with np.load(p, allow_pickle=False) as archive:
            arr = _pick_variable(dict(archive), variable, p)
    elif suffix == ".mat":
        contents = {k: v for k, v in loadmat(p).items() if not k.startswith("__")}
        arr = _pick_variable(contents, variable, p)
    elif suffix == ".parquet":
        arr = pd.read_parquet(p).to_numpy(dtype=float)
    else:
        sep = "," if suffix == ".csv" else r"\s+"
        arr = pd.read_csv(p, sep=sep, header=None, na_values=["NaN", "nan", ""]).to_numpy(dtype=float)

    return np.asarray(arr, dtype=float)


def _pick_variable(contents: dict[str, Any], variable: str | None, path: Path) -> np.ndarray:
    if variable is not None:
        if variable not in contents:
            raise DatasetIOError(f"Variable '{variable}' not found in {path}; available: {sorted(contents)}")
        return np.asarray(contents[variable])
    if len(contents) != 1:
        raise DatasetIOError(f"{path} holds {len(contents)} arrays {sorted(contents)}; pass a variable name")
    return np.asarray(next(iter(contents.values())))


def save_matrix(matrix: np.ndarray, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    np.save(p, np.asarray(matrix, dtype=float), allow_pickle=False)
    return p


def write_json(data: dict[str, Any], path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    if isinstance(value, np.ndarray):
        return value.tolist()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
