"""Fingerprints of input files and loaded matrices for run metadata."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import numpy as np


def file_sha256(path: str | Path, chunk_size: int = 1024 * 1024) -> str:
    h = hashlib.sha256()
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def inputs_sha256(paths: dict[str, str | Path]) -> dict[str, str]:
    """Per-input file sha256 keyed by dataset name."""

    return {name: file_sha256(path) for name, path in paths.items()}


def matrix_sha256(matrix: np.ndarray) -> str:
    """Content hash of a location x time matrix, independent of its file format.

    Shape is part of the digest and every NaN is hashed as the same bit pattern,
    so the same values loaded from .mat, .npy or .csv hash identically.
    """

    arr = np.ascontiguousarray(np.asarray(matrix, dtype=np.float64))
    canon = np.where(np.isnan(arr), np.nan, arr)
    h = hashlib.sha256()
    h.update(repr(arr.shape).encode("ascii"))
    h.update(canon.tobytes())
    return h.hexdigest()


def matrix_fingerprint(matrix: np.ndarray) -> dict[str, Any]:
    arr = np.asarray(matrix, dtype=float)
    return {
        "shape": list(arr.shape),
        "missing_fraction": float(np.isnan(arr).mean()) if arr.size else 0.0,
        "sha256": matrix_sha256(arr),
    }


def mapping_sha256(payload: dict[str, Any]) -> str:
    """Stable sha256 of the resolved configuration."""

    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
