"""Orchestration: load, validate, compute, export and record reproducibility metadata."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from smval.core.config import dump_yaml, resolve_config
from smval.core.types import PipelineResult
from smval.core.versioning import git_commit_hash, invocation_string, run_environment
from smval.data.io import load_matrix, write_json
from smval.data.validators import ShapeMismatch, report_to_dict, validate_matrices
from smval.reporting.summary import build_metrics_summary, build_tca_summary
from smval.reporting.tables import metrics_to_frame, tca_to_frame, write_table
from smval.stats.metrics import compute_metrics
from smval.stats.tca import triple_collocation
from smval.utils.hash import inputs_sha256, mapping_sha256, matrix_fingerprint
from smval.utils.time import utc_now_iso
from smval.viz.hovmoller import hovmoller_from_config, plot_hovmoller

logger = logging.getLogger(__name__)

METRICS_STEM = "metrics_results"
TCA_STEM = "TripleCollocation_Results"


class PipelineError(RuntimeError):
    """Raised when the pipeline cannot complete."""


def _load_inputs(paths: dict[str, str | Path], variables: dict[str, str | None]) -> dict[str, np.ndarray]:
    out: dict[str, np.ndarray] = {}
    for name, path in paths.items():
        out[name] = load_matrix(path, variable=variables.get(name))
        logger.info("Loaded %s from %s with shape %s", name, path, out[name].shape)
    return out


def _check_inputs(matrices: dict[str, np.ndarray], min_samples: int) -> dict[str, Any]:
    validation = validate_matrices(matrices, min_samples=min_samples)
    if not validation.valid:
        failures = [f"[{i.code}] {i.message}" for i in validation.issues if i.level == "error"]
        if any(i.code == "shape_mismatch" for i in validation.issues):
            raise ShapeMismatch(" | ".join(failures))
        raise PipelineError("Input validation failed. " + " | ".join(failures))
    return report_to_dict(validation)


def _export(df: pd.DataFrame, out_root: Path, stem: str, cfg: dict[str, Any]) -> list[Path]:
    written: list[Path] = []
    for fmt in cfg["export"]["formats"]:
        path = write_table(df, out_root / f"{stem}.{fmt}", na_rep=str(cfg["export"]["na_rep"]))
        logger.info("Exported %d rows to %s", len(df), path)
        written.append(path)
    return written


def _metadata(
    kind: str,
    paths: dict[str, str | Path],
    matrices: dict[str, np.ndarray],
    resolved: dict[str, Any],
    validation: dict[str, Any],
    outputs: list[Path],
    argv: list[str] | None,
) -> dict[str, Any]:
    return {
        "analysis": kind,
        "timestamp_utc": utc_now_iso(),
        "git_commit": git_commit_hash(Path.cwd()),
        "environment": run_environment(resolved["parallel"]["workers"]),
        "inputs": {name: str(Path(p).resolve()) for name, p in paths.items()},
        "input_hashes": inputs_sha256(paths),
        "input_matrices": {name: matrix_fingerprint(arr) for name, arr in matrices.items()},
        "config_hash": mapping_sha256(resolved),
        "cli_invocation": invocation_string(argv or []),
        "validation": validation,
        "outputs": [str(p.resolve()) for p in outputs],
    }


def run_metrics_pipeline(
    reference_path: str | Path,
    satellite_path: str | Path,
    out_dir: str | Path,
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    reference_var: str | None = None,
    satellite_var: str | None = None,
    argv: list[str] | None = None,
) -> PipelineResult:
    out_root = Path(out_dir)
    out_root.mkdir(parents=True, exist_ok=True)
    resolved = resolve_config(config_path=config_path, overrides=overrides)
    dump_yaml(resolved, out_root / "config_resolved.yaml")

    paths = {"reference": reference_path, "satellite": satellite_path}
    matrices = _load_inputs(paths, {"reference": reference_var, "satellite": satellite_var})
    validation = _check_inputs(matrices, int(resolved["metrics"]["min_samples"]))

    result = compute_metrics(
        matrices["reference"],
        matrices["satellite"],
        min_samples=int(resolved["metrics"]["min_samples"]),
        workers=resolved["parallel"]["workers"],
        chunk_size=int(resolved["parallel"]["chunk_size"]),
    )
    table = metrics_to_frame(result)
    outputs = _export(table, out_root, METRICS_STEM, resolved)

    summary = build_metrics_summary(result)
    write_json(summary, out_root / "summary.json")
    metadata = _metadata("metrics", paths, matrices, resolved, validation, outputs, argv)
    metadata["summary"] = summary
    write_json(metadata, out_root / "run_metadata.json")
    return PipelineResult(table=table, summary=summary, metadata=metadata)


def run_tca_pipeline(
    paths: list[str | Path],
    out_dir: str | Path,
    names: list[str] | None = None,
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    variables: list[str | None] | None = None,
    argv: list[str] | None = None,
) -> PipelineResult:
    if len(paths) != 3:
        raise PipelineError(f"Triple collocation needs exactly three inputs, got {len(paths)}")
    cfg_overrides = dict(overrides or {})
    if names is not None:
        cfg_overrides["tca"] = {**cfg_overrides.get("tca", {}), "names": list(names)}

    out_root = Path(out_dir)
    out_root.mkdir(parents=True, exist_ok=True)
    resolved = resolve_config(config_path=config_path, overrides=cfg_overrides)
    dump_yaml(resolved, out_root / "config_resolved.yaml")

    ds_names = [str(n) for n in resolved["tca"]["names"]]
    named_paths = dict(zip(ds_names, paths))
    named_vars = dict(zip(ds_names, variables or [None, None, None]))
    matrices = _load_inputs(named_paths, named_vars)
    validation = _check_inputs(matrices, int(resolved["tca"]["min_samples"]))

    a, b, c = (matrices[n] for n in ds_names)
    result = triple_collocation(
        a,
        b,
        c,
        min_samples=int(resolved["tca"]["min_samples"]),
        degenerate_rel_eps=float(resolved["tca"]["degenerate_rel_eps"]),
        workers=resolved["parallel"]["workers"],
        chunk_size=int(resolved["parallel"]["chunk_size"]),
    )
    table = tca_to_frame(result, ds_names)
    outputs = _export(table, out_root, TCA_STEM, resolved)

    summary = build_tca_summary(result, ds_names)
    write_json(summary, out_root / "summary.json")
    metadata = _metadata("tca", named_paths, matrices, resolved, validation, outputs, argv)
    metadata["summary"] = summary
    write_json(metadata, out_root / "run_metadata.json")
    return PipelineResult(table=table, summary=summary, metadata=metadata)


def run_hovmoller(
    matrix_path: str | Path,
    out_path: str | Path,
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    variable: str | None = None,
) -> Path:
    resolved = resolve_config(config_path=config_path, overrides=overrides)
    hov = resolved["hovmoller"]
    matrix = load_matrix(matrix_path, variable=variable)
    field = hovmoller_from_config(matrix, hov)
    logger.info(
        "Hovmoller field: %d latitudes x %d time steps (%s to %s)",
        field.values.shape[0],
        field.values.shape[1],
        field.times[0].date(),
        field.times[-1].date(),
    )
    return plot_hovmoller(
        field,
        out_path,
        vmin=float(hov["vmin"]),
        vmax=float(hov["vmax"]),
        cmap=str(hov["cmap"]),
        dpi=int(hov["dpi"]),
        lat_tick_step=float(hov["lat_tick_step"]),
        font_size=int(hov["font_size"]),
    )
