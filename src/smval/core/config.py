"""Configuration loading and resolution."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    """Raised when configuration is invalid."""


EXPORT_FORMATS = {"xlsx", "txt", "tsv", "csv", "parquet"}

DEFAULT_CONFIG: dict[str, Any] = {
    "metrics": {
        "min_samples": 2,
    },
    "tca": {
        "min_samples": 100,
        "names": ["SM1", "SM2", "SM3"],
        "degenerate_rel_eps": 1e-12,
    },
    "parallel": {
        "workers": None,
        "chunk_size": 512,
    },
    "export": {
        "formats": ["xlsx", "txt"],
        "na_rep": "NaN",
    },
    "hovmoller": {
        "n_lat": 121,
        "n_lon": 221,
        "grid_order": "F",
        "lat_start": 60.875,
        "lat_step": -0.25,
        "lat_min": 34.875,
        "lat_max": 55.125,
        "start_date": "2016-01-01",
        "freq": "D",
        "vmin": 0.0,
        "vmax": 0.6,
        "cmap": "jet",
        "dpi": 300,
        "lat_tick_step": 5,
        "font_size": 14,
    },
}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries and return a new dictionary."""

    out = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping at root: {p}")
    return data


def resolve_config(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Resolve run configuration from defaults, an optional user file and CLI overrides."""

    resolved = deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        resolved = deep_merge(resolved, load_yaml(config_path))
    if overrides:
        resolved = deep_merge(resolved, overrides)
    _validate(resolved)
    return resolved


def dump_yaml(data: dict[str, Any], out_path: str | Path) -> None:
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)


def _validate(cfg: dict[str, Any]) -> None:
    for section in ("metrics", "tca"):
        min_samples = cfg.get(section, {}).get("min_samples")
        if not isinstance(min_samples, int) or isinstance(min_samples, bool) or min_samples < 1:
            raise ConfigError(f"{section}.min_samples must be an integer >= 1, got {min_samples!r}")

    names = cfg["tca"].get("names")
    if not isinstance(names, list) or len(names) != 3 or len(set(map(str, names))) != 3:
        raise ConfigError(f"tca.names must be a list of three distinct names, got {names!r}")

    eps = cfg["tca"].get("degenerate_rel_eps")
    if not isinstance(eps, (int, float)) or eps < 0:
        raise ConfigError(f"tca.degenerate_rel_eps must be a non-negative number, got {eps!r}")

    workers = cfg.get("parallel", {}).get("workers")
    if workers is not None and (not isinstance(workers, int) or workers < 1):
        raise ConfigError(f"parallel.workers must be null or an integer >= 1, got {workers!r}")
    chunk_size = cfg.get("parallel", {}).get("chunk_size")
    if not isinstance(chunk_size, int) or chunk_size < 1:
        raise ConfigError(f"parallel.chunk_size must be an integer >= 1, got {chunk_size!r}")

    formats = cfg.get("export", {}).get("formats", [])
    unknown = sorted(set(formats) - EXPORT_FORMATS)
    if unknown:
        raise ConfigError(
            f"Unsupported export.formats {unknown}. Supported: {'|'.join(sorted(EXPORT_FORMATS))}"
        )

    hov = cfg.get("hovmoller", {})
    if hov.get("grid_order") not in {"C", "F"}:
        raise ConfigError(f"Unsupported hovmoller.grid_order '{hov.get('grid_order')}'. Supported: C|F")
    if float(hov["lat_min"]) >= float(hov["lat_max"]):
        raise ConfigError("hovmoller.lat_min must be below hovmoller.lat_max")
    if float(hov["vmin"]) >= float(hov["vmax"]):
        raise ConfigError("hovmoller.vmin must be below hovmoller.vmax")
