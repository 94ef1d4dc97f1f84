"""Latitude-time (Hovmoller) diagrams of zonally averaged soil moisture."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from smval.core.types import HovmollerField
from smval.data.validators import ShapeMismatch, as_matrix

_LAT_TOL = 1e-6


def zonal_mean(grid: np.ndarray) -> np.ndarray:
    """NaN-ignoring mean over the longitude axis of ``[lat, lon, time]``; all-NaN stays NaN."""

    valid = ~np.isnan(grid)
    counts = valid.sum(axis=1)
    sums = np.where(valid, grid, 0.0).sum(axis=1)
    with np.errstate(divide="ignore", invalid="ignore"):
        out = sums / counts
    out[counts == 0] = np.nan
    return out


def hovmoller_field(
    matrix: np.ndarray,
    n_lat: int,
    n_lon: int,
    lat_start: float,
    lat_step: float,
    lat_min: float,
    lat_max: float,
    start_date: str,
    freq: str = "D",
    grid_order: str = "F",
) -> HovmollerField:
    """Reshape ``[n_lat*n_lon, T]`` to a grid and average over longitude.

    ``grid_order`` is the flattening order of the location rows: "F" when latitude
    varies fastest, "C" when longitude does. Latitudes outside ``[lat_min, lat_max]``
    are dropped and rows are returned south to north.
    """

    arr = as_matrix(matrix, "soil moisture")
    n_loc, n_time = arr.shape
    if n_loc != n_lat * n_lon:
        raise ShapeMismatch(f"Expected {n_lat}x{n_lon}={n_lat * n_lon} location rows, got {n_loc}")

    grid = arr.reshape((n_lat, n_lon, n_time), order=grid_order)
    zonal = zonal_mean(grid)

    lats = lat_start + lat_step * np.arange(n_lat)
    keep = (lats >= lat_min - _LAT_TOL) & (lats <= lat_max + _LAT_TOL)
    if not keep.any():
        raise ValueError(f"No latitudes within [{lat_min}, {lat_max}]")
    order = np.argsort(lats[keep], kind="stable")

    times = pd.date_range(start=start_date, periods=n_time, freq=freq)
    return HovmollerField(values=zonal[keep][order], latitudes=lats[keep][order], times=times)


def hovmoller_from_config(matrix: np.ndarray, cfg: dict[str, Any]) -> HovmollerField:
    return hovmoller_field(
        matrix,
        n_lat=int(cfg["n_lat"]),
        n_lon=int(cfg["n_lon"]),
        lat_start=float(cfg["lat_start"]),
        lat_step=float(cfg["lat_step"]),
        lat_min=float(cfg["lat_min"]),
        lat_max=float(cfg["lat_max"]),
        start_date=str(cfg["start_date"]),
        freq=str(cfg.get("freq", "D")),
        grid_order=str(cfg.get("grid_order", "F")),
    )


def _lat_label(value: float) -> str:
    if value > 0:
        return f"{value:.0f}°N"
    if value < 0:
        return f"{-value:.0f}°S"
    return "0°"


def latitude_ticks(lat_lo: float, lat_hi: float, step: float) -> np.ndarray:
    first = math.ceil(lat_lo / step) * step
    last = math.floor(lat_hi / step) * step
    if first > last:
        return np.array([], dtype=float)
    return np.arange(first, last + step / 2, step)


def year_end_ticks(times: pd.DatetimeIndex) -> list[pd.Timestamp]:
    ends = [pd.Timestamp(year=y, month=12, day=31) for y in sorted(set(times.year))]
    return [t for t in ends if times[0] <= t <= times[-1]]


def plot_hovmoller(
    field: HovmollerField,
    out_path: str | Path,
    vmin: float = 0.0,
    vmax: float = 0.6,
    cmap: str = "jet",
    dpi: int = 300,
    lat_tick_step: float = 5,
    font_size: int = 14,
    colorbar_label: str = "Soil moisture (m³/m³)",
) -> Path:
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)

    x = mdates.date2num(field.times.to_pydatetime())
    fig, ax = plt.subplots(figsize=(16, 7))
    mesh = ax.pcolormesh(
        x,
        field.latitudes,
        np.ma.masked_invalid(field.values),
        shading="nearest",
        cmap=cmap,
        vmin=vmin,
        vmax=vmax,
    )

    ticks = year_end_ticks(field.times)
    if ticks:
        ax.set_xticks(mdates.date2num([t.to_pydatetime() for t in ticks]))
        ax.set_xticklabels([str(t.year) for t in ticks])
    else:
        ax.xaxis_date()
    ax.set_xlim(x[0], x[-1])

    lat_ticks = latitude_ticks(float(field.latitudes.min()), float(field.latitudes.max()), lat_tick_step)
    ax.set_yticks(lat_ticks)
    ax.set_yticklabels([_lat_label(v) for v in lat_ticks])
    ax.set_ylim(float(field.latitudes.min()), float(field.latitudes.max()))

    ax.tick_params(direction="out", labelsize=font_size)
    ax.grid(True, alpha=0.4)
    cb = fig.colorbar(mesh, ax=ax, location="right")
    cb.set_label(colorbar_label, fontsize=font_size)
    cb.ax.tick_params(labelsize=font_size)
    fig.tight_layout()
    fig.savefig(p, dpi=dpi)
    plt.close(fig)
    return p
