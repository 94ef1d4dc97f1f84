import warnings
from pathlib import Path

import numpy as np

from smval.data.validators import ShapeMismatch
from smval.viz.hovmoller import hovmoller_field, latitude_ticks, plot_hovmoller, year_end_ticks, zonal_mean

N_LAT, N_LON, N_TIME = 9, 4, 400
LAT_START, LAT_STEP = 40.0, -2.5


def _column_major_matrix() -> np.ndarray:
    lats = LAT_START + LAT_STEP * np.arange(N_LAT)
    grid = np.empty((N_LAT, N_LON, N_TIME))
    grid[:] = (lats / 100.0)[:, None, None]
    grid[:, 1, :] += 0.01
    grid[:, 2, :] -= 0.01
    return grid.reshape((N_LAT * N_LON, N_TIME), order="F")


def _field(matrix: np.ndarray, lat_min: float = 22.5, lat_max: float = 35.0):
    return hovmoller_field(
        matrix,
        n_lat=N_LAT,
        n_lon=N_LON,
        lat_start=LAT_START,
        lat_step=LAT_STEP,
        lat_min=lat_min,
        lat_max=lat_max,
        start_date="2016-01-01",
        grid_order="F",
    )


def test_zonal_mean_per_latitude_south_up():
    field = _field(_column_major_matrix())
    assert np.allclose(field.latitudes, [22.5, 25.0, 27.5, 30.0, 32.5, 35.0])
    assert np.allclose(field.values[:, 0], field.latitudes / 100.0)
    assert field.values.shape == (6, N_TIME)
    assert str(field.times[0].date()) == "2016-01-01"
    assert len(field.times) == N_TIME


def test_row_major_order_differs_from_column_major():
    matrix = _column_major_matrix()
    field = hovmoller_field(
        matrix,
        n_lat=N_LAT,
        n_lon=N_LON,
        lat_start=LAT_START,
        lat_step=LAT_STEP,
        lat_min=0.0,
        lat_max=90.0,
        start_date="2016-01-01",
        grid_order="C",
    )
    assert not np.allclose(field.values[:, 0], field.latitudes / 100.0)


def test_all_missing_latitude_stays_nan_without_warning():
    grid = np.ones((3, 2, 5))
    grid[1] = np.nan
    grid[2, 0] = np.nan
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        out = zonal_mean(grid)
    assert np.all(np.isnan(out[1]))
    assert np.allclose(out[0], 1.0)
    assert np.allclose(out[2], 1.0)


def test_wrong_row_count_raises():
    try:
        _field(np.zeros((N_LAT * N_LON - 1, 10)))
        assert False
    except ShapeMismatch as exc:
        assert "location rows" in str(exc)


def test_tick_helpers():
    assert latitude_ticks(34.875, 55.125, 5).tolist() == [35.0, 40.0, 45.0, 50.0, 55.0]
    field = _field(_column_major_matrix())
    ticks = year_end_ticks(field.times)
    assert [t.year for t in ticks] == [2016]


def test_plot_writes_image(tmp_path: Path):
    matrix = _column_major_matrix()
    matrix[:5, :20] = np.nan
    out = plot_hovmoller(_field(matrix), tmp_path / "figs" / "hov.png", vmin=0.0, vmax=0.6, dpi=50)
    assert out.exists()
    assert out.stat().st_size > 0
