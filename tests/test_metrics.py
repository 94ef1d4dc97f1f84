import numpy as np

from smval.data.validators import ShapeMismatch
from smval.stats.metrics import compute_metrics


def test_identical_series_give_perfect_agreement():
    x = np.linspace(0.1, 0.4, 10)[None, :]
    res = compute_metrics(x, x.copy())
    assert res.n[0] == 10
    assert res.bias[0] == 0.0
    assert res.rmse[0] == 0.0
    assert res.ubrmse[0] == 0.0
    assert abs(res.R[0] - 1.0) < 1e-12
    assert res.p_value[0] < 1e-6


def test_constant_offset_shows_in_bias_not_ubrmse():
    rng = np.random.default_rng(0)
    ref = rng.uniform(0.1, 0.4, size=(3, 50))
    sat = ref + 0.05
    res = compute_metrics(ref, sat)
    assert np.allclose(res.bias, 0.05)
    assert np.allclose(res.rmse, 0.05)
    assert np.allclose(res.ubrmse, 0.0, atol=1e-12)
    assert np.allclose(res.R, 1.0)


def test_bias_is_satellite_minus_reference():
    ref = np.array([[0.2, 0.3, 0.4, 0.5]])
    sat = np.array([[0.1, 0.3, 0.3, 0.5]])
    res = compute_metrics(ref, sat)
    assert np.isclose(res.bias[0], -0.05)
    assert np.isclose(res.rmse[0], np.sqrt((0.01 + 0.01) / 4))
    d = (sat[0] - sat[0].mean()) - (ref[0] - ref[0].mean())
    assert np.isclose(res.ubrmse[0], np.sqrt(np.mean(d**2)))


def test_missing_values_are_dropped_pairwise():
    ref = np.array([[0.1, np.nan, 0.3, 0.4, 0.5]])
    sat = np.array([[0.1, 0.2, np.nan, 0.4, 0.6]])
    res = compute_metrics(ref, sat)
    assert res.n[0] == 3
    assert np.isclose(res.bias[0], 0.1 / 3)


def test_insufficient_samples_leave_location_undefined():
    ref = np.array([[0.1, np.nan, np.nan], [np.nan, np.nan, np.nan], [0.1, 0.2, 0.3]])
    sat = np.array([[0.2, 0.3, np.nan], [0.1, 0.2, 0.3], [0.1, 0.2, 0.35]])
    res = compute_metrics(ref, sat)
    for i in (0, 1):
        assert res.n[i] == 0
        assert np.isnan(res.R[i])
        assert np.isnan(res.bias[i])
        assert np.isnan(res.rmse[i])
        assert np.isnan(res.ubrmse[i])
        assert np.isnan(res.p_value[i])
    assert res.n[2] == 3


def test_constant_series_keeps_errors_but_not_correlation():
    ref = np.full((1, 20), 0.25)
    sat = np.linspace(0.2, 0.3, 20)[None, :]
    res = compute_metrics(ref, sat)
    assert res.n[0] == 20
    assert np.isfinite(res.bias[0])
    assert np.isnan(res.R[0])
    assert np.isnan(res.p_value[0])


def test_parallel_matches_serial_and_is_repeatable():
    rng = np.random.default_rng(4)
    ref = rng.normal(0.3, 0.05, size=(37, 80))
    sat = ref + rng.normal(0.02, 0.03, size=ref.shape)
    ref[rng.random(ref.shape) < 0.2] = np.nan
    serial = compute_metrics(ref, sat, workers=1)
    threaded = compute_metrics(ref, sat, workers=4, chunk_size=5)
    again = compute_metrics(ref, sat, workers=4, chunk_size=5)
    for field in ("R", "bias", "rmse", "ubrmse", "p_value", "n"):
        assert np.array_equal(getattr(serial, field), getattr(threaded, field), equal_nan=True)
        assert np.array_equal(getattr(threaded, field), getattr(again, field), equal_nan=True)


def test_shape_mismatch_raises():
    try:
        compute_metrics(np.zeros((2, 5)), np.zeros((3, 5)))
        assert False
    except ShapeMismatch as exc:
        assert "same dimensions" in str(exc)


def test_one_dimensional_input_is_rejected():
    try:
        compute_metrics(np.zeros(5), np.zeros(5))
        assert False
    except ShapeMismatch as exc:
        assert "2-D" in str(exc)
