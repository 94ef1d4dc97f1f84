import numpy as np

from smval.data.synthetic import make_triplet, orthonormal_components


def test_orthonormal_components_are_centered_and_orthogonal():
    q = orthonormal_components(50, 4, np.random.default_rng(0))
    assert np.allclose(q.sum(axis=0), 0.0, atol=1e-12)
    assert np.allclose(q.T @ q, np.eye(4), atol=1e-12)


def test_make_triplet_exact_covariance():
    trip = make_triplet(2, 120, err_var=(0.01, 0.02, 0.03), signal_var=0.05, seed=1)
    C = np.cov(np.column_stack([trip.a[0], trip.b[0], trip.c[0]]), rowvar=False)
    expected = np.full((3, 3), 0.05) + np.diag([0.01, 0.02, 0.03])
    assert np.allclose(C, expected, atol=1e-12)


def test_make_triplet_missing_counts_match_meta():
    trip = make_triplet(10, 200, missing_fraction=0.2, seed=2)
    joint = ~(np.isnan(trip.a) | np.isnan(trip.b) | np.isnan(trip.c))
    assert joint.sum(axis=1).tolist() == trip.meta["joint_valid"]
    assert np.isnan(trip.a).any()
