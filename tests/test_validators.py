import numpy as np

from smval.data.validators import check_same_shape, joint_valid_counts, report_to_dict, validate_matrices


def test_validate_reports_coverage_warning():
    a = np.ones((3, 10))
    b = np.ones((3, 10))
    b[0, :] = np.nan
    b[1, :5] = np.nan
    report = validate_matrices({"a": a, "b": b}, min_samples=6)
    assert report.valid
    assert report.shape == (3, 10)
    codes = {issue.code for issue in report.issues}
    assert "all_missing_locations" in codes
    assert "insufficient_joint_samples" in codes
    payload = report_to_dict(report)
    assert payload["shape"] == [3, 10]


def test_validate_shape_mismatch_is_error():
    report = validate_matrices({"a": np.ones((3, 10)), "b": np.ones((3, 9))}, min_samples=2)
    assert not report.valid
    assert report.issues[0].code == "shape_mismatch"


def test_joint_valid_counts():
    a = np.array([[1.0, np.nan, 3.0], [1.0, 2.0, 3.0]])
    b = np.array([[1.0, 2.0, np.nan], [1.0, 2.0, 3.0]])
    assert joint_valid_counts(a, b).tolist() == [1, 3]


def test_check_same_shape_coerces_to_float():
    a, b = check_same_shape([[1, 2]], [[3, 4]])
    assert a.dtype == float
    assert b.shape == (1, 2)
