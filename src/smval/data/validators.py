"""Shape checks and coverage diagnostics for location x time matrices."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import numpy as np

from smval.core.types import ValidationIssue, ValidationReport

logger = logging.getLogger(__name__)


class ShapeMismatch(ValueError):
    """Raised when input matrices are not 2-D or do not share one shape."""


def as_matrix(matrix: Any, name: str = "matrix") -> np.ndarray:
    arr = np.asarray(matrix, dtype=float)
    if arr.ndim != 2:
        raise ShapeMismatch(f"{name} must be 2-D (locations x time), got shape {arr.shape}")
    return arr


def check_same_shape(*matrices: Any, names: list[str] | None = None) -> list[np.ndarray]:
    """Coerce every input to a float matrix and require identical shapes."""

    labels = names or [f"input{i + 1}" for i in range(len(matrices))]
    arrays = [as_matrix(m, name) for m, name in zip(matrices, labels)]
    shapes = {arr.shape for arr in arrays}
    if len(shapes) > 1:
        detail = ", ".join(f"{name}={arr.shape}" for name, arr in zip(labels, arrays))
        raise ShapeMismatch(f"Input matrices must have the same dimensions: {detail}")
    return arrays


def joint_valid_counts(*matrices: np.ndarray) -> np.ndarray:
    """Number of time steps per location where every matrix is non-missing."""

    valid = np.ones(matrices[0].shape, dtype=bool)
    for arr in matrices:
        valid &= ~np.isnan(arr)
    return valid.sum(axis=1)


def validate_matrices(matrices: Mapping[str, Any], min_samples: int) -> ValidationReport:
    """Check shapes and report joint coverage against the minimum-sample gate."""

    issues: list[ValidationIssue] = []
    names = list(matrices.keys())
    try:
        arrays = check_same_shape(*matrices.values(), names=names)
    except ShapeMismatch as exc:
        return ValidationReport(
            valid=False,
            issues=[ValidationIssue(level="error", code="shape_mismatch", message=str(exc), context={})],
            shape=None,
        )

    shape = arrays[0].shape
    if shape[0] == 0 or shape[1] == 0:
        issues.append(
            ValidationIssue(
                level="error",
                code="empty_input",
                message=f"Input matrices are empty: shape {shape}",
                context={"shape": list(shape)},
            )
        )
        return ValidationReport(valid=False, issues=issues, shape=shape)

    for name, arr in zip(names, arrays):
        missing = float(np.isnan(arr).mean())
        all_missing = int(np.isnan(arr).all(axis=1).sum())
        if all_missing:
            issues.append(
                ValidationIssue(
                    level="warning",
                    code="all_missing_locations",
                    message=f"{name}: {all_missing} locations have no valid observations",
                    context={"dataset": name, "locations": all_missing, "missing_fraction": missing},
                )
            )
        if np.isinf(arr).any():
            issues.append(
                ValidationIssue(
                    level="warning",
                    code="infinite_values",
                    message=f"{name}: contains infinite values; they are not treated as missing",
                    context={"dataset": name},
                )
            )

    counts = joint_valid_counts(*arrays)
    below = int((counts < min_samples).sum())
    if below:
        issues.append(
            ValidationIssue(
                level="warning",
                code="insufficient_joint_samples",
                message=(
                    f"{below} of {shape[0]} locations have fewer than {min_samples} "
                    "jointly valid samples and will be reported as undefined"
                ),
                context={"locations": below, "min_samples": min_samples},
            )
        )

    for issue in issues:
        if issue.level == "warning":
            logger.warning("[%s] %s", issue.code, issue.message)

    has_error = any(issue.level == "error" for issue in issues)
    return ValidationReport(valid=not has_error, issues=issues, shape=shape)


def report_to_dict(report: ValidationReport) -> dict[str, Any]:
    return {
        "valid": report.valid,
        "shape": list(report.shape) if report.shape is not None else None,
        "issues": [
            {
                "level": issue.level,
                "code": issue.code,
                "message": issue.message,
                "context": dict(issue.context),
            }
            for issue in report.issues
        ],
    }
