"""Implementation of `smval validate`."""

from __future__ import annotations

import argparse
import json

from smval.data.io import load_matrix
from smval.data.validators import report_to_dict, validate_matrices


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("validate", help="Check input shapes and joint coverage")
    parser.add_argument("inputs", nargs="+", help="Two or three matrices")
    parser.add_argument("--min-samples", type=int, default=None, help="Gate (default: 2 for pairs, 100 for triplets)")
    parser.add_argument("--json", action="store_true", help="Print report as JSON")
    parser.set_defaults(func=cmd_validate)


def cmd_validate(args: argparse.Namespace) -> int:
    if len(args.inputs) not in (2, 3):
        print("validate expects two or three inputs")
        return 2
    min_samples = args.min_samples
    if min_samples is None:
        min_samples = 2 if len(args.inputs) == 2 else 100

    matrices = {f"input{i + 1} ({p})": load_matrix(p) for i, p in enumerate(args.inputs)}
    report = validate_matrices(matrices, min_samples=min_samples)
    payload = report_to_dict(report)

    if args.json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        status = "PASS" if report.valid else "FAIL"
        print(f"Validation: {status}")
        if report.shape is not None:
            print(f"Shape: {report.shape[0]} locations x {report.shape[1]} time steps")
        if not report.issues:
            print("No issues found")
        for issue in report.issues:
            print(f"- {issue.level.upper()} [{issue.code}] {issue.message}")

    return 0 if report.valid else 2
