"""Implementation of `smval metrics`."""

from __future__ import annotations

import argparse
import sys

from smval.cli._common import add_run_arguments, run_overrides
from smval.core.pipeline import run_metrics_pipeline


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("metrics", help="Per-location R, bias, RMSE, ubRMSE between two datasets")
    parser.add_argument("reference", help="Reference matrix (e.g. ERA5, GLDAS)")
    parser.add_argument("satellite", help="Satellite matrix (e.g. ASCAT, SMAP)")
    parser.add_argument("--reference-var", default=None, help="Variable name inside .mat/.npz reference")
    parser.add_argument("--satellite-var", default=None, help="Variable name inside .mat/.npz satellite")
    add_run_arguments(parser)
    parser.set_defaults(func=cmd_metrics)


def cmd_metrics(args: argparse.Namespace) -> int:
    result = run_metrics_pipeline(
        reference_path=args.reference,
        satellite_path=args.satellite,
        out_dir=args.out,
        config_path=args.config,
        overrides=run_overrides(args, "metrics"),
        reference_var=args.reference_var,
        satellite_var=args.satellite_var,
        argv=sys.argv,
    )

    for path in result.metadata["outputs"]:
        print(f"Exported {len(result.table)} rows to {path}")
    print(f"Computed metrics at {result.summary['computed']} of {result.summary['locations']} locations")
    print(f"Wrote run metadata to {args.out}/run_metadata.json")
    return 0
