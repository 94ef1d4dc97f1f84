"""Implementation of `smval tca`."""

from __future__ import annotations

import argparse
import sys

from smval.cli._common import add_run_arguments, run_overrides
from smval.core.pipeline import run_tca_pipeline


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("tca", help="Triple collocation error variance, SNR and fMSE")
    parser.add_argument("inputs", nargs=3, help="Three collocated matrices")
    parser.add_argument("--names", nargs=3, default=None, help="Dataset names used in column headers")
    parser.add_argument("--vars", nargs=3, default=None, help="Variable names inside .mat/.npz inputs")
    add_run_arguments(parser)
    parser.set_defaults(func=cmd_tca)


def cmd_tca(args: argparse.Namespace) -> int:
    result = run_tca_pipeline(
        paths=list(args.inputs),
        out_dir=args.out,
        names=args.names,
        config_path=args.config,
        overrides=run_overrides(args, "tca"),
        variables=args.vars,
        argv=sys.argv,
    )

    for path in result.metadata["outputs"]:
        print(f"Triple Collocation analysis completed. Exported {len(result.table)} rows to {path}")
    for name, stats in result.summary["datasets"].items():
        if stats["negative_error_variance"]:
            print(f"Note: {name} has {stats['negative_error_variance']} locations with negative error variance")
    print(f"Wrote run metadata to {args.out}/run_metadata.json")
    return 0
