"""Arguments shared by the analysis subcommands."""

from __future__ import annotations

import argparse
from typing import Any


def add_run_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--out", required=True, help="Output folder")
    parser.add_argument("--config", default=None, help="Config YAML")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        default=None,
        help="Export format (xlsx|txt|tsv|csv|parquet); repeatable",
    )
    parser.add_argument("--min-samples", type=int, default=None, help="Override the minimum sample gate")


def run_overrides(args: argparse.Namespace, section: str) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.workers is not None:
        overrides["parallel"] = {"workers": int(args.workers)}
    if args.formats:
        overrides["export"] = {"formats": list(args.formats)}
    if args.min_samples is not None:
        overrides[section] = {"min_samples": int(args.min_samples)}
    return overrides
