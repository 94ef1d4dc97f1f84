"""Implementation of `smval hovmoller`."""

from __future__ import annotations

import argparse

from smval.core.pipeline import run_hovmoller


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("hovmoller", help="Latitude-time diagram of zonally averaged soil moisture")
    parser.add_argument("matrix", help="Soil moisture matrix, rows = n_lat*n_lon grid points")
    parser.add_argument("--out", required=True, help="Output image (.png, .tiff, .pdf)")
    parser.add_argument("--config", default=None, help="Config YAML")
    parser.add_argument("--var", default=None, help="Variable name inside .mat/.npz input")
    parser.add_argument("--start-date", default=None, help="Date of the first column")
    parser.add_argument("--dpi", type=int, default=None, help="Output resolution")
    parser.set_defaults(func=cmd_hovmoller)


def cmd_hovmoller(args: argparse.Namespace) -> int:
    hov: dict[str, object] = {}
    if args.start_date is not None:
        hov["start_date"] = args.start_date
    if args.dpi is not None:
        hov["dpi"] = int(args.dpi)

    path = run_hovmoller(
        matrix_path=args.matrix,
        out_path=args.out,
        config_path=args.config,
        overrides={"hovmoller": hov} if hov else None,
        variable=args.var,
    )
    print(f"Hovmoller diagram written to {path}")
    return 0
