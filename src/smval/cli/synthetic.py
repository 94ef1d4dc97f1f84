"""Implementation of `smval synthetic`."""

from __future__ import annotations

import argparse
from pathlib import Path

from smval.data.io import save_matrix, write_json
from smval.data.synthetic import make_triplet


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("synthetic", help="Write a synthetic triplet with known error variances")
    parser.add_argument("--out", required=True, help="Output folder")
    parser.add_argument("--locations", type=int, default=50, help="Number of locations")
    parser.add_argument("--time", type=int, default=365, help="Number of time steps")
    parser.add_argument("--err-var", type=float, nargs=3, default=[0.01, 0.02, 0.03], help="Error variances")
    parser.add_argument("--signal-var", type=float, default=0.04, help="Shared signal variance")
    parser.add_argument("--missing", type=float, default=0.1, help="Per-dataset missing fraction")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.set_defaults(func=cmd_synthetic)


def cmd_synthetic(args: argparse.Namespace) -> int:
    triplet = make_triplet(
        n_locations=args.locations,
        n_time=args.time,
        err_var=tuple(args.err_var),
        signal_var=args.signal_var,
        missing_fraction=args.missing,
        seed=args.seed,
    )
    out = Path(args.out)
    for name, matrix in (("a", triplet.a), ("b", triplet.b), ("c", triplet.c)):
        path = save_matrix(matrix, out / f"{name}.npy")
        print(f"Wrote {path}")
    write_json(triplet.meta, out / "synthetic_meta.json")
    print(f"Wrote {out / 'synthetic_meta.json'}")
    return 0
