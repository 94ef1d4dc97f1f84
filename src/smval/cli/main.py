"""Main CLI entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys

from smval.cli import config, hovmoller, metrics, synthetic, tca, validate
from smval.core.config import ConfigError
from smval.core.logging import setup_logging
from smval.core.pipeline import PipelineError
from smval.data.io import DatasetIOError
from smval.data.validators import ShapeMismatch

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smval", description="Soil-moisture validation: metrics, triple collocation, Hovmoller"
    )
    subparsers = parser.add_subparsers(dest="command")

    metrics.register(subparsers)
    tca.register(subparsers)
    hovmoller.register(subparsers)
    validate.register(subparsers)
    synthetic.register(subparsers)
    config.register(subparsers)

    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=getattr(args, "verbose", False))

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return int(args.func(args))
    except (ShapeMismatch, ConfigError, DatasetIOError, PipelineError) as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("Interrupted")
        return 130


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
