"""Implementation of `smval config`."""

from __future__ import annotations

import argparse

import yaml

from smval.core.config import DEFAULT_CONFIG, resolve_config


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("config", help="Print the default (or resolved) configuration")
    parser.add_argument("--config", default=None, help="Config YAML to resolve against defaults")
    parser.set_defaults(func=cmd_config)


def cmd_config(args: argparse.Namespace) -> int:
    data = resolve_config(config_path=args.config) if args.config else DEFAULT_CONFIG
    print(yaml.safe_dump(data, sort_keys=False))
    return 0
