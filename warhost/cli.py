"""Warhost Chronicle – unified CLI dispatcher.

All subcommands live in ``warhost/commands/*.py`` and expose a
``register(subparsers)`` function that adds themselves to argparse.
"""
from __future__ import annotations

import argparse
import logging
import sys

from warhost.commands.registry import register_all


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="warhost",
        description="Warhost Chronicle — narrative battle scenario generator CLI",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    register_all(sub)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    # Each command stores a ``func`` on the namespace
    rc = args.func(args)
    sys.exit(rc or 0)
