"""Main CLI dispatcher for depcheck.

This module provides the command-line interface, dispatching subcommands to
the modules implementing them.
"""

import argparse
import logging

from depcheck import __version__
from .cdg import add_cdg_parser, add_postdom_parser


def main(argv=None):
    """Main entry point for the depcheck CLI.

    Args:
        argv: Argument list; sys.argv[1:] if None.

    Returns:
        int: Exit code (0 for success, non-zero for error).
    """
    parser = argparse.ArgumentParser(
        description="depcheck - control and data dependence checker", prog="depcheck"
    )

    parser.add_argument("--version", action="version", version=f"depcheck {__version__}")

    subparsers = parser.add_subparsers(
        dest="command", help="Available commands", required=True
    )

    add_cdg_parser(subparsers)
    add_postdom_parser(subparsers)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
