"""Main CLI dispatcher for tripwire."""

import argparse
import logging
import sys

from tripwire import __version__
from tripwire.application.errors import TripwireError

from .instrument import add_instrument_parser, run_instrument
from .ranges import add_ranges_parser, run_ranges


def setup_logging(args):
    level = logging.DEBUG if args.debug else logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def build_parser():
    parser = argparse.ArgumentParser(
        description="tripwire - guard untested Go statements for coverage-guided fuzzing",
        prog="tripwire",
    )
    parser.add_argument("--version", action="version", version="tripwire %s" % __version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)
    add_instrument_parser(subparsers)
    add_ranges_parser(subparsers)
    return parser


def main(argv=None):
    """Main entry point for the tripwire CLI.

    Returns:
        int: Exit code (0 for success, 1 for a fatal error).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args)

    try:
        if args.command == "instrument":
            return run_instrument(args)
        elif args.command == "ranges":
            return run_ranges(args)
    except TripwireError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
