"""
Ranges command for the tripwire CLI.

Prints the merged uncovered ranges of each file in a coverage profile, the
same ranges the instrument command classifies statements against.
"""

from tripwire.application.driver import map_source_path
from tripwire.coverage.profile import parse_profiles
from tripwire.coverage.ranges import build_uncovered_ranges

from .instrument import add_common_arguments


def add_ranges_parser(subparsers):
    """Add ranges command parser to the main CLI."""
    parser = subparsers.add_parser("ranges", help="Print the uncovered ranges of a coverage profile")
    parser.add_argument("-c", "--coverprofile", required=True, metavar="PATH",
                        help="the coverage profile generated by go test -coverprofile")
    parser.add_argument("-m", "--module", default=None,
                        help="strip this module prefix from the reported file names")
    parser.add_argument("--all", action="store_true", help="also list fully covered files")
    add_common_arguments(parser)
    return parser


def run_ranges(args):
    for prof in parse_profiles(args.coverprofile):
        ranges = build_uncovered_ranges(prof.blocks)
        if not ranges and not args.all:
            continue

        name = prof.file_name
        if args.module is not None:
            name = map_source_path(args.module, name)

        print(f"{name}: {len(ranges)} uncovered ranges")
        for cr in ranges:
            print(f"  {cr}")
    return 0
