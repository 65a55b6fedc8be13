"""
Instrument command for the tripwire CLI.

Reads a Go coverage profile and writes a copy of every partially covered
source file in which each uncovered statement first calls a sentinel
function. Fully covered files are not written.
"""

from tripwire.application.config import InstrumentConfig
from tripwire.application.driver import run
from tripwire.transform.sentinel import DEFAULT_SENTINEL


def add_common_arguments(parser):
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-d", "--debug", action="store_true", help="Debug output")


def add_instrument_parser(subparsers):
    """Add instrument command parser to the main CLI."""
    parser = subparsers.add_parser("instrument", help="Wrap uncovered Go statements with a sentinel call")

    parser.add_argument("-c", "--coverprofile", required=True, metavar="PATH",
                        help="the coverage profile generated by go test -coverprofile")
    parser.add_argument("-m", "--module", default="",
                        help="the name of the covered module (e.g. github.com/user/repo)")
    parser.add_argument("-i", "--input", default=".", metavar="SRC_DIR",
                        help="directory containing the covered Go source")
    parser.add_argument("-o", "--output", default=".", metavar="OUT_DIR", help="output directory")
    parser.add_argument("-f", "--func", default=DEFAULT_SENTINEL, metavar="NAME",
                        help="function to call before the uncovered statements (default: %(default)s)")
    parser.add_argument("--gofmt", action="store_true", help="run gofmt over the instrumented files")
    parser.add_argument("-j", "--jobs", type=int, default=1, help="number of worker processes")
    add_common_arguments(parser)
    return parser


def run_instrument(args):
    config = InstrumentConfig(
        profile_path=args.coverprofile,
        module=args.module,
        source_dir=args.input,
        output_dir=args.output,
        sentinel=args.func,
        gofmt=args.gofmt,
        jobs=max(1, args.jobs),
    )
    results = run(config)
    for result in results:
        print(f"{result.job.output_path}: {result.wrapped} statements instrumented")
    return 0
