"""Argument parsing functionality for packagedetails."""

import argparse

from packagedetails import __version__
from packagedetails.constants import Constants


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        default="INFO")
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Also write log records to this file",
                        action="store",
                        type=str)
    parser.add_argument("--config",
                        dest="CONFIG",
                        help="YAML configuration file",
                        action="store",
                        type=str)


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog=Constants.PROGRAM_NAME,
        description="Read, build and validate 02packages.details.txt style package indexes",
        add_help=True,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="action", required=True)

    show = subparsers.add_parser("show", help="Print the header and record counts of an index")
    show.add_argument("INDEX", help="Index file path or http(s) URL")
    _add_common(show)

    check = subparsers.add_parser("check", help="Validate an index, optionally against a corpus")
    check.add_argument("INDEX", help="Index file path or http(s) URL")
    check.add_argument("-c", "--corpus",
                       dest="CORPUS",
                       help="Directory holding the archives the index paths are relative to",
                       action="store",
                       type=str)
    _add_common(check)

    reduce_cmd = subparsers.add_parser("reduce", help="List the newest archive of each distribution")
    reduce_cmd.add_argument("CORPUS", help="Directory to scan for archives")
    _add_common(reduce_cmd)

    build = subparsers.add_parser("build", help="Write a new index from package entries")
    build.add_argument("OUTPUT", help="Output file; gzip-compressed when it ends in .gz")
    build.add_argument("-e", "--entry",
                       dest="ENTRIES",
                       help="Package entry as NAME VERSION PATH",
                       action="append",
                       nargs=3,
                       metavar=("NAME", "VERSION", "PATH"),
                       default=[])
    build.add_argument("--multiple-versions",
                       dest="MULTIPLE_VERSIONS",
                       help="Allow several versions per package and keep the highest",
                       action="store_true")
    _add_common(build)

    return parser.parse_args(argv)
