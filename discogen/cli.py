"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from discogen.commands import map_api_index, run_substitute
from discogen.naming import NamingError
from discogen.templating.spec import Spec, StreamOrPath, TemplatingError

PROGRAM_NAME = "mcp"

_TRACE = 5
_LOG_LEVELS = {
    "INFO": logging.INFO,
    "ERROR": logging.ERROR,
    "DEBUG": logging.DEBUG,
    "TRACE": _TRACE,
}


def _split_replacements(values: Optional[List[str]]) -> List[str]:
    return [part for value in values or [] for part in value.split(":")]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(prog=PROGRAM_NAME)
    parser.add_argument(
        "-l",
        "--log-level",
        default="INFO",
        choices=list(_LOG_LEVELS),
        help="The desired log level.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    mapping = sub.add_parser(
        "map-api-index",
        help="Transform the API index into data we can use during substitution",
    )
    mapping.add_argument(
        "discovery_json_path",
        type=Path,
        help="The index with all API specification URLs of the discovery API",
    )
    mapping.add_argument(
        "output_file", type=Path, help="The path to which to write the digest"
    )
    mapping.add_argument(
        "spec_directory",
        type=Path,
        help="The directory into which specification files are written",
    )
    mapping.add_argument(
        "output_directory",
        type=Path,
        help="The directory into which files will be generated",
    )

    substitute = sub.add_parser(
        "substitute",
        aliases=["sub"],
        help="Substitutes templates using structured data.",
    )
    substitute.add_argument(
        "-s",
        "--separator",
        default="\n",
        help="The string separating multiple documents written to the same stream.",
    )
    substitute.add_argument(
        "--replace",
        action="append",
        dest="replacements",
        metavar="find-this:replace-with-that",
        help="A find & replace applied to string data, e.g. --replace=foo:bar.",
    )
    substitute.add_argument(
        "-v",
        "--validate",
        action="store_true",
        help="Parse the instantiated template as YAML or JSON and fail if invalid.",
    )
    substitute.add_argument(
        "-d",
        "--data",
        type=StreamOrPath.parse,
        default=None,
        metavar="path",
        help="Structured data in YAML or JSON format.",
    )
    substitute.add_argument(
        "specs",
        nargs="*",
        type=Spec.parse,
        metavar="template-spec",
        help="'<src>:<dst>' mapping of template files to outputs.",
    )
    return parser


def _print_causes(err: BaseException) -> None:
    current: Optional[BaseException] = err
    first = True
    while current is not None:
        prefix = "error: " if first else "caused by: "
        print(f"{prefix}{current}", file=sys.stderr)
        first = False
        current = current.__cause__


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line; returns the process exit code."""
    args = build_parser().parse_args(argv)
    logging.addLevelName(_TRACE, "TRACE")
    logging.basicConfig(level=_LOG_LEVELS[args.log_level])
    try:
        if args.command == "map-api-index":
            map_api_index(
                args.discovery_json_path,
                args.output_file,
                args.spec_directory,
                args.output_directory,
            )
        else:
            run_substitute(
                args.data,
                args.specs,
                args.separator,
                args.validate,
                _split_replacements(args.replacements),
            )
    except (NamingError, TemplatingError, OSError, ValueError) as err:
        _print_causes(err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())