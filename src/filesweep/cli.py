#!/usr/bin/env python3
"""
filesweep: Find files, run them through a processor, and report diagnostics

Common usage:
  filesweep docs/
  filesweep --processor whitespace .
  filesweep -e md -e txt --ignore-name .filesweepignore .
  filesweep --list-files '**/*.md'
  cat notes.md | filesweep --processor whitespace

The report is written to stderr. Exit status is 1 when any file has errors
(or warnings, with --frail).
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from filesweep.config import find_config_file, load_config, merge_cli_with_config
from filesweep.engine import EngineOptions, resolve_files, run
from filesweep.errors import ConfigError
from filesweep.processors import PROCESSORS, get_processor
from filesweep.scheduler import default_concurrency


@dataclass
class Options:
    """Command-line options for the filesweep tool."""

    files: list[str]
    processor: str = "noop"
    concurrency: int = field(default_factory=default_concurrency)
    extensions: list[str] | None = None
    ignore_name: str | None = None
    silently_ignore: bool = False
    exclude: list[str] | None = None
    extend_exclude: list[str] = field(default_factory=list)
    frail: bool = False
    quiet: bool = False
    silent: bool = False
    list_files: bool = False
    verbose: bool = False
    version: bool = False


# Options that may also come from a config file. Their argparse defaults are
# suppressed so that presence in the namespace means "given on the command line".
_CONFIGURABLE = (
    "processor",
    "concurrency",
    "extensions",
    "ignore_name",
    "silently_ignore",
    "exclude",
    "extend_exclude",
    "frail",
    "quiet",
    "silent",
)


def _build_parser() -> argparse.ArgumentParser:
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="filesweep",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        argument_default=argparse.SUPPRESS,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Files, directories, or glob patterns (reads stdin when none are given)",
    )
    parser.add_argument(
        "-p",
        "--processor",
        choices=sorted(PROCESSORS),
        help="Processor to run on each file (default: noop)",
    )
    parser.add_argument(
        "-j",
        "--concurrency",
        type=int,
        metavar="N",
        help="Number of files processed in parallel (default: CPU count + 4, max 32)",
    )
    parser.add_argument(
        "-e",
        "--ext",
        action="append",
        dest="extensions",
        metavar="EXT",
        help="Extension to search for in directories (e.g., 'md'). Can be repeated",
    )
    parser.add_argument(
        "--ignore-name",
        dest="ignore_name",
        metavar="NAME",
        help="Name of per-directory ignore files (e.g., '.filesweepignore')",
    )
    parser.add_argument(
        "--silently-ignore",
        action="store_true",
        dest="silently_ignore",
        help="Skip ignored files named explicitly instead of reporting an error",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        metavar="PATTERN",
        help="Replace all default directory exclusion patterns. Can be repeated",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        dest="extend_exclude",
        metavar="PATTERN",
        help="Add to default directory exclusion patterns (e.g., 'drafts/'). Can be repeated",
    )
    parser.add_argument(
        "--frail",
        action="store_true",
        help="Exit with status 1 on warnings too",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report files that have messages",
    )
    parser.add_argument(
        "-S",
        "--silent",
        action="store_true",
        help="Only report errors",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print resolved file paths to stdout without processing them",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    return parser


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)` where `explicit_flags` names the
    configurable options the user actually passed.
    """
    namespace = vars(_build_parser().parse_args(args))
    explicit_flags = {name for name in _CONFIGURABLE if name in namespace}
    return Options(**namespace), explicit_flags


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the filesweep CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for reported errors, 2 for usage or config errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("filesweep")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config_path = find_config_file(Path.cwd())
        if config_path:
            merge_cli_with_config(options, load_config(config_path), explicit_flags)
        processor = get_processor(options.processor)
    except (ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    engine_options = EngineOptions(
        files=list(options.files),
        cwd=Path.cwd(),
        processor=processor,
        extensions=options.extensions,
        ignore_name=options.ignore_name,
        silently_ignore=options.silently_ignore,
        exclude=options.exclude,
        extend_exclude=options.extend_exclude,
        frail=options.frail,
        quiet=options.quiet,
        silent=options.silent,
        concurrency=options.concurrency,
        stream_in=sys.stdin,
        stream_error=sys.stderr,
    )

    if options.list_files:
        if not options.files:
            print(
                "Error: --list-files requires at least one file, directory, or glob argument",
                file=sys.stderr,
            )
            return 2
        cwd = engine_options.cwd.resolve()
        for vfile in resolve_files(engine_options):
            print(vfile.display_path(cwd))
        return 0

    result = run(engine_options)
    if result.error is not None:
        print(f"Error: {result.error}", file=sys.stderr)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
