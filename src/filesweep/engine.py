"""
Engine entry point: resolve, process, and report in one call.

Usage::

    from filesweep.engine import EngineOptions, run
    from filesweep.processors import NoopProcessor

    result = run(EngineOptions(files=["docs/"], processor=NoopProcessor()))
    sys.exit(result.exit_code)
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

from filesweep.errors import NoInputError
from filesweep.file_resolver import FileResolver, ResolverConfig, Specifier
from filesweep.processors import NoopProcessor, Processor
from filesweep.reporter import ReportOptions, report
from filesweep.scheduler import Scheduler, describe_error
from filesweep.vfile import STDIN_NAME, VirtualFile

logger = logging.getLogger(__name__)


@dataclass
class EngineOptions:
    """
    Everything a run needs. `stream_in` is only consulted when `files` is
    empty; `stream_error` receives the report (defaults to `sys.stderr`).
    """

    files: list[str | Path | VirtualFile | Specifier] = field(default_factory=list)
    cwd: Path = field(default_factory=Path.cwd)
    processor: Processor = field(default_factory=NoopProcessor)
    extensions: list[str] | None = None
    ignore_name: str | None = None
    silently_ignore: bool = False
    exclude: list[str] | None = None
    extend_exclude: list[str] = field(default_factory=list)
    frail: bool = False
    quiet: bool = False
    silent: bool = False
    concurrency: int | None = None
    stream_in: IO[str] | None = None
    stream_error: IO[str] | None = None


@dataclass
class RunResult:
    """
    Outcome of a run. `error` is set only when the run could not start at all
    (no input); per-file problems live in `files` and `report`.
    """

    error: Exception | None
    exit_code: int
    files: list[VirtualFile] = field(default_factory=list)
    report: str = ""


def _read_stdin(stream: IO[str] | None) -> VirtualFile:
    if stream is None or stream.isatty():
        raise NoInputError()
    vfile = VirtualFile(path=Path(STDIN_NAME))
    try:
        vfile.content = stream.read()
    except (OSError, UnicodeDecodeError) as e:
        vfile.content = ""
        vfile.error(describe_error(e))
    return vfile


def resolve_files(options: EngineOptions) -> list[VirtualFile]:
    """Resolve `options.files` without processing anything."""
    config = ResolverConfig(
        cwd=options.cwd,
        extensions=options.extensions,
        ignore_name=options.ignore_name,
        silently_ignore=options.silently_ignore,
        exclude=options.exclude,
        extend_exclude=options.extend_exclude,
    )
    return FileResolver(config).resolve(options.files)


def run(options: EngineOptions) -> RunResult:
    """
    Run the whole pipeline and write the report to `options.stream_error`.

    Returns a `RunResult`; only a missing input yields a non-`None` error,
    in which case nothing is written.
    """
    if options.files:
        files = resolve_files(options)
    else:
        try:
            files = [_read_stdin(options.stream_in)]
        except NoInputError as e:
            logger.debug("No specifiers and no piped input")
            return RunResult(error=e, exit_code=1)

    processed = Scheduler(options.processor, options.concurrency).run(files)
    result = report(
        processed,
        options.cwd,
        ReportOptions(frail=options.frail, quiet=options.quiet, silent=options.silent),
    )

    stream = options.stream_error if options.stream_error is not None else sys.stderr
    if result.text:
        stream.write(result.text)
        stream.flush()

    return RunResult(error=None, exit_code=result.exit_code, files=processed, report=result.text)
