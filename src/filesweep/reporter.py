"""
Reporter: formats processed files into report text and an exit code.

Example output::

    nested/three.txt: no issues found
    nested/two.txt
      1:1  error  Cannot process specified file: it’s ignored

    one.txt: no issues found

    ✗ 1 error
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from filesweep.vfile import Message, Severity, VirtualFile

CROSS = "✗"
WARNING_SIGN = "⚠"


@dataclass
class ReportOptions:
    frail: bool = False  # Warnings also fail the run
    quiet: bool = False  # Omit files without messages
    silent: bool = False  # Only report errors (implies `quiet`)


@dataclass(frozen=True)
class Report:
    text: str
    exit_code: int
    errors: int
    warnings: int


def _sorted_messages(messages: Sequence[Message]) -> list[Message]:
    # `sorted` is stable, so ties keep insertion order.
    return sorted(messages, key=lambda m: (m.line, m.column))


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _format_messages(messages: Sequence[Message]) -> list[str]:
    positions = [f"{m.line}:{m.column}" for m in messages]
    pos_width = max(len(p) for p in positions)
    sev_width = max(len(m.severity.value) for m in messages)
    return [
        f"  {pos.ljust(pos_width)}  {m.severity.value.ljust(sev_width)}  {m.text}"
        for pos, m in zip(positions, messages)
    ]


def report(files: Sequence[VirtualFile], cwd: Path, options: ReportOptions | None = None) -> Report:
    """
    Build the report for `files`, which are listed in the order given (the
    scheduler already sorts them by path).
    """
    options = options or ReportOptions()
    quiet = options.quiet or options.silent
    cwd = cwd.resolve()

    lines: list[str] = []
    errors = 0
    warnings = 0

    for vfile in files:
        messages = _sorted_messages(vfile.messages)
        errors += sum(1 for m in messages if m.severity is Severity.error)
        warnings += sum(1 for m in messages if m.severity is Severity.warning)
        if options.silent:
            messages = [m for m in messages if m.severity is Severity.error]

        name = vfile.display_path(cwd)
        if not messages:
            if not quiet:
                lines.append(f"{name}: no issues found")
            continue
        lines.append(name)
        lines.extend(_format_messages(messages))
        lines.append("")

    summary = _summary(errors, 0 if options.silent else warnings)
    if summary:
        if lines and lines[-1] != "":
            lines.append("")
        lines.append(summary)
    elif lines and lines[-1] == "":
        lines.pop()

    text = "\n".join(lines) + "\n" if lines else ""
    failed = errors > 0 or (options.frail and warnings > 0)
    return Report(text=text, exit_code=1 if failed else 0, errors=errors, warnings=warnings)


def _summary(errors: int, warnings: int) -> str:
    parts: list[str] = []
    if errors:
        parts.append(_plural(errors, "error"))
    if warnings:
        parts.append(_plural(warnings, "warning"))
    if not parts:
        return ""
    mark = CROSS if errors else WARNING_SIGN
    return f"{mark} {', '.join(parts)}"
