"""
Processor protocol and built-in processors.

A processor inspects a loaded `VirtualFile` and appends messages to it. It
may raise; the scheduler turns any exception into an error on that file.
"""

from __future__ import annotations

from typing import Protocol

from filesweep.vfile import VirtualFile


class Processor(Protocol):
    def process(self, file: VirtualFile) -> None: ...


class NoopProcessor:
    """Accepts every file without adding messages."""

    def process(self, file: VirtualFile) -> None:
        return None


class WhitespaceProcessor:
    """
    Flags whitespace problems: trailing whitespace and a missing final newline
    are warnings, NUL bytes are errors.
    """

    def process(self, file: VirtualFile) -> None:
        text = file.content or ""
        if not text:
            return
        for lineno, line in enumerate(text.split("\n"), start=1):
            if "\x00" in line:
                file.error("Unexpected NUL byte", lineno, line.index("\x00") + 1)
            stripped = line.rstrip("\r")
            trimmed = stripped.rstrip(" \t")
            if trimmed != stripped:
                file.warn("Trailing whitespace", lineno, len(trimmed) + 1)
        if not text.endswith("\n"):
            last_line = text.count("\n") + 1
            last_len = len(text.rsplit("\n", 1)[-1])
            file.warn("Missing final newline", last_line, last_len + 1)


PROCESSORS: dict[str, type[NoopProcessor] | type[WhitespaceProcessor]] = {
    "noop": NoopProcessor,
    "whitespace": WhitespaceProcessor,
}


def get_processor(name: str) -> Processor:
    try:
        return PROCESSORS[name]()
    except KeyError:
        raise ValueError(f"Unknown processor: {name!r} (choose from {', '.join(PROCESSORS)})")
