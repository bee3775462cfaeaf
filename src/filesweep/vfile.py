"""
In-memory file representation shared by every stage of a run.

A `VirtualFile` carries a path, optional preloaded content, and the ordered
diagnostic messages attached to it while it moves through resolution,
processing and reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# Placeholder path for content read from standard input.
STDIN_NAME = "<stdin>"


class Severity(str, Enum):
    info = "info"
    warning = "warning"
    error = "error"


class Origin(str, Enum):
    """How a file entered the run. `explicit` outranks `discovered`."""

    explicit = "explicit"
    discovered = "discovered"


@dataclass(frozen=True)
class Message:
    line: int
    column: int
    severity: Severity
    text: str


@dataclass
class VirtualFile:
    """
    A file as seen by the engine.

    `content=None` means the file has not been loaded yet; the scheduler reads
    it from disk right before processing. Files with content are never re-read.
    """

    path: Path
    content: str | None = None
    messages: list[Message] = field(default_factory=list)
    origin: Origin = Origin.explicit

    def message(
        self,
        text: str,
        line: int = 1,
        column: int = 1,
        severity: Severity = Severity.warning,
    ) -> Message:
        """Append a message and return it."""
        msg = Message(line=line, column=column, severity=severity, text=text)
        self.messages.append(msg)
        return msg

    def info(self, text: str, line: int = 1, column: int = 1) -> Message:
        return self.message(text, line, column, Severity.info)

    def warn(self, text: str, line: int = 1, column: int = 1) -> Message:
        return self.message(text, line, column, Severity.warning)

    def error(self, text: str, line: int = 1, column: int = 1) -> Message:
        return self.message(text, line, column, Severity.error)

    @property
    def has_errors(self) -> bool:
        return any(m.severity is Severity.error for m in self.messages)

    @property
    def has_warnings(self) -> bool:
        return any(m.severity is Severity.warning for m in self.messages)

    def display_path(self, cwd: Path) -> str:
        """Path relative to `cwd` when possible, as used in reports."""
        if not self.path.is_absolute():
            return str(self.path)
        for candidate in (self.path, self.path.resolve()):
            try:
                return str(candidate.relative_to(cwd))
            except ValueError:
                continue
        return str(self.path)
