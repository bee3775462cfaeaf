"""
filesweep: file discovery and batch processing with ignore files,
deterministic ordering, and diagnostic reports.
"""

from filesweep.engine import EngineOptions, RunResult, run
from filesweep.errors import FilesweepError, NoInputError
from filesweep.vfile import Message, Origin, Severity, VirtualFile

__all__ = [
    "EngineOptions",
    "FilesweepError",
    "Message",
    "NoInputError",
    "Origin",
    "RunResult",
    "Severity",
    "VirtualFile",
    "run",
]
