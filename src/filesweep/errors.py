from __future__ import annotations


class FilesweepError(Exception):
    """Base error for filesweep."""


class NoInputError(FilesweepError):
    """Raised when a run has no specifiers and no usable piped input."""

    def __init__(self, message: str = "No input") -> None:
        super().__init__(message)


class ConfigError(FilesweepError):
    """Raised when a configuration file cannot be parsed."""
