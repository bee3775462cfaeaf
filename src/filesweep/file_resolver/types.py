"""Configuration and specifier types for file resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from filesweep.file_resolver.defaults import DEFAULT_EXCLUDES, normalize_extensions
from filesweep.vfile import VirtualFile

# Characters that indicate a string is a glob pattern rather than a literal path.
GLOB_CHARS = frozenset("*?[")


@dataclass
class ResolverConfig:
    """
    Configuration for file discovery and filtering.

    `extensions=None` (or empty) means use `DEFAULT_EXTENSIONS`.
    `ignore_name=None` disables ignore-file discovery entirely.
    `exclude=None` means use `DEFAULT_EXCLUDES`; providing a list replaces them.
    """

    cwd: Path = field(default_factory=Path.cwd)
    extensions: list[str] | None = None
    ignore_name: str | None = None
    silently_ignore: bool = False
    exclude: list[str] | None = None
    extend_exclude: list[str] = field(default_factory=list)

    @property
    def effective_extensions(self) -> list[str]:
        return normalize_extensions(self.extensions)

    @property
    def effective_exclude(self) -> list[str]:
        """Combined exclude patterns: defaults (or `exclude`) + `extend_exclude`."""
        base = self.exclude if self.exclude is not None else list(DEFAULT_EXCLUDES)
        return base + self.extend_exclude


@dataclass(frozen=True)
class PathSpecifier:
    """A literal path: a file, a directory, or something that doesn't exist."""

    path: str


@dataclass(frozen=True)
class GlobSpecifier:
    pattern: str


@dataclass(frozen=True)
class FileSpecifier:
    """A pre-built file handle supplied by the caller."""

    file: VirtualFile


Specifier = Union[PathSpecifier, GlobSpecifier, FileSpecifier]


def parse_specifier(raw: str | Path | VirtualFile | Specifier) -> Specifier:
    """
    Classify a raw caller input. Strings containing glob characters become
    `GlobSpecifier` unless they name an existing path verbatim, which is
    checked later by the resolver.
    """
    if isinstance(raw, (PathSpecifier, GlobSpecifier, FileSpecifier)):
        return raw
    if isinstance(raw, VirtualFile):
        return FileSpecifier(raw)
    text = str(raw)
    if isinstance(raw, str) and any(c in text for c in GLOB_CHARS):
        return GlobSpecifier(text)
    return PathSpecifier(text)
