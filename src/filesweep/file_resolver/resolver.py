"""
Resolver: turns specifiers (paths, globs, pre-built files) into a deduplicated,
sorted list of `VirtualFile`s, applying extension and ignore policy.

Explicit files (named directly or passed as handles) are processed regardless
of extension and produce a hard error when ignored. Discovered files (found by
directory search or glob) are filtered silently.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Sequence
from pathlib import Path

import pathspec

from filesweep.file_resolver.ignore import IgnoreRegistry
from filesweep.file_resolver.types import (
    GLOB_CHARS,
    FileSpecifier,
    GlobSpecifier,
    PathSpecifier,
    ResolverConfig,
    Specifier,
    parse_specifier,
)
from filesweep.vfile import Origin, VirtualFile

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "No such file or directory"
IGNORED_MESSAGE = "Cannot process specified file: it’s ignored"
INVALID_GLOB_MESSAGE = "Invalid glob pattern"


class FileResolver:
    """
    Resolves specifiers relative to `config.cwd`.

    A resolver owns one `IgnoreRegistry`, so ignore files are read at most once
    per directory for as long as the resolver lives (one run).
    """

    def __init__(self, config: ResolverConfig, registry: IgnoreRegistry | None = None) -> None:
        self._config: ResolverConfig = config
        self._cwd: Path = config.cwd.resolve()
        self._extensions: list[str] = config.effective_extensions
        self._exclude_spec: pathspec.PathSpec = pathspec.PathSpec.from_lines(
            "gitignore", config.effective_exclude
        )
        self.registry: IgnoreRegistry = registry or IgnoreRegistry(config.ignore_name, self._cwd)

    def resolve(self, specifiers: Sequence[str | Path | VirtualFile | Specifier]) -> list[VirtualFile]:
        """
        Resolve specifiers into files sorted by path.

        Never raises for a single bad specifier: missing explicit paths, invalid
        globs, and ignored explicit files come back as files carrying an error.
        """
        entries: dict[Path, VirtualFile] = {}

        for raw in specifiers:
            for found in self._resolve_one(parse_specifier(raw)):
                key = found.path
                existing = entries.get(key)
                if existing is None:
                    entries[key] = found
                    continue
                # Explicit wins over discovered so a named file is never dropped.
                if found.origin is Origin.explicit:
                    existing.origin = Origin.explicit
                if existing.content is None and found.content is not None:
                    existing.content = found.content

        result: list[VirtualFile] = []
        for key in sorted(entries, key=str):
            vfile = entries[key]
            if self._apply_ignore_policy(vfile):
                result.append(vfile)
        logger.debug("Resolved %d specifiers to %d files", len(specifiers), len(result))
        return result

    def _resolve_one(self, spec: Specifier) -> Iterable[VirtualFile]:
        if isinstance(spec, FileSpecifier):
            yield self._decorate_handle(spec.file)
        elif isinstance(spec, PathSpecifier):
            yield from self._resolve_path(spec.path)
        elif isinstance(spec, GlobSpecifier):
            if (self._cwd / spec.pattern).exists():
                yield from self._resolve_path(spec.pattern)
            else:
                yield from self._expand_glob(spec.pattern)

    def _absolute(self, path: str | Path) -> Path:
        p = Path(path).expanduser()
        if not p.is_absolute():
            p = self._cwd / p
        # Normalized but not symlink-resolved, so a link keeps the name it was given.
        return Path(os.path.normpath(p))

    def _decorate_handle(self, vfile: VirtualFile) -> VirtualFile:
        """Pre-built handles are used as-is, without touching disk."""
        vfile.path = self._absolute(vfile.path)
        vfile.origin = Origin.explicit
        return vfile

    def _resolve_path(self, raw: str) -> Iterable[VirtualFile]:
        p = self._absolute(raw)
        if p.is_dir():
            yield from self._walk_directory(p)
        elif p.exists():
            yield VirtualFile(path=p, origin=Origin.explicit)
        else:
            missing = VirtualFile(path=p, origin=Origin.explicit)
            missing.error(NOT_FOUND_MESSAGE)
            yield missing

    def _walk_directory(self, root: Path) -> Iterable[VirtualFile]:
        """
        Walk a directory tree using `os.walk()`, pruning excluded and ignored
        directories in-place.
        """
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rel_to_root = current.relative_to(root)

            dirnames[:] = sorted(
                d for d in dirnames if not self._is_dir_excluded(d, rel_to_root / d, current / d)
            )

            for filename in sorted(filenames):
                if not self._has_extension(filename):
                    continue
                filepath = current / filename
                if not filepath.is_file():
                    continue
                yield VirtualFile(path=filepath, origin=Origin.discovered)

    def _is_dir_excluded(self, dirname: str, rel_path: Path, full_path: Path) -> bool:
        """Check if a directory should be pruned during traversal."""
        if self._exclude_spec.match_file(dirname + "/"):
            return True
        if self._exclude_spec.match_file(rel_path.as_posix() + "/"):
            return True
        return self.registry.is_dir_ignored(full_path)

    def _has_extension(self, filename: str) -> bool:
        lowered = filename.lower()
        return any(lowered.endswith(ext) for ext in self._extensions)

    def _expand_glob(self, pattern: str) -> Iterable[VirtualFile]:
        """
        Expand a glob rooted at cwd. Matched directories are searched; matched
        files are treated as discovered and skip the extension filter.
        """
        parts = Path(pattern).parts
        root = self._cwd
        glob_part = pattern
        for i, part in enumerate(parts):
            if any(c in part for c in GLOB_CHARS):
                if i > 0:
                    root = self._absolute(Path(*parts[:i]))
                glob_part = str(Path(*parts[i:]))
                break

        if not root.is_dir():
            return

        try:
            matches = sorted(root.glob(glob_part))
        except ValueError as e:
            logger.debug("Invalid glob %r: %s", pattern, e)
            invalid = VirtualFile(path=self._absolute(pattern), origin=Origin.explicit)
            invalid.error(INVALID_GLOB_MESSAGE)
            yield invalid
            return

        for match in matches:
            if match.is_dir():
                yield from self._walk_directory(self._absolute(match))
            elif match.is_file():
                yield VirtualFile(path=self._absolute(match), origin=Origin.discovered)

    def _apply_ignore_policy(self, vfile: VirtualFile) -> bool:
        """
        Return whether `vfile` stays in the result. Ignored discovered files are
        dropped; ignored explicit files get an error, or are dropped when
        `silently_ignore` is set.
        """
        if vfile.has_errors or not self.registry.enabled:
            return True
        if not self.registry.is_ignored(vfile.path):
            return True
        if vfile.origin is Origin.discovered or self._config.silently_ignore:
            logger.debug("Skipping ignored file %s", vfile.path)
            return False
        vfile.error(IGNORED_MESSAGE)
        return True
