"""
Hierarchical ignore-file handling using pathspec.

Each directory may hold an ignore file (name configured by the caller) with
gitignore-style patterns rooted at that directory. Rule sets are loaded lazily,
at most once per directory per registry, and inherited by every descendant.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleSet:
    """
    Compiled patterns from one directory's ignore file.

    `negations` holds the `!pattern` lines with the `!` removed, so a deeper
    rule set can re-include a path an ancestor ignores.
    """

    directory: Path
    spec: pathspec.PathSpec | None = None
    negations: pathspec.PathSpec | None = None

    @property
    def is_empty(self) -> bool:
        return self.spec is None

    def verdict(self, path: Path) -> bool | None:
        """`True` if ignored, `False` if explicitly re-included, `None` if no rule applies."""
        if self.spec is None:
            return None
        try:
            rel = path.relative_to(self.directory).as_posix()
        except ValueError:
            return None
        if self.spec.match_file(rel):
            return True
        if self.negations is not None and self.negations.match_file(rel):
            return False
        return None


def _normalize(path: Path) -> Path:
    """Absolute and normalized, without following symlinks."""
    return Path(os.path.normpath(path.absolute()))


def _read_ignore_file(path: Path) -> list[str] | None:
    """Read pattern lines from an ignore file, or `None` if missing or unreadable."""
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read ignore file %s: %s", path, e)
        return None
    return [line for line in text.splitlines() if line.strip() and not line.strip().startswith("#")]


def load_rule_set(directory: Path, ignore_name: str) -> RuleSet:
    """
    Load `ignore_name` from `directory`. Missing, unreadable, or malformed
    files produce an empty rule set.
    """
    lines = _read_ignore_file(directory / ignore_name)
    if not lines:
        return RuleSet(directory)
    negated = [line.strip()[1:] for line in lines if line.strip().startswith("!")]
    try:
        spec = pathspec.PathSpec.from_lines("gitignore", lines)
        negations = pathspec.PathSpec.from_lines("gitignore", negated) if negated else None
    except (ValueError, TypeError) as e:
        logger.warning("Malformed ignore file %s: %s", directory / ignore_name, e)
        return RuleSet(directory)
    return RuleSet(directory, spec, negations)


class IgnoreRegistry:
    """
    Answers "is this path ignored?" using every ignore file from the path's
    directory up to `root`. The most specific directory with an opinion wins.

    Safe to share between threads: each directory's rule set is computed once
    under a per-directory lock, and every caller sees that single result.
    """

    def __init__(self, ignore_name: str | None, root: Path) -> None:
        self._ignore_name: str | None = ignore_name or None
        self._root: Path = _normalize(root)
        self._cache: dict[Path, RuleSet] = {}
        self._lock = threading.Lock()
        self._dir_locks: dict[Path, threading.Lock] = {}

    @property
    def enabled(self) -> bool:
        return self._ignore_name is not None

    def rules_for(self, directory: Path) -> RuleSet:
        """Rule set for a single directory, loaded on first request."""
        directory = _normalize(directory)
        cached = self._cache.get(directory)
        if cached is not None:
            return cached
        if self._ignore_name is None:
            return RuleSet(directory)
        with self._lock:
            dir_lock = self._dir_locks.setdefault(directory, threading.Lock())
        with dir_lock:
            cached = self._cache.get(directory)
            if cached is None:
                cached = load_rule_set(directory, self._ignore_name)
                logger.debug(
                    "Loaded ignore rules for %s (%s)",
                    directory,
                    "empty" if cached.is_empty else "present",
                )
                self._cache[directory] = cached
        return cached

    def chain(self, directory: Path) -> list[RuleSet]:
        """Rule sets from `directory` upward, most specific first."""
        directory = _normalize(directory)
        chain: list[RuleSet] = []
        current = directory
        while True:
            chain.append(self.rules_for(current))
            if current == self._root:
                break
            parent = current.parent
            if parent == current:
                break
            current = parent
        return chain

    def is_ignored(self, path: Path) -> bool:
        if self._ignore_name is None:
            return False
        path = _normalize(path)
        for rules in self.chain(path.parent):
            verdict = rules.verdict(path)
            if verdict is not None:
                return verdict
        return False

    def is_dir_ignored(self, directory: Path) -> bool:
        """Whether a whole directory is excluded (used to prune walks)."""
        if self._ignore_name is None:
            return False
        directory = _normalize(directory)
        for rules in self.chain(directory.parent):
            if rules.spec is None:
                continue
            try:
                rel = directory.relative_to(rules.directory).as_posix() + "/"
            except ValueError:
                continue
            if rules.spec.match_file(rel):
                return True
            if rules.negations is not None and rules.negations.match_file(rel):
                return False
        return False
