"""Tests for hierarchical ignore files."""

from __future__ import annotations

import os
import stat
import threading
from pathlib import Path

from filesweep.file_resolver import IgnoreRegistry
from filesweep.file_resolver.ignore import (
    _read_ignore_file,  # pyright: ignore[reportPrivateUsage]
    load_rule_set,
)


def test_registry_disabled_without_name(tmp_path: Path):
    (tmp_path / ".fooignore").write_text("*.txt\n")
    registry = IgnoreRegistry(None, tmp_path)
    assert not registry.enabled
    assert not registry.is_ignored(tmp_path / "a.txt")


def test_registry_empty_name_disables(tmp_path: Path):
    registry = IgnoreRegistry("", tmp_path)
    assert not registry.enabled


def test_registry_matches_file_pattern(tmp_path: Path):
    (tmp_path / ".fooignore").write_text("*.log\n")
    registry = IgnoreRegistry(".fooignore", tmp_path)
    assert registry.is_ignored(tmp_path / "debug.log")
    assert not registry.is_ignored(tmp_path / "notes.md")


def test_registry_rules_inherited_by_subdirectories(tmp_path: Path):
    (tmp_path / ".fooignore").write_text("*.log\n")
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)
    registry = IgnoreRegistry(".fooignore", tmp_path)
    assert registry.is_ignored(deep / "debug.log")


def test_registry_rules_rooted_at_their_directory(tmp_path: Path):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".fooignore").write_text("/top.md\n")
    registry = IgnoreRegistry(".fooignore", tmp_path)
    assert registry.is_ignored(sub / "top.md")
    assert not registry.is_ignored(tmp_path / "top.md")
    assert not registry.is_ignored(sub / "inner" / "top.md")


def test_registry_deeper_negation_wins(tmp_path: Path):
    (tmp_path / ".fooignore").write_text("*.txt\n")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".fooignore").write_text("!keep.txt\n")
    registry = IgnoreRegistry(".fooignore", tmp_path)
    assert registry.is_ignored(tmp_path / "keep.txt")
    assert registry.is_ignored(sub / "other.txt")
    assert not registry.is_ignored(sub / "keep.txt")


def test_registry_deeper_rule_ignores_what_parent_allows(tmp_path: Path):
    (tmp_path / ".fooignore").write_text("*.txt\n!*.md.txt\n")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".fooignore").write_text("notes.md.txt\n")
    registry = IgnoreRegistry(".fooignore", tmp_path)
    assert not registry.is_ignored(tmp_path / "notes.md.txt")
    assert registry.is_ignored(sub / "notes.md.txt")


def test_registry_directory_pattern(tmp_path: Path):
    (tmp_path / ".fooignore").write_text("generated/\n")
    registry = IgnoreRegistry(".fooignore", tmp_path)
    assert registry.is_dir_ignored(tmp_path / "generated")
    assert registry.is_dir_ignored(tmp_path / "sub" / "generated")
    assert registry.is_ignored(tmp_path / "generated" / "out.md")
    assert not registry.is_dir_ignored(tmp_path / "src")


def test_registry_caches_rule_sets(tmp_path: Path):
    ignore_file = tmp_path / ".fooignore"
    ignore_file.write_text("*.log\n")
    registry = IgnoreRegistry(".fooignore", tmp_path)
    first = registry.rules_for(tmp_path)
    ignore_file.write_text("*.md\n")
    assert registry.rules_for(tmp_path) is first
    assert registry.is_ignored(tmp_path / "a.log")
    assert not registry.is_ignored(tmp_path / "a.md")


def test_registry_no_cross_registry_cache(tmp_path: Path):
    ignore_file = tmp_path / ".fooignore"
    ignore_file.write_text("*.log\n")
    assert IgnoreRegistry(".fooignore", tmp_path).is_ignored(tmp_path / "a.log")
    ignore_file.write_text("*.md\n")
    assert not IgnoreRegistry(".fooignore", tmp_path).is_ignored(tmp_path / "a.log")


def test_registry_concurrent_population_is_single(tmp_path: Path):
    (tmp_path / ".fooignore").write_text("*.log\n")
    registry = IgnoreRegistry(".fooignore", tmp_path)
    results: list[object] = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        results.append(registry.rules_for(tmp_path))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_load_rule_set_skips_comments_and_blank_lines(tmp_path: Path):
    (tmp_path / ".fooignore").write_text("# comment\n\n   \n")
    rules = load_rule_set(tmp_path, ".fooignore")
    assert rules.is_empty


def test_load_rule_set_missing_file(tmp_path: Path):
    rules = load_rule_set(tmp_path, ".fooignore")
    assert rules.is_empty
    assert rules.verdict(tmp_path / "a.txt") is None


def test_read_ignore_file_missing(tmp_path: Path):
    assert _read_ignore_file(tmp_path / "nonexistent") is None


def test_read_ignore_file_unreadable(tmp_path: Path):
    if os.getuid() == 0:
        # Root can read any file regardless of permissions.
        assert _read_ignore_file(tmp_path / "nonexistent_ignore") is None
        return
    ignore_file = tmp_path / ".fooignore"
    ignore_file.write_text("*.log\n")
    ignore_file.chmod(0o000)
    try:
        assert _read_ignore_file(ignore_file) is None
    finally:
        ignore_file.chmod(stat.S_IRUSR | stat.S_IWUSR)


def test_read_ignore_file_non_utf8_is_empty_rule_set(tmp_path: Path):
    ignore_file = tmp_path / ".fooignore"
    ignore_file.write_bytes(b"\x80\x81\x82\xff\xfe")
    assert _read_ignore_file(ignore_file) is None
    registry = IgnoreRegistry(".fooignore", tmp_path)
    assert registry.rules_for(tmp_path).is_empty
    assert not registry.is_ignored(tmp_path / "a.txt")
