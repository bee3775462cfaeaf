"""
Self-contained file discovery with hierarchical ignore files, extension
filtering, and explicit-versus-discovered file policy.

Usage::

    from filesweep.file_resolver import FileResolver, ResolverConfig

    config = ResolverConfig(
        extensions=["md", "txt"],
        ignore_name=".filesweepignore",
    )
    resolver = FileResolver(config)
    files = resolver.resolve([".", "extra/doc.md", "**/*.rst"])
"""

from filesweep.file_resolver.defaults import DEFAULT_EXCLUDES, DEFAULT_EXTENSIONS
from filesweep.file_resolver.ignore import IgnoreRegistry, RuleSet
from filesweep.file_resolver.resolver import (
    IGNORED_MESSAGE,
    INVALID_GLOB_MESSAGE,
    NOT_FOUND_MESSAGE,
    FileResolver,
)
from filesweep.file_resolver.types import (
    FileSpecifier,
    GlobSpecifier,
    PathSpecifier,
    ResolverConfig,
    Specifier,
    parse_specifier,
)

__all__ = [
    "DEFAULT_EXCLUDES",
    "DEFAULT_EXTENSIONS",
    "IGNORED_MESSAGE",
    "INVALID_GLOB_MESSAGE",
    "NOT_FOUND_MESSAGE",
    "FileResolver",
    "FileSpecifier",
    "GlobSpecifier",
    "IgnoreRegistry",
    "PathSpecifier",
    "ResolverConfig",
    "RuleSet",
    "Specifier",
    "parse_specifier",
]
