"""
Default extensions and directory excludes for file discovery.

Exclude patterns use gitignore syntax. Directory patterns end with `/`.
"""

from __future__ import annotations

# Used when no extensions are configured (or an empty list is given).
DEFAULT_EXTENSIONS: list[str] = [
    ".md",
    ".markdown",
    ".mdown",
    ".mkdn",
    ".mkd",
    ".txt",
    ".text",
]

# Pruned during directory walks only. Globs that name these directly still match.
DEFAULT_EXCLUDES: list[str] = [
    # Version control
    ".git/",
    ".hg/",
    ".svn/",
    # Python
    ".venv/",
    "venv/",
    "__pycache__/",
    ".tox/",
    ".mypy_cache/",
    ".ruff_cache/",
    ".pytest_cache/",
    "*.egg-info/",
    # JavaScript/Node
    "node_modules/",
    "bower_components/",
    # IDE/Editor
    ".idea/",
    ".vscode/",
]


def normalize_extensions(extensions: list[str] | None) -> list[str]:
    """
    Normalize extensions to a lowercase leading-dot form, falling back to
    `DEFAULT_EXTENSIONS` for `None` or an empty list.
    """
    if not extensions:
        return list(DEFAULT_EXTENSIONS)
    result: list[str] = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        if ext not in result:
            result.append(ext)
    return result or list(DEFAULT_EXTENSIONS)
