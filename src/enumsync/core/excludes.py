"""Paths the tree walks never look at.

PRUNABLE_DIRS are directory names skipped wherever sources are walked
(enum discovery, model casts, the refactor scan). DEFAULT_REFACTOR_EXCLUDES
is the default of ``refactor.exclude``; a project that sets that key
replaces the whole list.
"""

from __future__ import annotations

PRUNABLE_DIRS: frozenset[str] = frozenset(
    {
        # version control
        ".git",
        ".hg",
        ".svn",
        # enumsync state and backups
        ".enumsync",
        # environments and tool caches
        ".venv",
        "venv",
        "__pycache__",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        ".tox",
        ".nox",
        "site-packages",
        # frontend and build output
        "node_modules",
        "build",
        "dist",
    }
)

DEFAULT_REFACTOR_EXCLUDES: tuple[str, ...] = (
    ".git",
    ".enumsync",
    "node_modules",
    "venv",
    ".venv",
    "__pycache__",
    "build",
    "dist",
    "migrations",
)


def is_prunable_dir(dirname: str) -> bool:
    return dirname in PRUNABLE_DIRS


def is_excluded_path(rel_path: str, excludes: tuple[str, ...] | list[str]) -> bool:
    """Whether any non-empty fragment occurs in the POSIX form of ``rel_path``.

    ``"migrations"`` therefore excludes ``orders/migrations/0001_initial.py``.
    """
    posix = rel_path.replace("\\", "/")
    return any(fragment in posix for fragment in excludes if fragment)
