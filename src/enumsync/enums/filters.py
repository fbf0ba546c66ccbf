"""Qualified-name glob filters.

``*`` matches any run of characters except ``.``; ``**`` matches across
``.``. Exclude patterns are checked first and win. An empty include list
includes everything not excluded.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from functools import lru_cache

SEPARATOR = "."


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a qualified-name glob into an anchored regex."""
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append(f"[^{re.escape(SEPARATOR)}]*")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("^" + "".join(parts) + "$")


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    return any(compile_glob(p).match(name) for p in patterns)


def is_included(
    qualified_name: str,
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
) -> bool:
    """Apply include/exclude globs to a qualified name."""
    if exclude and matches_any(qualified_name, exclude):
        return False
    if not include:
        return True
    return matches_any(qualified_name, include)
