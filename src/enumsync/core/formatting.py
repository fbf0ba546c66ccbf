"""Name and summary formatting utilities.

Design principles:
- Every transformation is pure and deterministic (generated output is hashed)
- Grammatically correct summaries (1 file vs 2 files)
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

FileCase = Literal["kebab", "camel", "pascal"]

_LOWER_UPPER_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def to_kebab_case(value: str) -> str:
    """Insert a hyphen at each lower-to-upper boundary, then lowercase.

    Examples:
        OrderStatus -> order-status
        HTTPStatus -> httpstatus
    """
    return _LOWER_UPPER_BOUNDARY.sub(r"\1-\2", value).lower()


def to_camel_case(value: str) -> str:
    """Lowercase only the first character (OrderStatus -> orderStatus)."""
    return value[:1].lower() + value[1:]


def convert_file_case(value: str, file_case: str) -> str:
    """Apply a file naming convention to a class short name.

    Unknown conventions fall back to kebab.
    """
    if file_case == "camel":
        return to_camel_case(value)
    if file_case == "pascal":
        return value
    return to_kebab_case(value)


def snake_to_pascal(value: str) -> str:
    """Convert SCREAMING_SNAKE_CASE or snake_case to PascalCase.

    Examples:
        PENDING_PAYMENT -> PendingPayment
        library_member -> LibraryMember
        pending -> Pending
    """
    parts = re.split(r"[_\-]+", value.lower())
    return "".join(part[:1].upper() + part[1:] for part in parts)


def humanize(value: str) -> str:
    """Turn a case name into display text (PENDING_PAYMENT -> Pending Payment)."""
    words = value.replace("_", " ").lower().split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def display_path(path: Path, root: Path) -> str:
    """Path relative to root in POSIX form, or the absolute path if outside."""
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()
