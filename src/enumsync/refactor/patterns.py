"""Literal-detection pattern bank.

A fixed, ordered set of regexes for ORM-style idioms that commonly carry
hardcoded enum values. Patterns are independent of each other; each match
yields one ``Candidate``. Patterns with an ``inner`` regex first locate a
region (call arguments, a choices list) and then yield one candidate per
inner match inside it.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

PatternType = Literal[
    "where",
    "orWhere",
    "whereNot",
    "update",
    "create",
    "array",
    "comparison",
    "validation",
]

TRACKED_FIELDS: tuple[str, ...] = (
    "status",
    "type",
    "state",
    "category",
    "priority",
    "role",
    "level",
    "method",
    "direction",
    "source",
    "channel",
)

COMPARISON_FIELDS: tuple[str, ...] = (
    "status",
    "type",
    "state",
    "category",
    "priority",
    "role",
    "level",
)

VALIDATION_FIELD = "validation"

_VALUE = r"(?P<value>[A-Za-z0-9_-]+)"
_Q = r"['\"]"
_TRACKED = "|".join(TRACKED_FIELDS)
_COMPARED = "|".join(COMPARISON_FIELDS)


@dataclass(frozen=True)
class LiteralPattern:
    """One entry of the pattern bank."""

    pattern_type: PatternType
    regex: re.Pattern[str]
    inner: re.Pattern[str] | None = None


@dataclass(frozen=True)
class Candidate:
    """A literal found in source, not yet matched to an enum."""

    pattern_type: PatternType
    field: str
    value: str
    code: str
    offset: int


def _kwarg_call(method: str) -> re.Pattern[str]:
    return re.compile(rf"\.{method}\(\s*(?P<field>\w+)\s*=\s*{_Q}{_VALUE}{_Q}\s*\)")


_TRACKED_KWARG = re.compile(rf"(?<![\w.])(?P<field>{_TRACKED})\s*=\s*{_Q}{_VALUE}{_Q}")

PATTERNS: tuple[LiteralPattern, ...] = (
    LiteralPattern("where", _kwarg_call("filter")),
    LiteralPattern(
        "orWhere",
        re.compile(rf"\|\s*Q\(\s*(?P<field>\w+)\s*=\s*{_Q}{_VALUE}{_Q}\s*\)"),
    ),
    LiteralPattern("whereNot", _kwarg_call("exclude")),
    LiteralPattern("update", re.compile(r"\.update\((?P<body>[^()]*)\)"), _TRACKED_KWARG),
    LiteralPattern("create", re.compile(r"\.create\((?P<body>[^()]*)\)"), _TRACKED_KWARG),
    LiteralPattern(
        "array",
        re.compile(rf"{_Q}(?P<field>{_TRACKED}){_Q}\s*:\s*{_Q}{_VALUE}{_Q}"),
    ),
    LiteralPattern(
        "comparison",
        re.compile(
            rf"(?P<lhs>\b[A-Za-z_]\w*(?:\.\w+)*\.(?P<field>{_COMPARED}))"
            rf"\s*(?P<op>==|!=)\s*{_Q}{_VALUE}{_Q}"
        ),
    ),
    LiteralPattern(
        "validation",
        re.compile(
            r"(?:\b(?P<field>\w+)\s*=\s*[\w.]+\([^\n]*?)?"
            r"(?P<code>\bchoices\s*=\s*\[(?P<body>[^\]]*)\])"
        ),
        re.compile(r"['\"](?P<value>[^'\"]+)['\"]"),
    ),
)


def iter_candidates(content: str) -> Iterator[Candidate]:
    """Yield every candidate literal in ``content``, pattern by pattern."""
    for pattern in PATTERNS:
        for match in pattern.regex.finditer(content):
            yield from _candidates_for(pattern, match)


def _candidates_for(pattern: LiteralPattern, match: re.Match[str]) -> Iterator[Candidate]:
    groups = pattern.regex.groupindex
    code = match.group("code") if "code" in groups else match.group(0)

    if pattern.inner is None:
        yield Candidate(
            pattern_type=pattern.pattern_type,
            field=match.group("field"),
            value=match.group("value"),
            code=code,
            offset=match.start(),
        )
        return

    body_start = match.start("body")
    for inner in pattern.inner.finditer(match.group("body")):
        if pattern.pattern_type == "validation":
            field = match.group("field") or VALIDATION_FIELD
            snippet = code
        else:
            field = inner.group("field")
            snippet = inner.group(0)
        yield Candidate(
            pattern_type=pattern.pattern_type,
            field=field,
            value=inner.group("value"),
            code=snippet,
            offset=body_start + inner.start(),
        )


def line_number(content: str, offset: int) -> int:
    """1-based line of a character offset."""
    return content.count("\n", 0, offset) + 1


def context_lines(lines: list[str], line: int) -> str:
    """Three lines before through one line after ``line`` (1-based)."""
    index = line - 1
    start = max(0, index - 3)
    end = min(len(lines), index + 2)
    return "\n".join(lines[start:end])
