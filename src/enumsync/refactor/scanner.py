"""Match candidate literals against discovered enum cases.

Three gating modes:

    cast    Only fields with a typed model cast to a loaded enum.
    strict  Field name and enum short name must contain one another.
    loose   Any enum with a case of equal value.

In every mode at most one issue is recorded per candidate, and the first
qualifying enum in qualified-name order wins. Ambiguous literals are not
reported as ambiguous.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any, Literal

from enumsync.enums.models import EnumDefinition
from enumsync.refactor.casts import CastTable
from enumsync.refactor.patterns import (
    Candidate,
    PatternType,
    context_lines,
    iter_candidates,
    line_number,
)

MatchMode = Literal["cast", "strict", "loose"]
MATCH_MODES: tuple[str, ...] = ("cast", "strict", "loose")

# Capitalized names that appear as receivers but are never models
INFRA_NAMES: frozenset[str] = frozenset(
    {
        "Q",
        "F",
        "Value",
        "Path",
        "Response",
        "Request",
        "JsonResponse",
        "HttpResponse",
        "Session",
        "Cache",
        "Logger",
        "Settings",
        "Config",
        "Field",
        "Model",
        "Enum",
        "Decimal",
    }
)

# Lowercase receivers that never name a model instance
INFRA_VARIABLES: frozenset[str] = frozenset(
    {
        "self",
        "cls",
        "request",
        "session",
        "db",
        "qs",
        "queryset",
        "query",
        "response",
        "cache",
        "logger",
        "settings",
        "config",
    }
)

_STATIC_RECEIVER = re.compile(
    r"\b([A-Z][A-Za-z0-9_]*)\.(?:objects|filter|exclude|get|create|update|query)\b"
)
_SELECT_RECEIVER = re.compile(r"\b(?:select|query)\(\s*([A-Z][A-Za-z0-9_]*)\b")
_INSTANCE_RECEIVER = re.compile(
    r"\b([a-z_][a-z0-9_]*)\.(?:save|update|delete|refresh_from_db)\s*\("
)


@dataclass(frozen=True)
class ScanIssue:
    """A hardcoded literal that matches an enum case."""

    file: str
    line: int
    pattern_type: PatternType
    field: str
    value: str
    code: str
    enum: str
    case: str
    enum_class: str
    context: str
    has_cast: bool

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = data.pop("pattern_type")
        return data


def _snake_to_pascal(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def extract_model_from_context(context: str) -> str | None:
    """Guess the model a query or save operates on from nearby code."""
    for regex in (_STATIC_RECEIVER, _SELECT_RECEIVER):
        for match in regex.finditer(context):
            if match.group(1) not in INFRA_NAMES:
                return match.group(1)
    for match in _INSTANCE_RECEIVER.finditer(context):
        if match.group(1) not in INFRA_VARIABLES:
            return _snake_to_pascal(match.group(1))
    return None


def _related(field: str, enum_name: str) -> bool:
    a, b = field.lower(), enum_name.lower()
    return a in b or b in a


class EnumScanner:
    """Checks candidates against a fixed set of enums."""

    def __init__(
        self,
        enums: Sequence[EnumDefinition],
        cast_table: CastTable | None = None,
        match_mode: MatchMode = "cast",
        target_enums: Sequence[str] | None = None,
    ) -> None:
        if match_mode not in MATCH_MODES:
            raise ValueError(f"Unknown match mode: {match_mode}")
        self._enums = sorted(enums, key=lambda e: e.qualified_name)
        self._by_qualified = {e.qualified_name: e for e in self._enums}
        self._casts = cast_table
        self._mode = match_mode
        self._targets = set(target_enums) if target_enums else None

    def _targeted(self, enum: EnumDefinition) -> bool:
        return self._targets is None or enum.short_name in self._targets

    def check(
        self,
        candidate: Candidate,
        file: str,
        line: int,
        context: str,
    ) -> ScanIssue | None:
        """Return the issue for a candidate, or None when nothing qualifies."""
        if self._mode == "cast":
            return self._check_cast(candidate, file, line, context)

        for enum in self._enums:
            if not self._targeted(enum):
                continue
            if self._mode == "strict" and not _related(candidate.field, enum.short_name):
                continue
            case = enum.case_for_value(candidate.value)
            if case is not None:
                return self._issue(candidate, file, line, context, enum, case.name, False)
        return None

    def _check_cast(
        self,
        candidate: Candidate,
        file: str,
        line: int,
        context: str,
    ) -> ScanIssue | None:
        if not self._casts:
            return None
        cast = self._casts.lookup(candidate.field, extract_model_from_context(context))
        if cast is None:
            return None
        enum = self._by_qualified.get(cast.enum_class)
        if enum is None or not self._targeted(enum):
            return None
        case = enum.case_for_value(candidate.value)
        if case is None:
            return None
        return self._issue(candidate, file, line, context, enum, case.name, True)

    @staticmethod
    def _issue(
        candidate: Candidate,
        file: str,
        line: int,
        context: str,
        enum: EnumDefinition,
        case_name: str,
        has_cast: bool,
    ) -> ScanIssue:
        return ScanIssue(
            file=file,
            line=line,
            pattern_type=candidate.pattern_type,
            field=candidate.field,
            value=candidate.value,
            code=candidate.code,
            enum=enum.short_name,
            case=case_name,
            enum_class=enum.qualified_name,
            context=context,
            has_cast=has_cast,
        )

    def scan_source(self, file: str, content: str) -> list[ScanIssue]:
        """Scan one file's content; ``file`` is the path reported on issues."""
        lines = content.split("\n")
        issues: list[ScanIssue] = []
        for candidate in iter_candidates(content):
            line = line_number(content, candidate.offset)
            issue = self.check(candidate, file, line, context_lines(lines, line))
            if issue is not None:
                issues.append(issue)
        return issues
