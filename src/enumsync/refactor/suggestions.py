"""Replacement code for scan issues."""

from __future__ import annotations

import re

from enumsync.refactor.scanner import ScanIssue

_COMPARISON = re.compile(r"^(?P<lhs>.+?)\s*(?P<op>==|!=)\s*")


def enum_reference(issue: ScanIssue) -> str:
    return f"{issue.enum}.{issue.case}"


def generate_suggestion(issue: ScanIssue) -> str:
    """The code that should replace ``issue.code``."""
    ref = enum_reference(issue)
    kind = issue.pattern_type

    if kind == "where":
        return f".filter({issue.field}={ref})"
    if kind == "orWhere":
        return f"| Q({issue.field}={ref})"
    if kind == "whereNot":
        return f".exclude({issue.field}={ref})"
    if kind in ("update", "create"):
        return f"{issue.field}={ref}"
    if kind == "array":
        quote = issue.code[:1] if issue.code[:1] in ("'", '"') else "'"
        return f"{quote}{issue.field}{quote}: {ref}"
    if kind == "comparison":
        # Without a cast the attribute holds the raw value, not the member
        rhs = ref if issue.has_cast else f"{ref}.value"
        match = _COMPARISON.match(issue.code)
        if match is None:
            return f"{issue.field} == {rhs}"
        return f"{match.group('lhs')} {match.group('op')} {rhs}"
    if kind == "validation":
        return f"choices=[member.value for member in {issue.enum}]"
    return ref
