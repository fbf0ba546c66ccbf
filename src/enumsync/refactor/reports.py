"""Scan result summaries and exported reports."""

from __future__ import annotations

import csv
import io
import json
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from enumsync.refactor.scanner import ScanIssue
from enumsync.refactor.suggestions import generate_suggestion

CSV_HEADER = ("File", "Line", "Type", "Column", "Value", "Enum", "Case", "Suggested Fix")


def group_by_file(issues: Sequence[ScanIssue]) -> dict[str, list[ScanIssue]]:
    """Issues per file, files and issues in first-seen order."""
    grouped: dict[str, list[ScanIssue]] = {}
    for issue in issues:
        grouped.setdefault(issue.file, []).append(issue)
    return grouped


def summary_json(issues: Sequence[ScanIssue], enums_loaded: int) -> dict[str, Any]:
    """Machine-readable scan summary (``refactor --json``)."""
    return {
        "summary": {
            "total_issues": len(issues),
            "enums_loaded": enums_loaded,
            "scanned_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        },
        "by_enum": dict(Counter(issue.enum for issue in issues)),
        "by_file": dict(Counter(issue.file for issue in issues)),
        "issues": [issue.to_dict() for issue in issues],
    }


def render_json(issues: Sequence[ScanIssue]) -> str:
    return json.dumps([issue.to_dict() for issue in issues], indent=4)


def render_csv(issues: Sequence[ScanIssue]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for issue in issues:
        writer.writerow(
            (
                issue.file,
                issue.line,
                issue.pattern_type,
                issue.field,
                issue.value,
                issue.enum,
                issue.case,
                generate_suggestion(issue),
            )
        )
    return buffer.getvalue()


def render_markdown(issues: Sequence[ScanIssue], enums_loaded: int) -> str:
    lines = [
        "# enumsync Refactor Report",
        "",
        f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "## Summary",
        "",
        f"- **Total Issues:** {len(issues)}",
        f"- **Enums Scanned:** {enums_loaded}",
        "",
        "## Issues by File",
        "",
    ]
    for file, file_issues in group_by_file(issues).items():
        lines.append(f"### `{file}`")
        lines.append("")
        for issue in file_issues:
            lines.append(f"- **Line {issue.line}:** `{issue.code}`")
            lines.append(f"  - Suggestion: `{generate_suggestion(issue)}`")
            lines.append(f"  - Enum: `{issue.enum_class}.{issue.case}`")
        lines.append("")
    return "\n".join(lines)


def export_report(path: Path, issues: Sequence[ScanIssue], enums_loaded: int) -> Path:
    """Write a report whose format follows the file suffix (.json, .csv, .md)."""
    suffix = path.suffix.lower()
    if suffix == ".csv":
        content = render_csv(issues)
    elif suffix == ".md":
        content = render_markdown(issues, enums_loaded)
    else:
        content = render_json(issues)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
