"""Enum key normalization: rename non-uppercase case names to UPPERCASE.

Values are untouched; only the member names and their references change.
"""

from __future__ import annotations

import ast
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from enumsync.core.formatting import display_path
from enumsync.core.logging import get_logger
from enumsync.enums.discovery import iter_python_files
from enumsync.enums.models import EnumDefinition
from enumsync.refactor.backups import BackupStore

log = get_logger(__name__)


@dataclass(frozen=True)
class KeyReference:
    file: str
    line: int
    code: str


@dataclass
class KeyNormalizationIssue:
    """One case name to upper-case, with every reference found."""

    enum: str
    old_key: str
    new_key: str
    file: str
    enum_class: str
    references: list[KeyReference] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "enum": self.enum,
            "old_key": self.old_key,
            "new_key": self.new_key,
            "file": self.file,
            "enum_class": self.enum_class,
            "references": [
                {"file": r.file, "line": r.line, "code": r.code} for r in self.references
            ],
        }


@dataclass
class KeyNormalizationResult:
    files_changed: int = 0
    keys_changed: int = 0
    references_updated: int = 0
    backups: dict[str, str] = field(default_factory=dict)


def reference_pattern(enum_name: str, key: str) -> re.Pattern[str]:
    """``Enum.key`` as a whole reference, not part of a longer name."""
    return re.compile(rf"(?<!\w){re.escape(enum_name)}\.{re.escape(key)}(?!\w)")


def find_references(
    scan_root: Path,
    project_root: Path,
    enum_name: str,
    key: str,
) -> list[KeyReference]:
    """Every line under ``scan_root`` referencing ``Enum.key``."""
    pattern = reference_pattern(enum_name, key)
    references: list[KeyReference] = []
    if not scan_root.is_dir():
        return references
    for path in iter_python_files(scan_root):
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        for number, line in enumerate(content.split("\n"), start=1):
            if pattern.search(line):
                references.append(
                    KeyReference(display_path(path, project_root), number, line.strip())
                )
    return references


def find_non_uppercase_keys(
    enums: Sequence[EnumDefinition],
    scan_root: Path,
    project_root: Path,
) -> list[KeyNormalizationIssue]:
    """Backed enum cases whose names are not already upper-case."""
    issues: list[KeyNormalizationIssue] = []
    for enum in enums:
        if not enum.is_backed:
            continue
        for case in enum.cases:
            new_key = case.name.upper()
            if case.name == new_key:
                continue
            issues.append(
                KeyNormalizationIssue(
                    enum=enum.short_name,
                    old_key=case.name,
                    new_key=new_key,
                    file=enum.source_path,
                    enum_class=enum.qualified_name,
                    references=find_references(
                        scan_root, project_root, enum.short_name, case.name
                    ),
                )
            )
    return issues


def _find_class(tree: ast.Module, class_name: str) -> ast.ClassDef | None:
    for node in tree.body:
        if isinstance(node, ast.ClassDef) and node.name == class_name:
            return node
    return None


def _member_targets(node: ast.ClassDef, key: str) -> list[ast.Name]:
    """Names bound to ``key`` by assignments directly in the class body."""
    targets: list[ast.Name] = []
    for stmt in node.body:
        if isinstance(stmt, ast.Assign):
            candidates = list(stmt.targets)
        elif isinstance(stmt, ast.AnnAssign):
            candidates = [stmt.target]
        else:
            continue
        targets.extend(t for t in candidates if isinstance(t, ast.Name) and t.id == key)
    return targets


def _char_offset(line: str, byte_offset: int) -> int:
    # ast column offsets count UTF-8 bytes
    return len(line.encode("utf-8")[:byte_offset].decode("utf-8"))


def rename_in_enum_source(content: str, issue: KeyNormalizationIssue) -> str:
    """Rewrite the member declaration and self references inside the enum file.

    Only assignments directly in the class body are members; a same-named
    local inside a method is left alone.
    """
    lines = content.split("\n")
    try:
        node = _find_class(ast.parse(content), issue.enum)
    except SyntaxError:
        node = None

    if node is not None:
        for target in _member_targets(node, issue.old_key):
            index = target.lineno - 1
            line = lines[index]
            start = _char_offset(line, target.col_offset)
            end = start + len(issue.old_key)
            lines[index] = line[:start] + issue.new_key + line[end:]

        self_ref = re.compile(rf"\b(cls|self)\.{re.escape(issue.old_key)}(?!\w)")
        first, last = node.lineno - 1, node.end_lineno or node.lineno
        for index in range(first, last):
            lines[index] = self_ref.sub(rf"\g<1>.{issue.new_key}", lines[index])

    return reference_pattern(issue.enum, issue.old_key).sub(
        f"{issue.enum}.{issue.new_key}", "\n".join(lines)
    )


def apply_key_normalization(
    issues: Sequence[KeyNormalizationIssue],
    project_root: Path,
    backups: BackupStore | None = None,
) -> KeyNormalizationResult:
    """Rename keys in enum files first, then in every referencing file."""
    result = KeyNormalizationResult()
    changed: set[str] = set()

    by_file: dict[str, list[KeyNormalizationIssue]] = {}
    for issue in issues:
        by_file.setdefault(issue.file, []).append(issue)

    for file, file_issues in by_file.items():
        path = Path(file)
        if not path.is_file():
            continue
        original = path.read_text(encoding="utf-8")
        if backups is not None:
            backups.save(path, original)
        content = original
        for issue in file_issues:
            content = rename_in_enum_source(content, issue)
            result.keys_changed += 1
        if content != original:
            path.write_text(content, encoding="utf-8", newline="")
            changed.add(str(path.resolve()))
        log.info("keys_normalized", file=file, keys=len(file_issues))

    refs_by_file: dict[Path, list[KeyNormalizationIssue]] = {}
    for issue in issues:
        for ref in issue.references:
            path = project_root / ref.file
            group = refs_by_file.setdefault(path, [])
            if issue not in group:
                group.append(issue)

    for path, file_issues in refs_by_file.items():
        if not path.is_file():
            continue
        original = path.read_text(encoding="utf-8")
        if backups is not None:
            backups.save(path, original)
        content = original
        for issue in file_issues:
            content, count = reference_pattern(issue.enum, issue.old_key).subn(
                f"{issue.enum}.{issue.new_key}", content
            )
            result.references_updated += count
        if content != original:
            path.write_text(content, encoding="utf-8", newline="")
            changed.add(str(path.resolve()))

    result.files_changed = len(changed)
    if backups is not None:
        result.backups = backups.backups
    return result
