"""Refactor operations: scan for hardcoded enum values and rewrite them.

Textual and heuristic by nature. Scanning never mutates anything; applying
fixes rewrites files in place, optionally after backing them up.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from enumsync.config.models import EnumSyncConfig
from enumsync.core.errors import RefactorError
from enumsync.core.excludes import is_excluded_path
from enumsync.core.formatting import display_path
from enumsync.core.logging import get_logger
from enumsync.core.progress import progress
from enumsync.enums.discovery import EnumDiscovery, iter_python_files, loaded_enums
from enumsync.enums.models import EnumDefinition
from enumsync.refactor.backups import BackupStore
from enumsync.refactor.casts import CastTable, build_cast_table
from enumsync.refactor.imports import add_imports
from enumsync.refactor.keys import (
    KeyNormalizationIssue,
    KeyNormalizationResult,
    apply_key_normalization,
    find_non_uppercase_keys,
)
from enumsync.refactor.reports import group_by_file
from enumsync.refactor.scanner import EnumScanner, MatchMode, ScanIssue
from enumsync.refactor.suggestions import generate_suggestion

log = get_logger(__name__)


@dataclass
class ProposedChange:
    """One before/after pair for ``--dry-run`` previews."""

    file: str
    line: int
    old: str
    new: str


@dataclass
class ApplyResult:
    """Result of applying fixes."""

    files_changed: int = 0
    changes_applied: int = 0
    changes_by_file: dict[str, int] = field(default_factory=dict)
    backups: dict[str, str] = field(default_factory=dict)


class RefactorOps:
    """Scanner and rewriter bound to one project configuration."""

    def __init__(
        self,
        config: EnumSyncConfig,
        enums: Sequence[EnumDefinition] | None = None,
        cast_table: CastTable | None = None,
    ) -> None:
        self._config = config
        self._root = config.project_root
        self._enums = list(enums) if enums is not None else None
        self._casts = cast_table

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @property
    def enum_paths(self) -> list[str]:
        return list(self._config.paths.enums)

    def load_enums(self, enum_name: str | None = None) -> list[EnumDefinition]:
        """Backed enums from the configured paths, optionally one by short name."""
        if self._enums is None:
            discovery = EnumDiscovery(self._root)
            self._enums = discovery.discover(
                self._config.paths.enums,
                include=self._config.filters.include,
                exclude=self._config.filters.exclude,
            )
        return loaded_enums(self._enums, enum_name)

    def load_casts(self) -> CastTable:
        if self._casts is None:
            self._casts = build_cast_table(self._config.model_paths, self.load_enums())
        return self._casts

    def scan_root(self, path: str | Path | None = None) -> Path:
        """Resolve the scan root, failing hard if it is not a directory."""
        raw = path if path is not None else self._config.refactor.path
        root = self._config.resolve(raw)
        if not root.is_dir():
            raise RefactorError.scan_root_not_found(str(raw))
        return root

    # -------------------------------------------------------------------------
    # Scanning
    # -------------------------------------------------------------------------

    def _excludes(self, extra: Sequence[str]) -> tuple[str, ...]:
        merged: list[str] = []
        for fragment in (*self._config.refactor.exclude, *extra):
            if fragment and fragment not in merged:
                merged.append(fragment)
        return tuple(merged)

    def scan(
        self,
        path: str | Path | None = None,
        exclude: Sequence[str] = (),
        target_enums: Sequence[str] | None = None,
        match_mode: MatchMode | None = None,
    ) -> list[ScanIssue]:
        """Find hardcoded values matching enum cases under the scan root.

        Raises:
            RefactorError: If the scan root does not exist.
        """
        root = self.scan_root(path)
        mode = match_mode or self._config.refactor.match_mode
        enums = self.load_enums()
        scanner = EnumScanner(
            enums,
            cast_table=self.load_casts() if mode == "cast" else None,
            match_mode=mode,
            target_enums=target_enums,
        )
        excludes = self._excludes(exclude)

        issues: list[ScanIssue] = []
        files = list(iter_python_files(root))
        for file_path in progress(files, desc="Scanning"):
            relative = file_path.relative_to(root).as_posix()
            if is_excluded_path(relative, excludes):
                continue
            try:
                content = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                log.debug("scan_file_skipped", path=relative, reason=str(e))
                continue
            found = scanner.scan_source(display_path(file_path, self._root), content)
            log.debug("scan_file", path=relative, issues=len(found))
            issues.extend(found)
        return issues

    @staticmethod
    def proposed_changes(issues: Sequence[ScanIssue]) -> list[ProposedChange]:
        return [
            ProposedChange(issue.file, issue.line, issue.code, generate_suggestion(issue))
            for issue in issues
        ]

    # -------------------------------------------------------------------------
    # Applying
    # -------------------------------------------------------------------------

    def _backup_store(self) -> BackupStore:
        return BackupStore(self._config.resolve(self._config.refactor.backup_dir), self._root)

    def apply_fixes(self, issues: Sequence[ScanIssue], with_backup: bool = False) -> ApplyResult:
        """Rewrite each issue's code with its suggestion and add imports.

        Replacements run sequentially per file; each replaces the first
        remaining occurrence of the matched code.
        """
        result = ApplyResult()
        backups = self._backup_store() if with_backup else None

        for file, file_issues in group_by_file(issues).items():
            path = self._root / file
            if not path.is_file():
                log.debug("fix_file_missing", path=file)
                continue

            original = path.read_text(encoding="utf-8")
            content = original
            imports: list[tuple[str, str]] = []
            applied = 0
            for issue in file_issues:
                if issue.code not in content:
                    continue
                content = content.replace(issue.code, generate_suggestion(issue), 1)
                imports.append((issue.enum_class.rpartition(".")[0], issue.enum))
                applied += 1

            if not applied:
                log.debug("fix_nothing_to_apply", path=file)
                continue

            if backups is not None:
                backups.save(path, original)
            content = add_imports(content, imports)
            path.write_text(content, encoding="utf-8", newline="")
            result.files_changed += 1
            result.changes_applied += applied
            result.changes_by_file[file] = applied
            log.info("fix_applied", file=file, changes=applied)

        if backups is not None:
            result.backups = backups.backups
        return result

    # -------------------------------------------------------------------------
    # Key normalization
    # -------------------------------------------------------------------------

    def normalize_keys(
        self,
        enums: Sequence[EnumDefinition] | None = None,
        path: str | Path | None = None,
    ) -> list[KeyNormalizationIssue]:
        """Non-uppercase case names and their references under the scan root."""
        targets = list(enums) if enums is not None else self.load_enums()
        return find_non_uppercase_keys(targets, self.scan_root(path), self._root)

    def apply_key_normalization(
        self,
        issues: Sequence[KeyNormalizationIssue],
        with_backup: bool = False,
    ) -> KeyNormalizationResult:
        backups = self._backup_store() if with_backup else None
        return apply_key_normalization(issues, self._root, backups)
