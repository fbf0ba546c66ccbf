"""Sync operations: discovery -> generation -> manifest -> writes.

One call to ``SyncOps.sync`` is one run. Per-enum write decisions come
from the manifest hash; the manifest itself is only rewritten when its
entries actually changed, so a second run on unchanged sources touches
nothing on disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from enumsync.config.models import EnumSyncConfig
from enumsync.core.errors import DiscoveryError
from enumsync.core.logging import get_logger
from enumsync.enums.discovery import EnumDiscovery
from enumsync.enums.models import EnumDefinition
from enumsync.generate.typescript import TypeScriptGenerator
from enumsync.sync.manifest import ManifestEntry, ManifestManager, compute_hash, package_version
from enumsync.sync.writer import FileWriter

log = get_logger(__name__)

SyncAction = Literal["generated", "skipped", "would_generate"]


@dataclass
class EnumOutcome:
    """What happened to one enum during a sync."""

    qualified_name: str
    file: str
    action: SyncAction


@dataclass
class SyncResult:
    """Result of a sync run."""

    dry_run: bool
    outcomes: list[EnumOutcome] = field(default_factory=list)
    barrel_written: bool = False
    manifest_written: bool = False
    deleted: list[str] = field(default_factory=list)

    @property
    def generated(self) -> int:
        return sum(1 for o in self.outcomes if o.action in ("generated", "would_generate"))

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.action == "skipped")

    @property
    def total(self) -> int:
        return len(self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated": self.generated,
            "skipped": self.skipped,
            "total": self.total,
            "dry_run": self.dry_run,
            "barrel": self.barrel_written,
            "deleted": self.deleted,
            "enums": [
                {"qualified_name": o.qualified_name, "file": o.file, "action": o.action}
                for o in self.outcomes
            ],
        }


class SyncOps:
    """Runs the enum -> TypeScript pipeline for one configuration."""

    def __init__(self, config: EnumSyncConfig) -> None:
        self._config = config
        features = config.features
        self._generator = TypeScriptGenerator(
            generate_union_types=features.generate_union_types,
            generate_label_maps=features.generate_label_maps,
            generate_method_maps=features.generate_method_maps,
            localization_mode=config.localization.mode,
        )
        self._writer = FileWriter(config.output_path)
        self._manifest = ManifestManager(config.output_path)
        self._discovery = EnumDiscovery(config.project_root)

    @property
    def writer(self) -> FileWriter:
        return self._writer

    @property
    def manifest(self) -> ManifestManager:
        return self._manifest

    def discover(self) -> list[EnumDefinition]:
        return self._discovery.discover(
            self._config.paths.enums,
            include=self._config.filters.include,
            exclude=self._config.filters.exclude,
        )

    def sync(
        self,
        force: bool = False,
        dry_run: bool = False,
        only: str | None = None,
    ) -> SyncResult:
        """Regenerate changed enum modules.

        Args:
            force: Rewrite every file even when unchanged.
            dry_run: Report what would be written without touching disk.
            only: Regenerate a single enum by qualified name. The barrel,
                  manifest and orphan cleanup still cover every discovered enum.

        Raises:
            DiscoveryError: If no enums are discovered.
        """
        if not dry_run:
            self._writer.ensure_output_directory()

        discovered = self.discover()
        targets = [e for e in discovered if only is None or e.qualified_name == only]
        if not targets:
            raise DiscoveryError.no_enums_found(self._config.paths.enums)

        file_case = self._config.naming.file_case
        result = SyncResult(dry_run=dry_run)
        entries: list[ManifestEntry] = []
        if only is not None:
            entries.extend(e for e in self._manifest.entries() if e["qualified_name"] != only)

        for enum in targets:
            filename = enum.filename(file_case)
            content = self._generator.generate(enum)
            needs_write = (
                force
                or self._manifest.needs_regeneration(enum.qualified_name, compute_hash(content))
                or not self._writer.file_path(filename).exists()
            )

            action: SyncAction = "skipped"
            if needs_write and dry_run:
                action = "would_generate"
            elif needs_write:
                self._writer.write_file(filename, content, force=force)
                action = "generated"
                log.info("enum_generated", enum=enum.qualified_name, file=f"{filename}.ts")

            result.outcomes.append(EnumOutcome(enum.qualified_name, f"{filename}.ts", action))
            entries.append(self._manifest.build_entry(enum, filename, content))

        if self._config.features.generate_index_barrel:
            barrel = self._generator.generate_barrel(discovered, file_case)
            result.barrel_written = dry_run or self._writer.write_barrel(barrel, force=force)

        if not dry_run:
            entries.sort(key=lambda e: e["qualified_name"])
            if force or not self._manifest.entries_match(entries):
                self._manifest.write(entries, package_version())
                result.manifest_written = True
            result.deleted = self._writer.clean_orphaned_files(
                [e.filename(file_case) for e in discovered]
            )

        return result
