"""Manifest side file tracking the content hash of each generated module.

Regeneration is decided purely by content hash, never by mtime.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, TypedDict

from enumsync.config.constants import HASH_DIGEST_SIZE, MANIFEST_FILE_NAME, TS_EXTENSION
from enumsync.core.logging import get_logger
from enumsync.enums.models import EnumDefinition
from enumsync.sync.writer import atomic_write_text

log = get_logger(__name__)


class ManifestEntry(TypedDict):
    qualified_name: str
    file: str
    hash: str


def compute_hash(content: str) -> str:
    """BLAKE2b (16-byte digest) of the UTF-8 content, hex encoded."""
    return hashlib.blake2b(content.encode("utf-8"), digest_size=HASH_DIGEST_SIZE).hexdigest()


def package_version() -> str:
    try:
        return version("enumsync")
    except PackageNotFoundError:
        return "dev"


def _dedupe(entries: list[ManifestEntry]) -> list[ManifestEntry]:
    # Later entries for the same name replace earlier ones, first position kept
    by_name: dict[str, ManifestEntry] = {}
    for entry in entries:
        by_name[entry["qualified_name"]] = entry
    return list(by_name.values())


class ManifestManager:
    """Reads and writes ``.enumsync-manifest.json`` in the output directory."""

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path

    @property
    def manifest_path(self) -> Path:
        return self._output_path / MANIFEST_FILE_NAME

    def read(self) -> dict[str, Any] | None:
        """Load the manifest; None when missing, malformed or not an object."""
        path = self.manifest_path
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            log.debug("manifest_unreadable", path=str(path), reason=str(e))
            return None
        return data if isinstance(data, dict) else None

    def entries(self) -> list[ManifestEntry]:
        manifest = self.read()
        if manifest is None:
            return []
        raw = manifest.get("enums")
        if not isinstance(raw, list):
            return []
        return [e for e in raw if isinstance(e, dict) and "qualified_name" in e]

    def write(self, entries: list[ManifestEntry], version: str | None = None) -> None:
        """Persist entries atomically, deduplicated by qualified name."""
        manifest = {
            "enums": _dedupe(entries),
            "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "version": version or package_version(),
        }
        atomic_write_text(self.manifest_path, json.dumps(manifest, indent=4) + "\n")
        log.debug("manifest_written", path=str(self.manifest_path), enums=len(entries))

    def needs_regeneration(self, qualified_name: str, content_hash: str) -> bool:
        """True when there is no manifest, no entry, or the hash differs."""
        if self.read() is None:
            return True
        for entry in self.entries():
            if entry["qualified_name"] == qualified_name:
                return entry.get("hash") != content_hash
        return True

    def entries_match(self, entries: list[ManifestEntry]) -> bool:
        """Whether the persisted entries equal ``entries`` (after dedupe)."""
        if self.read() is None:
            return False
        return self.entries() == _dedupe(entries)

    @staticmethod
    def build_entry(enum: EnumDefinition, filename: str, content: str) -> ManifestEntry:
        return ManifestEntry(
            qualified_name=enum.qualified_name,
            file=f"{filename}{TS_EXTENSION}",
            hash=compute_hash(content),
        )
