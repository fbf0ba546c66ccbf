"""Generated file writes.

All writes go through a temp file and ``os.replace``; on failure the temp
file is removed and the original error propagates.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path

from enumsync.config.constants import (
    BARREL_FILE_NAME,
    MANIFEST_FILE_NAME,
    PLACEHOLDER_FILE_NAME,
    TS_EXTENSION,
)
from enumsync.core.logging import get_logger

log = get_logger(__name__)


def atomic_write_text(path: Path, content: str) -> None:
    """Write content via a sibling temp file and rename it into place."""
    tmp = path.with_name(f"{path.name}.tmp.{uuid.uuid4().hex[:8]}")
    try:
        tmp.write_text(content, encoding="utf-8", newline="")
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def _unchanged(path: Path, content: str) -> bool:
    try:
        return path.read_bytes() == content.encode("utf-8")
    except FileNotFoundError:
        return False


class FileWriter:
    """Writes generated modules into a single output directory."""

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        return self._output_path

    def ensure_output_directory(self) -> None:
        """Create the output directory and its placeholder file if missing."""
        self._output_path.mkdir(parents=True, exist_ok=True)
        placeholder = self._output_path / PLACEHOLDER_FILE_NAME
        if not placeholder.exists():
            placeholder.write_text("", encoding="utf-8")

    def file_path(self, filename: str) -> Path:
        """Full path for a generated module stem."""
        return self._output_path / f"{filename}{TS_EXTENSION}"

    def write_file(self, filename: str, content: str, force: bool = False) -> bool:
        """Write ``<filename>.ts``. Returns False when skipped as unchanged."""
        return self._write(self.file_path(filename), content, force)

    def write_barrel(self, content: str, force: bool = False) -> bool:
        """Write ``index.ts``. Returns False when skipped as unchanged."""
        return self._write(self._output_path / BARREL_FILE_NAME, content, force)

    def _write(self, path: Path, content: str, force: bool) -> bool:
        if not force and _unchanged(path, content):
            return False
        atomic_write_text(path, content)
        log.debug("file_written", path=str(path))
        return True

    def clean_orphaned_files(self, keep: list[str]) -> list[str]:
        """Delete ``*.ts`` files not generated in this run.

        Args:
            keep: Module stems (without extension) produced this run.

        Returns:
            Names of deleted files, sorted.
        """
        if not self._output_path.is_dir():
            return []
        keep_set = {f"{name}{TS_EXTENSION}" for name in keep}
        keep_set.update({BARREL_FILE_NAME, PLACEHOLDER_FILE_NAME, MANIFEST_FILE_NAME})

        deleted: list[str] = []
        for path in sorted(self._output_path.iterdir()):
            if not path.is_file() or path.name in keep_set:
                continue
            if path.suffix != TS_EXTENSION:
                continue
            path.unlink()
            deleted.append(path.name)
            log.info("orphan_deleted", file=path.name)
        return deleted
