"""Pre-rewrite file backups.

One timestamped directory per run; each source file is copied at most once.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from enumsync.core.logging import get_logger

log = get_logger(__name__)

_UNSAFE = str.maketrans({"/": "_", "\\": "_", ":": "_"})


def backup_name(path: Path, project_root: Path) -> str:
    """Flatten a path into a single backup file name."""
    try:
        relative = path.resolve().relative_to(project_root.resolve()).as_posix()
    except ValueError:
        relative = path.name
    return relative.translate(_UNSAFE)


class BackupStore:
    """Writes original file contents under ``<backup_dir>/<timestamp>/``."""

    def __init__(self, backup_dir: Path, project_root: Path) -> None:
        self._root = project_root
        self._dir = backup_dir / datetime.now().strftime("%Y-%m-%d_%H%M%S")
        self._backups: dict[str, str] = {}

    @property
    def directory(self) -> Path:
        return self._dir

    @property
    def backups(self) -> dict[str, str]:
        """Original path -> backup path for every file saved so far."""
        return dict(self._backups)

    def save(self, path: Path, content: str) -> Path:
        """Save ``content`` as the backup of ``path`` unless already saved."""
        key = str(path.resolve())
        if key in self._backups:
            return Path(self._backups[key])
        self._dir.mkdir(parents=True, exist_ok=True)
        target = self._dir / backup_name(path, self._root)
        target.write_text(content, encoding="utf-8", newline="")
        self._backups[key] = str(target)
        log.debug("backup_written", source=key, backup=str(target))
        return target
