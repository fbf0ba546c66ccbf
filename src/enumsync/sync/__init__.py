"""Manifest-tracked writes of generated modules."""

from enumsync.sync.manifest import ManifestEntry, ManifestManager, compute_hash
from enumsync.sync.ops import EnumOutcome, SyncOps, SyncResult
from enumsync.sync.writer import FileWriter, atomic_write_text

__all__ = [
    "EnumOutcome",
    "FileWriter",
    "ManifestEntry",
    "ManifestManager",
    "SyncOps",
    "SyncResult",
    "atomic_write_text",
    "compute_hash",
]
