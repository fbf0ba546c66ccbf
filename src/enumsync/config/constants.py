"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are file-format names and generated-code markers shared by the pipelines.

For configurable values, see models.py (PathsConfig, FeaturesConfig, etc.).
"""

# =============================================================================
# Project Layout
# =============================================================================

CONFIG_DIR_NAME = ".enumsync"
"""Per-project directory holding config.yaml and backups."""

CONFIG_FILE_NAME = "config.yaml"
"""Repo-level YAML config file name inside CONFIG_DIR_NAME."""

# =============================================================================
# Generated Output
# =============================================================================

MANIFEST_FILE_NAME = ".enumsync-manifest.json"
"""Manifest side file written into the output directory."""

BARREL_FILE_NAME = "index.ts"
"""Barrel module re-exporting every generated enum."""

PLACEHOLDER_FILE_NAME = ".gitkeep"
"""Placeholder keeping an otherwise empty output directory under VCS."""

GENERATED_HEADER = "// AUTO-GENERATED - DO NOT EDIT MANUALLY"
"""First line of every generated file."""

TS_EXTENSION = ".ts"

HASH_DIGEST_SIZE = 16
"""BLAKE2b digest size in bytes for manifest content hashes."""
