"""CLI utilities."""

from pathlib import Path
from typing import Any

import click

from enumsync.config.loader import load_config
from enumsync.config.models import EnumSyncConfig
from enumsync.core.errors import EnumSyncError
from enumsync.core.logging import configure_logging


def load_project_config(ctx: click.Context, **overrides: Any) -> EnumSyncConfig:
    """Load config for the project root selected on the command group.

    Reconfigures logging from the loaded config unless ``-v`` was given.

    Raises:
        click.ClickException: If the config cannot be loaded.
    """
    obj = ctx.find_root().obj or {}
    root: Path = obj.get("root") or Path.cwd()
    try:
        config = load_config(root, **overrides)
    except EnumSyncError as e:
        raise click.ClickException(e.message) from e
    if not obj.get("verbose"):
        configure_logging(config=config.logging)
    return config


def fail(error: EnumSyncError) -> click.ClickException:
    """Convert a domain error into a CLI failure (exit code 1)."""
    return click.ClickException(error.message)
