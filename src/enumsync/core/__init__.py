"""Core module exports."""

from enumsync.core.errors import (
    ConfigError,
    DiscoveryError,
    EnumSyncError,
    ErrorCode,
    RefactorError,
)
from enumsync.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "DiscoveryError",
    "EnumSyncError",
    "ErrorCode",
    "RefactorError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
