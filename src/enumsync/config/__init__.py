"""Config module exports."""

from enumsync.config.loader import load_config
from enumsync.config.models import (
    EnumSyncConfig,
    FeaturesConfig,
    FiltersConfig,
    LocalizationConfig,
    LoggingConfig,
    NamingConfig,
    PathsConfig,
    RefactorConfig,
)

__all__ = [
    "load_config",
    "EnumSyncConfig",
    "PathsConfig",
    "NamingConfig",
    "FeaturesConfig",
    "LocalizationConfig",
    "FiltersConfig",
    "RefactorConfig",
    "LoggingConfig",
]
