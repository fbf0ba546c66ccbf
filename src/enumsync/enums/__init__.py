"""Enum discovery and metadata."""

from enumsync.enums.discovery import EnumDiscovery, loaded_enums
from enumsync.enums.models import EnumCase, EnumDefinition, EnumMethod, Scalar

__all__ = [
    "EnumCase",
    "EnumDefinition",
    "EnumDiscovery",
    "EnumMethod",
    "Scalar",
    "loaded_enums",
]
