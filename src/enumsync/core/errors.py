"""Run-level failures.

Only conditions that abort a whole command are errors. Per-item problems
(an enum that fails to import, a method that raises, an unreadable file) are
logged and skipped by the pipelines instead.

Code ranges: 2xxx config, 3xxx discovery, 4xxx refactor.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    DISCOVERY_NO_ENUMS = 3001

    REFACTOR_SCAN_ROOT_NOT_FOUND = 4001


@dataclass(frozen=True, slots=True)
class EnumSyncError(Exception):
    """Base error; ``message`` is what the CLI prints."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": int(self.code),
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.error_name}: {self.message}"


class ConfigError(EnumSyncError):
    """Unreadable or invalid configuration."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class DiscoveryError(EnumSyncError):
    """Nothing to generate from."""

    @classmethod
    def no_enums_found(cls, paths: list[str]) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_NO_ENUMS,
            message="No enums found. Check your paths.enums configuration.",
            details={"paths": paths},
        )


class RefactorError(EnumSyncError):
    """The scanner cannot start."""

    @classmethod
    def scan_root_not_found(cls, path: str) -> "RefactorError":
        return cls(
            code=ErrorCode.REFACTOR_SCAN_ROOT_NOT_FOUND,
            message=f"Directory not found: {path}",
            details={"path": path},
        )
