"""Enum metadata extracted during discovery.

Everything here is immutable and built once per discovery pass. The
generator, manifest and refactorer only ever read these values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from enumsync.core.formatting import convert_file_case, snake_to_pascal

Scalar = str | int | float | bool | None
BackingKind = Literal["string", "int"]
ReturnKind = Literal["string", "int", "float", "bool", "null"]

# Fixed output order for TypeScript union members
_TS_TYPE_ORDER: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("string", ("string",)),
    ("number", ("int", "float")),
    ("boolean", ("bool",)),
    ("null", ("null",)),
)


@dataclass(frozen=True)
class EnumCase:
    """A single enum member.

    ``value`` is None only for unit enums, where the name doubles as the
    serialized value.
    """

    name: str
    value: str | int | None = None
    label: str | None = None

    @property
    def ts_name(self) -> str:
        """PascalCase key used in the generated const object."""
        return snake_to_pascal(self.name)

    @property
    def serialized(self) -> str | int:
        return self.name if self.value is None else self.value


@dataclass(frozen=True)
class EnumMethod:
    """A zero-argument method evaluated once per case."""

    name: str
    return_kinds: tuple[ReturnKind, ...]
    values: dict[str, Scalar] = field(default_factory=dict)

    @property
    def is_boolean(self) -> bool:
        return self.return_kinds == ("bool",)

    @property
    def ts_type(self) -> str:
        kinds = set(self.return_kinds)
        parts = [ts for ts, members in _TS_TYPE_ORDER if kinds.intersection(members)]
        return " | ".join(parts)

    def true_cases(self) -> list[str]:
        """Case names for which a boolean method returns True, in case order."""
        return [name for name, value in self.values.items() if value is True]


@dataclass(frozen=True)
class EnumDefinition:
    """A discovered enum, ready for generation or scanning."""

    qualified_name: str
    short_name: str
    cases: tuple[EnumCase, ...]
    backing_kind: BackingKind | None = None
    methods: tuple[EnumMethod, ...] = ()
    source_path: str = ""

    @property
    def is_backed(self) -> bool:
        return self.backing_kind is not None

    @property
    def has_labels(self) -> bool:
        return any(case.label is not None for case in self.cases)

    def filename(self, file_case: str = "kebab") -> str:
        """Output file stem (without extension) for this enum."""
        return convert_file_case(self.short_name, file_case)

    def case_for_value(self, value: str | int) -> EnumCase | None:
        """First case whose serialized value equals ``value`` textually."""
        text = str(value)
        for case in self.cases:
            if case.value is not None and str(case.value) == text:
                return case
        return None
