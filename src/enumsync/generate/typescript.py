"""TypeScript module generation.

Pure text generation: the same EnumDefinition and options always produce
byte-identical output, which is what makes manifest hashing meaningful.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from enumsync.config.constants import GENERATED_HEADER
from enumsync.core.formatting import humanize
from enumsync.enums.models import EnumDefinition, EnumMethod, Scalar

LOCALIZATION_MODES: tuple[str, ...] = ("none", "react", "vue")


@dataclass(frozen=True)
class _Localizer:
    import_line: str
    hook_line: str


_LOCALIZERS: dict[str, _Localizer] = {
    "react": _Localizer(
        import_line="import { useTranslation } from 'react-i18next';",
        hook_line="const { t } = useTranslation();",
    ),
    "vue": _Localizer(
        import_line="import { useI18n } from 'vue-i18n';",
        hook_line="const { t } = useI18n();",
    ),
}

_ESCAPES = str.maketrans({"\\": "\\\\", "'": "\\'", "\n": "\\n", "\r": "\\r", "\t": "\\t"})


def escape_string(value: str) -> str:
    """Escape text for a single-quoted TypeScript string literal."""
    return value.translate(_ESCAPES)


def format_value(value: Scalar) -> str:
    """Render a scalar as a TypeScript literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return f"'{escape_string(value)}'"


class TypeScriptGenerator:
    """Renders one enum, or the barrel re-exporting all of them."""

    def __init__(
        self,
        generate_union_types: bool = True,
        generate_label_maps: bool = True,
        generate_method_maps: bool = True,
        localization_mode: str = "none",
    ) -> None:
        if localization_mode not in LOCALIZATION_MODES:
            raise ValueError(
                f'Invalid localization mode "{localization_mode}". '
                f"Allowed values are: {', '.join(LOCALIZATION_MODES)}."
            )
        self._union_types = generate_union_types
        self._label_maps = generate_label_maps
        self._method_maps = generate_method_maps
        self._localizer = _LOCALIZERS.get(localization_mode)

    @property
    def _static(self) -> bool:
        return self._localizer is None

    @property
    def _indent(self) -> str:
        # Methods sit 2 deep in the static object, 8 deep inside the hook's return
        return "  " if self._static else "        "

    def _emits_labels(self, enum: EnumDefinition) -> bool:
        return self._label_maps and enum.has_labels

    def _value_type(self, enum: EnumDefinition) -> str:
        if self._union_types:
            return enum.short_name
        return f"typeof {enum.short_name}[keyof typeof {enum.short_name}]"

    def generate(self, enum: EnumDefinition) -> str:
        """Generate the full ``.ts`` module for one enum."""
        lines = [GENERATED_HEADER, ""]

        if self._localizer is not None and self._emits_labels(enum):
            lines.append(self._localizer.import_line)
            lines.append("")

        lines.extend(self._const_block(enum))
        lines.append("")

        if self._union_types:
            lines.append(f"export type {enum.short_name} =")
            lines.append(f"  typeof {enum.short_name}[keyof typeof {enum.short_name}];")
            lines.append("")

        lines.extend(self._utils_block(enum))
        lines.append("")
        return "\n".join(lines)

    def generate_barrel(self, enums: Sequence[EnumDefinition], file_case: str = "kebab") -> str:
        """Generate ``index.ts`` re-exporting each enum module in the given order."""
        lines = [GENERATED_HEADER, ""]
        for enum in enums:
            lines.append(f"export * from './{enum.filename(file_case)}';")
        lines.append("")
        return "\n".join(lines)

    def _const_block(self, enum: EnumDefinition) -> list[str]:
        lines = [f"export const {enum.short_name} = {{"]
        for case in enum.cases:
            lines.append(f"  {case.ts_name}: {format_value(case.serialized)},")
        lines.append("} as const;")
        return lines

    def _utils_block(self, enum: EnumDefinition) -> list[str]:
        name = enum.short_name
        lines = ["/**", f" * {name} helpers", " */"]

        if self._localizer is not None:
            lines.append(f"export function use{name}Utils() {{")
            if self._emits_labels(enum):
                lines.append(f"    {self._localizer.hook_line}")
                lines.append("")
            lines.append("    return {")
        else:
            lines.append(f"export const {name}Utils = {{")

        if self._emits_labels(enum):
            lines.extend(self._label_method(enum))

        if self._method_maps:
            for method in enum.methods:
                lines.extend(self._custom_method(enum, method))

        ind = self._indent
        value_type = self._value_type(enum)
        options_type = value_type if self._union_types else f"({value_type})"
        lines.append(f"{ind}options(): {options_type}[] {{")
        lines.append(f"{ind}  return Object.values({name});")
        lines.append(f"{ind}}},")

        if self._localizer is not None:
            lines.append("    };")
            lines.append("}")
        else:
            lines.append("};")
        return lines

    def _label_method(self, enum: EnumDefinition) -> list[str]:
        ind = self._indent
        lines = [
            f"{ind}label(status: {self._value_type(enum)}): string {{",
            f"{ind}  switch (status) {{",
        ]
        for case in enum.cases:
            text = escape_string(case.label if case.label is not None else humanize(case.name))
            literal = f"'{text}'" if self._static else f"t('{text}')"
            lines.append(f"{ind}    case {enum.short_name}.{case.ts_name}:")
            lines.append(f"{ind}      return {literal};")
        lines.append(f"{ind}  }}")
        lines.append(f"{ind}}},")
        lines.append("")
        return lines

    def _custom_method(self, enum: EnumDefinition, method: EnumMethod) -> list[str]:
        ind = self._indent
        name = enum.short_name
        lines = [f"{ind}{method.name}(status: {self._value_type(enum)}): {method.ts_type} {{"]

        if method.is_boolean:
            ts_names = {case.name: case.ts_name for case in enum.cases}
            checks = [f"status === {name}.{ts_names[c]}" for c in method.true_cases()]
            if not checks:
                lines.append(f"{ind}  return false;")
            else:
                lines.append(f"{ind}  return {' || '.join(checks)};")
        else:
            lines.append(f"{ind}  switch (status) {{")
            for case in enum.cases:
                lines.append(f"{ind}    case {name}.{case.ts_name}:")
                lines.append(f"{ind}      return {format_value(method.values.get(case.name))};")
            lines.append(f"{ind}  }}")

        lines.append(f"{ind}}},")
        lines.append("")
        return lines
