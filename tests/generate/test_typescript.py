"""Tests for generate/typescript.py."""

from __future__ import annotations

import pytest

from enumsync.enums.models import EnumCase, EnumDefinition, EnumMethod
from enumsync.generate.typescript import TypeScriptGenerator, escape_string, format_value

ORDER_STATUS = EnumDefinition(
    qualified_name="shop.enums.OrderStatus",
    short_name="OrderStatus",
    backing_kind="string",
    cases=(
        EnumCase("PENDING", "pending", label="Awaiting review"),
        EnumCase("SHIPPED", "shipped"),
    ),
    methods=(
        EnumMethod("color", ("string",), {"PENDING": "green", "SHIPPED": "it's"}),
        EnumMethod("is_final", ("bool",), {"PENDING": False, "SHIPPED": True}),
    ),
)

PRIORITY = EnumDefinition(
    qualified_name="shop.enums.Priority",
    short_name="Priority",
    backing_kind="int",
    cases=(EnumCase("LOW", 1), EnumCase("HIGH", 3)),
)

SIZE = EnumDefinition(
    qualified_name="shop.enums.Size",
    short_name="Size",
    cases=(EnumCase("SMALL"), EnumCase("EXTRA_LARGE")),
)

STATIC_ORDER_STATUS = """\
// AUTO-GENERATED - DO NOT EDIT MANUALLY

export const OrderStatus = {
  Pending: 'pending',
  Shipped: 'shipped',
} as const;

export type OrderStatus =
  typeof OrderStatus[keyof typeof OrderStatus];

/**
 * OrderStatus helpers
 */
export const OrderStatusUtils = {
  label(status: OrderStatus): string {
    switch (status) {
      case OrderStatus.Pending:
        return 'Awaiting review';
      case OrderStatus.Shipped:
        return 'Shipped';
    }
  },

  color(status: OrderStatus): string {
    switch (status) {
      case OrderStatus.Pending:
        return 'green';
      case OrderStatus.Shipped:
        return 'it\\'s';
    }
  },

  is_final(status: OrderStatus): boolean {
    return status === OrderStatus.Shipped;
  },

  options(): OrderStatus[] {
    return Object.values(OrderStatus);
  },
};
"""


class TestFormatValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "null"),
            (True, "true"),
            (False, "false"),
            (3, "3"),
            (2.0, "2"),
            (1.5, "1.5"),
            (float("nan"), "NaN"),
            (float("inf"), "Infinity"),
            (float("-inf"), "-Infinity"),
            ("a'b", "'a\\'b'"),
        ],
    )
    def test_literals(self, value: object, expected: str) -> None:
        assert format_value(value) == expected  # type: ignore[arg-type]

    def test_escape_string(self) -> None:
        assert escape_string("a\\b\n\r\t'") == "a\\\\b\\n\\r\\t\\'"


class TestStaticMode:
    def test_full_module(self) -> None:
        assert TypeScriptGenerator().generate(ORDER_STATUS) == STATIC_ORDER_STATUS

    def test_deterministic(self) -> None:
        generator = TypeScriptGenerator()
        assert generator.generate(ORDER_STATUS) == generator.generate(ORDER_STATUS)

    def test_int_values_and_no_labels(self) -> None:
        output = TypeScriptGenerator().generate(PRIORITY)

        assert "  Low: 1,\n  High: 3,\n" in output
        assert "label(" not in output
        assert output.endswith("};\n")

    def test_unit_enum_serializes_names(self) -> None:
        output = TypeScriptGenerator().generate(SIZE)
        assert "  Small: 'SMALL',\n  ExtraLarge: 'EXTRA_LARGE',\n" in output


class TestFeatureToggles:
    def test_without_union_types_uses_inline_type(self) -> None:
        output = TypeScriptGenerator(generate_union_types=False).generate(ORDER_STATUS)
        inline = "typeof OrderStatus[keyof typeof OrderStatus]"

        assert "export type" not in output
        assert f"  label(status: {inline}): string {{" in output
        assert f"  options(): ({inline})[] {{" in output

    def test_without_label_maps(self) -> None:
        output = TypeScriptGenerator(generate_label_maps=False).generate(ORDER_STATUS)
        assert "label(" not in output
        assert "is_final(" in output

    def test_without_method_maps(self) -> None:
        output = TypeScriptGenerator(generate_method_maps=False).generate(ORDER_STATUS)
        assert "is_final(" not in output
        assert "color(" not in output
        assert "label(" in output


class TestBooleanMethods:
    def _method_output(self, values: dict[str, bool]) -> str:
        enum = EnumDefinition(
            qualified_name="a.Flagged",
            short_name="Flagged",
            backing_kind="string",
            cases=(EnumCase("ONE", "one"), EnumCase("TWO", "two"), EnumCase("THREE", "three")),
            methods=(EnumMethod("check", ("bool",), values),),
        )
        return TypeScriptGenerator().generate(enum)

    def test_no_true_cases_returns_false(self) -> None:
        output = self._method_output({"ONE": False, "TWO": False, "THREE": False})
        assert "  check(status: Flagged): boolean {\n    return false;\n  }," in output

    def test_or_chain_over_true_cases(self) -> None:
        output = self._method_output({"ONE": True, "TWO": False, "THREE": True})
        assert "    return status === Flagged.One || status === Flagged.Three;\n" in output

    def test_nullable_bool_uses_switch(self) -> None:
        enum = EnumDefinition(
            qualified_name="a.Flagged",
            short_name="Flagged",
            backing_kind="string",
            cases=(EnumCase("ONE", "one"),),
            methods=(EnumMethod("maybe", ("bool", "null"), {"ONE": None}),),
        )
        output = TypeScriptGenerator().generate(enum)

        assert "  maybe(status: Flagged): boolean | null {" in output
        assert "      case Flagged.One:\n        return null;\n" in output


class TestLocalizedModes:
    def test_react_hook(self) -> None:
        output = TypeScriptGenerator(localization_mode="react").generate(ORDER_STATUS)

        assert output.startswith(
            "// AUTO-GENERATED - DO NOT EDIT MANUALLY\n\n"
            "import { useTranslation } from 'react-i18next';\n\n"
        )
        assert "export function useOrderStatusUtils() {\n" in output
        assert "    const { t } = useTranslation();\n\n    return {\n" in output
        assert "        label(status: OrderStatus): string {\n" in output
        assert "              return t('Awaiting review');\n" in output
        assert "        options(): OrderStatus[] {\n" in output
        assert output.endswith("        },\n    };\n}\n")

    def test_vue_composable(self) -> None:
        output = TypeScriptGenerator(localization_mode="vue").generate(ORDER_STATUS)

        assert "import { useI18n } from 'vue-i18n';" in output
        assert "    const { t } = useI18n();" in output

    def test_no_labels_no_translation_import(self) -> None:
        output = TypeScriptGenerator(localization_mode="react").generate(PRIORITY)

        assert "react-i18next" not in output
        assert "useTranslation()" not in output
        assert "export function usePriorityUtils() {\n    return {\n" in output

    def test_label_maps_disabled_skips_import(self) -> None:
        generator = TypeScriptGenerator(localization_mode="vue", generate_label_maps=False)
        assert "vue-i18n" not in generator.generate(ORDER_STATUS)

    def test_invalid_mode_rejected(self) -> None:
        with pytest.raises(ValueError, match="Allowed values are: none, react, vue"):
            TypeScriptGenerator(localization_mode="angular")


class TestBarrel:
    def test_exports_in_given_order(self) -> None:
        output = TypeScriptGenerator().generate_barrel([PRIORITY, ORDER_STATUS])
        assert output == (
            "// AUTO-GENERATED - DO NOT EDIT MANUALLY\n\n"
            "export * from './priority';\n"
            "export * from './order-status';\n"
        )

    def test_file_case(self) -> None:
        output = TypeScriptGenerator().generate_barrel([ORDER_STATUS], "pascal")
        assert "export * from './OrderStatus';\n" in output
