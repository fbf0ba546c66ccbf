"""Tests for enums/discovery.py."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from enumsync.enums.discovery import (
    EnumDiscovery,
    find_enum_class_names,
    iter_python_files,
    loaded_enums,
    module_name_for,
)
from tests.fixtures import (
    ORDER_STATUS_SOURCE,
    PRIORITY_SOURCE,
    SIZE_SOURCE,
    EnumProject,
)


class TestFindEnumClassNames:
    def test_bare_and_dotted_bases(self) -> None:
        source = (
            "import enum\n"
            "from django.db import models\n"
            "class A(enum.Enum):\n    X = 1\n"
            "class B(models.TextChoices):\n    Y = 'y'\n"
            "class C(str, Enum):\n    Z = 'z'\n"
            "class NotAnEnum(Base):\n    pass\n"
        )
        assert find_enum_class_names(source) == ["A", "B", "C"]

    def test_subclass_of_enum_in_same_file(self) -> None:
        source = "class Base(Enum):\n    pass\nclass Child(Base):\n    X = 1\n"
        assert find_enum_class_names(source) == ["Base", "Child"]

    def test_nested_classes_ignored(self) -> None:
        source = "class Outer:\n    class Inner(Enum):\n        X = 1\n"
        assert find_enum_class_names(source) == []

    def test_syntax_error_raises(self) -> None:
        with pytest.raises(SyntaxError):
            find_enum_class_names("class (:\n")


class TestModuleNameFor:
    def test_package_chain(self, tmp_path: Path) -> None:
        pkg = tmp_path / "shop" / "enums"
        pkg.mkdir(parents=True)
        (tmp_path / "shop" / "__init__.py").write_text("")
        (pkg / "__init__.py").write_text("")
        target = pkg / "status.py"
        target.write_text("")

        assert module_name_for(target) == (tmp_path, "shop.enums.status")

    def test_package_init(self, tmp_path: Path) -> None:
        pkg = tmp_path / "shop"
        pkg.mkdir()
        (pkg / "__init__.py").write_text("")

        assert module_name_for(pkg / "__init__.py") == (tmp_path, "shop")

    def test_loose_module(self, tmp_path: Path) -> None:
        assert module_name_for(tmp_path / "status.py") == (tmp_path, "status")


class TestIterPythonFiles:
    def test_sorted_and_pruned(self, tmp_path: Path) -> None:
        for relative in ("b.py", "a.py", "sub/c.py", "__pycache__/x.py", "notes.txt"):
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")

        found = [p.relative_to(tmp_path).as_posix() for p in iter_python_files(tmp_path)]
        assert found == ["a.py", "b.py", "sub/c.py"]


class TestEnumDiscovery:
    def _populate(self, project: EnumProject) -> None:
        project.write("enums/order_status.py", ORDER_STATUS_SOURCE)
        project.write("enums/priority.py", PRIORITY_SOURCE)
        project.write("enums/size.py", SIZE_SOURCE)
        project.write("enums/helpers.py", "def helper() -> int:\n    return 1\n")

    def test_discovers_sorted_by_qualified_name(self, enum_project: EnumProject) -> None:
        self._populate(enum_project)

        enums = EnumDiscovery(enum_project.root).discover([enum_project.enums_dir])

        assert [e.qualified_name for e in enums] == [
            enum_project.module("enums", "order_status", "OrderStatus"),
            enum_project.module("enums", "priority", "Priority"),
            enum_project.module("enums", "size", "Size"),
        ]

    def test_definition_contents(self, enum_project: EnumProject) -> None:
        self._populate(enum_project)

        enums = EnumDiscovery(enum_project.root).discover([enum_project.enums_dir])
        status = enums[0]

        assert status.short_name == "OrderStatus"
        assert status.backing_kind == "string"
        assert [c.name for c in status.cases] == [
            "PENDING",
            "PENDING_PAYMENT",
            "SHIPPED",
            "CANCELLED",
        ]
        assert status.cases[1].label == "Awaiting payment"
        assert [m.name for m in status.methods] == ["color", "is_final"]
        assert status.source_path.endswith("order_status.py")
        assert enums[1].backing_kind == "int"
        assert enums[2].is_backed is False

    def test_broken_candidates_skipped(self, enum_project: EnumProject) -> None:
        enum_project.write("enums/priority.py", PRIORITY_SOURCE)
        enum_project.write("enums/broken_syntax.py", "class Oops(Enum:\n")
        enum_project.write(
            "enums/broken_import.py",
            "from enum import Enum\nraise RuntimeError('boom')\nclass Never(Enum):\n    A = 1\n",
        )
        enum_project.write("enums/empty.py", "from enum import Enum\nclass Nothing(Enum):\n    pass\n")

        enums = EnumDiscovery(enum_project.root).discover([enum_project.enums_dir])

        assert [e.short_name for e in enums] == ["Priority"]

    def test_missing_paths_skipped(self, enum_project: EnumProject) -> None:
        enum_project.write("enums/priority.py", PRIORITY_SOURCE)

        enums = EnumDiscovery(enum_project.root).discover(
            ["does/not/exist", enum_project.enums_dir]
        )

        assert len(enums) == 1

    def test_absolute_paths_accepted(self, enum_project: EnumProject) -> None:
        enum_project.write("enums/priority.py", PRIORITY_SOURCE)

        enums = EnumDiscovery(Path("/")).discover([enum_project.root / enum_project.enums_dir])

        assert [e.short_name for e in enums] == ["Priority"]

    def test_filters_applied_before_import(self, enum_project: EnumProject) -> None:
        self._populate(enum_project)
        excluded_module = enum_project.module("enums", "size")

        enums = EnumDiscovery(enum_project.root).discover(
            [enum_project.enums_dir],
            include=[f"{enum_project.package}.**"],
            exclude=[f"{excluded_module}.*"],
        )

        assert [e.short_name for e in enums] == ["OrderStatus", "Priority"]
        assert excluded_module not in sys.modules

    def test_rediscovery_sees_edits(self, enum_project: EnumProject) -> None:
        path = enum_project.write("enums/priority.py", PRIORITY_SOURCE)
        discovery = EnumDiscovery(enum_project.root)
        first = discovery.discover([enum_project.enums_dir])

        path.write_text(path.read_text() + "    URGENT = 4\n")
        second = discovery.discover([enum_project.enums_dir])

        assert len(first[0].cases) == 3
        assert [c.name for c in second[0].cases] == ["LOW", "MEDIUM", "HIGH", "URGENT"]

    def test_deterministic(self, enum_project: EnumProject) -> None:
        self._populate(enum_project)
        discovery = EnumDiscovery(enum_project.root)

        assert discovery.discover([enum_project.enums_dir]) == discovery.discover(
            [enum_project.enums_dir]
        )


class TestLoadedEnums:
    def test_backed_only_and_name_filter(self, enum_project: EnumProject) -> None:
        enum_project.write("enums/priority.py", PRIORITY_SOURCE)
        enum_project.write("enums/size.py", SIZE_SOURCE)
        enum_project.write("enums/order_status.py", ORDER_STATUS_SOURCE)
        enums = EnumDiscovery(enum_project.root).discover([enum_project.enums_dir])

        assert [e.short_name for e in loaded_enums(enums)] == ["OrderStatus", "Priority"]
        assert [e.short_name for e in loaded_enums(enums, "Priority")] == ["Priority"]
        assert loaded_enums(enums, "Size") == []
