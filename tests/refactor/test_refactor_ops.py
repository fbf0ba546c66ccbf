"""Tests for refactor/ops.py - scan, preview and apply end to end."""

from __future__ import annotations

from pathlib import Path

import pytest

from enumsync.core.errors import RefactorError
from enumsync.refactor.ops import RefactorOps
from tests.fixtures import ORDER_STATUS_SOURCE, PRIORITY_SOURCE, EnumProject

MODELS_SOURCE = """
from django.db import models

from {pkg}.enums.order_status import OrderStatus


class Order(models.Model):
    status = models.CharField(max_length=20, choices=OrderStatus.choices)
"""

VIEWS_SOURCE = """
from {pkg}.models.order import Order


def pending_orders():
    return Order.objects.filter(status='pending')


def ship(order):
    if order.status == 'pending':
        order.save()
    Order.objects.filter(pk=order.pk).update(status='shipped')
"""

EXPECTED_VIEWS = """\
from {pkg}.models.order import Order
from {pkg}.enums.order_status import OrderStatus


def pending_orders():
    return Order.objects.filter(status=OrderStatus.PENDING)


def ship(order):
    if order.status == OrderStatus.PENDING:
        order.save()
    Order.objects.filter(pk=order.pk).update(status=OrderStatus.SHIPPED)
"""

TASKS_SOURCE = """
def escalate(ticket):
    ticket.priority = 3
    return {'priority': '3', 'status': 'archived'}
"""


@pytest.fixture
def shop(enum_project: EnumProject) -> EnumProject:
    pkg = enum_project.package
    enum_project.write("enums/order_status.py", ORDER_STATUS_SOURCE)
    enum_project.write("enums/priority.py", PRIORITY_SOURCE)
    enum_project.write("models/order.py", MODELS_SOURCE.replace("{pkg}", pkg))
    enum_project.write("views.py", VIEWS_SOURCE.replace("{pkg}", pkg))
    enum_project.write("tasks.py", TASKS_SOURCE)
    enum_project.write(
        "migrations/0001_initial.py", "Order.objects.filter(status='pending')\n"
    )
    return enum_project


class TestLoading:
    def test_backed_enums_and_cast_table(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())

        assert [e.short_name for e in ops.load_enums()] == ["OrderStatus", "Priority"]
        assert [e.short_name for e in ops.load_enums("Priority")] == ["Priority"]
        assert ops.load_casts().lookup("status", "Order") is not None
        assert ops.enum_paths == [shop.enums_dir]

    def test_missing_scan_root(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())

        with pytest.raises(RefactorError) as exc_info:
            ops.scan(path="nope")

        assert exc_info.value.details == {"path": "nope"}


class TestScan:
    def test_cast_mode_reports_cast_fields_only(self, shop: EnumProject) -> None:
        issues = RefactorOps(shop.config()).scan()

        views = f"{shop.package}/views.py"
        assert [(i.file, i.line, i.pattern_type, i.case) for i in issues] == [
            (views, 5, "where", "PENDING"),
            (views, 11, "update", "SHIPPED"),
            (views, 9, "comparison", "PENDING"),
        ]
        assert all(i.has_cast for i in issues)

    def test_strict_mode_relates_field_to_enum(self, shop: EnumProject) -> None:
        issues = RefactorOps(shop.config()).scan(match_mode="strict")

        tasks = [i for i in issues if i.file.endswith("tasks.py")]
        assert [(i.field, i.enum, i.case) for i in tasks] == [("priority", "Priority", "HIGH")]

    def test_configured_mode_used(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config(refactor={"match_mode": "loose"}))
        assert any(i.file.endswith("tasks.py") for i in ops.scan())

    def test_excludes(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())

        assert not any("migrations" in i.file for i in ops.scan())
        assert ops.scan(exclude=["views.py"]) == []

    def test_target_enums(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())
        assert ops.scan(target_enums=["Priority"]) == []

    def test_proposed_changes(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())

        changes = ops.proposed_changes(ops.scan())

        assert changes[0].old == ".filter(status='pending')"
        assert changes[0].new == ".filter(status=OrderStatus.PENDING)"
        assert changes[0].line == 5


class TestApplyFixes:
    def test_rewrites_and_imports(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())
        views = shop.root / shop.package / "views.py"

        result = ops.apply_fixes(ops.scan())

        assert views.read_text() == EXPECTED_VIEWS.replace("{pkg}", shop.package)
        assert result.files_changed == 1
        assert result.changes_applied == 3
        assert result.changes_by_file == {f"{shop.package}/views.py": 3}
        assert result.backups == {}

    def test_second_scan_is_clean(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())
        ops.apply_fixes(ops.scan())

        assert RefactorOps(shop.config()).scan() == []

    def test_backup_written(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())
        views = shop.root / shop.package / "views.py"
        original = views.read_text()

        result = ops.apply_fixes(ops.scan(), with_backup=True)

        (backup,) = result.backups.values()
        backup_path = Path(backup)
        assert backup_path.read_text() == original
        assert backup_path.name == f"{shop.package}_views.py"
        assert backup_path.parent.parent == shop.root / ".enumsync" / "backups"

    def test_missing_file_skipped(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())
        issues = ops.scan()
        (shop.root / shop.package / "views.py").unlink()

        result = ops.apply_fixes(issues)

        assert result.files_changed == 0

    def test_already_fixed_file_left_untouched(self, shop: EnumProject) -> None:
        ops = RefactorOps(shop.config())
        views = shop.root / shop.package / "views.py"
        issues = ops.scan()
        ops.apply_fixes(issues)
        fixed = views.read_text()

        result = ops.apply_fixes(issues, with_backup=True)

        assert views.read_text() == fixed
        assert result.files_changed == 0
        assert result.changes_applied == 0
        assert result.changes_by_file == {}
        assert result.backups == {}


class TestNormalizeKeys:
    def test_uppercase_enums_have_no_issues(self, shop: EnumProject) -> None:
        assert RefactorOps(shop.config()).normalize_keys() == []

    def test_lowercase_keys_found_and_fixed(self, shop: EnumProject) -> None:
        shop.write(
            "enums/channel.py",
            "from enum import StrEnum\n\n\nclass Channel(StrEnum):\n    email = 'email'\n",
        )
        shop.write("notify.py", "def send(c):\n    return c == Channel.email\n")
        ops = RefactorOps(shop.config())

        issues = ops.normalize_keys()
        result = ops.apply_key_normalization(issues, with_backup=True)

        assert [(i.enum, i.old_key) for i in issues] == [("Channel", "email")]
        assert result.references_updated == 1
        assert "Channel.EMAIL" in (shop.root / shop.package / "notify.py").read_text()
        assert len(result.backups) == 2
