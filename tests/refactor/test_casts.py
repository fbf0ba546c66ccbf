"""Tests for refactor/casts.py."""

from __future__ import annotations

from enumsync.enums.models import EnumCase, EnumDefinition
from enumsync.refactor.casts import CastInfo, CastTable, build_cast_table, extract_model_casts
from tests.fixtures import EnumProject


def _enums(project: EnumProject) -> list[EnumDefinition]:
    return [
        EnumDefinition(
            qualified_name=project.module("enums", "order_status", "OrderStatus"),
            short_name="OrderStatus",
            backing_kind="string",
            cases=(EnumCase("PENDING", "pending"),),
        ),
        EnumDefinition(
            qualified_name=project.module("enums", "priority", "Priority"),
            short_name="Priority",
            backing_kind="int",
            cases=(EnumCase("LOW", 1),),
        ),
    ]


MODELS_SOURCE = """
from django.db import models
from sqlalchemy import Column, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from {pkg}.enums.order_status import OrderStatus
from {pkg}.enums import priority as prio


class Order(Base):
    status: Mapped[OrderStatus] = mapped_column()
    priority = Column(SAEnum(prio.Priority))
    note: Mapped[str]


class Shipment(models.Model):
    state = models.CharField(max_length=20, choices=OrderStatus.choices)
    phase: Mapped["OrderStatus"]
    label = models.CharField(max_length=20)
"""


class TestCastTable:
    def test_lookup_prefers_named_model(self) -> None:
        table = CastTable()
        table.add("app.models.Order", "status", "app.enums.OrderStatus")
        table.add("app.models.Ticket", "status", "app.enums.TicketStatus")

        assert table.lookup("status", "Ticket") == CastInfo(
            "app.models.Ticket", "status", "app.enums.TicketStatus"
        )
        assert table.lookup("status").enum_class == "app.enums.OrderStatus"  # type: ignore[union-attr]
        assert table.lookup("status", "Unknown").model == "app.models.Order"  # type: ignore[union-attr]
        assert table.lookup("missing") is None

    def test_size_and_truthiness(self) -> None:
        table = CastTable()
        assert not table
        table.add("m.A", "x", "e.X")
        table.add("m.A", "y", "e.Y")
        assert table
        assert len(table) == 2
        assert table.models == {"m.A": {"x": "e.X", "y": "e.Y"}}


class TestExtractModelCasts:
    def test_annotation_and_constructor_casts(self, enum_project: EnumProject) -> None:
        path = enum_project.write(
            "models/order.py", MODELS_SOURCE.replace("{pkg}", enum_project.package)
        )
        table = CastTable()

        extract_model_casts(path, _enums(enum_project), table)

        status = enum_project.module("enums", "order_status", "OrderStatus")
        priority = enum_project.module("enums", "priority", "Priority")
        assert table.models == {
            enum_project.module("models", "order", "Order"): {
                "status": status,
                "priority": priority,
            },
            enum_project.module("models", "order", "Shipment"): {
                "state": status,
                "phase": status,
            },
        }

    def test_short_name_fallback(self, enum_project: EnumProject) -> None:
        path = enum_project.write(
            "models/ticket.py",
            "class Ticket(Model):\n    priority: Mapped[Priority]\n",
        )
        table = CastTable()

        extract_model_casts(path, _enums(enum_project), table)

        assert table.lookup("priority", "Ticket") is not None

    def test_unparseable_file_ignored(self, enum_project: EnumProject) -> None:
        path = enum_project.write("models/broken.py", "class (:\n")
        table = CastTable()

        extract_model_casts(path, _enums(enum_project), table)

        assert not table


class TestBuildCastTable:
    def test_walks_model_dirs(self, enum_project: EnumProject) -> None:
        enum_project.write("models/order.py", MODELS_SOURCE.replace("{pkg}", enum_project.package))
        models_dir = enum_project.root / enum_project.models_dir

        table = build_cast_table([models_dir, enum_project.root / "missing"], _enums(enum_project))

        assert len(table) == 4
        assert table.lookup("state", "Shipment") is not None
