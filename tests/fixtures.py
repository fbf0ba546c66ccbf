"""Shared test helpers: throwaway enum packages on disk."""

from __future__ import annotations

import sys
import textwrap
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from enumsync.config.models import EnumSyncConfig

ORDER_STATUS_SOURCE = '''
from enum import StrEnum


class OrderStatus(StrEnum):
    PENDING = "pending"
    PENDING_PAYMENT = "pending_payment"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"

    def label(self) -> str:
        return {
            "pending": "Awaiting review",
            "pending_payment": "Awaiting payment",
            "shipped": "On its way",
            "cancelled": "Cancelled",
        }[self.value]

    def is_final(self) -> bool:
        return self in (OrderStatus.SHIPPED, OrderStatus.CANCELLED)

    def color(self) -> str:
        return "grey" if self is OrderStatus.CANCELLED else "green"
'''

PRIORITY_SOURCE = '''
from enum import IntEnum


class Priority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
'''

SIZE_SOURCE = '''
from enum import Enum, auto


class Size(Enum):
    SMALL = auto()
    LARGE = auto()
'''


def new_package_name() -> str:
    return f"fx_{uuid.uuid4().hex[:10]}"


@dataclass
class EnumProject:
    """A project root holding one importable top-level package."""

    root: Path
    package: str

    @property
    def enums_dir(self) -> str:
        return f"{self.package}/enums"

    @property
    def models_dir(self) -> str:
        return f"{self.package}/models"

    @property
    def output_dir(self) -> Path:
        return self.root / "frontend" / "src" / "enums"

    def module(self, *parts: str) -> str:
        return ".".join((self.package, *parts))

    def write(self, relative: str, source: str) -> Path:
        """Write ``<package>/<relative>`` and mark every directory as a package."""
        path = self.root / self.package / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        directory = path.parent
        while directory != self.root:
            init = directory / "__init__.py"
            if not init.exists():
                init.write_text("")
            directory = directory.parent
        path.write_text(textwrap.dedent(source).lstrip("\n"))
        return path

    def write_file(self, relative: str, source: str) -> Path:
        """Write a plain file relative to the project root."""
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).lstrip("\n"))
        return path

    def config(self, **sections: Any) -> EnumSyncConfig:
        data: dict[str, Any] = {
            "project_root": self.root,
            "paths": {
                "enums": [self.enums_dir],
                "output": "frontend/src/enums",
                "models": [self.models_dir],
            },
            "refactor": {"path": self.package},
        }
        for key, value in sections.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value
        return EnumSyncConfig.model_validate(data)

    def config_yaml(self) -> str:
        return textwrap.dedent(
            f"""
            paths:
              enums: [{self.enums_dir}]
              output: frontend/src/enums
              models: [{self.models_dir}]
            refactor:
              path: {self.package}
            """
        ).lstrip("\n")

    def unload(self) -> None:
        for name in list(sys.modules):
            if name == self.package or name.startswith(self.package + "."):
                del sys.modules[name]
