"""Typed-model cast table.

Maps model fields to the enum they are declared with. A field counts as
cast when its annotation or its constructor call references a known enum:

    status: Mapped[OrderStatus]
    status = Column(Enum(OrderStatus))
    status = models.CharField(choices=OrderStatus.choices)

Names are resolved through the file's imports first, then by short name
against the discovered enums.
"""

from __future__ import annotations

import ast
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from enumsync.core.logging import get_logger
from enumsync.enums.discovery import iter_python_files, module_name_for
from enumsync.enums.models import EnumDefinition

log = get_logger(__name__)


@dataclass(frozen=True)
class CastInfo:
    model: str
    field: str
    enum_class: str


class CastTable:
    """model qualified name -> {field -> enum qualified name}."""

    def __init__(self) -> None:
        self._casts: dict[str, dict[str, str]] = {}

    def add(self, model: str, field: str, enum_class: str) -> None:
        self._casts.setdefault(model, {})[field] = enum_class

    def lookup(self, field: str, model_name: str | None = None) -> CastInfo | None:
        """Find the enum a field is cast to.

        A model whose short name equals ``model_name`` is preferred; otherwise
        the first model (in insertion order) casting the field wins.
        """
        if model_name:
            for model, casts in self._casts.items():
                if model.rpartition(".")[2] == model_name and field in casts:
                    return CastInfo(model, field, casts[field])
        for model, casts in self._casts.items():
            if field in casts:
                return CastInfo(model, field, casts[field])
        return None

    @property
    def models(self) -> dict[str, dict[str, str]]:
        return {model: dict(casts) for model, casts in self._casts.items()}

    def __len__(self) -> int:
        return sum(len(casts) for casts in self._casts.values())

    def __bool__(self) -> bool:
        return bool(self._casts)


def _import_map(tree: ast.Module) -> dict[str, str]:
    """Local name -> dotted origin for top-level imports."""
    names: dict[str, str] = {}
    for node in tree.body:
        if isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            for alias in node.names:
                names[alias.asname or alias.name] = f"{node.module}.{alias.name}"
        elif isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    names[alias.asname] = alias.name
    return names


def _dotted(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        base = _dotted(node.value)
        return f"{base}.{node.attr}" if base else None
    return None


def _referenced_names(node: ast.AST) -> Iterator[str]:
    for child in ast.walk(node):
        if isinstance(child, (ast.Name, ast.Attribute)):
            dotted = _dotted(child)
            if dotted:
                yield dotted
        elif isinstance(child, ast.Constant) and isinstance(child.value, str):
            # String annotations: Mapped["OrderStatus"]
            yield child.value


class _EnumResolver:
    def __init__(self, enums: Sequence[EnumDefinition]) -> None:
        self._by_qualified = {e.qualified_name: e.qualified_name for e in enums}
        self._by_short: dict[str, str] = {}
        for enum in enums:
            self._by_short.setdefault(enum.short_name, enum.qualified_name)

    def resolve(self, name: str, imports: dict[str, str]) -> str | None:
        head, _, rest = name.partition(".")
        expanded = imports.get(head, head) + (f".{rest}" if rest else "")
        if expanded in self._by_qualified:
            return expanded
        if name in self._by_qualified:
            return name
        if "." not in name:
            return self._by_short.get(name)
        return None

    def first_enum(self, node: ast.AST, imports: dict[str, str]) -> str | None:
        for name in _referenced_names(node):
            resolved = self.resolve(name, imports)
            if resolved:
                return resolved
        return None


def _field_casts(
    class_node: ast.ClassDef,
    resolver: _EnumResolver,
    imports: dict[str, str],
) -> Iterator[tuple[str, str]]:
    for stmt in class_node.body:
        if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
            enum_class = resolver.first_enum(stmt.annotation, imports)
            if enum_class is None and isinstance(stmt.value, ast.Call):
                enum_class = resolver.first_enum(stmt.value, imports)
            if enum_class:
                yield stmt.target.id, enum_class
        elif (
            isinstance(stmt, ast.Assign)
            and len(stmt.targets) == 1
            and isinstance(stmt.targets[0], ast.Name)
            and isinstance(stmt.value, ast.Call)
        ):
            enum_class = resolver.first_enum(stmt.value, imports)
            if enum_class:
                yield stmt.targets[0].id, enum_class


def extract_model_casts(
    file_path: Path,
    enums: Sequence[EnumDefinition],
    table: CastTable,
) -> None:
    """Add the casts declared by the top-level classes in one file."""
    try:
        tree = ast.parse(file_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as e:
        log.debug("model_file_skipped", path=str(file_path), reason=str(e))
        return

    enum_names = {e.qualified_name for e in enums}
    resolver = _EnumResolver(enums)
    imports = _import_map(tree)
    _, module_name = module_name_for(file_path)

    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        model = f"{module_name}.{node.name}"
        if model in enum_names:
            continue
        for field, enum_class in _field_casts(node, resolver, imports):
            table.add(model, field, enum_class)


def build_cast_table(
    model_paths: Sequence[Path],
    enums: Sequence[EnumDefinition],
) -> CastTable:
    """Scan model directories for enum-typed fields."""
    table = CastTable()
    for directory in model_paths:
        if not directory.is_dir():
            log.debug("model_dir_missing", path=str(directory))
            continue
        for file_path in iter_python_files(directory):
            extract_model_casts(file_path, enums, table)
    log.debug("cast_table_built", casts=len(table), models=len(table.models))
    return table
