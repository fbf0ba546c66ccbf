"""Enum discovery: directory walk, structural detection, reflection.

Candidates are found syntactically with ``ast`` so that modules without
enums are never imported. Each candidate is then imported and reflected;
any failure skips that candidate and the walk continues.
"""

from __future__ import annotations

import ast
import os
from collections.abc import Iterator, Sequence
from pathlib import Path

from enumsync.core.excludes import is_prunable_dir
from enumsync.core.logging import get_logger
from enumsync.enums.filters import is_included
from enumsync.enums.models import EnumDefinition
from enumsync.enums.reflection import (
    EXCLUDED_METHOD_NAMES,
    Skip,
    backing_kind,
    extract_cases,
    extract_methods,
    import_module_from,
    resolve_enum_class,
)

log = get_logger(__name__)

ENUM_BASE_NAMES: frozenset[str] = frozenset(
    {
        "Enum",
        "StrEnum",
        "IntEnum",
        "Flag",
        "IntFlag",
        "ReprEnum",
        "TextChoices",
        "IntegerChoices",
        "Choices",
    }
)


def _base_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def find_enum_class_names(source: str) -> list[str]:
    """Top-level classes deriving (syntactically) from an enum base.

    A class deriving from an enum declared earlier in the same file counts.

    Raises:
        SyntaxError: If the source does not parse.
    """
    tree = ast.parse(source)
    found: list[str] = []
    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        bases = {_base_name(base) for base in node.bases}
        if bases & ENUM_BASE_NAMES or bases & set(found):
            found.append(node.name)
    return found


def module_name_for(path: Path) -> tuple[Path, str]:
    """(import root, dotted module name) derived from the ``__init__.py`` chain."""
    parts: list[str] = [] if path.name == "__init__.py" else [path.stem]
    parent = path.parent
    while (parent / "__init__.py").is_file():
        parts.insert(0, parent.name)
        parent = parent.parent
    return parent, ".".join(parts)


def iter_python_files(root: Path) -> Iterator[Path]:
    """Yield ``.py`` files under root in sorted order, pruning noise dirs."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_prunable_dir(d))
        for filename in sorted(filenames):
            if filename.endswith(".py"):
                yield Path(dirpath) / filename


class EnumDiscovery:
    """Finds and reflects enums under a set of source directories."""

    def __init__(
        self,
        project_root: Path | None = None,
        excluded_methods: frozenset[str] = EXCLUDED_METHOD_NAMES,
    ) -> None:
        self._root = (project_root or Path.cwd()).resolve()
        self._excluded_methods = excluded_methods

    def discover(
        self,
        paths: Sequence[str | Path],
        include: Sequence[str] = (),
        exclude: Sequence[str] = (),
    ) -> list[EnumDefinition]:
        """Discover enums, sorted by qualified name.

        Args:
            paths: Directories to walk. Relative paths resolve against the
                   project root; missing directories are skipped.
            include: Qualified-name globs to keep (empty keeps all).
            exclude: Qualified-name globs to drop (checked first).
        """
        found: dict[str, EnumDefinition] = {}
        for raw in paths:
            directory = Path(raw)
            if not directory.is_absolute():
                directory = self._root / directory
            if not directory.is_dir():
                log.debug("source_dir_missing", path=str(directory))
                continue
            for file_path in iter_python_files(directory):
                for enum in self._discover_file(file_path, include, exclude):
                    found.setdefault(enum.qualified_name, enum)

        return sorted(found.values(), key=lambda e: e.qualified_name)

    def _discover_file(
        self,
        file_path: Path,
        include: Sequence[str],
        exclude: Sequence[str],
    ) -> list[EnumDefinition]:
        try:
            source = file_path.read_text(encoding="utf-8")
            class_names = find_enum_class_names(source)
        except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as e:
            log.debug("enum_file_skipped", path=str(file_path), reason=str(e))
            return []
        if not class_names:
            return []

        import_root, module_name = module_name_for(file_path)
        wanted = [
            name
            for name in class_names
            if is_included(f"{module_name}.{name}", include, exclude)
        ]
        if not wanted:
            return []

        module = import_module_from(import_root, module_name)
        if isinstance(module, Skip):
            log.debug("enum_skipped", module=module_name, reason=module.reason)
            return []

        definitions: list[EnumDefinition] = []
        for class_name in wanted:
            qualified_name = f"{module_name}.{class_name}"
            enum_cls = resolve_enum_class(module, class_name)
            if isinstance(enum_cls, Skip):
                log.debug("enum_skipped", enum=qualified_name, reason=enum_cls.reason)
                continue

            def _on_method_skip(name: str, skip: Skip, _enum: str = qualified_name) -> None:
                log.debug("method_dropped", enum=_enum, method=name, reason=skip.reason)

            kind = backing_kind(enum_cls)
            definition = EnumDefinition(
                qualified_name=qualified_name,
                short_name=class_name,
                backing_kind=kind,
                cases=extract_cases(enum_cls, kind),
                methods=extract_methods(enum_cls, self._excluded_methods, _on_method_skip),
                source_path=str(file_path),
            )
            log.debug(
                "enum_discovered",
                enum=qualified_name,
                cases=len(definition.cases),
                methods=len(definition.methods),
            )
            definitions.append(definition)
        return definitions


def loaded_enums(
    enums: Sequence[EnumDefinition],
    enum_name: str | None = None,
) -> list[EnumDefinition]:
    """Backed enums usable by the refactorer, optionally narrowed by short name."""
    result = [e for e in enums if e.is_backed]
    if enum_name:
        result = [e for e in result if e.short_name == enum_name]
    return result
