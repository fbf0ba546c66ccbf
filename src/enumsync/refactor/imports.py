"""Import insertion for rewritten files."""

from __future__ import annotations

import ast
from collections.abc import Iterable


def _existing_imports(tree: ast.Module) -> set[tuple[str, str]]:
    found: set[tuple[str, str]] = set()
    for node in tree.body:
        if isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            for alias in node.names:
                if alias.asname is None:
                    found.add((node.module, alias.name))
    return found


def _insertion_line(tree: ast.Module | None, lines: list[str]) -> tuple[int, bool]:
    """(0-based line index to insert at, whether a blank separator is needed)."""
    if tree is not None:
        imports = [n for n in tree.body if isinstance(n, (ast.Import, ast.ImportFrom))]
        if imports:
            return imports[-1].end_lineno or imports[-1].lineno, False
        first = tree.body[0] if tree.body else None
        if (
            isinstance(first, ast.Expr)
            and isinstance(first.value, ast.Constant)
            and isinstance(first.value.value, str)
        ):
            return first.end_lineno or first.lineno, True

    index = 0
    while index < len(lines) and lines[index].lstrip().startswith("#"):
        index += 1
    return index, index > 0


def add_imports(content: str, imports: Iterable[tuple[str, str]]) -> str:
    """Insert ``from module import Name`` lines for names not yet imported.

    Names are grouped per module. New lines go after the last top-level
    import, or after the module docstring / leading comments when the file
    has no imports.
    """
    try:
        tree: ast.Module | None = ast.parse(content)
    except SyntaxError:
        tree = None

    existing = _existing_imports(tree) if tree is not None else set()
    by_module: dict[str, list[str]] = {}
    for module, name in imports:
        if (module, name) in existing:
            continue
        names = by_module.setdefault(module, [])
        if name not in names:
            names.append(name)
    if not by_module:
        return content

    new_lines = [
        f"from {module} import {', '.join(sorted(names))}\n"
        for module, names in sorted(by_module.items())
    ]

    lines = content.splitlines(keepends=True)
    index, separate = _insertion_line(tree, lines)
    if index > 0 and not lines[index - 1].endswith("\n"):
        lines[index - 1] += "\n"
    block = (["\n"] if separate else []) + new_lines
    if not separate and index == 0 and lines:
        block.append("\n")
    return "".join(lines[:index] + block + lines[index:])
