"""Runtime reflection of enum classes.

Each extraction step returns either its value or a ``Skip`` carrying the
reason the item was omitted. Callers log the skip and continue; nothing in
here lets an exception from user code escape.
"""

from __future__ import annotations

import importlib
import inspect
import sys
import types
import typing
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

from enumsync.enums.models import (
    BackingKind,
    EnumCase,
    EnumMethod,
    ReturnKind,
    Scalar,
)

# Case iterator, value constructors and label accessors handled separately
EXCLUDED_METHOD_NAMES: frozenset[str] = frozenset(
    {"cases", "from_value", "try_from", "label", "labels"}
)

# Classes from these modules never contribute custom methods
FRAMEWORK_MODULES: frozenset[str] = frozenset({"builtins", "enum", "django.db.models.enums"})

_SCALAR_KINDS: dict[Any, ReturnKind] = {
    str: "string",
    int: "int",
    float: "float",
    bool: "bool",
    type(None): "null",
    None: "null",
}


@dataclass(frozen=True, slots=True)
class Skip:
    """An omitted item and why."""

    reason: str


# =============================================================================
# Module import
# =============================================================================


@contextmanager
def _on_sys_path(root: Path) -> Iterator[None]:
    entry = str(root)
    inserted = entry not in sys.path
    if inserted:
        sys.path.insert(0, entry)
    try:
        yield
    finally:
        if inserted and entry in sys.path:
            sys.path.remove(entry)


def _is_within(file: str | None, root: Path) -> bool:
    if file is None:
        return False
    try:
        Path(file).resolve().relative_to(root)
    except ValueError:
        return False
    return True


def _purge_stale_modules(module_name: str, import_root: Path) -> None:
    """Drop cached modules of the same top-level package loaded from elsewhere."""
    top = module_name.partition(".")[0]
    if top in sys.stdlib_module_names:
        return
    root = import_root.resolve()
    for name in list(sys.modules):
        if name != top and not name.startswith(top + "."):
            continue
        module = sys.modules.get(name)
        if module is None or not _is_within(getattr(module, "__file__", None), root):
            sys.modules.pop(name, None)


def import_module_from(import_root: Path, module_name: str) -> types.ModuleType | Skip:
    """Import ``module_name`` fresh, resolving it from ``import_root``."""
    _purge_stale_modules(module_name, import_root)
    sys.modules.pop(module_name, None)
    with _on_sys_path(import_root):
        importlib.invalidate_caches()
        try:
            return importlib.import_module(module_name)
        except Exception as e:  # noqa: BLE001 - user modules may raise anything
            return Skip(f"import failed: {type(e).__name__}: {e}")


def resolve_enum_class(module: types.ModuleType, class_name: str) -> type[Enum] | Skip:
    obj = getattr(module, class_name, None)
    if obj is None:
        return Skip("attribute missing after import")
    if not (isinstance(obj, type) and issubclass(obj, Enum)):
        return Skip("not an enum class")
    if not list(obj):
        return Skip("enum has no members")
    return obj


# =============================================================================
# Cases
# =============================================================================


def backing_kind(enum_cls: type[Enum]) -> BackingKind | None:
    """``string`` / ``int`` for value-backed enums, None for unit enums."""
    member_type = getattr(enum_cls, "_member_type_", object)
    if issubclass(member_type, str):
        return "string"
    if issubclass(member_type, int):
        return "int"
    if member_type is object and all(isinstance(m.value, str) for m in enum_cls):
        return "string"
    return None


def _member_label(member: Enum) -> str | Skip:
    try:
        label = member.label  # type: ignore[attr-defined]
        if callable(label):
            label = label()
    except Exception as e:  # noqa: BLE001
        return Skip(f"label() raised {type(e).__name__}")
    if isinstance(label, str):
        return label
    return Skip("label is not a string")


def _static_labels(enum_cls: type[Enum]) -> dict[str, str] | Skip:
    raw = inspect.getattr_static(enum_cls, "labels", None)
    if not isinstance(raw, (classmethod, staticmethod)):
        return Skip("no labels() accessor")
    try:
        result = enum_cls.labels()  # type: ignore[attr-defined]
    except Exception as e:  # noqa: BLE001
        return Skip(f"labels() raised {type(e).__name__}")
    if not isinstance(result, Mapping):
        return Skip("labels() did not return a mapping")
    labels: dict[str, str] = {}
    for key, value in result.items():
        if not isinstance(value, str):
            continue
        name = key.name if isinstance(key, Enum) else str(key)
        labels[name] = value
    return labels


def _has_label_accessor(enum_cls: type[Enum]) -> bool:
    if "label" in enum_cls.__members__:
        return False
    return inspect.getattr_static(enum_cls, "label", None) is not None


def extract_cases(enum_cls: type[Enum], kind: BackingKind | None) -> tuple[EnumCase, ...]:
    """Canonical members in declaration order with their resolved labels."""
    static = _static_labels(enum_cls)
    static_labels = {} if isinstance(static, Skip) else static
    has_accessor = _has_label_accessor(enum_cls)

    cases: list[EnumCase] = []
    for member in enum_cls:
        label: str | None = None
        if has_accessor:
            own = _member_label(member)
            if not isinstance(own, Skip):
                label = own
        if label is None:
            label = static_labels.get(member.name)
        value = None if kind is None else _backing_value(member.value, kind)
        cases.append(EnumCase(name=member.name, value=value, label=label))
    return tuple(cases)


def _backing_value(value: Any, kind: BackingKind) -> str | int:
    if kind == "string":
        return str(value)
    return int(value)


# =============================================================================
# Custom methods
# =============================================================================


def return_kinds(annotation: Any) -> tuple[ReturnKind, ...] | Skip:
    """Map a return annotation to scalar kinds, or Skip for other shapes."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        kinds: list[ReturnKind] = []
        for arg in typing.get_args(annotation):
            kind = _SCALAR_KINDS.get(arg)
            if kind is None:
                return Skip(f"unsupported union member {arg!r}")
            if kind not in kinds:
                kinds.append(kind)
        return tuple(kinds)
    try:
        kind = _SCALAR_KINDS.get(annotation)
    except TypeError:
        kind = None
    if kind is None:
        return Skip(f"unsupported return type {annotation!r}")
    return (kind,)


def _has_required_params(func: Callable[..., Any]) -> bool:
    try:
        params = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        return True
    for param in params[1:]:
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if param.default is param.empty:
            return True
    return False


def candidate_methods(
    enum_cls: type[Enum],
    excluded: frozenset[str] = EXCLUDED_METHOD_NAMES,
) -> list[tuple[str, Callable[..., Any], bool]]:
    """Public instance methods and properties: (name, function, is_property).

    The nearest definition in the MRO wins; a static or class method shadows
    anything further up.
    """
    seen: dict[str, tuple[Callable[..., Any], bool] | None] = {}
    for klass in enum_cls.__mro__:
        if klass is object or klass.__module__ in FRAMEWORK_MODULES:
            continue
        for name, attr in vars(klass).items():
            if name.startswith("_") or name in excluded or name in seen:
                continue
            if name in enum_cls.__members__:
                continue
            if isinstance(attr, (staticmethod, classmethod)):
                seen[name] = None
            elif isinstance(attr, (property, types.DynamicClassAttribute)) and attr.fget:
                seen[name] = (attr.fget, True)
            elif inspect.isfunction(attr):
                seen[name] = (attr, False)
            else:
                seen[name] = None
    return [(name, entry[0], entry[1]) for name, entry in seen.items() if entry is not None]


def _unwrap(value: Any) -> Scalar | Skip:
    if isinstance(value, Enum):
        value = value.value
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return Skip(f"non-scalar value of type {type(value).__name__}")


def evaluate_method(
    enum_cls: type[Enum],
    name: str,
    func: Callable[..., Any],
    is_property: bool,
) -> EnumMethod | Skip:
    """Evaluate one method on every member; any failure drops it entirely."""
    if not is_property and _has_required_params(func):
        return Skip("requires parameters")
    try:
        hints = typing.get_type_hints(func)
    except Exception as e:  # noqa: BLE001
        return Skip(f"unresolvable annotations: {e}")
    if "return" not in hints:
        return Skip("missing return annotation")
    kinds = return_kinds(hints["return"])
    if isinstance(kinds, Skip):
        return kinds

    values: dict[str, Scalar] = {}
    for member in enum_cls:
        try:
            raw = func(member)
        except Exception as e:  # noqa: BLE001
            return Skip(f"raised {type(e).__name__} for {member.name}")
        value = _unwrap(raw)
        if isinstance(value, Skip):
            return value
        values[member.name] = value
    return EnumMethod(name=name, return_kinds=kinds, values=values)


def extract_methods(
    enum_cls: type[Enum],
    excluded: frozenset[str] = EXCLUDED_METHOD_NAMES,
    on_skip: Callable[[str, Skip], None] | None = None,
) -> tuple[EnumMethod, ...]:
    """All surviving custom methods, sorted by name."""
    methods: list[EnumMethod] = []
    for name, func, is_property in candidate_methods(enum_cls, excluded):
        result = evaluate_method(enum_cls, name, func, is_property)
        if isinstance(result, Skip):
            if on_skip is not None:
                on_skip(name, result)
            continue
        methods.append(result)
    return tuple(sorted(methods, key=lambda m: m.name))
