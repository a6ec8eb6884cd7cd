"""Build-time introspection of source types.

Resolves member-access chains against a source type (dataclass, Pydantic
model, NamedTuple, annotated or plain class) and checks transforms against
the resolved and declared types. None of this runs during serialization.
"""

from __future__ import annotations

import dataclasses
import inspect
import types
import typing
from collections.abc import Sequence
from typing import Any, Union, get_args, get_origin

from ser_mapper.core.capability import is_position
from ser_mapper.core.exceptions import TransformTypeError, UnresolvablePathError
from ser_mapper.mapping.views import View

_NONE_TYPE = type(None)


def _safe_hints(obj: Any) -> dict[str, Any]:
    """get_type_hints that degrades to Any for unresolvable annotations."""
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError, AttributeError):
        raw = getattr(obj, "__annotations__", None) or {}
        return {name: Any for name in raw}


def _member_types(cls: type) -> dict[str, Any] | None:
    """Declared member types of *cls*, or None if it cannot be introspected."""
    # Pydantic model
    if hasattr(cls, "model_fields") and isinstance(cls.model_fields, dict):
        return {name: info.annotation for name, info in cls.model_fields.items()}

    # Dataclass
    if dataclasses.is_dataclass(cls):
        hints = _safe_hints(cls)
        return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(cls)}

    # NamedTuple and annotated classes
    hints = _safe_hints(cls)
    if hints:
        return hints

    # Plain class - use __init__ parameters
    init = cls.__dict__.get("__init__")
    if init is None or not inspect.isfunction(init):
        return None
    init_hints = _safe_hints(init)
    return {
        name: init_hints.get(name, Any)
        for name in list(inspect.signature(init).parameters)[1:]
    }


def _strip_optional(tp: Any) -> Any:
    """``X | None`` -> ``X``; other unions -> Any."""
    if _is_union(tp):
        members = [m for m in get_args(tp) if m is not _NONE_TYPE]
        return members[0] if len(members) == 1 else Any
    return tp


def _is_union(tp: Any) -> bool:
    return get_origin(tp) in (Union, types.UnionType)


def _positional_type(tp: Any, index: int, path: str, owner: str) -> Any:
    """Type of element *index* of a tuple-like type."""
    if isinstance(tp, type) and issubclass(tp, tuple) and hasattr(tp, "_fields"):
        fields = tp._fields
        if index >= len(fields):
            raise UnresolvablePathError(owner, path, f"{tp.__name__} has no position {index}")
        return _safe_hints(tp).get(fields[index], Any)

    origin = get_origin(tp)
    if origin is tuple:
        args = get_args(tp)
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if index >= len(args):
            raise UnresolvablePathError(owner, path, f"tuple has no position {index}")
        return args[index]
    if tp is tuple:
        return Any
    raise UnresolvablePathError(
        owner, path, f"positional access requires a tuple-like member, got {_type_name(tp)}"
    )


def _attribute_type(tp: type, name: str, path: str, owner: str, strict: bool) -> Any:
    members = _member_types(tp)
    if members is not None and name in members:
        return members[name]

    attr = inspect.getattr_static(tp, name, None)
    if isinstance(attr, property):
        if attr.fget is None:
            raise UnresolvablePathError(owner, path, f"property '{name}' has no getter")
        return _safe_hints(attr.fget).get("return", Any)
    if attr is not None and not callable(attr):
        return Any

    if strict:
        raise UnresolvablePathError(owner, path, f"{tp.__name__} has no member '{name}'")
    return Any


def resolve_path(source_type: type, path: Sequence[str], *, strict: bool = True) -> Any:
    """Resolve a member-access chain and return the type it yields.

    Segments are attribute names or decimal positions into tuple-like
    members. Resolution stops at ``Any``: anything past an unannotated member
    is accepted as ``Any``.

    Raises:
        UnresolvablePathError: If a segment is malformed or does not name a
            member of the type reached so far.
    """
    owner = _type_name(source_type)
    dotted = ".".join(path)
    if not path:
        raise UnresolvablePathError(owner, dotted, "empty path")
    for segment in path:
        if not (is_position(segment) or segment.isidentifier()):
            raise UnresolvablePathError(owner, dotted, f"'{segment}' is not a member name")

    current: Any = source_type
    for segment in path:
        current = _strip_optional(current)
        if current is Any:
            return Any
        if is_position(segment):
            current = _positional_type(current, int(segment), dotted, owner)
            continue
        if not isinstance(current, type):
            origin = get_origin(current)
            if not isinstance(origin, type):
                return Any
            current = origin
        current = _attribute_type(current, segment, dotted, owner, strict)
    return current


def is_compatible(actual: Any, expected: Any) -> bool:
    """Static assignability check used for transform validation.

    Conservative: anything that cannot be decided (Any, TypeVars, Literals,
    forward references, non-runtime protocols) is accepted.
    """
    if actual is Any or expected is Any or expected is object:
        return True
    if actual is None:
        actual = _NONE_TYPE
    if expected is None:
        expected = _NONE_TYPE
    if _is_union(actual):
        return all(is_compatible(member, expected) for member in get_args(actual))
    if _is_union(expected):
        return any(is_compatible(actual, member) for member in get_args(expected))

    actual_cls = get_origin(actual) or actual
    expected_cls = get_origin(expected) or expected
    if not isinstance(actual_cls, type) or not isinstance(expected_cls, type):
        return True
    # PEP 484 numeric tower
    if expected_cls is float and actual_cls is int:
        return True
    if expected_cls is complex and actual_cls in (int, float):
        return True
    try:
        return issubclass(actual_cls, expected_cls)
    except TypeError:
        return True


def check_transform(
    field_name: str,
    transform: Any,
    resolved_type: Any,
    declared_type: Any,
) -> None:
    """Validate a transform against the resolved source value and declared type.

    A generated view class used as a transform is checked on its input only:
    its output is the nested view's own document.

    Raises:
        TransformTypeError: If the transform is not a one-argument callable
            or its annotations contradict the resolved or declared types.
    """
    if isinstance(transform, type) and issubclass(transform, View):
        source = transform.source_type
        if not is_compatible(resolved_type, source):
            raise TransformTypeError(
                field_name,
                f"view {transform.__name__} wraps {_type_name(source)}, "
                f"but the source path yields {_type_name(resolved_type)}",
            )
        return

    if not callable(transform):
        raise TransformTypeError(field_name, f"{transform!r} is not callable")

    if isinstance(transform, type):
        if not is_compatible(transform, declared_type):
            raise TransformTypeError(
                field_name,
                f"constructs {transform.__name__}, declared type is {_type_name(declared_type)}",
            )
        return

    try:
        signature = inspect.signature(transform)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures are taken on trust.
        return

    positional = [
        p
        for p in signature.parameters.values()
        if p.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        )
    ]
    required = [
        p
        for p in signature.parameters.values()
        if p.default is inspect.Parameter.empty
        and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    if not positional or len(required) > 1:
        raise TransformTypeError(field_name, "transform must accept exactly one positional argument")

    hints = _safe_hints(transform)
    first = positional[0]
    param_type = Any if first.kind is inspect.Parameter.VAR_POSITIONAL else hints.get(first.name, Any)
    if not is_compatible(resolved_type, param_type):
        raise TransformTypeError(
            field_name,
            f"expects {_type_name(param_type)}, but the source path yields {_type_name(resolved_type)}",
        )

    return_type = hints.get("return", Any)
    if not is_compatible(return_type, declared_type):
        raise TransformTypeError(
            field_name,
            f"returns {_type_name(return_type)}, declared type is {_type_name(declared_type)}",
        )


def _type_name(tp: Any) -> str:
    if isinstance(tp, type) and not get_args(tp):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")
