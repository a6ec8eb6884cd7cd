"""Declarative mapping parser.

Parses mapping blocks of the form::

    @dataclass(frozen=True)
    public class UserResponse(User):
        user_id: str = id.key
        first_name: str = full_name => first_token
        age: int = age.0

Type expressions, source types, transforms and decorators are names looked
up in a caller-supplied namespace (falling back to builtins and
``typing.Any``). Expressions are walked as ASTs, never evaluated.
"""

from __future__ import annotations

import ast
import builtins
import logging
import re
from collections.abc import Mapping
from typing import Any, Union

from ser_mapper.core.config import GeneratorConfig
from ser_mapper.core.exceptions import (
    DuplicateCapabilityError,
    MalformedDeclarationError,
    MissingSourcePathError,
)
from ser_mapper.core.registry import qualified_name
from ser_mapper.mapping.builder import MappingBuilder
from ser_mapper.mapping.spec import MappingSpec

logger = logging.getLogger(__name__)

_HEADER = re.compile(
    r"^(?:(?P<visibility>public|private)\s+)?class\s+(?P<name>[A-Za-z_]\w*)"
    r"\s*\(\s*(?P<source>[A-Za-z_][\w.]*)\s*\)\s*:\s*$"
)

# name: type [= rest] [,]
_FIELD = re.compile(
    r"^(?P<name>[A-Za-z_]\w*)\s*:\s*(?P<type>[^=]+?)\s*(?:=\s*(?P<rest>.*?))?\s*,?\s*$"
)

# id, id.key, age.0
_PATH = re.compile(r"^[A-Za-z_]\w*(?:\.(?:[A-Za-z_]\w*|\d+))*$")

_DOTTED_NAME = re.compile(r"^[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*$")

_DEFAULT_NAMES: dict[str, Any] = {"Any": Any, "None": None}


def _strip_comment(line: str) -> str:
    return line.split("#", 1)[0].rstrip()


class _NameResolver:
    """Looks up names and type expressions in the declaration namespace."""

    def __init__(self, namespace: Mapping[str, Any] | None) -> None:
        self._namespace = dict(namespace or {})

    def lookup(self, dotted: str, line: int) -> Any:
        head, *rest = dotted.split(".")
        if head in self._namespace:
            value = self._namespace[head]
        elif head in _DEFAULT_NAMES:
            value = _DEFAULT_NAMES[head]
        elif hasattr(builtins, head):
            value = getattr(builtins, head)
        else:
            raise MalformedDeclarationError(f"unknown name '{head}'", line)
        for attr in rest:
            try:
                value = getattr(value, attr)
            except AttributeError:
                raise MalformedDeclarationError(f"unknown name '{dotted}'", line) from None
        return value

    def type_expr(self, expr: str, line: int) -> Any:
        try:
            node = ast.parse(expr.strip(), mode="eval").body
        except SyntaxError:
            raise MalformedDeclarationError(f"invalid type expression '{expr}'", line) from None
        return self._type_node(node, expr, line)

    def _type_node(self, node: ast.expr, expr: str, line: int) -> Any:
        if isinstance(node, (ast.Name, ast.Attribute)):
            return self.lookup(ast.unparse(node), line)
        if isinstance(node, ast.Constant) and (node.value is None or node.value is Ellipsis):
            return node.value
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            left = self._type_node(node.left, expr, line)
            right = self._type_node(node.right, expr, line)
            return Union[left, right]
        if isinstance(node, ast.Subscript):
            origin = self._type_node(node.value, expr, line)
            if isinstance(node.slice, ast.Tuple):
                args = tuple(self._type_node(elt, expr, line) for elt in node.slice.elts)
            else:
                args = self._type_node(node.slice, expr, line)
            try:
                return origin[args]
            except TypeError as e:
                raise MalformedDeclarationError(f"invalid type expression '{expr}': {e}", line) from e
        if isinstance(node, ast.List):
            return [self._type_node(elt, expr, line) for elt in node.elts]
        raise MalformedDeclarationError(f"unsupported type expression '{expr}'", line)


def _parse_annotation(text: str, resolver: _NameResolver, line: int) -> tuple[Any, dict[str, Any]]:
    """``@name`` or ``@name(key=literal, ...)`` -> (decorator or "dataclass", options)."""
    try:
        node = ast.parse(text, mode="eval").body
    except SyntaxError:
        raise MalformedDeclarationError(f"invalid annotation '@{text}'", line) from None

    options: dict[str, Any] = {}
    if isinstance(node, ast.Call):
        if node.args:
            raise MalformedDeclarationError(
                f"annotation '@{text}' takes keyword arguments only", line
            )
        for keyword in node.keywords:
            if keyword.arg is None:
                raise MalformedDeclarationError(f"annotation '@{text}' cannot use **kwargs", line)
            try:
                options[keyword.arg] = ast.literal_eval(keyword.value)
            except ValueError:
                raise MalformedDeclarationError(
                    f"annotation option '{keyword.arg}' must be a literal", line
                ) from None
        node = node.func

    if not isinstance(node, (ast.Name, ast.Attribute)):
        raise MalformedDeclarationError(f"invalid annotation '@{text}'", line)
    name = ast.unparse(node)
    if name in ("dataclass", "dataclasses.dataclass"):
        return "dataclass", options
    return resolver.lookup(name, line), options


def _parse_field(
    builder: MappingBuilder,
    text: str,
    resolver: _NameResolver,
    line: int,
) -> None:
    match = _FIELD.match(text)
    if match is None:
        raise MalformedDeclarationError(f"invalid field declaration '{text}'", line)

    name = match.group("name")
    declared_type = resolver.type_expr(match.group("type"), line)
    rest = (match.group("rest") or "").strip()
    if not rest or rest.startswith(">"):
        raise MissingSourcePathError(name, line)

    path_text, arrow, transform_text = rest.partition("=>")
    path_text = path_text.strip()
    transform_text = transform_text.strip()
    if not path_text:
        raise MissingSourcePathError(name, line)
    if not _PATH.match(path_text):
        raise MalformedDeclarationError(f"invalid source path '{path_text}' for '{name}'", line)

    transform = None
    if arrow:
        if not _DOTTED_NAME.match(transform_text):
            raise MalformedDeclarationError(
                f"transform for '{name}' must be a name, got '{transform_text}'", line
            )
        transform = resolver.lookup(transform_text, line)

    builder.field(name, declared_type, path_text, transform)


def parse_mappings(
    text: str,
    namespace: Mapping[str, Any] | None = None,
    *,
    config: GeneratorConfig | None = None,
) -> list[MappingSpec]:
    """Parse every mapping block in *text*, in document order.

    Args:
        text: Declarative mapping source.
        namespace: Names visible to the declarations (source types, types,
            transforms, decorators). Pass ``globals()`` to use a module's
            names.
        config: Forwarded to each builder.

    Raises:
        SpecError: On the first malformed or invalid declaration. Nothing
            is returned for earlier, valid blocks.
    """
    resolver = _NameResolver(namespace)
    builders: list[MappingBuilder] = []
    pending: list[tuple[Any, dict[str, Any]]] = []
    current: MappingBuilder | None = None
    seen: set[tuple[str, type]] = set()

    for lineno, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if raw[0].isspace():
            if current is None:
                raise MalformedDeclarationError("field declared outside a class block", lineno)
            _parse_field(current, _strip_comment(stripped), resolver, lineno)
            continue

        current = None
        if stripped.startswith("@"):
            pending.append(_parse_annotation(stripped[1:], resolver, lineno))
            continue

        header = _HEADER.match(_strip_comment(stripped))
        if header is None:
            raise MalformedDeclarationError(f"invalid mapping header '{stripped}'", lineno)
        source_type = resolver.lookup(header.group("source"), lineno)
        if not isinstance(source_type, type):
            raise MalformedDeclarationError(
                f"source '{header.group('source')}' is not a class", lineno
            )
        target_name = header.group("name")
        if (target_name, source_type) in seen:
            raise DuplicateCapabilityError(target_name, qualified_name(source_type))
        seen.add((target_name, source_type))

        current = MappingBuilder(
            target_name,
            source_type,
            visibility=header.group("visibility") or "public",
            config=config,
        )
        for decorator, options in pending:
            current.annotate(decorator, **options)
        pending = []
        builders.append(current)

    if pending:
        raise MalformedDeclarationError("annotation is not followed by a class block")
    if not builders:
        raise MalformedDeclarationError("no mapping declared")

    specs = [builder.build() for builder in builders]
    for spec in specs:
        logger.debug(
            "Parsed mapping %s(%s) with %d fields",
            spec.target_name,
            spec.source_type.__qualname__,
            len(spec.fields),
        )
    return specs


def parse_mapping(
    text: str,
    namespace: Mapping[str, Any] | None = None,
    *,
    config: GeneratorConfig | None = None,
) -> MappingSpec:
    """Parse a document holding exactly one mapping block."""
    specs = parse_mappings(text, namespace, config=config)
    if len(specs) != 1:
        raise MalformedDeclarationError(f"expected one mapping block, found {len(specs)}")
    return specs[0]
