"""Mapping DSL builder.

Provides a fluent builder for defining mapping specifications. The text
parser drives the same builder, so both surfaces share validation.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Sequence
from typing import Any

from ser_mapper.core.config import DEFAULT_CONFIG, GeneratorConfig
from ser_mapper.core.exceptions import (
    EmptyMappingError,
    MalformedDeclarationError,
    MissingSourcePathError,
)
from ser_mapper.mapping.resolve import check_transform, resolve_path
from ser_mapper.mapping.spec import Annotation, FieldSpec, MappingSpec, Visibility


def _split_path(source_path: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(source_path, str):
        source_path = source_path.strip()
        return tuple(source_path.split(".")) if source_path else ()
    return tuple(source_path)


def mapping(
    target_name: str,
    source_type: type,
    *,
    visibility: Visibility = "public",
    config: GeneratorConfig | None = None,
) -> MappingBuilder:
    """Entry point for the mapping DSL.

    Args:
        target_name: Name of the target shape (and base name of the views).
        source_type: The source entity class being exposed.
        visibility: "public" mappings are listed in ``__all__`` on export.
        config: Controls path strictness and transform type checking.

    Returns:
        A builder for chaining field declarations.
    """
    return MappingBuilder(target_name, source_type, visibility=visibility, config=config)


class MappingBuilder:
    """Fluent builder for mapping definitions."""

    def __init__(
        self,
        target_name: str,
        source_type: type,
        *,
        visibility: Visibility = "public",
        config: GeneratorConfig | None = None,
    ) -> None:
        self._target_name = target_name
        self._source_type = source_type
        self._visibility = visibility
        self._config = config or DEFAULT_CONFIG
        # name, declared type, path, transform
        self._fields: list[tuple[str, Any, tuple[str, ...], Callable[[Any], Any] | None]] = []
        self._annotations: list[Annotation] = []

    def field(
        self,
        output_name: str,
        declared_type: Any,
        source_path: str | Sequence[str] | None = None,
        transform: Callable[[Any], Any] | None = None,
    ) -> MappingBuilder:
        """Declare one output field.

        ``source_path`` is a dotted member-access chain on the source
        (``"id.key"``, ``"age.0"``); it defaults to ``output_name``.
        """
        path = _split_path(output_name if source_path is None else source_path)
        self._fields.append((output_name, declared_type, path, transform))
        return self

    def annotate(
        self,
        decorator: Callable[..., Any] | str,
        **options: Any,
    ) -> MappingBuilder:
        """Add a pass-through annotation for the generated shape type.

        ``"dataclass"`` (or ``dataclasses.dataclass`` itself) contributes
        options to the shape construction; any other callable is applied to
        the shape class as a decorator.
        """
        if decorator == "dataclass" or decorator is dataclasses.dataclass:
            self._annotations.append(Annotation(name="dataclass", options=dict(options)))
            return self
        if isinstance(decorator, str) or not callable(decorator):
            raise MalformedDeclarationError(f"annotation {decorator!r} is not a decorator")
        name = getattr(decorator, "__name__", repr(decorator))
        self._annotations.append(Annotation(name=name, decorator=decorator, options=dict(options)))
        return self

    def build(self) -> MappingSpec:
        """Validate the declarations and compile them into a MappingSpec."""
        if not self._target_name.isidentifier():
            raise MalformedDeclarationError(f"target name {self._target_name!r} is not an identifier")
        if not isinstance(self._source_type, type):
            raise MalformedDeclarationError(f"source type {self._source_type!r} is not a class")
        if self._visibility not in ("public", "private"):
            raise MalformedDeclarationError(f"unknown visibility {self._visibility!r}")
        if not self._fields:
            raise EmptyMappingError(self._target_name)

        seen: set[str] = set()
        fields: list[FieldSpec] = []
        for output_name, declared_type, path, transform in self._fields:
            if not output_name.isidentifier():
                raise MalformedDeclarationError(f"field name {output_name!r} is not an identifier")
            if output_name in seen:
                raise MalformedDeclarationError(
                    f"field '{output_name}' is declared twice in {self._target_name}"
                )
            seen.add(output_name)
            if not path:
                raise MissingSourcePathError(output_name)

            resolved = resolve_path(self._source_type, path, strict=self._config.strict_paths)
            if transform is not None and self._config.check_transform_types:
                check_transform(output_name, transform, resolved, declared_type)

            fields.append(
                FieldSpec(
                    output_name=output_name,
                    declared_type=declared_type,
                    source_path=path,
                    transform=transform,
                    resolved_type=resolved,
                )
            )

        return MappingSpec(
            target_name=self._target_name,
            source_type=self._source_type,
            fields=tuple(fields),
            visibility=self._visibility,
            annotations=tuple(self._annotations),
        )
