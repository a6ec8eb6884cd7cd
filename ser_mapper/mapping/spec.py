"""Mapping specification data classes.

Frozen dataclasses representing parsed, validated mapping specifications.
Produced by MappingBuilder (directly or through the text parser) and
consumed once by ViewGenerator.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

Visibility = Literal["public", "private"]


@dataclass(frozen=True)
class Annotation:
    """Pass-through annotation applied to the generated shape type.

    ``decorator`` is ``None`` for ``dataclass`` options, which are merged into
    the shape construction instead of being applied afterwards.
    """

    name: str
    decorator: Callable[..., Any] | None = None
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldSpec:
    """A single output field and where its value comes from."""

    output_name: str
    declared_type: Any
    source_path: tuple[str, ...]
    transform: Callable[[Any], Any] | None = None
    resolved_type: Any = Any

    @property
    def dotted_path(self) -> str:
        return ".".join(self.source_path)


@dataclass(frozen=True)
class MappingSpec:
    """Compiled, validated mapping from a source type to a target shape."""

    target_name: str
    source_type: type
    fields: tuple[FieldSpec, ...]
    visibility: Visibility = "public"
    annotations: tuple[Annotation, ...] = ()

    @property
    def field_names(self) -> list[str]:
        """Output names in declaration (and wire) order."""
        return [f.output_name for f in self.fields]
