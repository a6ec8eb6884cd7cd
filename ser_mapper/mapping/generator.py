"""View-type generation.

From a MappingSpec, ViewGenerator emits the plain target-shape type and the
eight view wrappers over the source type, and registers the serialization
capability they all dispatch to. Generation is all-or-nothing: every check
runs before anything is registered.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterator, Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import create_model

from ser_mapper.core.capability import CustomCapability, SerializationCapability
from ser_mapper.core.config import DEFAULT_CONFIG, GeneratorConfig
from ser_mapper.core.exceptions import (
    DuplicateCapabilityError,
    EmptyMappingError,
    MalformedDeclarationError,
)
from ser_mapper.core.registry import CapabilityRegistry, default_registry, qualified_name
from ser_mapper.mapping.builder import MappingBuilder
from ser_mapper.mapping.parser import parse_mappings
from ser_mapper.mapping.spec import Annotation, MappingSpec, Visibility
from ser_mapper.mapping.views import REF, VIEW_SHAPES, View
from ser_mapper.sinks.protocol import Sink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewFamily:
    """Everything generated for one mapping."""

    target_name: str
    source_type: type
    visibility: Visibility
    shape: type
    capability: SerializationCapability | CustomCapability
    owned: type[View]
    ref: type[View]
    option: type[View]
    option_ref: type[View]
    ref_option: type[View]
    vec: type[View]
    vec_ref: type[View]
    ref_vec: type[View]

    @property
    def views(self) -> tuple[type[View], ...]:
        """The eight wrapper classes, in generation order."""
        return tuple(getattr(self, s.attribute) for s in VIEW_SHAPES)

    @property
    def names(self) -> list[str]:
        """Generated names: the shape followed by the eight wrappers."""
        return [self.shape.__name__] + [view.__name__ for view in self.views]

    def __getitem__(self, name: str) -> type:
        for generated in (self.shape, *self.views):
            if generated.__name__ == name:
                return generated
        raise KeyError(name)

    def __iter__(self) -> Iterator[type[View]]:
        return iter(self.views)

    def export(self, namespace: MutableMapping[str, Any]) -> None:
        """Bind the generated names into *namespace* (typically ``globals()``).

        Public mappings are also appended to the namespace's ``__all__``.
        """
        for name in self.names:
            namespace[name] = self[name]
        if self.visibility == "public":
            exported = list(namespace.get("__all__", []))
            exported.extend(n for n in self.names if n not in exported)
            namespace["__all__"] = exported


class ViewGenerator:
    """Generates view families and registers their capabilities.

    Args:
        registry: Where capabilities are registered. Defaults to the
            process-wide registry.
        config: Naming and shape options.
    """

    def __init__(
        self,
        registry: CapabilityRegistry | None = None,
        config: GeneratorConfig | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry
        self._config = config or DEFAULT_CONFIG

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    def generate(self, spec: MappingSpec) -> ViewFamily:
        """Generate the shape type and view wrappers for *spec*.

        Raises:
            DuplicateCapabilityError: If the (target, source) pair already
                has a capability.
        """
        return self.generate_all([spec])[0]

    def generate_all(self, specs: Sequence[MappingSpec]) -> list[ViewFamily]:
        """Generate several mappings; nothing is registered unless all succeed."""
        keys: set[tuple[str, type]] = set()
        for spec in specs:
            key = (spec.target_name, spec.source_type)
            if key in keys:
                raise DuplicateCapabilityError(spec.target_name, qualified_name(spec.source_type))
            keys.add(key)
            self._check_free(spec.target_name, spec.source_type)

        families = [self._prepare(spec) for spec in specs]
        for spec, family in zip(specs, families, strict=True):
            self._registry.register(family.capability)
            logger.debug(
                "Generated %s over %s with %d fields: %s",
                spec.target_name,
                spec.source_type.__qualname__,
                len(spec.fields),
                ", ".join(spec.field_names),
            )
        return families

    def _prepare(self, spec: MappingSpec) -> ViewFamily:
        capability = SerializationCapability.compile(spec)
        shape = self._build_shape(
            spec.target_name,
            [(f.output_name, f.declared_type) for f in spec.fields],
            spec.annotations,
            spec.source_type,
        )
        return self._assemble(spec.target_name, spec.source_type, spec.visibility, shape, capability)

    def generate_custom(
        self,
        target_name: str,
        source_type: type,
        write: Callable[[Any, Sink], Any],
        fields: Sequence[tuple[str, Any]],
        *,
        visibility: Visibility = "public",
        annotations: Sequence[Annotation] = (),
    ) -> ViewFamily:
        """Generate a view family around a hand-written ``write(source, sink)``.

        Used when a source type needs a document the field mapping cannot
        express, such as a bare scalar.
        """
        if not fields:
            raise EmptyMappingError(target_name)
        if not callable(write):
            raise MalformedDeclarationError(f"writer for {target_name} is not callable")
        self._check_free(target_name, source_type)
        capability = CustomCapability(target_name=target_name, source_type=source_type, writer=write)
        shape = self._build_shape(target_name, list(fields), tuple(annotations), source_type)
        family = self._assemble(target_name, source_type, visibility, shape, capability)
        self._registry.register(capability)
        logger.debug("Generated custom %s over %s", target_name, source_type.__qualname__)
        return family

    def _check_free(self, target_name: str, source_type: type) -> None:
        if self._registry.has(target_name, source_type):
            raise DuplicateCapabilityError(target_name, qualified_name(source_type))

    def _build_shape(
        self,
        target_name: str,
        fields: list[tuple[str, Any]],
        annotations: Sequence[Annotation],
        source_type: type,
    ) -> type:
        dataclass_options: dict[str, Any] = {}
        decorators: list[Annotation] = []
        for annotation in annotations:
            if annotation.decorator is None:
                dataclass_options.update(annotation.options)
            else:
                decorators.append(annotation)

        try:
            if self._config.shape_backend == "pydantic":
                if dataclass_options:
                    raise MalformedDeclarationError(
                        f"dataclass options {sorted(dataclass_options)} need the dataclass shape backend"
                    )
                shape: type = create_model(target_name, **{name: (tp, ...) for name, tp in fields})
            else:
                shape = dataclasses.make_dataclass(target_name, fields, **dataclass_options)
        except TypeError as e:
            raise MalformedDeclarationError(f"cannot build shape {target_name}: {e}") from e
        shape.__module__ = source_type.__module__

        # Decorators apply bottom-up, as stacked on a class statement.
        for annotation in reversed(decorators):
            decorator: Callable[..., Any] = annotation.decorator  # type: ignore[assignment]
            if annotation.options:
                decorator = decorator(**annotation.options)
            shape = decorator(shape)
        return shape

    def _assemble(
        self,
        target_name: str,
        source_type: type,
        visibility: Visibility,
        shape: type,
        capability: SerializationCapability | CustomCapability,
    ) -> ViewFamily:
        base_name = f"{self._config.wrapper_prefix}{target_name}"
        views: dict[str, type[View]] = {}
        for view_shape in VIEW_SHAPES:
            views[view_shape.attribute] = type(
                base_name + view_shape.suffix,
                (View,),
                {
                    "__slots__": (),
                    "__module__": source_type.__module__,
                    "__doc__": f"{target_name} view ({view_shape.attribute}) over "
                    f"{source_type.__qualname__}.",
                    "shape": view_shape,
                    "source_type": source_type,
                    "target_name": target_name,
                    "capability": capability,
                },
            )
        element_view = views[REF.attribute]
        for view in views.values():
            view.element_view = element_view

        return ViewFamily(
            target_name=target_name,
            source_type=source_type,
            visibility=visibility,
            shape=shape,
            capability=capability,
            **views,
        )


def build_views(
    spec: MappingSpec | MappingBuilder,
    *,
    registry: CapabilityRegistry | None = None,
    config: GeneratorConfig | None = None,
) -> ViewFamily:
    """Build (if needed) and generate one mapping."""
    if isinstance(spec, MappingBuilder):
        spec = spec.build()
    return ViewGenerator(registry, config).generate(spec)


def build_views_from_text(
    text: str,
    namespace: Mapping[str, Any] | None = None,
    *,
    registry: CapabilityRegistry | None = None,
    config: GeneratorConfig | None = None,
) -> list[ViewFamily]:
    """Parse every block in *text* and generate all of them, all-or-nothing."""
    specs = parse_mappings(text, namespace, config=config)
    return ViewGenerator(registry, config).generate_all(specs)
