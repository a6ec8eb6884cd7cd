"""Serialization capabilities.

A SerializationCapability is the compiled form of a MappingSpec: the ordered
(output_name, accessor, transform) entries plus the record arity, driven by
one generic routine that writes the fields of a source value into a sink.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ser_mapper.core.arity import count_fields

if TYPE_CHECKING:
    from ser_mapper.mapping.spec import MappingSpec
    from ser_mapper.sinks.protocol import Sink


def is_position(segment: str) -> bool:
    """True for a positional path segment (ASCII decimal digits only)."""
    return segment.isascii() and segment.isdigit()


def build_accessor(path: Sequence[str]) -> Callable[[Any], Any]:
    """Compile a member-access chain into a single accessor callable.

    Consecutive attribute segments share one ``operator.attrgetter``;
    positional segments use ``operator.itemgetter``.
    """
    getters: list[Callable[[Any], Any]] = []
    attrs: list[str] = []
    for segment in path:
        if is_position(segment):
            if attrs:
                getters.append(operator.attrgetter(".".join(attrs)))
                attrs = []
            getters.append(operator.itemgetter(int(segment)))
        else:
            attrs.append(segment)
    if attrs:
        getters.append(operator.attrgetter(".".join(attrs)))

    if len(getters) == 1:
        return getters[0]

    def access(obj: Any) -> Any:
        for getter in getters:
            obj = getter(obj)
        return obj

    return access


@dataclass(frozen=True)
class FieldEntry:
    """One compiled output field."""

    name: str
    accessor: Callable[[Any], Any]
    transform: Callable[[Any], Any] | None = None


@dataclass(frozen=True)
class SerializationCapability:
    """Writes a source value's selected fields, in declared order, as one record."""

    target_name: str
    source_type: type
    arity: int
    entries: tuple[FieldEntry, ...]

    @classmethod
    def compile(cls, spec: MappingSpec) -> SerializationCapability:
        """Compile a validated MappingSpec."""
        entries = tuple(
            FieldEntry(
                name=f.output_name,
                accessor=build_accessor(f.source_path),
                transform=f.transform,
            )
            for f in spec.fields
        )
        return cls(
            target_name=spec.target_name,
            source_type=spec.source_type,
            arity=count_fields(spec.fields, spec.target_name),
            entries=entries,
        )

    @property
    def key(self) -> tuple[str, type]:
        return (self.target_name, self.source_type)

    def write(self, source: Any, sink: Sink) -> Any:
        """Serialize *source* into *sink* and return the sink's result.

        Errors from accessors, transforms or the sink propagate unchanged;
        the record is never finalized after a failure.
        """
        record = sink.begin_record(self.target_name, self.arity)
        for entry in self.entries:
            value = entry.accessor(source)
            if entry.transform is not None:
                value = entry.transform(value)
            record.write_field(entry.name, value)
        return record.end()


@dataclass(frozen=True)
class CustomCapability:
    """Capability backed by a hand-written ``write(source, sink)`` callable."""

    target_name: str
    source_type: type
    writer: Callable[[Any, Sink], Any]

    @property
    def key(self) -> tuple[str, type]:
        return (self.target_name, self.source_type)

    def write(self, source: Any, sink: Sink) -> Any:
        return self.writer(source, sink)
