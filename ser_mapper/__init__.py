"""ser_mapper - serialize source entities through generated view types, without copying."""

from __future__ import annotations

from ser_mapper.core.arity import count_fields
from ser_mapper.core.capability import CustomCapability, SerializationCapability
from ser_mapper.core.config import GeneratorConfig
from ser_mapper.core.enums import Cardinality, Optionality, Ownership
from ser_mapper.core.exceptions import (
    CapabilityNotFoundError,
    DuplicateCapabilityError,
    EmptyMappingError,
    MalformedDeclarationError,
    MissingSourcePathError,
    RegistryError,
    SerMapperError,
    SinkError,
    SinkStateError,
    SpecError,
    TransformTypeError,
    UnresolvablePathError,
)
from ser_mapper.core.registry import CapabilityRegistry, default_registry
from ser_mapper.mapping.builder import MappingBuilder, mapping
from ser_mapper.mapping.generator import (
    ViewFamily,
    ViewGenerator,
    build_views,
    build_views_from_text,
)
from ser_mapper.mapping.parser import parse_mapping, parse_mappings
from ser_mapper.mapping.spec import MappingSpec
from ser_mapper.mapping.views import View
from ser_mapper.sinks.document import DocumentSink, to_document
from ser_mapper.sinks.json_stream import JsonStreamSink, to_json

__version__ = "0.1.0"

__all__ = [
    # Declaration
    "mapping",
    "MappingBuilder",
    "parse_mapping",
    "parse_mappings",
    "MappingSpec",
    # Generation
    "ViewGenerator",
    "ViewFamily",
    "View",
    "build_views",
    "build_views_from_text",
    "GeneratorConfig",
    # Dispatch
    "SerializationCapability",
    "CustomCapability",
    "CapabilityRegistry",
    "default_registry",
    "count_fields",
    # Sinks
    "DocumentSink",
    "JsonStreamSink",
    "to_document",
    "to_json",
    # Enums
    "Ownership",
    "Cardinality",
    "Optionality",
    # Exceptions
    "SerMapperError",
    "SpecError",
    "MalformedDeclarationError",
    "MissingSourcePathError",
    "UnresolvablePathError",
    "TransformTypeError",
    "EmptyMappingError",
    "RegistryError",
    "CapabilityNotFoundError",
    "DuplicateCapabilityError",
    "SinkError",
    "SinkStateError",
]
