"""Mapping layer - declare target shapes and generate views over source types."""

from __future__ import annotations

from ser_mapper.mapping.builder import MappingBuilder, mapping
from ser_mapper.mapping.generator import (
    ViewFamily,
    ViewGenerator,
    build_views,
    build_views_from_text,
)
from ser_mapper.mapping.parser import parse_mapping, parse_mappings
from ser_mapper.mapping.spec import Annotation, FieldSpec, MappingSpec
from ser_mapper.mapping.views import VIEW_SHAPES, View, ViewShape

__all__ = [
    "MappingBuilder",
    "mapping",
    "parse_mapping",
    "parse_mappings",
    "MappingSpec",
    "FieldSpec",
    "Annotation",
    "ViewGenerator",
    "ViewFamily",
    "build_views",
    "build_views_from_text",
    "View",
    "ViewShape",
    "VIEW_SHAPES",
]
