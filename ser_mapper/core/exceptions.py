"""ser_mapper exception hierarchy.

Generation-time errors derive from SpecError and are raised before any
wrapper or capability is produced. Errors raised by transforms or by a
third-party encoder during serialization are never wrapped; they reach the
caller unchanged.
"""

from __future__ import annotations


class SerMapperError(Exception):
    """Base exception for all ser_mapper errors."""


# --- Declaration (generation time) ---


class SpecError(SerMapperError):
    """Base for mapping specification errors. Always fatal at build time."""


class MalformedDeclarationError(SpecError):
    """Raised when a declaration cannot be parsed."""

    def __init__(self, detail: str, line: int | None = None) -> None:
        self.detail = detail
        self.line = line
        location = f"line {line}: " if line is not None else ""
        super().__init__(f"Malformed declaration: {location}{detail}")


class MissingSourcePathError(SpecError):
    """Raised when a field declares no source path."""

    def __init__(self, field_name: str, line: int | None = None) -> None:
        self.field_name = field_name
        self.line = line
        location = f" (line {line})" if line is not None else ""
        super().__init__(f"Field '{field_name}' has no source path{location}")


class UnresolvablePathError(SpecError):
    """Raised when a member-access chain does not resolve against the source type."""

    def __init__(self, source_type: str, path: str, detail: str) -> None:
        self.source_type = source_type
        self.path = path
        super().__init__(f"Cannot resolve '{path}' on {source_type}: {detail}")


class TransformTypeError(SpecError):
    """Raised when a transform does not fit the resolved value or declared type."""

    def __init__(self, field_name: str, detail: str) -> None:
        self.field_name = field_name
        super().__init__(f"Invalid transform for field '{field_name}': {detail}")


class EmptyMappingError(SpecError):
    """Raised when a mapping declares no fields."""

    def __init__(self, target_name: str) -> None:
        self.target_name = target_name
        super().__init__(f"Mapping '{target_name}' must declare at least one field")


# --- Registry ---


class RegistryError(SerMapperError):
    """Base for capability registry errors."""


class CapabilityNotFoundError(RegistryError):
    """Raised when no capability is registered for a (target, source) pair."""

    def __init__(self, target_name: str, source_type: str) -> None:
        self.target_name = target_name
        self.source_type = source_type
        super().__init__(f"No capability '{target_name}' registered for {source_type}")


class DuplicateCapabilityError(RegistryError, SpecError):
    """Raised when a second capability is declared for the same (target, source) pair."""

    def __init__(self, target_name: str, source_type: str) -> None:
        self.target_name = target_name
        self.source_type = source_type
        super().__init__(
            f"Duplicate capability '{target_name}' for {source_type}: "
            "a mapping with this name already exists for the source type"
        )


# --- Sinks ---


class SinkError(SerMapperError):
    """Base for errors raised by the built-in sinks."""


class SinkStateError(SinkError):
    """Raised on writes to a finished or mis-sized record or sequence."""
