"""Sink protocols.

A sink is the seam to a structured-document encoder. Every sink MUST
implement these protocols; views and capabilities only ever talk to a sink
through them.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RecordWriter(Protocol):
    """Writes the named fields of one record, in order."""

    def write_field(self, name: str, value: Any) -> None:
        """Write one named field."""
        ...

    def end(self) -> Any:
        """Finalize the record and return the sink's result for it."""
        ...


@runtime_checkable
class SequenceWriter(Protocol):
    """Writes the elements of one ordered sequence."""

    def write_element(self, value: Any) -> None:
        """Append one element."""
        ...

    def end(self) -> Any:
        """Finalize the sequence and return the sink's result for it."""
        ...


@runtime_checkable
class Sink(Protocol):
    """Structured-document sink."""

    def begin_record(self, name: str, length: int) -> RecordWriter:
        """Open a record of exactly *length* fields."""
        ...

    def begin_sequence(self, length: int) -> SequenceWriter:
        """Open a sequence of exactly *length* elements."""
        ...

    def write_null(self) -> Any:
        """Write a null document."""
        ...

    def write_value(self, value: Any) -> Any:
        """Write a plain (non-view) value as a complete document."""
        ...


@runtime_checkable
class Serializable(Protocol):
    """Anything that can write itself into a sink."""

    def serialize(self, sink: Sink) -> Any:
        ...
