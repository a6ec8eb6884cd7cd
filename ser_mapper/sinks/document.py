"""Document sink - builds plain Python documents.

Records become dicts, sequences become lists, null becomes None. Plain
values are converted with ``pydantic_core.to_jsonable_python`` as they are
written, so an unencodable value fails on the field that carries it.
"""

from __future__ import annotations

from typing import Any

from pydantic_core import PydanticSerializationError, to_jsonable_python

from ser_mapper.core.exceptions import SinkStateError
from ser_mapper.mapping.views import View


class DocumentSink:
    """Sink producing dict/list/None/JSON-compatible scalar documents."""

    def begin_record(self, name: str, length: int) -> DocumentRecord:
        return DocumentRecord(self, name, length)

    def begin_sequence(self, length: int) -> DocumentSequence:
        return DocumentSequence(self, length)

    def write_null(self) -> None:
        return None

    def write_value(self, value: Any) -> Any:
        return self.encode(value)

    def encode(self, value: Any) -> Any:
        """Encode one value; views recurse through this sink."""
        if isinstance(value, View):
            return value.serialize(self)
        return to_jsonable_python(value, fallback=self.encode_unknown)

    def encode_unknown(self, value: Any) -> Any:
        # Views nested inside containers (lists, dicts, dataclasses).
        if isinstance(value, View):
            return value.serialize(self)
        raise PydanticSerializationError(f"Unable to serialize unknown type: {type(value)!r}")


class DocumentRecord:
    """Record writer collecting fields into a dict, in write order."""

    __slots__ = ("_sink", "_name", "_length", "_fields", "_closed")

    def __init__(self, sink: DocumentSink, name: str, length: int) -> None:
        self._sink = sink
        self._name = name
        self._length = length
        self._fields: dict[str, Any] = {}
        self._closed = False

    def write_field(self, name: str, value: Any) -> None:
        if self._closed:
            raise SinkStateError(f"Record '{self._name}' is already finalized")
        if len(self._fields) >= self._length:
            raise SinkStateError(
                f"Record '{self._name}' was opened for {self._length} fields, got more"
            )
        if name in self._fields:
            raise SinkStateError(f"Field '{name}' written twice in record '{self._name}'")
        self._fields[name] = self._sink.encode(value)

    def end(self) -> dict[str, Any]:
        if len(self._fields) != self._length:
            raise SinkStateError(
                f"Record '{self._name}' was opened for {self._length} fields, "
                f"got {len(self._fields)}"
            )
        self._closed = True
        return self._fields


class DocumentSequence:
    """Sequence writer collecting elements into a list."""

    __slots__ = ("_sink", "_length", "_items", "_closed")

    def __init__(self, sink: DocumentSink, length: int) -> None:
        self._sink = sink
        self._length = length
        self._items: list[Any] = []
        self._closed = False

    def write_element(self, value: Any) -> None:
        if self._closed:
            raise SinkStateError("Sequence is already finalized")
        self._items.append(self._sink.encode(value))

    def end(self) -> list[Any]:
        if len(self._items) != self._length:
            raise SinkStateError(
                f"Sequence was opened for {self._length} elements, got {len(self._items)}"
            )
        self._closed = True
        return self._items


def to_document(obj: Any) -> Any:
    """Serialize a view (or any encodable value) into a plain Python document."""
    return DocumentSink().encode(obj)
