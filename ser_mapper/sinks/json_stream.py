"""JSON sinks.

JsonStreamSink writes compact JSON straight into a binary stream as fields
are produced. If serialization fails midway, bytes for earlier fields have
already been written and the stream content must be discarded by the
caller.
"""

from __future__ import annotations

from typing import Any, BinaryIO

from pydantic_core import to_json as _encode_json

from ser_mapper.core.exceptions import SinkStateError
from ser_mapper.mapping.views import View
from ser_mapper.sinks.document import DocumentSink, to_document


class JsonStreamSink:
    """Sink streaming compact JSON bytes into *stream*."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._document_sink = DocumentSink()

    def begin_record(self, name: str, length: int) -> JsonRecord:
        self._stream.write(b"{")
        return JsonRecord(self, name, length)

    def begin_sequence(self, length: int) -> JsonSequence:
        self._stream.write(b"[")
        return JsonSequence(self, length)

    def write_null(self) -> None:
        self._stream.write(b"null")

    def write_value(self, value: Any) -> None:
        self.emit(value)

    def emit(self, value: Any) -> None:
        """Write one value; views stream through this sink."""
        if isinstance(value, View):
            value.serialize(self)
            return
        self._stream.write(_encode_json(value, fallback=self._document_sink.encode_unknown))

    def write_raw(self, data: bytes) -> None:
        self._stream.write(data)


class JsonRecord:
    """Streams one JSON object."""

    __slots__ = ("_sink", "_name", "_length", "_count", "_closed")

    def __init__(self, sink: JsonStreamSink, name: str, length: int) -> None:
        self._sink = sink
        self._name = name
        self._length = length
        self._count = 0
        self._closed = False

    def write_field(self, name: str, value: Any) -> None:
        if self._closed:
            raise SinkStateError(f"Record '{self._name}' is already finalized")
        if self._count >= self._length:
            raise SinkStateError(
                f"Record '{self._name}' was opened for {self._length} fields, got more"
            )
        if self._count:
            self._sink.write_raw(b",")
        self._sink.write_raw(_encode_json(name) + b":")
        self._count += 1
        self._sink.emit(value)

    def end(self) -> None:
        if self._count != self._length:
            raise SinkStateError(
                f"Record '{self._name}' was opened for {self._length} fields, got {self._count}"
            )
        self._closed = True
        self._sink.write_raw(b"}")


class JsonSequence:
    """Streams one JSON array."""

    __slots__ = ("_sink", "_length", "_count", "_closed")

    def __init__(self, sink: JsonStreamSink, length: int) -> None:
        self._sink = sink
        self._length = length
        self._count = 0
        self._closed = False

    def write_element(self, value: Any) -> None:
        if self._closed:
            raise SinkStateError("Sequence is already finalized")
        if self._count:
            self._sink.write_raw(b",")
        self._count += 1
        self._sink.emit(value)

    def end(self) -> None:
        if self._count != self._length:
            raise SinkStateError(
                f"Sequence was opened for {self._length} elements, got {self._count}"
            )
        self._closed = True
        self._sink.write_raw(b"]")


def to_json(obj: Any, *, indent: int | None = None) -> bytes:
    """Serialize a view (or any encodable value) to JSON bytes.

    Compact by default: ``{"user_id":"abcd_123","age":69}``.
    """
    return _encode_json(to_document(obj), indent=indent)
