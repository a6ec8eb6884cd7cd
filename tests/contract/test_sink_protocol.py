"""Contract tests for sink protocol compliance."""

from __future__ import annotations

import io

import pytest

from entities import User
from ser_mapper.mapping.generator import ViewFamily
from ser_mapper.sinks.document import DocumentSink
from ser_mapper.sinks.json_stream import JsonStreamSink
from ser_mapper.sinks.protocol import RecordWriter, SequenceWriter, Serializable, Sink


@pytest.fixture(params=["document", "json"])
def sink(request: pytest.FixtureRequest) -> Sink:
    if request.param == "document":
        return DocumentSink()
    return JsonStreamSink(io.BytesIO())


class TestSinkProtocol:
    def test_implements_sink(self, sink: Sink) -> None:
        assert isinstance(sink, Sink)

    def test_record_writer(self, sink: Sink) -> None:
        record = sink.begin_record("Pair", 1)
        assert isinstance(record, RecordWriter)
        record.write_field("a", 1)
        record.end()

    def test_sequence_writer(self, sink: Sink) -> None:
        seq = sink.begin_sequence(1)
        assert isinstance(seq, SequenceWriter)
        seq.write_element(1)
        seq.end()


class TestDocumentSinkResults:
    def test_record_result(self) -> None:
        record = DocumentSink().begin_record("Pair", 1)
        record.write_field("a", 1)
        assert record.end() == {"a": 1}

    def test_sequence_result(self) -> None:
        seq = DocumentSink().begin_sequence(0)
        assert seq.end() == []


class TestJsonStreamSinkResults:
    def test_record_result_is_none(self) -> None:
        buffer = io.BytesIO()
        record = JsonStreamSink(buffer).begin_record("Pair", 1)
        record.write_field("a", 1)
        assert record.end() is None
        assert buffer.getvalue() == b'{"a":1}'


class TestViewsAreSerializable:
    def test_every_kind(self, user_views: ViewFamily, john: User) -> None:
        for view in user_views:
            value = [john] if view.shape.is_sequence else john
            assert isinstance(view(value), Serializable)

    def test_source_is_not_serializable(self, john: User) -> None:
        assert not isinstance(john, Serializable)
