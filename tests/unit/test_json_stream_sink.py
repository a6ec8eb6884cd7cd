"""Unit tests for the streaming JSON sink."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any

import pytest

from entities import JOHN_JSON, User
from ser_mapper.core.exceptions import SinkStateError
from ser_mapper.mapping.builder import mapping
from ser_mapper.mapping.generator import ViewFamily, ViewGenerator
from ser_mapper.sinks.json_stream import JsonStreamSink, to_json


@dataclass
class Money:
    amount: int
    currency: str

    def serialize(self) -> str:
        return f"{self.amount} {self.currency}"


@dataclass
class Order:
    total: Money


class TestJsonStreamSink:
    def test_record(self) -> None:
        buffer = io.BytesIO()
        record = JsonStreamSink(buffer).begin_record("Pair", 2)
        record.write_field("a", 1)
        record.write_field("b", "two")
        record.end()
        assert buffer.getvalue() == b'{"a":1,"b":"two"}'

    def test_sequence(self) -> None:
        buffer = io.BytesIO()
        seq = JsonStreamSink(buffer).begin_sequence(3)
        for value in (1, None, "x"):
            seq.write_element(value)
        seq.end()
        assert buffer.getvalue() == b'[1,null,"x"]'

    def test_null(self) -> None:
        buffer = io.BytesIO()
        JsonStreamSink(buffer).write_null()
        assert buffer.getvalue() == b"null"

    def test_field_names_escaped(self) -> None:
        buffer = io.BytesIO()
        record = JsonStreamSink(buffer).begin_record("Odd", 1)
        record.write_field('say "hi"', 1)
        record.end()
        assert buffer.getvalue() == b'{"say \\"hi\\"":1}'

    def test_view(self, user_views: ViewFamily, john: User) -> None:
        buffer = io.BytesIO()
        user_views.ref(john).serialize(JsonStreamSink(buffer))
        assert buffer.getvalue() == JOHN_JSON

    def test_sequence_of_views(self, user_views: ViewFamily, john: User) -> None:
        buffer = io.BytesIO()
        user_views.vec([john]).serialize(JsonStreamSink(buffer))
        assert buffer.getvalue() == b"[" + JOHN_JSON + b"]"

    def test_field_with_own_serialize_method(self, generator: ViewGenerator) -> None:
        family = generator.generate(mapping("OrderRow", Order).field("total", Money).build())
        buffer = io.BytesIO()
        family.ref(Order(Money(5, "EUR"))).serialize(JsonStreamSink(buffer))
        assert buffer.getvalue() == b'{"total":{"amount":5,"currency":"EUR"}}'
        assert to_json(family.ref(Order(Money(5, "EUR")))) == buffer.getvalue()

    def test_count_mismatch(self) -> None:
        record = JsonStreamSink(io.BytesIO()).begin_record("Two", 2)
        record.write_field("a", 1)
        with pytest.raises(SinkStateError):
            record.end()

    def test_failure_leaves_partial_bytes(self, generator: ViewGenerator) -> None:
        def fail(value: Any) -> Any:
            raise RuntimeError("transform failed")

        spec = (
            mapping("Partial", User)
            .field("email", str)
            .field("broken", str, "full_name", fail)
            .build()
        )
        family = generator.generate(spec)
        buffer = io.BytesIO()
        with pytest.raises(RuntimeError, match="transform failed"):
            family.ref(
                User(id=None, full_name="x", email="e@x", age=None)  # type: ignore[arg-type]
            ).serialize(JsonStreamSink(buffer))
        assert buffer.getvalue() == b'{"email":"e@x"'


class TestToJson:
    def test_compact(self, user_views: ViewFamily, john: User) -> None:
        assert to_json(user_views.owned(john)) == JOHN_JSON

    def test_indent(self, user_views: ViewFamily, john: User) -> None:
        assert to_json(user_views.owned(john), indent=2).startswith(b'{\n  "user_id": "abcd_123"')

    def test_null(self, user_views: ViewFamily) -> None:
        assert to_json(user_views.option(None)) == b"null"
