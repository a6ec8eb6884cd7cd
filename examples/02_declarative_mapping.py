"""
Example 02: Declarative Mapping

This example demonstrates the text declaration surface, nested views used as
transforms, and handing views to Pydantic for the final JSON encoding.
"""

from ser_mapper import ViewGenerator, build_views_from_text, to_json
from dataclasses import dataclass
from pydantic import BaseModel
import io
from ser_mapper import JsonStreamSink


@dataclass
class RecordId:
    table: str
    key: str


class Account(BaseModel):
    """Source entity as a Pydantic model"""
    id: RecordId
    handle: str
    karma: int
    followers: list[str]


MAPPINGS = """
# Public API shape
@dataclass(frozen=True)
public class AccountResponse(Account):
    account_id: _IdRef = id => _IdRef
    handle: str = handle
    karma: int = karma
    follower_count: int = followers => len

private class AccountKey(Account):
    key: str = id.key
"""


def main():
    generator = ViewGenerator()

    # RecordId is written as its bare key
    ids = generator.generate_custom(
        "Id",
        RecordId,
        lambda record, sink: sink.write_value(record.key),
        [("key", str)],
    )
    response, key = build_views_from_text(
        MAPPINGS,
        {"Account": Account, "_IdRef": ids.ref},
    )
    response.export(globals())

    account = Account(
        id=RecordId("account", "acc_1"),
        handle="jdoe",
        karma=12,
        followers=["ann", "bob"],
    )

    print("=== Declarative Mapping ===\n")

    print("1. Nested view:")
    print(f"   {to_json(_AccountResponseRef(account)).decode()}\n")  # noqa: F821

    print("2. Second shape over the same source:")
    print(f"   {to_json(key.ref(account)).decode()}\n")

    # Views as Pydantic fields
    print("3. Pydantic envelope:")

    class Page(BaseModel):
        items: list[response.ref]  # type: ignore[valid-type]
        total: int

    page = Page(items=[response.ref(account)], total=1)
    print(f"   {page.model_dump_json()}\n")

    # Streaming straight into a byte buffer
    print("4. Streaming sink:")
    buffer = io.BytesIO()
    response.vec_ref([account, account]).serialize(JsonStreamSink(buffer))
    print(f"   {len(buffer.getvalue())} bytes written")


if __name__ == "__main__":
    main()
