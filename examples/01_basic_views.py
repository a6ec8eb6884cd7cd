"""
Example 01: Basic Views

This example demonstrates declaring a mapping with the builder DSL and
serializing one source entity through each of the generated views.
"""

from ser_mapper import ViewGenerator, mapping, to_document, to_json
from dataclasses import dataclass
from typing import NamedTuple


@dataclass
class RecordId:
    """Database record identifier"""
    table: str
    key: str


class Age(NamedTuple):
    years: int


@dataclass
class User:
    """Source entity, never copied into a DTO"""
    id: RecordId
    full_name: str
    email: str
    age: Age


def first_token(value: str) -> str:
    return value.split(" ")[0]


def second_token(value: str) -> str:
    return value.split(" ")[1]


def main():
    john = User(RecordId("user", "abcd_123"), "John Doe", "jd@email.com", Age(69))
    jane = User(RecordId("user", "efgh_456"), "Jane Roe", "jr@email.com", Age(42))

    # Declare the target shape
    spec = (
        mapping("UserResponse", User)
        .field("user_id", str, "id.key")
        .field("first_name", str, "full_name", first_token)
        .field("last_name", str, "full_name", second_token)
        .field("email_id", str, "email")
        .field("age", int, "age.0")
        .build()
    )
    views = ViewGenerator().generate(spec)

    print("=== Basic Views ===\n")

    print("1. Generated names:")
    for name in views.names:
        print(f"   - {name}")
    print()

    # Single views
    print("2. Single value:")
    print(f"   {views.ref.__name__}: {to_json(views.ref(john)).decode()}")
    print(f"   {views.owned.__name__}: {to_json(views.owned(john)).decode()}\n")

    # Optional views
    print("3. Optional value:")
    print(f"   present: {to_json(views.option_ref(john)).decode()}")
    print(f"   absent:  {to_json(views.option_ref(None)).decode()}\n")

    # Sequence views
    print("4. Sequence:")
    users = [john, jane]
    for row in to_document(views.vec_ref(users)):
        print(f"   - {row['first_name']} {row['last_name']} <{row['email_id']}>")
    print()

    # The plain target shape
    print("5. Target shape:")
    shape = views.shape(**to_document(views.ref(jane)))
    print(f"   {shape}")


if __name__ == "__main__":
    main()
