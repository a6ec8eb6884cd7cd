"""Shared test fixtures."""

from __future__ import annotations

import pytest

from entities import Age, RecordId, User, first_token, second_token
from ser_mapper.core.registry import CapabilityRegistry
from ser_mapper.mapping.builder import MappingBuilder, mapping
from ser_mapper.mapping.generator import ViewFamily, ViewGenerator


@pytest.fixture
def registry() -> CapabilityRegistry:
    """Fresh capability registry, isolated from the process-wide one."""
    return CapabilityRegistry()


@pytest.fixture
def generator(registry: CapabilityRegistry) -> ViewGenerator:
    return ViewGenerator(registry)


@pytest.fixture
def john() -> User:
    return User(
        id=RecordId(table="user", key="abcd_123"),
        full_name="John Doe",
        email="jd@email.com",
        age=Age(69),
    )


@pytest.fixture
def user_response_builder() -> MappingBuilder:
    """The UserResponse mapping over User, not yet built."""
    return (
        mapping("UserResponse", User)
        .field("user_id", str, "id.key")
        .field("first_name", str, "full_name", first_token)
        .field("last_name", str, "full_name", second_token)
        .field("email_id", str, "email")
        .field("age", int, "age.0")
    )


@pytest.fixture
def user_views(generator: ViewGenerator, user_response_builder: MappingBuilder) -> ViewFamily:
    """Generated UserResponse view family, registered in the fresh registry."""
    return generator.generate(user_response_builder.build())
