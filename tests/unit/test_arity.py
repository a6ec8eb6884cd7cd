"""Unit tests for the record arity helper."""

from __future__ import annotations

import pytest

from ser_mapper.core.arity import count_fields
from ser_mapper.core.exceptions import EmptyMappingError, SpecError


class TestCountFields:
    def test_single_field(self) -> None:
        assert count_fields(["user_id"]) == 1

    def test_several_fields(self) -> None:
        assert count_fields(["user_id", "first_name", "last_name", "email_id", "age"]) == 5

    @pytest.mark.parametrize("n", [1, 2, 7, 64, 500])
    def test_matches_length(self, n: int) -> None:
        assert count_fields(list(range(n))) == n

    def test_accepts_tuples(self) -> None:
        assert count_fields(("a", "b")) == 2

    def test_empty_raises(self) -> None:
        with pytest.raises(EmptyMappingError, match="Empty"):
            count_fields([], "Empty")

    def test_empty_is_spec_error(self) -> None:
        with pytest.raises(SpecError):
            count_fields(())
