"""Unit tests for the generic View and its eight generated kinds."""

from __future__ import annotations

import pytest

from entities import JOHN_DOCUMENT, User
from ser_mapper.core.enums import Cardinality, Optionality, Ownership
from ser_mapper.mapping.generator import ViewFamily
from ser_mapper.mapping.views import (
    OPTION,
    OPTION_REF,
    OWNED,
    REF,
    REF_OPTION,
    REF_VEC,
    VEC,
    VEC_REF,
    VIEW_SHAPES,
    View,
)
from ser_mapper.sinks.document import DocumentSink, to_document


class TestViewShapes:
    def test_eight_distinct_shapes(self) -> None:
        assert len(VIEW_SHAPES) == 8
        axes = {(s.ownership, s.cardinality, s.optionality) for s in VIEW_SHAPES}
        assert len(axes) == 8

    def test_suffixes(self) -> None:
        assert [s.suffix for s in VIEW_SHAPES] == [
            "",
            "Ref",
            "Option",
            "OptionRef",
            "RefOption",
            "Vec",
            "VecRef",
            "RefVec",
        ]

    @pytest.mark.parametrize(
        ("shape", "ownership", "cardinality", "optionality"),
        [
            (OWNED, Ownership.OWNED, Cardinality.SINGLE, Optionality.REQUIRED),
            (REF, Ownership.BORROWED, Cardinality.SINGLE, Optionality.REQUIRED),
            (OPTION, Ownership.OWNED, Cardinality.SINGLE, Optionality.OPTIONAL),
            (OPTION_REF, Ownership.BORROWED, Cardinality.SINGLE, Optionality.OPTIONAL),
            (REF_OPTION, Ownership.BORROWED_INNER, Cardinality.SINGLE, Optionality.OPTIONAL),
            (VEC, Ownership.OWNED, Cardinality.SEQUENCE, Optionality.REQUIRED),
            (VEC_REF, Ownership.BORROWED, Cardinality.SEQUENCE, Optionality.REQUIRED),
            (REF_VEC, Ownership.BORROWED_INNER, Cardinality.SEQUENCE, Optionality.REQUIRED),
        ],
    )
    def test_axes(self, shape, ownership, cardinality, optionality) -> None:
        assert shape.ownership is ownership
        assert shape.cardinality is cardinality
        assert shape.optionality is optionality

    def test_predicates(self) -> None:
        assert OPTION.is_optional and not OPTION.is_sequence
        assert VEC.is_sequence and not VEC.is_optional
        assert not OWNED.is_optional and not OWNED.is_sequence


class TestSingleViews:
    @pytest.mark.parametrize("attribute", ["owned", "ref", "option", "option_ref", "ref_option"])
    def test_present_value(self, user_views: ViewFamily, john: User, attribute: str) -> None:
        view = getattr(user_views, attribute)(john)
        assert to_document(view) == JOHN_DOCUMENT

    @pytest.mark.parametrize("attribute", ["option", "option_ref", "ref_option"])
    def test_absent_value(self, user_views: ViewFamily, attribute: str) -> None:
        view = getattr(user_views, attribute)(None)
        assert view.serialize(DocumentSink()) is None

    def test_holds_the_source_itself(self, user_views: ViewFamily, john: User) -> None:
        assert user_views.ref(john).value is john
        assert user_views.owned(john).value is john

    def test_slots(self, user_views: ViewFamily, john: User) -> None:
        view = user_views.ref(john)
        with pytest.raises(AttributeError):
            view.extra = 1  # type: ignore[attr-defined]

    def test_repr(self, user_views: ViewFamily, john: User) -> None:
        assert repr(user_views.ref(john)).startswith("_UserResponseRef(User(")

    def test_is_view(self, user_views: ViewFamily, john: User) -> None:
        assert all(issubclass(view, View) for view in user_views)
        assert isinstance(user_views.owned(john), View)


class TestSequenceViews:
    @pytest.mark.parametrize("attribute", ["vec", "vec_ref", "ref_vec"])
    def test_elements_in_order(self, user_views: ViewFamily, john: User, attribute: str) -> None:
        jane = User(id=john.id, full_name="Jane Roe", email="jr@email.com", age=john.age)
        document = to_document(getattr(user_views, attribute)([john, jane]))
        assert len(document) == 2
        assert document[0] == JOHN_DOCUMENT
        assert document[1]["first_name"] == "Jane"
        assert document[1]["last_name"] == "Roe"

    @pytest.mark.parametrize("attribute", ["vec", "vec_ref", "ref_vec"])
    def test_empty(self, user_views: ViewFamily, attribute: str) -> None:
        assert to_document(getattr(user_views, attribute)([])) == []

    def test_vec_ref_borrows_the_list(self, user_views: ViewFamily, john: User) -> None:
        users = [john]
        assert user_views.vec_ref(users).value is users

    def test_ref_vec_collects_any_iterable(self, user_views: ViewFamily, john: User) -> None:
        view = user_views.ref_vec(user for user in [john, john])
        assert view.value == (john, john)
        assert to_document(view) == [JOHN_DOCUMENT, JOHN_DOCUMENT]

    def test_elements_use_ref_view(self, user_views: ViewFamily) -> None:
        assert all(view.element_view is user_views.ref for view in user_views)


class TestViewEquivalence:
    def test_all_kinds_agree(self, user_views: ViewFamily, john: User) -> None:
        single = [
            to_document(user_views.owned(john)),
            to_document(user_views.ref(john)),
            to_document(user_views.option(john)),
            to_document(user_views.option_ref(john)),
            to_document(user_views.ref_option(john)),
        ]
        assert all(doc == single[0] for doc in single)
        for attribute in ("vec", "vec_ref", "ref_vec"):
            assert to_document(getattr(user_views, attribute)([john])) == [single[0]]

    def test_repeated_serialization(self, user_views: ViewFamily, john: User) -> None:
        view = user_views.ref(john)
        assert to_document(view) == to_document(view)
        assert john.full_name == "John Doe"
