"""View wrappers.

A view is a transient adapter around a source value (or an optional value,
or a sequence of values) that knows which serialization capability writes
it. Views hold exactly the wrapped data; they are created at the call site
and discarded after serialization.

All eight wrapper kinds are subclasses of one generic ``View`` whose behaviour
is selected by a ``ViewShape`` over three axes: ownership, cardinality and
optionality. ViewGenerator creates the concrete subclasses per mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic_core import core_schema

from ser_mapper.core.enums import Cardinality, Optionality, Ownership

if TYPE_CHECKING:
    from pydantic import GetCoreSchemaHandler

    from ser_mapper.core.capability import CustomCapability, SerializationCapability
    from ser_mapper.sinks.protocol import Sink


@dataclass(frozen=True)
class ViewShape:
    """Position of a wrapper kind in the ownership x cardinality x optionality space."""

    attribute: str
    suffix: str
    ownership: Ownership
    cardinality: Cardinality
    optionality: Optionality = Optionality.REQUIRED

    @property
    def is_optional(self) -> bool:
        return self.optionality is Optionality.OPTIONAL

    @property
    def is_sequence(self) -> bool:
        return self.cardinality is Cardinality.SEQUENCE


OWNED = ViewShape("owned", "", Ownership.OWNED, Cardinality.SINGLE)
REF = ViewShape("ref", "Ref", Ownership.BORROWED, Cardinality.SINGLE)
OPTION = ViewShape("option", "Option", Ownership.OWNED, Cardinality.SINGLE, Optionality.OPTIONAL)
OPTION_REF = ViewShape(
    "option_ref", "OptionRef", Ownership.BORROWED, Cardinality.SINGLE, Optionality.OPTIONAL
)
REF_OPTION = ViewShape(
    "ref_option", "RefOption", Ownership.BORROWED_INNER, Cardinality.SINGLE, Optionality.OPTIONAL
)
VEC = ViewShape("vec", "Vec", Ownership.OWNED, Cardinality.SEQUENCE)
VEC_REF = ViewShape("vec_ref", "VecRef", Ownership.BORROWED, Cardinality.SEQUENCE)
REF_VEC = ViewShape("ref_vec", "RefVec", Ownership.BORROWED_INNER, Cardinality.SEQUENCE)

# Generation order; also the attribute order of ViewFamily.
VIEW_SHAPES: tuple[ViewShape, ...] = (
    OWNED,
    REF,
    OPTION,
    OPTION_REF,
    REF_OPTION,
    VEC,
    VEC_REF,
    REF_VEC,
)


class View:
    """Generic view over a source type, parameterized by a ViewShape.

    Concrete subclasses are generated per mapping and carry the shape, the
    source type, the capability and the borrowed single view used for
    sequence elements as class attributes.
    """

    __slots__ = ("value",)

    shape: ClassVar[ViewShape]
    source_type: ClassVar[type]
    target_name: ClassVar[str]
    capability: ClassVar[SerializationCapability | CustomCapability]
    element_view: ClassVar[type[View]]

    def __init__(self, value: Any) -> None:
        # A sequence of references is collected at the call site, so any
        # iterable of sources is accepted. Every other kind keeps the
        # caller's object as-is.
        if self.shape is REF_VEC and not isinstance(value, tuple):
            value = tuple(value)
        self.value = value

    def serialize(self, sink: Sink) -> Any:
        """Write the wrapped value(s) into *sink* and return the sink's result."""
        shape = self.shape
        if shape.is_sequence:
            items = self.value
            seq = sink.begin_sequence(len(items))
            element_view = self.element_view
            for item in items:
                seq.write_element(element_view(item))
            return seq.end()
        if shape.is_optional and self.value is None:
            return sink.write_null()
        return self.capability.write(self.value, sink)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Let pydantic serialize views through their capability (serialize-only)."""
        from ser_mapper.sinks.document import DocumentSink

        return core_schema.is_instance_schema(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda view: view.serialize(DocumentSink()),
                return_schema=core_schema.any_schema(),
            ),
        )
