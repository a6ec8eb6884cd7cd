"""View wrapper axes."""

from __future__ import annotations

from enum import Enum


class Ownership(Enum):
    """How a view holds what it wraps.

    BORROWED is a reference to the whole wrapped value (a reference to an
    optional, a reference to a sequence). BORROWED_INNER is a container the
    view owns holding references (an optional of a reference, a sequence of
    references).
    """

    OWNED = "owned"
    BORROWED = "borrowed"
    BORROWED_INNER = "borrowed_inner"


class Cardinality(Enum):
    """Single value or ordered sequence of values."""

    SINGLE = "single"
    SEQUENCE = "sequence"


class Optionality(Enum):
    """Whether the wrapped value may be absent."""

    REQUIRED = "required"
    OPTIONAL = "optional"
