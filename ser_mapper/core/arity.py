"""Record arity helper.

Counts the declared fields of a mapping once, at build time, so that the
record written at serialization time is sized from the declaration rather
than from a runtime container.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ser_mapper.core.exceptions import EmptyMappingError


def count_fields(fields: Sequence[Any], target_name: str = "<mapping>") -> int:
    """Return the number of declared fields.

    A single remaining field counts as 1; otherwise the count is 1 plus the
    count of the remaining tail.

    Raises:
        EmptyMappingError: If *fields* is empty. Every mapping needs at
            least one field.
    """
    if not fields:
        raise EmptyMappingError(target_name)
    return _count_from(fields, 0)


def _count_from(fields: Sequence[Any], start: int) -> int:
    if start == len(fields) - 1:
        return 1
    return 1 + _count_from(fields, start + 1)
