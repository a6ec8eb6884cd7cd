"""Capability registry - one serialization capability per (target, source) pair.

Keys:
    ("UserResponse", User)  -> capability writing User as UserResponse
    ("UserSummary", User)   -> a second, independent shape over User
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Union

from ser_mapper.core.exceptions import CapabilityNotFoundError, DuplicateCapabilityError

if TYPE_CHECKING:
    from ser_mapper.core.capability import CustomCapability, SerializationCapability

    Capability = Union[SerializationCapability, CustomCapability]

logger = logging.getLogger(__name__)


class CapabilityRegistry:
    """Holds the serialization capabilities generated for each source type.

    Capabilities are registered once, at build time, and only read
    afterwards. Registering a second capability for the same
    (target_name, source_type) pair is a build-time conflict.
    """

    def __init__(self) -> None:
        self._capabilities: dict[tuple[str, type], Capability] = {}

    def register(self, capability: Capability) -> None:
        """Register *capability* under its (target_name, source_type) key.

        Raises:
            DuplicateCapabilityError: If the pair is already registered.
        """
        key = capability.key
        if key in self._capabilities:
            raise DuplicateCapabilityError(
                capability.target_name, qualified_name(capability.source_type)
            )
        self._capabilities[key] = capability
        logger.debug(
            "Registered capability %s for %s",
            capability.target_name,
            qualified_name(capability.source_type),
        )

    def get(self, target_name: str, source_type: type) -> Capability:
        """Look up the capability for a (target_name, source_type) pair.

        Raises:
            CapabilityNotFoundError: If nothing is registered for the pair.
        """
        try:
            return self._capabilities[(target_name, source_type)]
        except KeyError:
            raise CapabilityNotFoundError(target_name, qualified_name(source_type)) from None

    def has(self, target_name: str, source_type: type) -> bool:
        """Check if a capability is registered for the pair."""
        return (target_name, source_type) in self._capabilities

    def for_source(self, source_type: type) -> list[Capability]:
        """All capabilities registered for *source_type*, in registration order."""
        return [cap for (_, src), cap in self._capabilities.items() if src is source_type]

    @property
    def target_names(self) -> list[str]:
        """List all registered target names, sorted alphabetically."""
        return sorted({name for name, _ in self._capabilities})

    def __len__(self) -> int:
        """Number of registered capabilities."""
        return len(self._capabilities)


def qualified_name(tp: type) -> str:
    """Module-qualified class name used in registry and conflict messages."""
    return f"{tp.__module__}.{tp.__qualname__}"


default_registry = CapabilityRegistry()
