"""Generator configuration.

GeneratorConfig is a Pydantic model for type-safe generator settings.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator


class GeneratorConfig(BaseModel):
    """Configuration for view generation."""

    model_config = ConfigDict(frozen=True)

    wrapper_prefix: str = "_"
    shape_backend: Literal["dataclass", "pydantic"] = "dataclass"
    check_transform_types: bool = True
    strict_paths: bool = True

    @field_validator("wrapper_prefix")
    @classmethod
    def _prefix_is_identifier_safe(cls, value: str) -> str:
        if value and not (value + "X").isidentifier():
            raise ValueError(f"wrapper_prefix {value!r} cannot start a Python identifier")
        return value


DEFAULT_CONFIG = GeneratorConfig()
