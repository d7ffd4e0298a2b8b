"""Base model and enum for smart-home server payloads.

Every wire model inherits from :class:`SmartHomeBaseModel` which
provides:

* ``frozen=True`` so records handed to subscribers cannot be mutated.
* ``extra="ignore"`` so server-side additions never break parsing.
* A ``model_validator(mode="before")`` that drops ``None`` values so
  the field default is used instead of a null.

Category enums inherit from :class:`SmartHomeEnum` which resolves any
unmapped value to an ``OTHER`` member instead of raising.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class SmartHomeEnum(enum.StrEnum):
    """Base for string category enums.

    Every subclass **must** define ``OTHER``. Lookups are
    case-insensitive and values without a mapped member resolve to
    ``OTHER``.
    """

    @classmethod
    def _missing_(cls, value: object) -> SmartHomeEnum:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        other: SmartHomeEnum = cls.OTHER  # type: ignore[attr-defined]
        return other


class SmartHomeBaseModel(BaseModel):
    """Base for server payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop ``None`` values so the declared defaults apply."""
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}
