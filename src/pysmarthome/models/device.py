"""Device model."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from pysmarthome._constants import COMMAND_PREFIX
from pysmarthome.ingestion.normalize import decode_embedded_json, non_negative_or_zero, safe_bool
from pysmarthome.models._base import SmartHomeBaseModel, SmartHomeEnum


class DeviceType(SmartHomeEnum):
    """Device category; decides which optional fields are meaningful."""

    LIGHT = "light"
    THERMOSTAT = "thermostat"
    DOOR = "door"
    CAMERA = "camera"
    SENSOR = "sensor"
    SPEAKER = "speaker"
    OTHER = "other"


class Device(SmartHomeBaseModel):
    """Last-known state of a single device.

    Mapped from the flat device objects of ``GET /api/devices`` and of
    ``DEVICE_CHANGED`` / ``DEVICE_UPDATED`` pushes.
    """

    id: str
    """Server-assigned identifier, primary key of the registry."""
    name: str = ""
    """Display name (e.g. ``"Main Light"``)."""
    type: DeviceType = DeviceType.OTHER
    """Device category."""
    room: str = ""
    """Free-form room label; may be empty."""
    status: bool = False
    """On/off state."""
    value: int = 0
    """Type-dependent value (brightness 0-100, setpoint...). Never negative."""
    color: str = ""
    """Empty, a color (``"#FF0000"``) or a command token (``"CMD:PLAY"``)."""
    tracks: tuple[str, ...] = Field(default_factory=tuple)
    """Speaker playlist, informational only."""

    @property
    def carries_command(self) -> bool:
        """Whether the color channel currently holds a command token."""
        return self.color.startswith(COMMAND_PREFIX)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> str:
        text = "" if value is None else str(value).strip()
        if not text:
            raise ValueError("id must be non-empty")
        return text

    @field_validator("name", "room", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return str(value).strip()

    @field_validator("color", mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> str:
        return str(value).strip()

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> DeviceType:
        return DeviceType(str(value))

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> bool:
        return safe_bool(value)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> int:
        return non_negative_or_zero(value)

    @field_validator("tracks", mode="before")
    @classmethod
    def _coerce_tracks(cls, value: Any) -> tuple[str, ...]:
        decoded = decode_embedded_json(value)
        if isinstance(decoded, (list, tuple)):
            return tuple(str(item) for item in decoded if item is not None)
        return ()
