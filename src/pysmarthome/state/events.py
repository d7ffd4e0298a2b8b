"""Typed dispatch events.

Every notification leaving the registry is one of these payloads. They
are frozen so a subscriber cannot alter what the next subscriber sees.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pysmarthome.models.device import Device
from pysmarthome.state.decoder import DecodedColor


class ChangedFields(BaseModel):
    """Per-field change flags computed by the diff engine."""

    model_config = ConfigDict(frozen=True)

    status: bool = False
    value: bool = False
    color: bool = False

    @property
    def has_changes(self) -> bool:
        return self.status or self.value or self.color

    @classmethod
    def for_new_device(cls, device: Device) -> ChangedFields:
        """Flags for a first sighting; an empty color is still not a change."""
        return cls(status=True, value=True, color=bool(device.color))


class DevicesLoaded(BaseModel):
    """Fired once per applied snapshot."""

    model_config = ConfigDict(frozen=True)

    devices: tuple[Device, ...] = Field(default_factory=tuple)


class DeviceUpdated(BaseModel):
    """Fired once per update that changed at least one field.

    ``device`` is the full post-update record. ``decoded`` is set only
    when ``changed.color`` is true.
    """

    model_config = ConfigDict(frozen=True)

    device: Device
    changed: ChangedFields
    decoded: DecodedColor | None = None


SmartHomeEvent = DevicesLoaded | DeviceUpdated
