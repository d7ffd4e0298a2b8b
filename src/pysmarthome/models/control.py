"""Remote control command models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, Field

from pysmarthome.models._base import SmartHomeBaseModel


class ControlCommand(StrEnum):
    """Commands accepted by ``POST /api/control``."""

    ON = "ON"
    OFF = "OFF"
    TOGGLE = "TOGGLE"
    SET_VALUE = "SET_VALUE"
    SET_COLOR = "SET_COLOR"
    SPEAKER_CMD = "SPEAKER_CMD"


class ControlAck(SmartHomeBaseModel):
    """Server acknowledgement of a control command.

    The registry is not updated from this ack; the realtime push that
    follows every accepted command is the confirmation.
    """

    status: str = ""
    device_id: str = Field(default="", validation_alias=AliasChoices("deviceId", "device_id"))
    new_status: bool | None = Field(default=None, validation_alias=AliasChoices("newStatus", "new_status"))
    new_value: int | None = Field(default=None, validation_alias=AliasChoices("newValue", "new_value"))

    @property
    def success(self) -> bool:
        return self.status.upper() == "OK"
