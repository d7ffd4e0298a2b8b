"""Data models for smart-home server payloads."""

from pysmarthome.models._base import SmartHomeBaseModel, SmartHomeEnum
from pysmarthome.models.control import ControlAck, ControlCommand
from pysmarthome.models.device import Device, DeviceType
from pysmarthome.models.token import AuthToken

__all__ = [
    "AuthToken",
    "ControlAck",
    "ControlCommand",
    "Device",
    "DeviceType",
    "SmartHomeBaseModel",
    "SmartHomeEnum",
]
