"""Server message ingestion.

This module translates server payloads (REST device lists, realtime
pushes) into typed device records and routes them into the registry:
lists become snapshots, single devices become updates.
"""

from __future__ import annotations

import json
import logging
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pysmarthome.ingestion.normalize import decode_embedded_json
from pysmarthome.models.device import Device
from pysmarthome.state.events import DeviceUpdated
from pysmarthome.state.registry import DeviceRegistry

_logger = logging.getLogger(__name__)


class MessageAction(StrEnum):
    DEVICES_LIST = "DEVICES_LIST"
    DEVICE_UPDATED = "DEVICE_UPDATED"
    DEVICE_CHANGED = "DEVICE_CHANGED"
    DEVICE_INFO = "DEVICE_INFO"
    PONG = "PONG"
    REGISTERED = "REGISTERED"
    UNKNOWN = "UNKNOWN"


_UPDATE_ACTIONS = frozenset({MessageAction.DEVICE_UPDATED, MessageAction.DEVICE_CHANGED, MessageAction.DEVICE_INFO})


class ServerMessage(BaseModel):
    """A parsed server message."""

    model_config = ConfigDict(frozen=True)

    action: MessageAction
    device: Device | None = None
    devices: tuple[Device, ...] | None = None
    changed_by: str = ""
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_snapshot(self) -> bool:
        return self.devices is not None

    @property
    def is_update(self) -> bool:
        return self.device is not None


def parse_device(payload: Any) -> Device | None:
    """Parse one device object; returns ``None`` for unusable payloads."""
    data = decode_embedded_json(payload)
    if not isinstance(data, dict):
        return None
    try:
        return Device.model_validate(data)
    except ValidationError:
        _logger.debug("Skipping malformed device payload keys=%s", sorted(data), exc_info=True)
        return None


def parse_device_list(payload: Any) -> list[Device]:
    """Parse a list of device objects, dropping unusable entries."""
    data = decode_embedded_json(payload)
    if not isinstance(data, list):
        return []
    devices: list[Device] = []
    for item in data:
        device = parse_device(item)
        if device is not None:
            devices.append(device)
    return devices


def _action(value: Any) -> MessageAction:
    text = str(value or "").strip().upper()
    try:
        return MessageAction(text)
    except ValueError:
        return MessageAction.UNKNOWN


def parse_message(payload: str | bytes | dict[str, Any]) -> ServerMessage | None:
    """Parse a realtime/TCP message envelope.

    Returns ``None`` when *payload* is not a JSON object.
    """
    data: Any = payload
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError):
            _logger.debug("Ignoring non-JSON message", exc_info=True)
            return None
    if not isinstance(data, dict):
        return None

    action = _action(data.get("action"))
    device: Device | None = None
    devices: tuple[Device, ...] | None = None

    if action == MessageAction.DEVICES_LIST:
        devices = tuple(parse_device_list(data.get("devices")))
    elif action in _UPDATE_ACTIONS:
        device = parse_device(data.get("device"))

    return ServerMessage(
        action=action,
        device=device,
        devices=devices,
        changed_by=str(data.get("changedBy") or data.get("source") or ""),
        raw=data,
    )


def apply_message(registry: DeviceRegistry, message: ServerMessage) -> list[Device] | DeviceUpdated | None:
    """Route *message* into *registry*.

    Device lists are applied as snapshots and single devices as updates.
    Other actions are ignored.
    """
    if message.devices is not None:
        return registry.apply_snapshot(message.devices)
    if message.device is not None:
        return registry.apply_update(message.device)
    return None
