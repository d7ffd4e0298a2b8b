"""Per-device card models for a dashboard."""

from __future__ import annotations

from dataclasses import dataclass

from pysmarthome.models.device import Device, DeviceType
from pysmarthome.state.bus import Subscription
from pysmarthome.state.decoder import decode_color
from pysmarthome.state.events import DevicesLoaded, DeviceUpdated
from pysmarthome.state.registry import DeviceRegistry

_TYPE_LABELS: dict[DeviceType, str] = {
    DeviceType.LIGHT: "Light",
    DeviceType.THERMOSTAT: "Thermostat",
    DeviceType.DOOR: "Door",
    DeviceType.CAMERA: "Camera",
    DeviceType.SENSOR: "Sensor",
    DeviceType.SPEAKER: "Speaker",
}


def value_text(device: Device) -> str:
    if device.type == DeviceType.THERMOSTAT:
        return f"{device.value}°C"
    if device.type == DeviceType.LIGHT:
        return f"{device.value}%"
    return str(device.value)


@dataclass(frozen=True, slots=True)
class Card:
    device_id: str
    name: str
    type_label: str
    room: str
    status: bool
    status_text: str
    value_text: str
    accent: str
    """Light color when the card shows a lit light, else empty."""

    @classmethod
    def from_device(cls, device: Device) -> Card:
        decoded = decode_color(device.color)
        accent = ""
        if device.type == DeviceType.LIGHT and device.status and device.color and not decoded.is_command:
            accent = decoded.value
        return cls(
            device_id=device.id,
            name=device.name,
            type_label=_TYPE_LABELS.get(device.type, "Device"),
            room=device.room,
            status=device.status,
            status_text="ON" if device.status else "OFF",
            value_text=value_text(device),
            accent=accent,
        )


class CardBoard:
    """One :class:`Card` per device, in first-seen order."""

    def __init__(self, registry: DeviceRegistry) -> None:
        self._cards: dict[str, Card] = {}
        self._subscriptions: list[Subscription] = [
            registry.bus.subscribe(DevicesLoaded, self._on_loaded),
            registry.bus.subscribe(DeviceUpdated, self._on_updated),
        ]

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.release()
        self._subscriptions.clear()

    @property
    def cards(self) -> list[Card]:
        return list(self._cards.values())

    def get(self, device_id: str) -> Card | None:
        return self._cards.get(device_id)

    @property
    def active(self) -> int:
        return sum(1 for card in self._cards.values() if card.status)

    def _on_loaded(self, event: DevicesLoaded) -> None:
        for device in event.devices:
            self._cards[device.id] = Card.from_device(device)

    def _on_updated(self, event: DeviceUpdated) -> None:
        self._cards[event.device.id] = Card.from_device(event.device)
