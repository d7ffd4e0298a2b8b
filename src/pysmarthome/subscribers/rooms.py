"""Per-room aggregate state."""

from __future__ import annotations

from dataclasses import dataclass

from pysmarthome._constants import UNASSIGNED_ROOM
from pysmarthome.models.device import Device, DeviceType
from pysmarthome.state.bus import Subscription
from pysmarthome.state.decoder import decode_color
from pysmarthome.state.events import DevicesLoaded, DeviceUpdated
from pysmarthome.state.registry import DeviceRegistry


@dataclass(frozen=True, slots=True)
class RoomState:
    room: str
    device_ids: tuple[str, ...]
    lit: bool
    """At least one light in the room is on."""
    color: str
    """Color of the first lit light that carries one, else empty."""
    active_count: int


def _room_key(device: Device) -> str:
    return device.room.strip().lower() or UNASSIGNED_ROOM


def _summarize(room: str, devices: list[Device]) -> RoomState:
    lit_lights = [d for d in devices if d.type == DeviceType.LIGHT and d.status]
    color = ""
    for light in lit_lights:
        decoded = decode_color(light.color)
        if light.color and not decoded.is_command:
            color = decoded.value
            break
    return RoomState(
        room=room,
        device_ids=tuple(d.id for d in devices),
        lit=bool(lit_lights),
        color=color,
        active_count=sum(1 for d in devices if d.status),
    )


class RoomAggregator:
    """Keeps a :class:`RoomState` per room, recomputed from the registry."""

    def __init__(self, registry: DeviceRegistry) -> None:
        self._registry = registry
        self._rooms: dict[str, RoomState] = {}
        self._subscriptions: list[Subscription] = [
            registry.bus.subscribe(DevicesLoaded, self._on_loaded),
            registry.bus.subscribe(DeviceUpdated, self._on_updated),
        ]

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.release()
        self._subscriptions.clear()

    @property
    def rooms(self) -> dict[str, RoomState]:
        return dict(self._rooms)

    def get(self, room: str) -> RoomState | None:
        return self._rooms.get(room.strip().lower() or UNASSIGNED_ROOM)

    def _rebuild(self) -> None:
        grouped: dict[str, list[Device]] = {}
        for device in self._registry.get_all_devices():
            grouped.setdefault(_room_key(device), []).append(device)
        self._rooms = {room: _summarize(room, devices) for room, devices in grouped.items()}

    def _on_loaded(self, event: DevicesLoaded) -> None:
        self._rebuild()

    def _on_updated(self, event: DeviceUpdated) -> None:
        # A device may have moved rooms, so every room is recomputed.
        self._rebuild()
