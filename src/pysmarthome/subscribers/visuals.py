"""Per-device visual state derived from device type."""

from __future__ import annotations

from dataclasses import dataclass, replace

from pysmarthome.models.device import Device, DeviceType
from pysmarthome.state.bus import Subscription
from pysmarthome.state.decoder import decode_color
from pysmarthome.state.events import DevicesLoaded, DeviceUpdated
from pysmarthome.state.registry import DeviceRegistry


@dataclass(frozen=True, slots=True)
class VisualState:
    """What a renderer needs to draw one device.

    ``intensity`` is the light level in ``[0, 1]`` (0 when off).
    ``setpoint`` is the thermostat target. ``open`` is a door's status.
    ``active`` is the on/off state for every other type.
    """

    device_id: str
    type: DeviceType
    active: bool = False
    intensity: float = 0.0
    open: bool = False
    setpoint: int = 0
    color: str = ""
    last_command: str = ""


def _visual_for(device: Device, previous: VisualState | None) -> VisualState:
    state = previous or VisualState(device_id=device.id, type=device.type)
    decoded = decode_color(device.color)
    state = replace(
        state,
        type=device.type,
        active=device.status,
        color=decoded.value if device.color and not decoded.is_command else state.color,
    )
    if device.type == DeviceType.LIGHT:
        return replace(state, intensity=min(device.value, 100) / 100 if device.status else 0.0)
    if device.type == DeviceType.DOOR:
        return replace(state, open=device.status)
    if device.type == DeviceType.THERMOSTAT:
        return replace(state, setpoint=device.value)
    return state


class VisualUpdater:
    """Maintains a :class:`VisualState` per device id."""

    def __init__(self, registry: DeviceRegistry) -> None:
        self._states: dict[str, VisualState] = {}
        self._subscriptions: list[Subscription] = [
            registry.bus.subscribe(DevicesLoaded, self._on_loaded),
            registry.bus.subscribe(DeviceUpdated, self._on_updated),
        ]

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.release()
        self._subscriptions.clear()

    def get(self, device_id: str) -> VisualState | None:
        return self._states.get(device_id)

    @property
    def states(self) -> dict[str, VisualState]:
        return dict(self._states)

    def _on_loaded(self, event: DevicesLoaded) -> None:
        for device in event.devices:
            self._states[device.id] = _visual_for(device, self._states.get(device.id))

    def _on_updated(self, event: DeviceUpdated) -> None:
        device = event.device
        state = _visual_for(device, self._states.get(device.id))
        if event.decoded is not None and event.decoded.is_command:
            state = replace(state, last_command=event.decoded.value)
        self._states[device.id] = state
