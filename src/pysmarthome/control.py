"""Outbound command seam.

The state layer never talks to the network. Anything that wants to
change a device goes through a :class:`CommandSink`, a fire-and-forget
interface implemented by :class:`~pysmarthome.client.SmartHomeClient`
(and by simple recorders in tests).
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from pysmarthome.state.registry import DeviceRegistry

_logger = logging.getLogger(__name__)


@runtime_checkable
class CommandSink(Protocol):
    """Fire-and-forget command requests.

    Implementations must return immediately. The registry is only
    updated when the server pushes the resulting change back.
    """

    def request_toggle(self, device_id: str) -> None: ...

    def request_set_value(self, device_id: str, value: int) -> None: ...

    def request_refresh_all(self) -> None: ...

    def request_all_off(self) -> None: ...

    def request_turn_on(self, device_id: str) -> None: ...

    def request_turn_off(self, device_id: str) -> None: ...

    def request_set_color(self, device_id: str, color: str) -> None: ...

    def request_speaker_command(self, device_id: str, token: str) -> None: ...


class DeviceControls:
    """Room- and house-level controls built on a sink and the registry."""

    def __init__(self, sink: CommandSink, registry: DeviceRegistry) -> None:
        self._sink = sink
        self._registry = registry

    def toggle(self, device_id: str) -> None:
        self._sink.request_toggle(device_id)

    def set_value(self, device_id: str, value: int) -> None:
        self._sink.request_set_value(device_id, value)

    def refresh_all(self) -> None:
        self._sink.request_refresh_all()

    def turn_off_all(self) -> None:
        self._sink.request_all_off()

    def turn_on_room(self, room: str) -> int:
        """Request ON for every device of *room*.

        Returns the number of requests issued.
        """
        targets = [d.id for d in self._registry.get_devices_by_room(room)]
        for device_id in targets:
            self._sink.request_turn_on(device_id)
        _logger.debug("Room %r: %d turn-on requests", room, len(targets))
        return len(targets)

    def turn_off_room(self, room: str) -> int:
        """Request OFF for every device of *room*."""
        targets = [d.id for d in self._registry.get_devices_by_room(room)]
        for device_id in targets:
            self._sink.request_turn_off(device_id)
        _logger.debug("Room %r: %d turn-off requests", room, len(targets))
        return len(targets)
