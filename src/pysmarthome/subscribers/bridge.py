"""Bridge between device updates and bound local objects."""

from __future__ import annotations

import logging

from pysmarthome.control import CommandSink
from pysmarthome.state.bus import Subscription
from pysmarthome.state.events import DevicesLoaded, DeviceUpdated
from pysmarthome.state.identity import (
    Binding,
    Colorable,
    Commandable,
    Dimmable,
    Reaction,
    Switchable,
)
from pysmarthome.state.registry import DeviceRegistry

_logger = logging.getLogger(__name__)


class ObjectBridge:
    """Drive bound objects from registry events.

    Bindings are declared on ``registry.identity``. On a snapshot the
    bridge only reports how many bindings resolved; bound objects are
    not actuated on initial load. On an update it calls the capability
    method matching each changed flag the binding reacts to.
    """

    def __init__(self, registry: DeviceRegistry, sink: CommandSink | None = None) -> None:
        self._registry = registry
        self._sink = sink
        self._subscriptions: list[Subscription] = [
            registry.bus.subscribe(DevicesLoaded, self._on_loaded),
            registry.bus.subscribe(DeviceUpdated, self._on_updated),
        ]

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.release()
        self._subscriptions.clear()

    def toggle(self, name: str) -> bool:
        """Request a toggle for the device bound to *name*.

        Returns ``False`` (and sends nothing) when the binding is unknown
        or inert, or when no sink is attached.
        """
        binding = self._registry.identity.binding_for_name(name)
        if binding is None or binding.device_id is None or self._sink is None:
            _logger.debug("Toggle for %r ignored: no armed binding", name)
            return False
        self._sink.request_toggle(binding.device_id)
        return True

    def _on_loaded(self, event: DevicesLoaded) -> None:
        armed = sum(1 for b in self._registry.identity.bindings if b.armed)
        _logger.debug("Bridge: %d bindings armed after loading %d devices", armed, len(event.devices))

    def _on_updated(self, event: DeviceUpdated) -> None:
        device = event.device
        binding = self._registry.identity.binding_for_id(device.id)
        if binding is None:
            return

        if event.changed.status and binding.reacts_to(Reaction.STATUS):
            self._apply_status(binding, device.status)
        if event.changed.value and binding.reacts_to(Reaction.VALUE) and isinstance(binding.target, Dimmable):
            binding.target.set_value(device.value)
        if event.changed.color and binding.reacts_to(Reaction.COLOR) and event.decoded is not None:
            target = binding.target
            if event.decoded.is_command:
                if isinstance(target, Commandable):
                    target.run_command(event.decoded.value)
            elif isinstance(target, Colorable):
                target.set_color(event.decoded.value)

    @staticmethod
    def _apply_status(binding: Binding, on: bool) -> None:
        target = binding.target
        if not isinstance(target, Switchable):
            return
        if on:
            target.turn_on()
        else:
            target.turn_off()
