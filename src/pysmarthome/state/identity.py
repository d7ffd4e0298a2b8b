"""Configuration-time bindings resolved to runtime device ids.

Consumers declare targets by display name before any device is known.
Each snapshot arms the bindings whose name matches (case-insensitively)
and indexes them by server id so updates route in O(1).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, runtime_checkable

from pysmarthome.models.device import Device

_logger = logging.getLogger(__name__)


@runtime_checkable
class Switchable(Protocol):
    def turn_on(self) -> None: ...

    def turn_off(self) -> None: ...


@runtime_checkable
class Dimmable(Protocol):
    def set_value(self, value: int) -> None: ...


@runtime_checkable
class Colorable(Protocol):
    def set_color(self, color: str) -> None: ...


@runtime_checkable
class Commandable(Protocol):
    def run_command(self, command: str) -> None: ...


class Capability(StrEnum):
    SWITCHABLE = "switchable"
    DIMMABLE = "dimmable"
    COLORABLE = "colorable"
    COMMANDABLE = "commandable"


class Reaction(StrEnum):
    """Which changed-flag a binding reacts to."""

    STATUS = "status"
    VALUE = "value"
    COLOR = "color"


_CAPABILITY_PROTOCOLS: dict[Capability, type] = {
    Capability.SWITCHABLE: Switchable,
    Capability.DIMMABLE: Dimmable,
    Capability.COLORABLE: Colorable,
    Capability.COMMANDABLE: Commandable,
}


def detect_capabilities(target: object) -> frozenset[Capability]:
    """Return the capability interfaces *target* implements."""
    return frozenset(cap for cap, proto in _CAPABILITY_PROTOCOLS.items() if isinstance(target, proto))


def default_reactions(capabilities: Iterable[Capability]) -> frozenset[Reaction]:
    caps = set(capabilities)
    reactions: set[Reaction] = set()
    if Capability.SWITCHABLE in caps:
        reactions.add(Reaction.STATUS)
    if Capability.DIMMABLE in caps:
        reactions.add(Reaction.VALUE)
    if caps & {Capability.COLORABLE, Capability.COMMANDABLE}:
        reactions.add(Reaction.COLOR)
    return frozenset(reactions)


def _name_key(name: str) -> str:
    return name.strip().lower()


@dataclass(slots=True, eq=False)
class Binding:
    """A declared link between a device name and a target object.

    ``device_id`` stays ``None`` (inert) until a snapshot resolves it.
    """

    name: str
    target: object
    capabilities: frozenset[Capability]
    reactions: frozenset[Reaction]
    device_id: str | None = field(default=None)

    @property
    def armed(self) -> bool:
        return self.device_id is not None

    def reacts_to(self, reaction: Reaction) -> bool:
        return reaction in self.reactions


class IdentityResolver:
    """Two indexes over declared bindings: by display name and by device id."""

    def __init__(self) -> None:
        self._bindings: list[Binding] = []
        self._by_name: dict[str, Binding] = {}
        self._by_id: dict[str, Binding] = {}

    @property
    def bindings(self) -> list[Binding]:
        return list(self._bindings)

    def declare(
        self,
        name: str,
        target: object,
        *,
        reactions: Iterable[Reaction | str] | None = None,
    ) -> Binding:
        """Declare a binding; it is resolved on the next snapshot.

        Capabilities are taken from the interfaces *target* implements.
        Reactions default to every flag those capabilities can act on.
        """
        key = _name_key(name)
        if not key:
            raise ValueError("binding name must be non-empty")
        capabilities = detect_capabilities(target)
        chosen = (
            frozenset(Reaction(r) for r in reactions) if reactions is not None else default_reactions(capabilities)
        )
        binding = Binding(name=name.strip(), target=target, capabilities=capabilities, reactions=chosen)
        self._bindings.append(binding)
        # Last declaration wins the name.
        self._by_name[key] = binding
        return binding

    def resolve(self, devices: Iterable[Device]) -> list[Binding]:
        """Arm bindings whose name matches a device in *devices*.

        Returns the bindings still inert afterwards; each one is logged
        as a warning.
        """
        for device in devices:
            binding = self._by_name.get(_name_key(device.name))
            if binding is None:
                continue
            if binding.device_id is not None and binding.device_id != device.id:
                self._by_id.pop(binding.device_id, None)
            stale = self._by_id.get(device.id)
            if stale is not None and stale is not binding:
                stale.device_id = None
            binding.device_id = device.id
            self._by_id[device.id] = binding
            _logger.debug("Binding %r resolved to device id=%s", binding.name, device.id)

        unresolved = [binding for binding in self._bindings if not binding.armed]
        for binding in unresolved:
            _logger.warning("Binding %r matches no known device; it stays inert", binding.name)
        return unresolved

    def binding_for_id(self, device_id: str) -> Binding | None:
        return self._by_id.get(device_id)

    def binding_for_name(self, name: str) -> Binding | None:
        return self._by_name.get(_name_key(name))

    def disarm_all(self) -> None:
        for binding in self._bindings:
            binding.device_id = None
        self._by_id.clear()
