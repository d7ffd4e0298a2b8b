"""Deterministic in-memory device registry.

This is the only component allowed to mutate device state. Given the
same sequence of snapshots and updates it produces the same records and
the same events.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from pysmarthome._constants import UNASSIGNED_ROOM
from pysmarthome.exceptions import RegistryClosedError
from pysmarthome.models.device import Device, DeviceType
from pysmarthome.state.bus import DispatchBus
from pysmarthome.state.decoder import decode_color
from pysmarthome.state.diff import compute_changes, merge_record
from pysmarthome.state.events import DevicesLoaded, DeviceUpdated
from pysmarthome.state.identity import IdentityResolver

_logger = logging.getLogger(__name__)


def _name_key(name: str) -> str:
    return name.strip().lower()


def _room_key(room: str) -> str:
    return room.strip().lower() or UNASSIGNED_ROOM


class DeviceRegistry:
    """Last-known state of every device, keyed by server id.

    Snapshots and updates are linearized under one re-entrant lock,
    including the event fan-out they trigger.
    """

    def __init__(
        self,
        *,
        bus: DispatchBus | None = None,
        identity: IdentityResolver | None = None,
    ) -> None:
        self.bus = bus if bus is not None else DispatchBus()
        self.identity = identity if identity is not None else IdentityResolver()
        self._lock = threading.RLock()
        self._devices: dict[str, Device] = {}
        self._by_name: dict[str, str] = {}
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Tear the registry down; later snapshots/updates raise."""
        with self._lock:
            self._closed = True

    def clear(self) -> None:
        """Drop every record and disarm bindings (declarations are kept)."""
        with self._lock:
            self._devices.clear()
            self._by_name.clear()
            self.identity.disarm_all()

    def _require_open(self) -> None:
        if self._closed:
            raise RegistryClosedError("Device registry is closed")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _store(self, record: Device) -> None:
        previous = self._devices.get(record.id)
        self._devices[record.id] = record
        if previous is not None and _name_key(previous.name) != _name_key(record.name):
            key = _name_key(previous.name)
            if self._by_name.get(key) == record.id:
                # Fall back to the latest remaining holder of the old name.
                holder = next(
                    (d.id for d in reversed(self._devices.values()) if _name_key(d.name) == key),
                    None,
                )
                if holder is None:
                    del self._by_name[key]
                else:
                    self._by_name[key] = holder
        key = _name_key(record.name)
        if key:
            self._by_name[key] = record.id

    def apply_snapshot(self, devices: Iterable[Device]) -> list[Device]:
        """Merge a full device list and announce it once.

        Devices missing from the snapshot are kept. No per-device update
        events are emitted. Returns the snapshot's devices as stored.
        """
        with self._lock:
            self._require_open()
            stored: dict[str, Device] = {}
            for device in devices:
                record = merge_record(self._devices.get(device.id), device)
                self._store(record)
                # A repeated id in one snapshot keeps its first position.
                stored[record.id] = record
            loaded = list(stored.values())
            self.identity.resolve(loaded)
            _logger.debug("Snapshot applied: %d devices (%d known)", len(loaded), len(self._devices))
            self.bus.publish(DevicesLoaded(devices=tuple(loaded)))
            return loaded

    def apply_update(self, device: Device) -> DeviceUpdated | None:
        """Apply a single-device update.

        Fires and returns one :class:`DeviceUpdated` when at least one
        field changed; returns ``None`` otherwise.
        """
        with self._lock:
            self._require_open()
            previous = self._devices.get(device.id)
            changed = compute_changes(previous, device)
            record = merge_record(previous, device)
            self._store(record)

            if not changed.has_changes:
                _logger.debug("Update for id=%s changed nothing", device.id)
                return None

            event = DeviceUpdated(
                device=record,
                changed=changed,
                decoded=decode_color(record.color) if changed.color else None,
            )
            _logger.debug(
                "Device id=%s updated status=%s value=%s color=%s",
                record.id,
                changed.status,
                changed.value,
                changed.color,
            )
            self.bus.publish(event)
            return event

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_by_id(self, device_id: str) -> Device | None:
        with self._lock:
            return self._devices.get(device_id)

    def get_by_name(self, name: str) -> Device | None:
        """Case-insensitive lookup; the most recently indexed device wins."""
        with self._lock:
            device_id = self._by_name.get(_name_key(name))
            return self._devices.get(device_id) if device_id is not None else None

    def get_all_devices(self) -> list[Device]:
        with self._lock:
            return list(self._devices.values())

    def get_devices_by_room(self, room: str) -> list[Device]:
        key = _room_key(room)
        with self._lock:
            return [d for d in self._devices.values() if _room_key(d.room) == key]

    def get_devices_by_type(self, device_type: DeviceType | str) -> list[Device]:
        wanted = DeviceType(str(device_type))
        with self._lock:
            return [d for d in self._devices.values() if d.type == wanted]

    def get_rooms(self) -> list[str]:
        """Distinct rooms in first-seen order, labelled as first seen.

        Rooms differing only by case or whitespace are one room; devices
        without a room are listed as ``UNASSIGNED_ROOM``.
        """
        with self._lock:
            labels: dict[str, str] = {}
            for device in self._devices.values():
                labels.setdefault(_room_key(device.room), device.room.strip() or UNASSIGNED_ROOM)
            return list(labels.values())

    def get_active_count(self) -> int:
        with self._lock:
            return sum(1 for d in self._devices.values() if d.status)

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)

    def __contains__(self, device_id: object) -> bool:
        with self._lock:
            return device_id in self._devices
