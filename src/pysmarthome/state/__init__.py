"""State layer.

This package is the single source of truth for device state: it merges
snapshots and updates, computes per-field changes, resolves name
bindings and fans typed events out to subscribers.
"""

from pysmarthome.state.bus import DispatchBus, Subscription
from pysmarthome.state.decoder import ColorKind, DecodedColor, decode_color, encode_command
from pysmarthome.state.diff import compute_changes, merge_record
from pysmarthome.state.events import ChangedFields, DevicesLoaded, DeviceUpdated
from pysmarthome.state.identity import (
    Binding,
    Capability,
    Colorable,
    Commandable,
    Dimmable,
    IdentityResolver,
    Reaction,
    Switchable,
)
from pysmarthome.state.registry import DeviceRegistry

__all__ = [
    "Binding",
    "Capability",
    "ChangedFields",
    "ColorKind",
    "Colorable",
    "Commandable",
    "DecodedColor",
    "DeviceRegistry",
    "DeviceUpdated",
    "DevicesLoaded",
    "Dimmable",
    "DispatchBus",
    "IdentityResolver",
    "Reaction",
    "Subscription",
    "Switchable",
    "compute_changes",
    "decode_color",
    "encode_command",
    "merge_record",
]
