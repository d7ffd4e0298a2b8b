"""Field-level diffing of device records.

The three flags are independent. Each drives a different
downstream effect (actuation, dimming, color/command).
"""

from __future__ import annotations

from pysmarthome.models.device import Device
from pysmarthome.state.events import ChangedFields


def compute_changes(previous: Device | None, incoming: Device) -> ChangedFields:
    """Compare *incoming* against the stored *previous* record.

    An unseen device reports status and value as changed. An empty
    incoming color means "not specified" and never counts as a change,
    for new devices too.
    """
    if previous is None:
        return ChangedFields.for_new_device(incoming)
    return ChangedFields(
        status=previous.status != incoming.status,
        value=previous.value != incoming.value,
        color=bool(incoming.color) and previous.color != incoming.color,
    )


def merge_record(previous: Device | None, incoming: Device) -> Device:
    """Return the record to store for *incoming*.

    Updates carry full records so every field is replaced, except that
    an empty color keeps the previously known one.
    """
    if previous is None or incoming.color or not previous.color:
        return incoming
    return incoming.model_copy(update={"color": previous.color})
