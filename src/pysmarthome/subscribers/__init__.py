"""Headless registry subscribers.

Each subscriber attaches to a registry's dispatch bus on construction
and detaches on ``close()``.
"""

from pysmarthome.subscribers.bridge import ObjectBridge
from pysmarthome.subscribers.cards import Card, CardBoard
from pysmarthome.subscribers.rooms import RoomAggregator, RoomState
from pysmarthome.subscribers.visuals import VisualState, VisualUpdater

__all__ = [
    "Card",
    "CardBoard",
    "ObjectBridge",
    "RoomAggregator",
    "RoomState",
    "VisualState",
    "VisualUpdater",
]
