"""Synchronous typed publish/subscribe.

Fan-out is ordered and completes before :meth:`DispatchBus.publish`
returns. A failing handler is logged and skipped; it never stops the
remaining handlers.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pysmarthome.state.events import DevicesLoaded, DeviceUpdated

_logger = logging.getLogger(__name__)

E = TypeVar("E", DevicesLoaded, DeviceUpdated)


@dataclass(slots=True, eq=False)
class _Handler:
    event_type: type[Any]
    callback: Callable[[Any], None]


class Subscription(Generic[E]):
    """Handle returned by :meth:`DispatchBus.subscribe`.

    Usable as a context manager; :meth:`release` is idempotent.
    """

    def __init__(self, bus: DispatchBus, handler: _Handler) -> None:
        self._bus = bus
        self._handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def release(self) -> None:
        if not self._active:
            return
        self._active = False
        self._bus._remove(self._handler)  # noqa: SLF001

    def __enter__(self) -> Subscription[E]:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.release()


class DispatchBus:
    """Named events (devices-loaded, device-updated) and their subscribers."""

    def __init__(self) -> None:
        self._handlers: list[_Handler] = []
        self._lock = threading.Lock()
        self._fault_count = 0

    @property
    def fault_count(self) -> int:
        """Number of handler failures isolated so far."""
        return self._fault_count

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Subscription[E]:
        if event_type not in (DevicesLoaded, DeviceUpdated):
            raise TypeError(f"Unsupported event type: {event_type!r}")
        entry = _Handler(event_type=event_type, callback=handler)
        with self._lock:
            self._handlers.append(entry)
        return Subscription(self, entry)

    def subscriber_count(self, event_type: type[Any] | None = None) -> int:
        with self._lock:
            if event_type is None:
                return len(self._handlers)
            return sum(1 for h in self._handlers if h.event_type is event_type)

    def publish(self, event: DevicesLoaded | DeviceUpdated) -> int:
        """Deliver *event* to every current subscriber of its type.

        Returns the number of handlers that completed without raising.
        """
        with self._lock:
            targets = [h for h in self._handlers if h.event_type is type(event)]
        if not targets:
            return 0

        delivered = 0
        for handler in targets:
            try:
                handler.callback(event)
            except Exception:
                with self._lock:
                    self._fault_count += 1
                _logger.warning(
                    "Subscriber %r failed handling %s",
                    handler.callback,
                    type(event).__name__,
                    exc_info=True,
                )
                continue
            delivered += 1
        return delivered

    def _remove(self, handler: _Handler) -> None:
        with self._lock:
            self._handlers = [h for h in self._handlers if h is not handler]
