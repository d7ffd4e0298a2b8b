from __future__ import annotations

import logging
import threading

import pytest

from pysmarthome.models.device import Device
from pysmarthome.state.bus import DispatchBus
from pysmarthome.state.events import ChangedFields, DevicesLoaded, DeviceUpdated


def _updated() -> DeviceUpdated:
    return DeviceUpdated(device=Device(id="d1"), changed=ChangedFields(status=True))


def test_publish_without_subscribers_is_dropped() -> None:
    bus = DispatchBus()
    assert bus.publish(_updated()) == 0


def test_fan_out_is_ordered_and_typed() -> None:
    bus = DispatchBus()
    calls: list[str] = []
    bus.subscribe(DeviceUpdated, lambda _e: calls.append("first"))
    bus.subscribe(DevicesLoaded, lambda _e: calls.append("loaded"))
    bus.subscribe(DeviceUpdated, lambda _e: calls.append("second"))

    assert bus.publish(_updated()) == 2
    assert calls == ["first", "second"]


def test_failing_handler_is_isolated_and_counted(caplog: pytest.LogCaptureFixture) -> None:
    bus = DispatchBus()
    calls: list[str] = []

    def broken(_event: DeviceUpdated) -> None:
        raise RuntimeError("boom")

    bus.subscribe(DeviceUpdated, broken)
    bus.subscribe(DeviceUpdated, lambda _e: calls.append("after"))

    with caplog.at_level(logging.WARNING, logger="pysmarthome.state.bus"):
        delivered = bus.publish(_updated())

    assert delivered == 1
    assert calls == ["after"]
    assert bus.fault_count == 1
    assert any(record.exc_info for record in caplog.records)


def test_release_is_idempotent() -> None:
    bus = DispatchBus()
    calls: list[DeviceUpdated] = []
    subscription = bus.subscribe(DeviceUpdated, calls.append)

    subscription.release()
    subscription.release()

    assert subscription.active is False
    assert bus.subscriber_count() == 0
    bus.publish(_updated())
    assert calls == []


def test_subscription_context_manager_releases_on_exit() -> None:
    bus = DispatchBus()
    calls: list[DeviceUpdated] = []

    with bus.subscribe(DeviceUpdated, calls.append) as subscription:
        bus.publish(_updated())
        assert bus.subscriber_count(DeviceUpdated) == 1

    assert subscription.active is False
    bus.publish(_updated())
    assert len(calls) == 1


def test_unsupported_event_type_is_rejected() -> None:
    bus = DispatchBus()
    with pytest.raises(TypeError):
        bus.subscribe(dict, lambda _e: None)  # type: ignore[arg-type]


def test_handler_may_unsubscribe_during_fan_out() -> None:
    bus = DispatchBus()
    calls: list[str] = []
    subscriptions = []

    def once(_event: DeviceUpdated) -> None:
        calls.append("once")
        subscriptions[0].release()

    subscriptions.append(bus.subscribe(DeviceUpdated, once))
    bus.subscribe(DeviceUpdated, lambda _e: calls.append("other"))

    bus.publish(_updated())
    bus.publish(_updated())

    assert calls == ["once", "other", "other"]


def test_fault_count_is_exact_under_concurrent_publishers() -> None:
    bus = DispatchBus()

    def fail(_event: DeviceUpdated) -> None:
        raise RuntimeError("boom")

    bus.subscribe(DeviceUpdated, fail)
    start = threading.Barrier(4)

    def worker() -> None:
        start.wait()
        for _ in range(50):
            bus.publish(_updated())

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert bus.fault_count == 200
