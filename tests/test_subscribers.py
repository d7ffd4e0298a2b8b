from __future__ import annotations

from typing import Any

import pytest

from pysmarthome._constants import UNASSIGNED_ROOM
from pysmarthome.control import CommandSink, DeviceControls
from pysmarthome.models.device import Device, DeviceType
from pysmarthome.state.events import DeviceUpdated
from pysmarthome.state.registry import DeviceRegistry
from pysmarthome.subscribers import CardBoard, ObjectBridge, RoomAggregator, VisualUpdater


def _device(**overrides: Any) -> Device:
    data: dict[str, Any] = {
        "id": "d1",
        "name": "Main Light",
        "type": "light",
        "room": "Living",
        "status": False,
        "value": 0,
        "color": "",
    }
    data.update(overrides)
    return Device.model_validate(data)


class _Lamp:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def turn_on(self) -> None:
        self.calls.append(("turn_on",))

    def turn_off(self) -> None:
        self.calls.append(("turn_off",))

    def set_value(self, value: int) -> None:
        self.calls.append(("set_value", value))

    def set_color(self, color: str) -> None:
        self.calls.append(("set_color", color))


class _Speaker:
    def __init__(self) -> None:
        self.commands: list[str] = []

    def run_command(self, command: str) -> None:
        self.commands.append(command)


class _RecordingSink:
    def __init__(self) -> None:
        self.requests: list[tuple[Any, ...]] = []

    def request_toggle(self, device_id: str) -> None:
        self.requests.append(("toggle", device_id))

    def request_set_value(self, device_id: str, value: int) -> None:
        self.requests.append(("set_value", device_id, value))

    def request_refresh_all(self) -> None:
        self.requests.append(("refresh_all",))

    def request_all_off(self) -> None:
        self.requests.append(("all_off",))

    def request_turn_on(self, device_id: str) -> None:
        self.requests.append(("turn_on", device_id))

    def request_turn_off(self, device_id: str) -> None:
        self.requests.append(("turn_off", device_id))

    def request_set_color(self, device_id: str, color: str) -> None:
        self.requests.append(("set_color", device_id, color))

    def request_speaker_command(self, device_id: str, token: str) -> None:
        self.requests.append(("speaker", device_id, token))


# ----------------------------------------------------------------------
# ObjectBridge
# ----------------------------------------------------------------------


def test_bridge_does_not_actuate_on_initial_load() -> None:
    registry = DeviceRegistry()
    lamp = _Lamp()
    registry.identity.declare("main light", lamp)
    ObjectBridge(registry)

    registry.apply_snapshot([_device(status=True, value=70, color="#FFFFFF")])

    assert lamp.calls == []


def test_bridge_calls_capability_per_changed_flag() -> None:
    registry = DeviceRegistry()
    lamp = _Lamp()
    registry.identity.declare("Main Light", lamp)
    ObjectBridge(registry)
    registry.apply_snapshot([_device()])

    registry.apply_update(_device(status=True, value=80, color="#FFAA00"))
    registry.apply_update(_device(status=True, value=80, color="#FFAA00"))
    registry.apply_update(_device(status=False, value=80, color=""))

    assert lamp.calls == [
        ("turn_on",),
        ("set_value", 80),
        ("set_color", "#FFAA00"),
        ("turn_off",),
    ]


def test_bridge_routes_command_tokens_to_commandable_targets() -> None:
    registry = DeviceRegistry()
    speaker = _Speaker()
    registry.identity.declare("Speaker", speaker)
    ObjectBridge(registry)
    registry.apply_snapshot([_device(id="s1", name="Speaker", type="speaker")])

    registry.apply_update(_device(id="s1", name="Speaker", type="speaker", color="CMD:PLAY"))
    registry.apply_update(_device(id="s1", name="Speaker", type="speaker", color="#00FF00"))

    assert speaker.commands == ["PLAY"]


def test_bridge_honours_declared_reactions() -> None:
    registry = DeviceRegistry()
    lamp = _Lamp()
    registry.identity.declare("Main Light", lamp, reactions=["value"])
    ObjectBridge(registry)
    registry.apply_snapshot([_device()])

    registry.apply_update(_device(status=True, value=20, color="#123456"))

    assert lamp.calls == [("set_value", 20)]


def test_bridge_ignores_updates_for_inert_bindings() -> None:
    registry = DeviceRegistry()
    lamp = _Lamp()
    registry.identity.declare("Kitchen Light", lamp)
    ObjectBridge(registry)
    registry.apply_snapshot([_device()])

    registry.apply_update(_device(id="k1", name="Kitchen Light", status=True))

    assert lamp.calls == []


def test_bridge_toggle_goes_through_sink_only_when_armed() -> None:
    registry = DeviceRegistry()
    sink = _RecordingSink()
    registry.identity.declare("Main Light", _Lamp())
    registry.identity.declare("Kitchen Light", _Lamp())
    bridge = ObjectBridge(registry, sink)
    registry.apply_snapshot([_device()])

    assert bridge.toggle("main light") is True
    assert bridge.toggle("Kitchen Light") is False
    assert bridge.toggle("Unknown") is False
    assert sink.requests == [("toggle", "d1")]


def test_failing_target_does_not_stop_other_subscribers() -> None:
    class _Broken:
        def turn_on(self) -> None:
            raise RuntimeError("stuck relay")

        def turn_off(self) -> None: ...

    registry = DeviceRegistry()
    registry.identity.declare("Main Light", _Broken())
    ObjectBridge(registry)
    cards = CardBoard(registry)
    registry.apply_snapshot([_device()])

    event = registry.apply_update(_device(status=True))

    assert isinstance(event, DeviceUpdated)
    assert registry.bus.fault_count == 1
    assert cards.get("d1").status is True  # type: ignore[union-attr]


# ----------------------------------------------------------------------
# RoomAggregator
# ----------------------------------------------------------------------


def test_rooms_track_lit_state_and_first_lit_color() -> None:
    registry = DeviceRegistry()
    rooms = RoomAggregator(registry)
    registry.apply_snapshot(
        [
            _device(id="l1", name="Lamp 1", status=False, color="#111111"),
            _device(id="l2", name="Lamp 2", status=True, color="#222222"),
            _device(id="l3", name="Lamp 3", status=True, color="#333333"),
            _device(id="s1", name="Sensor", type="sensor", room=""),
        ]
    )

    living = rooms.get("living")
    assert living is not None
    assert living.lit is True
    assert living.color == "#222222"
    assert living.device_ids == ("l1", "l2", "l3")
    assert living.active_count == 2
    assert rooms.get("") == rooms.rooms[UNASSIGNED_ROOM]

    registry.apply_update(_device(id="l2", name="Lamp 2", status=False))
    assert rooms.get("Living").color == "#333333"  # type: ignore[union-attr]

    registry.apply_update(_device(id="l3", name="Lamp 3", status=False))
    living = rooms.get("Living")
    assert living is not None
    assert living.lit is False
    assert living.color == ""


def test_room_follows_device_that_moved() -> None:
    registry = DeviceRegistry()
    rooms = RoomAggregator(registry)
    registry.apply_snapshot([_device()])

    registry.apply_update(_device(room="Bedroom", status=True))

    assert rooms.get("living") is None
    assert rooms.get("bedroom").device_ids == ("d1",)  # type: ignore[union-attr]


# ----------------------------------------------------------------------
# VisualUpdater
# ----------------------------------------------------------------------


def test_visual_state_by_device_type() -> None:
    registry = DeviceRegistry()
    visuals = VisualUpdater(registry)
    registry.apply_snapshot(
        [
            _device(id="l1", status=True, value=80, color="#FFAA00"),
            _device(id="door", name="Gate", type="door", status=True),
            _device(id="t1", name="Thermo", type="thermostat", value=21),
            _device(id="cam", name="Cam", type="camera", status=True),
        ]
    )

    light = visuals.get("l1")
    assert light is not None
    assert light.intensity == pytest.approx(0.8)
    assert light.color == "#FFAA00"
    assert visuals.get("door").open is True  # type: ignore[union-attr]
    assert visuals.get("t1").setpoint == 21  # type: ignore[union-attr]
    assert visuals.get("cam").active is True  # type: ignore[union-attr]

    registry.apply_update(_device(id="l1", status=False, value=80))
    assert visuals.get("l1").intensity == 0.0  # type: ignore[union-attr]
    assert visuals.get("l1").color == "#FFAA00"  # type: ignore[union-attr]


def test_visual_records_last_command_without_touching_color() -> None:
    registry = DeviceRegistry()
    visuals = VisualUpdater(registry)
    registry.apply_snapshot([_device(id="s1", name="Speaker", type="speaker", color="#00FF00")])

    registry.apply_update(_device(id="s1", name="Speaker", type="speaker", color="CMD:NEXT"))

    state = visuals.get("s1")
    assert state is not None
    assert state.type == DeviceType.SPEAKER
    assert state.last_command == "NEXT"
    assert state.color == "#00FF00"


# ----------------------------------------------------------------------
# CardBoard
# ----------------------------------------------------------------------


def test_cards_are_created_on_first_sight_and_count_active() -> None:
    registry = DeviceRegistry()
    board = CardBoard(registry)
    registry.apply_snapshot(
        [
            _device(id="l1", status=True, value=60, color="#FFAA00"),
            _device(id="t1", name="Thermo", type="thermostat", value=21),
        ]
    )

    light = board.get("l1")
    assert light is not None
    assert light.type_label == "Light"
    assert light.status_text == "ON"
    assert light.value_text == "60%"
    assert light.accent == "#FFAA00"
    assert board.get("t1").value_text == "21°C"  # type: ignore[union-attr]
    assert board.active == 1

    registry.apply_update(_device(id="x1", name="Mystery", type="fridge", status=True, value=3))
    assert [card.device_id for card in board.cards] == ["l1", "t1", "x1"]
    assert board.get("x1").type_label == "Device"  # type: ignore[union-attr]
    assert board.get("x1").value_text == "3"  # type: ignore[union-attr]
    assert board.active == 2


def test_closing_subscribers_releases_every_subscription() -> None:
    registry = DeviceRegistry()
    subscribers = [ObjectBridge(registry), RoomAggregator(registry), VisualUpdater(registry), CardBoard(registry)]
    assert registry.bus.subscriber_count() == 8

    for subscriber in subscribers:
        subscriber.close()
        subscriber.close()

    assert registry.bus.subscriber_count() == 0


# ----------------------------------------------------------------------
# DeviceControls
# ----------------------------------------------------------------------


def test_recording_sink_satisfies_protocol() -> None:
    assert isinstance(_RecordingSink(), CommandSink)


def test_room_controls_address_every_device_in_room() -> None:
    registry = DeviceRegistry()
    sink = _RecordingSink()
    controls = DeviceControls(sink, registry)
    registry.apply_snapshot(
        [
            _device(id="a", name="A", room="Kitchen", status=True),
            _device(id="b", name="B", room="kitchen"),
            _device(id="c", name="C", room="Office"),
        ]
    )

    assert controls.turn_on_room("Kitchen") == 2
    assert controls.turn_off_room("office") == 1
    controls.turn_off_all()
    controls.toggle("a")
    controls.set_value("b", 40)
    controls.refresh_all()

    assert sink.requests == [
        ("turn_on", "a"),
        ("turn_on", "b"),
        ("turn_off", "c"),
        ("all_off",),
        ("toggle", "a"),
        ("set_value", "b", 40),
        ("refresh_all",),
    ]
