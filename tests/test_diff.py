from __future__ import annotations

from pysmarthome.models.device import Device
from pysmarthome.state.diff import compute_changes, merge_record


def _device(status: bool = False, value: int = 0, color: str = "") -> Device:
    return Device(id="d1", name="Lamp", status=status, value=value, color=color)


def test_no_previous_with_color_means_everything_changed() -> None:
    changed = compute_changes(None, _device(color="#FF0000"))
    assert (changed.status, changed.value, changed.color) == (True, True, True)
    assert changed.has_changes


def test_no_previous_with_empty_color_leaves_color_unchanged() -> None:
    changed = compute_changes(None, _device())
    assert (changed.status, changed.value, changed.color) == (True, True, False)
    assert changed.has_changes


def test_identical_records_report_no_changes() -> None:
    changed = compute_changes(_device(True, 40, "#FFFFFF"), _device(True, 40, "#FFFFFF"))
    assert not changed.has_changes


def test_value_change_has_no_threshold() -> None:
    changed = compute_changes(_device(value=50), _device(value=51))
    assert changed.value is True
    assert changed.status is False


def test_empty_incoming_color_is_never_a_change() -> None:
    assert compute_changes(_device(color="#FF0000"), _device(color="")).color is False


def test_new_color_after_empty_is_a_change() -> None:
    assert compute_changes(_device(color=""), _device(color="#00FF00")).color is True


def test_merge_keeps_previous_color_for_empty_incoming() -> None:
    merged = merge_record(_device(color="#FF0000"), _device(status=True, value=3))
    assert merged.color == "#FF0000"
    assert merged.status is True
    assert merged.value == 3


def test_merge_replaces_color_when_present() -> None:
    incoming = _device(color="CMD:PLAY")
    assert merge_record(_device(color="#FF0000"), incoming) is incoming
