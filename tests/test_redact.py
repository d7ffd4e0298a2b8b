from __future__ import annotations

from pysmarthome._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "username": "admin",
        "password": "pw",
        "token": "eyJhbGciOi",
        "nested": {"Authorization": "Bearer abc", "accessToken": "xyz"},
    }

    redacted = redact_for_log(payload)
    assert redacted["username"] == "admin"
    assert redacted["password"] == "<redacted>"
    assert redacted["token"] == "<redacted>"
    assert redacted["nested"]["Authorization"] == "<redacted>"
    assert redacted["nested"]["accessToken"] == "<redacted>"
    assert payload["password"] == "pw"


def test_redact_for_log_masks_bearer_values() -> None:
    assert redact_for_log(["Bearer secret-token"]) == ["Bearer <redacted>"]


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_keeps_scalars() -> None:
    assert redact_for_log({"status": True, "value": 80, "color": None}) == {
        "status": True,
        "value": 80,
        "color": None,
    }
