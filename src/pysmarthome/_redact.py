"""Helpers for safe debug logging.

Login bodies carry passwords and every authenticated request carries a
bearer token. Payloads pass through :func:`redact_for_log` before they
reach a DEBUG log line.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({"password", "token", "accesstoken", "authorization", "cookie"})
_REDACTED = "<redacted>"


def _redact_text(text: str, max_string: int) -> str:
    if text.lower().startswith("bearer "):
        return f"Bearer {_REDACTED}"
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a copy of *value* with secrets masked and long strings cut."""
    if _depth > 10:
        return "<max-depth>"
    if isinstance(value, str):
        return _redact_text(value, max_string)
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {
            str(key): _REDACTED
            if str(key).lower() in _SENSITIVE_KEYS
            else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return repr(value)
