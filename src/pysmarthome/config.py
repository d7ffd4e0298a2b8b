"""Client configuration for pysmarthome."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pysmarthome._constants import BASE_URL, WS_URL
from pysmarthome.exceptions import SmartHomeConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env: Mapping[str, str], key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise SmartHomeConfigError(f"{key} must be a {cast.__name__}, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class SmartHomeConfig:
    """Client configuration.

    Parameters
    ----------
    username : str
        Account user name.
    password : str
        Account password.
    base_url : str
        REST API base URL (``/api/...`` endpoints live below it).
    ws_url : str
        WebSocket URL pushing ``DEVICE_CHANGED`` notifications.
    request_timeout : float
        Total timeout in seconds for a single REST request.
    session_ttl : float
        Bearer token time-to-live in seconds. The server issues tokens
        valid for 24 hours. Set to ``0`` to disable expiry (the token is
        only refreshed when the server rejects it).
    realtime_enabled : bool
        Start the WebSocket listener after login.
    reconnect_attempts : int
        How many times the listener reconnects before giving up.
    reconnect_delay : float
        Seconds between reconnect attempts.
    """

    username: str
    password: str
    base_url: str = BASE_URL
    ws_url: str = WS_URL
    request_timeout: float = 10.0
    session_ttl: float = 24 * 3600
    realtime_enabled: bool = True
    reconnect_attempts: int = 5
    reconnect_delay: float = 3.0

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise SmartHomeConfigError("request_timeout must be positive")
        if self.reconnect_attempts < 0:
            raise SmartHomeConfigError("reconnect_attempts must not be negative")
        if self.reconnect_delay < 0:
            raise SmartHomeConfigError("reconnect_delay must not be negative")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> SmartHomeConfig:
        """Create configuration from environment variables.

        Reads ``SMARTHOME_USERNAME``, ``SMARTHOME_PASSWORD`` and the
        optional ``SMARTHOME_*`` variables below. Explicit keyword
        arguments override environment values.

        Returns
        -------
        SmartHomeConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_TEXT_MAP = {
            "SMARTHOME_USERNAME": "username",
            "SMARTHOME_PASSWORD": "password",
            "SMARTHOME_BASE_URL": "base_url",
            "SMARTHOME_WS_URL": "ws_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_TEXT_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMBER_MAP: dict[str, tuple[str, type]] = {
            "SMARTHOME_REQUEST_TIMEOUT": ("request_timeout", float),
            "SMARTHOME_SESSION_TTL": ("session_ttl", float),
            "SMARTHOME_RECONNECT_ATTEMPTS": ("reconnect_attempts", int),
            "SMARTHOME_RECONNECT_DELAY": ("reconnect_delay", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMBER_MAP.items():
            if field_name in overrides:
                continue
            parsed = _env_number(env, env_key, cast)
            if parsed is not None:
                config_kwargs[field_name] = parsed

        if "realtime_enabled" not in overrides:
            config_kwargs["realtime_enabled"] = _env_bool(env.get("SMARTHOME_REALTIME_ENABLED"), True)

        config_kwargs.update(overrides)

        missing = [name for name in ("username", "password") if not config_kwargs.get(name)]
        if missing:
            raise SmartHomeConfigError(f"Missing configuration: {', '.join(missing)}")

        return cls(**config_kwargs)
