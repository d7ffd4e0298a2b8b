"""Shared helpers for REST endpoint modules.

This module centralizes mapping HTTP statuses and ``{"error": ...}``
bodies onto the exception hierarchy. It is internal to pysmarthome and
may change at any time.
"""

from __future__ import annotations

from typing import Any

from pysmarthome._transport import ApiResponse
from pysmarthome.exceptions import (
    SmartHomeApiError,
    SmartHomeDeviceNotFoundError,
    SmartHomeSessionExpiredError,
    SmartHomeTransportError,
)


def error_message(body: Any) -> str:
    """Extract the human-readable error from a server body."""
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if value:
                return str(value)
    return ""


def raise_for_status(response: ApiResponse, *, endpoint: str) -> None:
    """Raise the matching exception for a failed response.

    401 means the bearer token was rejected, 404 an unknown device, any
    other 4xx a rejected request. 5xx is treated as a transport failure.
    """
    if response.ok:
        return
    status = response.status
    message = error_message(response.body) or f"HTTP {status}"
    if status == 401:
        raise SmartHomeSessionExpiredError(
            f"{endpoint} failed: {message}",
            code=str(status),
            endpoint=endpoint,
        )
    if status == 404:
        raise SmartHomeDeviceNotFoundError(
            f"{endpoint} failed: {message}",
            code=str(status),
            endpoint=endpoint,
        )
    if 400 <= status < 500:
        raise SmartHomeApiError(
            f"{endpoint} failed: {message}",
            code=str(status),
            endpoint=endpoint,
        )
    raise SmartHomeTransportError(
        f"{endpoint} failed: {message}",
        status_code=status,
        endpoint=endpoint,
    )


def require_object(response: ApiResponse, *, endpoint: str) -> dict[str, Any]:
    """Return the body as a dict or raise :class:`SmartHomeTransportError`."""
    body = response.body
    if not isinstance(body, dict):
        raise SmartHomeTransportError(
            f"{endpoint} returned {type(body).__name__}, expected an object",
            status_code=response.status,
            endpoint=endpoint,
        )
    return body
