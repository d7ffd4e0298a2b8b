"""Custom exception hierarchy for pysmarthome."""

from __future__ import annotations


class SmartHomeError(Exception):
    """Base exception for all pysmarthome errors."""


class SmartHomeConfigError(SmartHomeError):
    """Invalid or missing configuration."""


class RegistryClosedError(SmartHomeError):
    """A snapshot or update was applied to a registry that was torn down."""


class SmartHomeTransportError(SmartHomeError):
    """HTTP-level failure (network, unexpected status, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class SmartHomeApiError(SmartHomeError):
    """Server answered with an ``error`` payload (application-level error)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class SmartHomeAuthenticationError(SmartHomeApiError):
    """Login failed or credentials were rejected."""


class SmartHomeSessionExpiredError(SmartHomeAuthenticationError):
    """Bearer token rejected by the server.

    Raised when a post-login call fails with HTTP 401. The client
    catches this internally to trigger one automatic re-authentication.
    """


class SmartHomeDeviceNotFoundError(SmartHomeApiError):
    """The server does not know the addressed device id (HTTP 404)."""
