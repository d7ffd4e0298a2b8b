"""Login endpoint.

Endpoint:
  - POST /api/login
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pysmarthome._api._common import error_message
from pysmarthome._redact import redact_for_log
from pysmarthome._transport import ApiResponse, Transport
from pysmarthome.config import SmartHomeConfig
from pysmarthome.exceptions import SmartHomeAuthenticationError, SmartHomeTransportError
from pysmarthome.models.token import AuthToken

_logger = logging.getLogger(__name__)

ENDPOINT = "/api/login"


def build_login_request(config: SmartHomeConfig) -> dict[str, Any]:
    """Build the JSON body for the login endpoint."""
    return {"username": config.username, "password": config.password}


def parse_login_response(response: ApiResponse) -> AuthToken:
    """Parse the login response into an :class:`AuthToken`.

    Raises
    ------
    SmartHomeAuthenticationError
        If the server rejected the credentials or returned no token.
    SmartHomeTransportError
        If the server failed (5xx).
    """
    if response.status >= 500:
        raise SmartHomeTransportError(
            f"Login failed: HTTP {response.status}",
            status_code=response.status,
            endpoint=ENDPOINT,
        )
    body = response.body
    if not response.ok or not isinstance(body, dict):
        message = error_message(body) or f"HTTP {response.status}"
        raise SmartHomeAuthenticationError(
            f"Login failed: {message}",
            code=str(response.status),
            endpoint=ENDPOINT,
        )

    _logger.debug("Login response body=%s", redact_for_log(body))
    try:
        return AuthToken.model_validate(body)
    except ValidationError as exc:
        raise SmartHomeAuthenticationError(
            "Login response missing token",
            code=str(response.status),
            endpoint=ENDPOINT,
        ) from exc


async def login(config: SmartHomeConfig, transport: Transport) -> AuthToken:
    """Authenticate and return the issued token."""
    response = await transport.request("POST", ENDPOINT, payload=build_login_request(config))
    return parse_login_response(response)
