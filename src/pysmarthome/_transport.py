"""JSON-over-HTTP transport for the smart-home REST API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from pysmarthome._constants import USER_AGENT
from pysmarthome._redact import redact_for_log
from pysmarthome.config import SmartHomeConfig
from pysmarthome.exceptions import SmartHomeTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """Decoded HTTP response: status code plus JSON body."""

    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by endpoint modules."""

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse: ...


class HttpTransport:
    """aiohttp transport that JSON-encodes requests and decodes replies."""

    def __init__(self, config: SmartHomeConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse:
        """Send one request and return the decoded JSON body.

        Network failures and non-JSON bodies raise
        :class:`SmartHomeTransportError`. HTTP error statuses are
        returned to the caller, which maps them to API errors.
        """
        request_headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        if headers:
            request_headers.update(headers)

        url = f"{self._config.base_url}{endpoint}"
        body = json.dumps(dict(payload)) if payload is not None else None

        _logger.debug("%s %s body=%s", method, url, redact_for_log(dict(payload or {})))

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=request_headers,
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise SmartHomeTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise SmartHomeTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return ApiResponse(status=status, body=None)

        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SmartHomeTransportError(
                f"Invalid JSON from {endpoint} (HTTP {status}): {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        _logger.debug("HTTP %s from %s body=%s", status, endpoint, redact_for_log(decoded))
        return ApiResponse(status=status, body=decoded)
