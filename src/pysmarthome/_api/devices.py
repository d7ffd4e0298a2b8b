"""Device list endpoint: GET /api/devices."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from pysmarthome._api._common import raise_for_status
from pysmarthome._transport import Transport
from pysmarthome.exceptions import SmartHomeTransportError
from pysmarthome.ingestion.messages import parse_device_list
from pysmarthome.models.device import Device, DeviceType
from pysmarthome.session import Session

_logger = logging.getLogger(__name__)

ENDPOINT = "/api/devices"


def build_devices_path(*, room: str | None = None, device_type: DeviceType | str | None = None) -> str:
    """Return the endpoint path with optional ``room``/``type`` filters."""
    query: dict[str, str] = {}
    if room:
        query["room"] = room
    if device_type:
        query["type"] = str(device_type)
    return f"{ENDPOINT}?{urlencode(query)}" if query else ENDPOINT


async def fetch_devices(
    transport: Transport,
    session: Session,
    *,
    room: str | None = None,
    device_type: DeviceType | str | None = None,
) -> list[Device]:
    """Fetch the device list.

    The server answers with a bare JSON array; entries that are not
    device objects are skipped by the ingestion layer.
    """
    response = await transport.request(
        "GET",
        build_devices_path(room=room, device_type=device_type),
        headers=session.auth_headers(),
    )
    raise_for_status(response, endpoint=ENDPOINT)
    if not isinstance(response.body, list):
        raise SmartHomeTransportError(
            f"{ENDPOINT} returned {type(response.body).__name__}, expected a list",
            status_code=response.status,
            endpoint=ENDPOINT,
        )
    devices = parse_device_list(response.body)
    _logger.debug("Fetched %d devices (%d entries)", len(devices), len(response.body))
    return devices
