"""Remote control endpoint: POST /api/control."""

from __future__ import annotations

import logging
from typing import Any

from pysmarthome._api._common import raise_for_status, require_object
from pysmarthome._transport import Transport
from pysmarthome.models.control import ControlAck, ControlCommand
from pysmarthome.session import Session

_logger = logging.getLogger(__name__)

ENDPOINT = "/api/control"

_VALUE_COMMANDS = frozenset({ControlCommand.SET_VALUE, ControlCommand.SET_COLOR, ControlCommand.SPEAKER_CMD})


def build_control_request(
    device_id: str,
    command: ControlCommand | str,
    value: int | str | None = None,
) -> dict[str, Any]:
    """Build the JSON body for a control command.

    Raises
    ------
    ValueError
        If the device id is empty or a value command has no value.
    """
    device_id = device_id.strip()
    if not device_id:
        raise ValueError("device_id must not be empty")
    command = ControlCommand(str(command).upper())
    body: dict[str, Any] = {"deviceId": device_id, "command": command.value}
    if command in _VALUE_COMMANDS:
        if value is None or value == "":
            raise ValueError(f"{command.value} requires a value")
        body["value"] = value
    elif value is not None:
        body["value"] = value
    return body


async def send_control(
    transport: Transport,
    session: Session,
    device_id: str,
    command: ControlCommand | str,
    value: int | str | None = None,
) -> ControlAck:
    """Send one control command and return the server acknowledgement."""
    body = build_control_request(device_id, command, value)
    response = await transport.request("POST", ENDPOINT, payload=body, headers=session.auth_headers())
    raise_for_status(response, endpoint=ENDPOINT)
    ack = ControlAck.model_validate(require_object(response, endpoint=ENDPOINT))
    _logger.debug("Control %s on %s acknowledged: %s", body["command"], device_id, ack.status)
    return ack
