"""High-level async client for the smart-home server."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, TypeVar

import aiohttp

from pysmarthome._api import control as _control_api
from pysmarthome._api import devices as _devices_api
from pysmarthome._api import login as _login_api
from pysmarthome._realtime import RealtimeRuntime
from pysmarthome._transport import HttpTransport, Transport
from pysmarthome.config import SmartHomeConfig
from pysmarthome.exceptions import (
    RegistryClosedError,
    SmartHomeApiError,
    SmartHomeError,
    SmartHomeSessionExpiredError,
)
from pysmarthome.ingestion.messages import ServerMessage, apply_message
from pysmarthome.models.control import ControlAck, ControlCommand
from pysmarthome.models.device import Device, DeviceType
from pysmarthome.session import Session
from pysmarthome.state.registry import DeviceRegistry

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class SmartHomeClient:
    """Async client for the smart-home REST and realtime API.

    The client feeds a :class:`DeviceRegistry`: ``refresh()`` applies a
    snapshot, realtime pushes are applied as updates. It also implements
    the :class:`~pysmarthome.control.CommandSink` protocol.

    Usage::

        registry = DeviceRegistry()
        async with SmartHomeClient(config, registry) as client:
            await client.login()
            await client.refresh()
            await client.turn_on("light-1")
    """

    def __init__(
        self,
        config: SmartHomeConfig,
        registry: DeviceRegistry | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        on_message: Callable[[ServerMessage], None] | None = None,
    ) -> None:
        self._config = config
        self._registry = registry if registry is not None else DeviceRegistry()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None
        self._session: Session | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._realtime: RealtimeRuntime | None = None
        self._pending: set[asyncio.Task[Any]] = set()
        self._on_message_cb = on_message

    @property
    def registry(self) -> DeviceRegistry:
        return self._registry

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def realtime_running(self) -> bool:
        return self._realtime is not None and self._realtime.is_running

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SmartHomeClient:
        self._loop = asyncio.get_running_loop()
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._stop_realtime()
        for future in list(self._pending):
            future.cancel()
        self._pending.clear()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._loop = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self) -> None:
        """Authenticate and start the realtime listener."""
        transport = self._require_transport()
        token = await _login_api.login(self._config, transport)

        ttl = self._config.session_ttl if self._config.session_ttl > 0 else float("inf")
        self._session = Session(
            username=token.username or self._config.username,
            token=token.token,
            ttl=ttl,
        )
        _logger.debug("Logged in as %s (role=%s)", self._session.username, token.role or "?")
        await self._ensure_realtime_started()

    async def ensure_session(self) -> Session:
        """Return an active session, re-authenticating if expired."""
        if self._session is not None and not self._session.is_expired:
            return self._session
        await self.login()
        assert self._session is not None  # noqa: S101
        return self._session

    def invalidate_session(self) -> None:
        """Force session invalidation (next call will re-authenticate)."""
        self._session = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise SmartHomeError("Client not initialized. Use 'async with SmartHomeClient(...) as client:'")
        return self._transport

    async def _call_with_reauth(self, fn: Callable[[Session], Awaitable[T]]) -> T:
        """Run an API call, retrying once on session expiry."""
        session = await self.ensure_session()
        try:
            return await fn(session)
        except SmartHomeSessionExpiredError:
            _logger.debug("Session rejected by server, logging in again")
            self.invalidate_session()
            session = await self.ensure_session()
            return await fn(session)

    # ------------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------------

    async def _ensure_realtime_started(self) -> None:
        if not self._config.realtime_enabled or self._http_session is None:
            return
        if self._realtime is not None and self._realtime.is_running:
            return
        runtime = RealtimeRuntime(
            http_session=self._http_session,
            url=self._config.ws_url,
            on_message=self._on_realtime_message,
            reconnect_attempts=self._config.reconnect_attempts,
            reconnect_delay=self._config.reconnect_delay,
            logger=_logger,
        )
        runtime.start()
        self._realtime = runtime

    async def _stop_realtime(self) -> None:
        runtime = self._realtime
        self._realtime = None
        if runtime is not None:
            await runtime.stop()

    def _on_realtime_message(self, message: ServerMessage) -> None:
        try:
            apply_message(self._registry, message)
        except RegistryClosedError:
            _logger.debug("Dropping %s: registry is closed", message.action)
        if self._on_message_cb is not None:
            try:
                self._on_message_cb(message)
            except Exception:
                _logger.debug("on_message callback failed", exc_info=True)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def refresh(self) -> list[Device]:
        """Fetch every device and apply the list as a registry snapshot."""
        transport = self._require_transport()
        devices = await self._call_with_reauth(lambda s: _devices_api.fetch_devices(transport, s))
        return self._registry.apply_snapshot(devices)

    async def get_devices(
        self,
        *,
        room: str | None = None,
        device_type: DeviceType | str | None = None,
    ) -> list[Device]:
        """Fetch a filtered device list without touching the registry."""
        transport = self._require_transport()
        return await self._call_with_reauth(
            lambda s: _devices_api.fetch_devices(transport, s, room=room, device_type=device_type)
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def control(
        self,
        device_id: str,
        command: ControlCommand | str,
        value: int | str | None = None,
    ) -> ControlAck:
        """Send a raw control command.

        The registry is not touched; the realtime push that follows is
        applied as an update.
        """
        transport = self._require_transport()
        return await self._call_with_reauth(
            lambda s: _control_api.send_control(transport, s, device_id, command, value)
        )

    async def turn_on(self, device_id: str) -> ControlAck:
        return await self.control(device_id, ControlCommand.ON)

    async def turn_off(self, device_id: str) -> ControlAck:
        return await self.control(device_id, ControlCommand.OFF)

    async def toggle(self, device_id: str) -> ControlAck:
        return await self.control(device_id, ControlCommand.TOGGLE)

    async def set_value(self, device_id: str, value: int) -> ControlAck:
        if value < 0:
            raise ValueError("value must not be negative")
        return await self.control(device_id, ControlCommand.SET_VALUE, int(value))

    async def set_color(self, device_id: str, color: str) -> ControlAck:
        return await self.control(device_id, ControlCommand.SET_COLOR, color.strip())

    async def speaker_command(self, device_id: str, token: str) -> ControlAck:
        """Send a speaker command such as ``PLAY`` or ``NEXT``.

        The server stores it as ``CMD:<TOKEN>`` in the device color.
        """
        return await self.control(device_id, ControlCommand.SPEAKER_CMD, token.strip().upper())

    async def _command_each(self, device_ids: list[str], command: ControlCommand) -> list[ControlAck]:
        acks: list[ControlAck] = []
        for device_id in device_ids:
            try:
                acks.append(await self.control(device_id, command))
            except SmartHomeApiError as exc:
                _logger.warning("%s for %s failed: %s", command.value, device_id, exc)
        return acks

    async def all_off(self) -> list[ControlAck]:
        """Send OFF to every device known to the registry."""
        ids = [d.id for d in self._registry.get_all_devices()]
        return await self._command_each(ids, ControlCommand.OFF)

    async def turn_on_room(self, room: str) -> list[ControlAck]:
        """Send ON to every device of *room*."""
        ids = [d.id for d in self._registry.get_devices_by_room(room)]
        return await self._command_each(ids, ControlCommand.ON)

    async def turn_off_room(self, room: str) -> list[ControlAck]:
        """Send OFF to every device of *room*."""
        ids = [d.id for d in self._registry.get_devices_by_room(room)]
        return await self._command_each(ids, ControlCommand.OFF)

    # ------------------------------------------------------------------
    # CommandSink
    # ------------------------------------------------------------------

    def _schedule(self, coro: Coroutine[Any, Any, Any], label: str) -> None:
        loop = self._loop
        if loop is None:
            coro.close()
            raise SmartHomeError("Client not initialized. Use 'async with SmartHomeClient(...) as client:'")

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            self._track(loop.create_task(coro), label)
        else:
            loop.call_soon_threadsafe(lambda: self._track(loop.create_task(coro), label))

    def _track(self, task: asyncio.Task[Any], label: str) -> None:
        self._pending.add(task)

        def _done(fut: asyncio.Task[Any]) -> None:
            self._pending.discard(fut)
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is not None:
                _logger.warning("Command %s failed: %s", label, exc, exc_info=exc)

        task.add_done_callback(_done)

    def request_toggle(self, device_id: str) -> None:
        self._schedule(self.toggle(device_id), f"toggle {device_id}")

    def request_set_value(self, device_id: str, value: int) -> None:
        self._schedule(self.set_value(device_id, value), f"set_value {device_id}")

    def request_refresh_all(self) -> None:
        self._schedule(self.refresh(), "refresh")

    def request_all_off(self) -> None:
        self._schedule(self.all_off(), "all_off")

    def request_turn_on(self, device_id: str) -> None:
        self._schedule(self.turn_on(device_id), f"turn_on {device_id}")

    def request_turn_off(self, device_id: str) -> None:
        self._schedule(self.turn_off(device_id), f"turn_off {device_id}")

    def request_set_color(self, device_id: str, color: str) -> None:
        self._schedule(self.set_color(device_id, color), f"set_color {device_id}")

    def request_speaker_command(self, device_id: str, token: str) -> None:
        self._schedule(self.speaker_command(device_id, token), f"speaker {device_id}")
