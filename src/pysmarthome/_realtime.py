"""WebSocket runtime for server-pushed device changes.

The server pushes ``DEVICE_CHANGED`` notifications on a plain WebSocket
and answers ``{"action": "PING"}`` with ``PONG``. This runtime keeps one
connection open on the client's event loop, parses every frame with the
ingestion layer and hands the result to a callback.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

import aiohttp

from pysmarthome.ingestion.messages import ServerMessage, parse_message

_PING = {"action": "PING"}


class RealtimeRuntime:
    """Asyncio WebSocket listener with bounded reconnects."""

    def __init__(
        self,
        *,
        http_session: aiohttp.ClientSession,
        url: str,
        on_message: Callable[[ServerMessage], None],
        reconnect_attempts: int = 5,
        reconnect_delay: float = 3.0,
        ping_interval: float = 30.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._http = http_session
        self._url = url
        self._on_message = on_message
        self._reconnect_attempts = reconnect_attempts
        self._reconnect_delay = reconnect_delay
        self._ping_interval = ping_interval
        self._logger = logger or logging.getLogger(__name__)
        self._task: asyncio.Task[None] | None = None
        self._connected = False

    @property
    def is_running(self) -> bool:
        """Whether the listener task is alive (connected or reconnecting)."""
        return self._task is not None and not self._task.done()

    @property
    def connected(self) -> bool:
        return self._connected

    def start(self) -> None:
        """Start the listener task on the running loop."""
        if self.is_running:
            return
        self._logger.debug("Realtime runtime start requested url=%s", self._url)
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Cancel the listener task and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._logger.debug("Realtime runtime stopped")

    async def _run(self) -> None:
        failures = 0
        while True:
            try:
                async with self._http.ws_connect(self._url) as ws:
                    failures = 0
                    self._connected = True
                    self._logger.debug("Realtime connected url=%s", self._url)
                    await ws.send_json(_PING)
                    await self._listen(ws)
                    self._logger.debug("Realtime connection closed by server")
            except (aiohttp.ClientError, OSError) as exc:
                self._logger.debug("Realtime connection failed: %s", exc)
            finally:
                self._connected = False

            if failures >= self._reconnect_attempts:
                self._logger.warning(
                    "Realtime listener giving up after %d reconnect attempts",
                    self._reconnect_attempts,
                )
                return
            failures += 1
            self._logger.debug(
                "Realtime reconnect %d/%d in %.1fs",
                failures,
                self._reconnect_attempts,
                self._reconnect_delay,
            )
            await asyncio.sleep(self._reconnect_delay)

    async def _listen(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        while not ws.closed:
            try:
                msg = await ws.receive(timeout=self._ping_interval)
            except TimeoutError:
                await ws.send_json(_PING)
                continue

            if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                self._dispatch(msg.data)
            elif msg.type in (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED):
                return
            elif msg.type == aiohttp.WSMsgType.ERROR:
                self._logger.debug("Realtime socket error: %s", ws.exception())
                return

    def _dispatch(self, data: str | bytes) -> None:
        message = parse_message(data)
        if message is None:
            return
        self._logger.debug("Realtime message action=%s", message.action)
        try:
            self._on_message(message)
        except Exception:
            self._logger.warning("Realtime message handler failed", exc_info=True)
