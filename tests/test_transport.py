from __future__ import annotations

import aiohttp
import pytest
from aiohttp import test_utils, web

from pysmarthome._transport import HttpTransport
from pysmarthome.config import SmartHomeConfig
from pysmarthome.exceptions import SmartHomeTransportError


async def _echo(request: web.Request) -> web.Response:
    return web.json_response(
        {"echo": await request.json(), "auth": request.headers.get("Authorization")},
        status=201,
    )


async def _html(_request: web.Request) -> web.Response:
    return web.Response(text="<html>oops</html>", content_type="text/html")


async def _empty(_request: web.Request) -> web.Response:
    return web.Response(status=204)


async def _error(_request: web.Request) -> web.Response:
    return web.json_response({"error": "Dispositivo no encontrado"}, status=404)


@pytest.mark.asyncio
async def test_http_transport_against_local_server() -> None:
    app = web.Application()
    app.router.add_post("/api/echo", _echo)
    app.router.add_get("/api/html", _html)
    app.router.add_get("/api/empty", _empty)
    app.router.add_get("/api/error", _error)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        config = SmartHomeConfig(username="a", password="b", base_url=f"http://{server.host}:{server.port}/")
        async with aiohttp.ClientSession() as session:
            transport = HttpTransport(config, session)

            echoed = await transport.request(
                "POST",
                "/api/echo",
                payload={"username": "a", "password": "b"},
                headers={"Authorization": "Bearer t"},
            )
            assert echoed.ok
            assert echoed.status == 201
            assert echoed.body == {"echo": {"username": "a", "password": "b"}, "auth": "Bearer t"}

            empty = await transport.request("GET", "/api/empty")
            assert empty.ok
            assert empty.body is None

            error = await transport.request("GET", "/api/error")
            assert not error.ok
            assert error.body == {"error": "Dispositivo no encontrado"}

            with pytest.raises(SmartHomeTransportError) as exc_info:
                await transport.request("GET", "/api/html")
            assert exc_info.value.status_code == 200
            assert exc_info.value.endpoint == "/api/html"
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_http_transport_wraps_connection_errors() -> None:
    config = SmartHomeConfig(username="a", password="b", base_url="http://127.0.0.1:9", request_timeout=2)
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(config, session)
        with pytest.raises(SmartHomeTransportError, match="/api/devices"):
            await transport.request("GET", "/api/devices")
