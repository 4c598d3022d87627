"""
GSI HTTP listener.

The game client POSTs its full state as JSON to the configured URI every few
hundred milliseconds. Each body is parsed into a Snapshot and published on
the bus; the handler never runs coaching logic itself.

Responses:
  200 "OK"   payload accepted (or dropped because the bus is full)
  400        body is not a JSON object
  401        GSI_AUTH_TOKEN is set and auth.token does not match
"""

from __future__ import annotations
import logging

from aiohttp import web

from bus.event_bus import EventBus
from gsi.parser import auth_token, parse_snapshot

log = logging.getLogger(__name__)


class GSIListener:
    """
    aiohttp.web server for the GSI feed.

    Call startup() to bind the socket and shutdown() to release it.
    build_app() is exposed separately so tests can drive the handler
    without opening a port.
    """

    def __init__(self, bus: EventBus, host: str = "127.0.0.1", port: int = 3000, auth_token: str = "") -> None:
        self._bus = bus
        self._host = host
        self._port = port
        self._auth_token = auth_token
        self._runner: web.AppRunner | None = None
        self._received = 0

    @property
    def received(self) -> int:
        return self._received

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/", self.handle)
        return app

    async def startup(self) -> None:
        self._runner = web.AppRunner(self.build_app(), access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._host, self._port)
        await site.start()
        log.info("GSI listener up on http://%s:%d/ (auth=%s)",
                 self._host, self._port, "on" if self._auth_token else "off")

    async def shutdown(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None

    async def handle(self, request: web.Request) -> web.Response:
        try:
            payload = await request.json()
        except ValueError as exc:
            log.warning("Rejected GSI payload from %s: invalid JSON (%s)", request.remote, exc)
            return web.Response(status=400, text="invalid JSON")
        if not isinstance(payload, dict):
            log.warning("Rejected GSI payload from %s: expected an object, got %s",
                        request.remote, type(payload).__name__)
            return web.Response(status=400, text="expected a JSON object")

        if self._auth_token and auth_token(payload) != self._auth_token:
            log.warning("Rejected GSI payload from %s: bad auth token", request.remote)
            return web.Response(status=401, text="bad auth token")

        snapshot = parse_snapshot(payload)
        self._received += 1
        self._bus.publish_snapshot(snapshot)
        return web.Response(text="OK")
