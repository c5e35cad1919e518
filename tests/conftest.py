"""Shared fixtures: result factory and fake transports."""

from __future__ import annotations

import asyncio
import socket
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

import pytest
from aiohttp import web

from urlhealth.check_result import STATUS_CONNECTION_ERROR, Failure, Result, Success

ResultFactory = Callable[..., Result]


@pytest.fixture()
def make_result() -> ResultFactory:
    """Build Results without running a check."""

    def _make(
        endpoint: str = "https://example.com",
        *,
        ok: bool = True,
        status_code: int | None = 200,
        error: str = "",
        duration: float = 0.1,
        attempts: int = 1,
        category: str = STATUS_CONNECTION_ERROR,
    ) -> Result:
        if ok:
            outcome: Success | Failure = Success(status_code=status_code or 200)
        else:
            outcome = Failure(error=error, status_code=status_code, category=category)
        return Result(
            endpoint=endpoint,
            outcome=outcome,
            duration=duration,
            completed_at=datetime(2024, 5, 1, 12, 30, 45, tzinfo=UTC),
            attempts=attempts,
        )

    return _make


class FakeClock:
    """Monotonic clock that only advances when ``sleep`` is awaited."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


class SlowTransport:
    """Transport answering every GET after ``delay`` seconds.

    Tracks how many requests are in flight at once.
    """

    def __init__(self, delay: float = 0.0, status: int = 200) -> None:
        self.delay = delay
        self.status = status
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls: list[str] = []
        self.cancelled = 0

    async def get(self, url: str, headers: Mapping[str, str], timeout: float) -> int:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.in_flight -= 1
        return self.status


@pytest.fixture()
def slow_transport_factory() -> Callable[..., SlowTransport]:
    return SlowTransport


@pytest.fixture()
async def http_server():
    """Start an aiohttp test server with fixed routes; yield its base URL."""

    async def ok(request: web.Request) -> web.Response:
        return web.Response(status=200, body=b"x" * 10_000)

    async def missing(request: web.Request) -> web.Response:
        return web.Response(status=404, text="not found")

    async def broken(request: web.Request) -> web.Response:
        return web.Response(status=500, text="internal error")

    async def redirect(request: web.Request) -> web.Response:
        raise web.HTTPFound("/ok")

    async def agent(request: web.Request) -> web.Response:
        expected = request.query.get("expect", "")
        return web.Response(status=200 if request.headers.get("User-Agent") == expected else 400)

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(2)
        return web.Response(status=200)

    app = web.Application()
    app.router.add_get("/ok", ok)
    app.router.add_get("/missing", missing)
    app.router.add_get("/broken", broken)
    app.router.add_get("/redirect", redirect)
    app.router.add_get("/agent", agent)
    app.router.add_get("/slow", slow)

    runner = web.AppRunner(app, shutdown_timeout=0.1)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    port: int = site._server.sockets[0].getsockname()[1]  # type: ignore[union-attr]

    yield f"http://127.0.0.1:{port}"

    await runner.cleanup()


@pytest.fixture()
def closed_port() -> int:
    """Return a local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
