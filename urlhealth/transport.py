"""aiohttp-backed transport shared by all workers of one run."""

from __future__ import annotations

import socket
from collections.abc import Mapping
from types import TracebackType

import aiohttp

from urlhealth.checker import (
    CheckConnectionRefusedError,
    CheckDnsError,
    CheckError,
    CheckTimeoutError,
    CheckTlsError,
)

# Bounded body prefix read to confirm the response.
BODY_READ_LIMIT = 4096

DEFAULT_CONNECTION_LIMIT = 100
DEFAULT_CONNECTION_LIMIT_PER_HOST = 10
DEFAULT_KEEPALIVE_TIMEOUT = 30.0


class AiohttpTransport:
    """HTTP GET transport over one pooled aiohttp.ClientSession.

    The session is created lazily inside the running event loop and closed by
    ``close()`` (or ``async with``). A caller-supplied session is used as is and
    left open.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        limit: int = DEFAULT_CONNECTION_LIMIT,
        limit_per_host: int = DEFAULT_CONNECTION_LIMIT_PER_HOST,
        keepalive_timeout: float = DEFAULT_KEEPALIVE_TIMEOUT,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._limit = limit
        self._limit_per_host = limit_per_host
        self._keepalive_timeout = keepalive_timeout

    async def __aenter__(self) -> AiohttpTransport:
        self._ensure_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the owned session and its connection pool."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            connector = aiohttp.TCPConnector(
                limit=self._limit,
                limit_per_host=self._limit_per_host,
                keepalive_timeout=self._keepalive_timeout,
            )
            self._session = aiohttp.ClientSession(connector=connector)
        return self._session

    async def get(self, url: str, headers: Mapping[str, str], timeout: float) -> int:
        """Perform an HTTP GET, drain up to BODY_READ_LIMIT bytes, return the status.

        Only bodies that fit within BODY_READ_LIMIT leave the connection
        reusable; aiohttp closes a connection released with unread data.
        """
        session = self._ensure_session()
        try:
            async with session.get(
                url,
                headers=dict(headers),
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                await resp.content.read(BODY_READ_LIMIT)
                return resp.status
        except TimeoutError as exc:
            msg = f"HTTP request to {url} timed out after {timeout:g}s"
            raise CheckTimeoutError(msg) from exc
        except aiohttp.ClientSSLError as e:
            msg = f"TLS error for {url}: {e}"
            raise CheckTlsError(msg) from e
        except aiohttp.ClientConnectorError as e:
            if isinstance(e.os_error, socket.gaierror):
                msg = f"cannot resolve host for {url}: {e}"
                raise CheckDnsError(msg) from e
            msg = f"HTTP connection to {url} refused: {e}"
            raise CheckConnectionRefusedError(msg) from e
        except aiohttp.ClientError as e:
            msg = f"HTTP request to {url} failed: {e}"
            raise CheckError(msg) from e
        except ValueError as e:
            # yarl rejects malformed URLs before a request is built.
            msg = f"invalid request for {url}: {e}"
            raise CheckError(msg) from e
