"""
HTTP transport built on aiohttp.

Sends the requests described by suite calls to the server under test and
returns status, headers and the raw body.
"""

from __future__ import annotations

import asyncio
import logging

import aiohttp

from .base import BaseTransport
from .models import HTTPRequest, HTTPResponse, TransportError
from .throttle import Throttle

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000


def concat_url(base: str, path: str) -> str:
    """Join a base URL and a path with exactly one slash between them."""
    if not base:
        return path
    if not path:
        return base
    return base.rstrip("/") + "/" + path.lstrip("/")


def is_absolute_url(url: str) -> bool:
    return url.startswith("http://") or url.startswith("https://")


class HTTPTransport(BaseTransport):
    """
    aiohttp-backed transport.

    One client session is shared by every call made through the
    transport; an optional ``Throttle`` is awaited before each request.

    Example:
        async with HTTPTransport("http://localhost:8080") as transport:
            response = await transport.send(HTTPRequest("GET", "/orders/17"))
    """

    def __init__(
        self,
        base_url: str = "",
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        throttle: Throttle | None = None,
        default_headers: dict[str, str] | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self.throttle = throttle
        self.default_headers = dict(default_headers or {})
        self._session: aiohttp.ClientSession | None = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected and self._session is not None

    def resolve_url(self, url: str) -> str:
        if is_absolute_url(url):
            return url
        return concat_url(self.base_url, url)

    async def connect(self) -> None:
        """Create the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
        self._connected = True

    async def disconnect(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
        self._connected = False

    async def send(self, request: HTTPRequest, timeout_ms: int | None = None) -> HTTPResponse:
        if not self.is_connected:
            return HTTPResponse.from_error(
                TransportError.connection_error("Transport not connected. Call connect() first.")
            )

        timeout_ms = timeout_ms or self.timeout_ms
        timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)
        url = self.resolve_url(request.url)
        headers = {**self.default_headers, **request.headers}

        if self.throttle:
            await self.throttle.run_or_pause()

        logger.debug(f"{request.method} {url}")

        try:
            async with self._session.request(
                request.method,
                url,
                params=request.params or None,
                headers=headers,
                data=request.body,
                timeout=timeout,
            ) as resp:
                body = await resp.read()
                logger.debug(f"{request.method} {url} -> {resp.status}")
                return HTTPResponse(
                    status_code=resp.status,
                    reason=resp.reason or "",
                    headers={name: value for name, value in resp.headers.items()},
                    body=body,
                )

        except asyncio.TimeoutError:
            return HTTPResponse.from_error(
                TransportError.timeout_error(
                    f"Request timed out after {timeout_ms}ms",
                    data={"url": url, "method": request.method},
                )
            )
        except aiohttp.ClientConnectorError as e:
            return HTTPResponse.from_error(
                TransportError.connection_error(
                    f"Connection failed: {e}",
                    data={"url": url},
                )
            )
        except aiohttp.ClientError as e:
            return HTTPResponse.from_error(
                TransportError.connection_error(
                    f"HTTP error: {e}",
                    data={"url": url},
                )
            )

    def __repr__(self) -> str:
        status = "connected" if self.is_connected else "disconnected"
        return f"HTTPTransport(base_url={self.base_url!r}, status={status})"
