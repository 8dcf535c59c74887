"""
Base transport interface for HTTP calls.

This module defines the abstract base class that all transport
implementations must follow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import HTTPRequest, HTTPResponse


class BaseTransport(ABC):
    """
    Abstract base class for transports.

    A transport sends a request description and returns the response. It
    never raises for network failures: those come back as an
    ``HTTPResponse`` carrying a ``TransportError``.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Open whatever the transport needs (a client session for HTTP)."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    async def send(self, request: HTTPRequest, timeout_ms: int | None = None) -> HTTPResponse:
        """
        Send a request and get the response.

        Args:
            request: The request to send; relative URLs are resolved
                against the transport's base URL
            timeout_ms: Timeout in milliseconds, or the transport default

        Returns:
            HTTPResponse with either the response or a transport error
        """
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Return True if the transport is currently connected."""
        pass

    async def __aenter__(self) -> BaseTransport:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()
