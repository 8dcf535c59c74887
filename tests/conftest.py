"""Shared fixtures: sample documents, canned responses and a fake transport."""

import json
from typing import Any, Callable

import pytest

from ensemble.query import QueryEngine
from ensemble.transport import BaseTransport, HTTPRequest, HTTPResponse


def json_response(body: Any, status_code: int = 200, headers: dict[str, str] | None = None) -> HTTPResponse:
    """Build a JSON ``HTTPResponse`` without touching the network."""
    all_headers = {"Content-Type": "application/json"}
    all_headers.update(headers or {})
    return HTTPResponse(
        status_code=status_code,
        reason="OK",
        headers=all_headers,
        body=json.dumps(body).encode("utf-8"),
    )


class FakeTransport(BaseTransport):
    """
    In-memory transport for runner tests.

    ``handler`` maps each request to a response; every request is kept
    in ``requests`` for later inspection.
    """

    def __init__(self, handler: Callable[[HTTPRequest], HTTPResponse]):
        self.handler = handler
        self.requests: list[HTTPRequest] = []
        self._connected = False

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def send(self, request: HTTPRequest, timeout_ms: int | None = None) -> HTTPResponse:
        self.requests.append(request)
        return self.handler(request)

    @property
    def is_connected(self) -> bool:
        return self._connected


@pytest.fixture
def engine() -> QueryEngine:
    """Provide a QueryEngine with the default function registry."""
    return QueryEngine()


@pytest.fixture
def order() -> dict[str, Any]:
    """A typical order document with nested arrays."""
    return {
        "id": 417857,
        "status": "NEW",
        "customer": {"name": "Smith", "vip": True},
        "items": [
            {"sku": "A-1", "qty": 2, "tags": ["red", "small"]},
            {"sku": "B-2", "qty": 1, "tags": ["blue"]},
        ],
        "notes": None,
    }
