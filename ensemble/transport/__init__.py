"""
HTTP Transport Layer

This package sends the requests described by suite calls and returns
responses whose bodies can be parsed into documents.

Usage:
    from ensemble.transport import HTTPTransport, HTTPRequest, Throttle

    transport = HTTPTransport("http://localhost:8080", throttle=Throttle(100, 60.0))

    async with transport:
        response = await transport.send(HTTPRequest("GET", "/orders/17"))

        if response.success:
            print(response.status_code, response.parsed_body())
        else:
            print(response.error)
"""

# Base
from .base import BaseTransport

# Implementation
from .http import DEFAULT_TIMEOUT_MS, HTTPTransport, concat_url, is_absolute_url

# Rate limiting
from .throttle import UNLIMITED, Throttle

# Models
from .models import (
    JSON_MEDIA_TYPE,
    BodyParseError,
    HTTPRequest,
    HTTPResponse,
    TransportError,
    TransportErrorCode,
    media_type,
)

__all__ = [
    # Base
    "BaseTransport",
    # Implementation
    "DEFAULT_TIMEOUT_MS",
    "HTTPTransport",
    "concat_url",
    "is_absolute_url",
    # Rate limiting
    "UNLIMITED",
    "Throttle",
    # Models
    "JSON_MEDIA_TYPE",
    "BodyParseError",
    "HTTPRequest",
    "HTTPResponse",
    "TransportError",
    "TransportErrorCode",
    "media_type",
]
