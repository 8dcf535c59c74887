"""
Transport layer models for HTTP calls.

This module defines the request and response structures exchanged with
the server under test, transport-level errors, and response body parsing.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any
from xml.etree import ElementTree

from ..query.document import MISSING

JSON_MEDIA_TYPE = "application/json"
XML_MEDIA_TYPES = ("application/xml", "text/xml")


class TransportErrorCode(IntEnum):
    """Transport failure classes."""
    CONNECTION_ERROR = -32000
    TIMEOUT_ERROR = -32001
    INTERNAL_ERROR = -32603


@dataclass
class TransportError:
    """A request that never produced an HTTP response."""
    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            result["data"] = self.data
        return result

    def __str__(self) -> str:
        return self.message

    @classmethod
    def connection_error(cls, message: str, data: Any = None) -> TransportError:
        return cls(TransportErrorCode.CONNECTION_ERROR, message, data)

    @classmethod
    def timeout_error(cls, message: str, data: Any = None) -> TransportError:
        return cls(TransportErrorCode.TIMEOUT_ERROR, message, data)


class BodyParseError(ValueError):
    """Raised when a response body cannot be turned into a document."""


def media_type(header_value: str | None) -> str:
    """Media type of a Content-Type value, without parameters, lower-cased."""
    if not header_value:
        return ""
    return header_value.split(";", 1)[0].strip().lower()


@dataclass
class HTTPRequest:
    """A request to send."""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def dump(self) -> str:
        """Readable rendering for HTTP logging."""
        lines = [f"{self.method} {self.url}"]
        if self.params:
            query = "&".join(f"{k}={v}" for k, v in self.params.items())
            lines[0] += f"?{query}"
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        if self.body:
            lines.append("")
            lines.append(self.body.decode("utf-8", errors="replace"))
        return "\n".join(lines)


@dataclass
class HTTPResponse:
    """
    Response of a call, or the transport error that prevented one.

    The body is kept as raw bytes; ``parsed_body()`` turns it into a
    document on first use and caches the result.
    """
    status_code: int = 0
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    error: TransportError | None = None
    _parsed: Any = field(default=MISSING, repr=False, compare=False)

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def from_error(cls, error: TransportError) -> HTTPResponse:
        return cls(error=error)

    def header(self, name: str) -> str:
        """Case-insensitive header lookup; empty string when absent."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return ""

    @property
    def content_type(self) -> str:
        return media_type(self.header("Content-Type"))

    def parsed_body(self) -> Any:
        """
        The body as a document.

        JSON and XML bodies are supported; an empty body is ``None``.

        Raises:
            BodyParseError: If the body cannot be parsed
        """
        if self._parsed is MISSING:
            self._parsed = self._parse_body()
        return self._parsed

    def _parse_body(self) -> Any:
        if not self.body:
            return None

        content_type = self.content_type
        if content_type == JSON_MEDIA_TYPE or content_type.endswith("+json"):
            try:
                return json.loads(self.body)
            except ValueError as e:
                raise BodyParseError(f"Invalid JSON body: {e}") from e

        if content_type in XML_MEDIA_TYPES or content_type.endswith("+xml"):
            try:
                root = ElementTree.fromstring(self.body)
            except ElementTree.ParseError as e:
                raise BodyParseError(f"Invalid XML body: {e}") from e
            return {root.tag: _element_to_document(root)}

        raise BodyParseError(f"Cannot parse body. Unsupported content type: {content_type!r}")

    def dump(self) -> str:
        """Readable rendering for HTTP logging."""
        if self.error:
            return f"Transport error: {self.error}"

        lines = [f"{self.status_code} {self.reason}".rstrip()]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        if self.body:
            lines.append("")
            try:
                lines.append(json.dumps(self.parsed_body(), indent=2, ensure_ascii=False))
            except BodyParseError:
                lines.append(self.body.decode("utf-8", errors="replace"))
        return "\n".join(lines)


def _element_to_document(element: ElementTree.Element) -> Any:
    """
    Map an XML element onto the document model.

    Attributes become ``-name`` keys, text alongside children or
    attributes becomes ``#text``, and repeated child tags become arrays.
    A leaf element with no attributes is its (stripped) text.
    """
    children = list(element)
    text = (element.text or "").strip()

    if not children and not element.attrib:
        return text

    value: dict[str, Any] = {f"-{name}": attr for name, attr in element.attrib.items()}
    for child in children:
        child_value = _element_to_document(child)
        if child.tag not in value:
            value[child.tag] = child_value
        elif isinstance(value[child.tag], list):
            value[child.tag].append(child_value)
        else:
            value[child.tag] = [value[child.tag], child_value]

    if text:
        value["#text"] = text
    return value
