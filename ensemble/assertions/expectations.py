"""
Response expectations.

Each expectation checks one aspect of an HTTP response and returns an
``AssertionResult``; none of them raise on a failed check.

    expectation = StatusCodeExpectation(201)
    result = expectation.check(response)
    if not result.passed:
        print(result.message)
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

import jsonschema
from jsonschema.validators import validator_for

from ..diffing import diff_bodies
from ..query import QueryEngine, to_string
from ..transport.models import JSON_MEDIA_TYPE, BodyParseError, HTTPResponse, media_type
from .models import AssertionResult

logger = logging.getLogger(__name__)


class ResponseExpectation(ABC):
    """A single check on a response."""

    @abstractmethod
    def check(self, response: HTTPResponse) -> AssertionResult:
        pass

    @abstractmethod
    def describe(self) -> str:
        """One-line, user-facing description of what is checked."""
        pass

    def __str__(self) -> str:
        return self.describe()


def _parse_body(response: HTTPResponse) -> tuple[Any, AssertionResult | None]:
    """
    Parsed response body.

    Returns:
        Tuple of (document, error). If error is not None, document is None.
    """
    try:
        return response.parsed_body(), None
    except BodyParseError as e:
        return None, AssertionResult.unusable(f"Can't parse response body. {e}")


# ─────────────────────────────────────────────────────────────────────────────
# Status & Headers
# ─────────────────────────────────────────────────────────────────────────────

class StatusCodeExpectation(ResponseExpectation):
    def __init__(self, status_code: int):
        self.status_code = status_code

    def check(self, response: HTTPResponse) -> AssertionResult:
        if response.status_code != self.status_code:
            return AssertionResult.mismatch(
                message=f"Unexpected Status Code. Expected: {self.status_code}, Actual: {response.status_code}",
                expected=self.status_code,
                actual=response.status_code,
            )
        return AssertionResult.ok(f"Status code is {self.status_code}", actual=response.status_code)

    def describe(self) -> str:
        return f"Status code is {self.status_code}"


class HeaderExpectation(ResponseExpectation):
    """
    One response header.

    An empty expected value only requires the header to be present.
    """

    def __init__(
        self,
        name: str,
        value: str = "",
        value_parser: Callable[[str], str] | None = None,
    ):
        self.name = name
        self.value = value
        self.value_parser = value_parser

    def check(self, response: HTTPResponse) -> AssertionResult:
        value = response.header(self.name)
        if self.value_parser is not None:
            value = self.value_parser(value)
        value = value.strip()

        if not value:
            return AssertionResult.mismatch(
                message=f'Missing header. Expected "{self.name}: {self.value}"',
                expected=self.value,
            )
        if self.value and self.value != value:
            return AssertionResult.mismatch(
                message=f'Unexpected header. Expected "{self.name}: {self.value}". '
                        f'Actual "{self.name}: {value}"',
                expected=self.value,
                actual=value,
            )
        return AssertionResult.ok(f"Header '{self.name}' matches", actual=value)

    def describe(self) -> str:
        return f"Header '{self.name}' matches expected value '{self.value}'"


class ContentTypeExpectation(ResponseExpectation):
    """
    Media type of the Content-Type header.

    Parameters are ignored: ``application/json; charset=utf-8`` matches
    ``application/json``.
    """

    def __init__(self, value: str):
        self.value = value
        self._header = HeaderExpectation("Content-Type", value, media_type)

    def check(self, response: HTTPResponse) -> AssertionResult:
        return self._header.check(response)

    def describe(self) -> str:
        return f"Content Type is '{self.value}'"


# ─────────────────────────────────────────────────────────────────────────────
# Body
# ─────────────────────────────────────────────────────────────────────────────

class BodyPathExpectation(ResponseExpectation):
    """
    Values on body paths.

    Paths starting with ``~`` are searched recursively, others resolved
    exactly. List values under a recursive path must all be found.
    """

    def __init__(self, path_expectations: dict[str, Any], engine: QueryEngine | None = None):
        self.path_expectations = path_expectations
        self.engine = engine or QueryEngine()

    def check(self, response: HTTPResponse) -> AssertionResult:
        body, error = _parse_body(response)
        if error:
            return error

        for path, expected in self.path_expectations.items():
            result = self.engine.check(body, path, expected)
            if not result.found:
                return AssertionResult.path_not_matched(path, expected, result)

        return AssertionResult.ok(f"All {len(self.path_expectations)} body paths match")

    def describe(self) -> str:
        return f"Expected body's structure / values ({len(self.path_expectations)} checks)"


class BodyExpectation(ResponseExpectation):
    """
    The whole body against an expected document.

    Partial by default: the expected body describes a required subset of
    the actual one. Strict mode requires both to match exactly.
    """

    def __init__(self, expected_body: Any, strict: bool = False):
        self.expected_body = expected_body
        self.strict = strict

    def check(self, response: HTTPResponse) -> AssertionResult:
        body, error = _parse_body(response)
        if error:
            return error

        recorder = diff_bodies(self.expected_body, body, strict=self.strict)
        if recorder.has_diffs:
            return AssertionResult.body_differs(recorder)

        return AssertionResult.ok("Body matches expected")

    def describe(self) -> str:
        if self.strict:
            return "Expected body's structure / values (strict)"
        return "Expected body's structure / values"


class AbsentExpectation(ResponseExpectation):
    """Nothing may be reachable along any of the paths."""

    def __init__(self, paths: list[str], engine: QueryEngine | None = None):
        self.paths = paths
        self.engine = engine or QueryEngine()

    def check(self, response: HTTPResponse) -> AssertionResult:
        body, error = _parse_body(response)
        if error:
            return error

        for path in self.paths:
            found = self.engine.collect(body, path)
            if found:
                return AssertionResult.mismatch(
                    message=f"Value expected to be absent was found: {to_string(found)}, path: {path}",
                    path=path,
                    actual=found,
                )

        return AssertionResult.ok("All paths are absent")

    def describe(self) -> str:
        return "Absent fields:" + "".join(f"\n  - {path}" for path in self.paths)


class PresentExpectation(ResponseExpectation):
    """Something must be reachable along each of the paths."""

    def __init__(self, paths: list[str], engine: QueryEngine | None = None):
        self.paths = paths
        self.engine = engine or QueryEngine()

    def check(self, response: HTTPResponse) -> AssertionResult:
        body, error = _parse_body(response)
        if error:
            return error

        for path in self.paths:
            if not self.engine.collect(body, path):
                return AssertionResult.mismatch(
                    message=f"Value expected to exist was not found, path: {path}",
                    path=path,
                )

        return AssertionResult.ok("All paths are present")

    def describe(self) -> str:
        return "Present fields:" + "".join(f"\n  - {path}" for path in self.paths)


class BodySchemaExpectation(ResponseExpectation):
    """JSON body validated against a JSON Schema (any draft jsonschema knows)."""

    def __init__(self, schema: dict[str, Any], display_name: str = ""):
        self.schema = schema
        self.display_name = display_name

    def check(self, response: HTTPResponse) -> AssertionResult:
        content_type = response.content_type
        if content_type != JSON_MEDIA_TYPE and not content_type.endswith("+json"):
            return AssertionResult.unusable(
                f"Unsupported content type for schema validation: {content_type or '<none>'}"
            )

        try:
            document = json.loads(response.body)
        except ValueError as e:
            return AssertionResult.unusable(f"Can't parse response body. {e}")

        validator_cls = validator_for(self.schema)
        try:
            validator_cls.check_schema(self.schema)
        except jsonschema.SchemaError as e:
            return AssertionResult.unusable(
                f"Invalid schema {self.display_name}: {e.message}".replace("  ", " ")
            )

        errors = sorted(
            validator_cls(self.schema).iter_errors(document),
            key=lambda e: [str(p) for p in e.absolute_path],
        )
        if errors:
            violations = []
            for error in errors:
                location = ".".join(str(p) for p in error.absolute_path) or "(root)"
                violations.append(f"{location}: {error.message}")
            return AssertionResult.schema_violated(violations)

        return AssertionResult.ok("Body matches the schema")

    def describe(self) -> str:
        if not self.display_name:
            return "Body matches the schema"
        return f"Body matches the schema ({self.display_name})"
