"""
Schema parser for test suites.

This module converts validated JSON/YAML data into typed Suite structures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..query.document import MISSING
from .models import Call, Case, Expect, On, Remember, Suite


class SchemaParser:
    """Parses and converts validated data to a typed Suite."""

    def __init__(self, data: list[dict[str, Any]], name: str, dir: str = ".", path: Path | None = None):
        self.data = data
        self.name = name
        self.dir = dir
        self.path = path

    def parse(self) -> Suite:
        """Convert validated data to a typed Suite."""
        return Suite(
            name=self.name,
            dir=self.dir,
            path=self.path,
            cases=[self._parse_case(i, case) for i, case in enumerate(self.data)],
        )

    def _parse_case(self, index: int, case: dict) -> Case:
        return Case(
            name=case.get("name") or f"case {index + 1}",
            calls=[self._parse_call(call) for call in case["calls"]],
            ignore=case.get("ignore"),
        )

    def _parse_call(self, call: dict) -> Call:
        return Call(
            on=self._parse_on(call["on"]),
            expect=self._parse_expect(call.get("expect") or {}),
            args=call.get("args") or {},
            remember=self._parse_remember(call.get("remember") or {}),
        )

    def _parse_on(self, on: dict) -> On:
        return On(
            method=on["method"].upper(),
            url=on["url"],
            headers=on.get("headers") or {},
            params=on.get("params") or {},
            body=on.get("body"),
            body_file=on.get("bodyFile"),
        )

    def _parse_expect(self, expect: dict) -> Expect:
        return Expect(
            status_code=expect.get("statusCode"),
            content_type=expect.get("contentType"),
            headers=expect.get("headers") or {},
            body=expect.get("body") or {},
            body_equals=expect.get("bodyEquals", MISSING),
            strict_body=expect.get("strictBody", False),
            absent=expect.get("absent") or [],
            present=expect.get("present") or [],
            body_schema_file=expect.get("bodySchemaFile"),
            body_schema_uri=expect.get("bodySchemaURI"),
        )

    def _parse_remember(self, remember: dict) -> Remember:
        return Remember(
            body=remember.get("body") or {},
            headers=remember.get("headers") or {},
        )
