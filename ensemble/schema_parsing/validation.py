"""
Schema validation for test suites.

This module contains the validation logic that checks raw parsed
JSON/YAML against the suite schema and reports errors with helpful
messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "[0].calls[1].on.url"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Schema validation passed"
        lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


def is_suite_shape(data: Any) -> bool:
    """
    Cheap shape check used during discovery.

    A suite file holds a list of objects that declare ``calls``; other
    JSON/YAML files in the suite directory (payloads, schemas) are skipped.
    """
    return (
        isinstance(data, list)
        and len(data) > 0
        and all(isinstance(item, dict) and "calls" in item for item in data)
    )


# ─────────────────────────────────────────────────────────────────────────────
# Suite Validator
# ─────────────────────────────────────────────────────────────────────────────

class SchemaValidator:
    """Validates raw parsed JSON/YAML against the suite schema."""

    CASE_FIELDS = {"name", "ignore", "calls"}
    CALL_FIELDS = {"args", "on", "expect", "remember"}
    ON_FIELDS = {"method", "url", "headers", "params", "body", "bodyFile"}
    EXPECT_FIELDS = {
        "statusCode",
        "contentType",
        "headers",
        "body",
        "bodyEquals",
        "strictBody",
        "absent",
        "present",
        "bodySchemaFile",
        "bodySchemaURI",
    }
    REMEMBER_FIELDS = {"body", "headers"}
    HTTP_METHODS = {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"}

    def __init__(self, data: Any):
        self.data = data
        self.result = ValidationResult()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        if not isinstance(self.data, list):
            self.result.add_error(
                "suite",
                "Must be a list of test cases",
                value=type(self.data).__name__,
                suggestion="Start the file with '- name: ...' (YAML) or '[' (JSON)"
            )
            return self.result

        if len(self.data) == 0:
            self.result.add_error(
                "suite",
                "Must contain at least one test case"
            )
            return self.result

        for i, case in enumerate(self.data):
            self._validate_case(f"[{i}]", case)

        return self.result

    def _validate_case(self, path: str, case: Any) -> None:
        if not isinstance(case, dict):
            self.result.add_error(
                path,
                "Test case must be an object",
                value=case
            )
            return

        self._check_unknown_fields(path, case, self.CASE_FIELDS)

        name = case.get("name")
        if name is not None and not isinstance(name, str):
            self.result.add_error(
                f"{path}.name",
                "Must be a string",
                value=name
            )

        ignore = case.get("ignore")
        if ignore is not None and not isinstance(ignore, str):
            self.result.add_error(
                f"{path}.ignore",
                "Must be a string (the reason the case is skipped)",
                value=ignore
            )

        calls = case.get("calls")
        if calls is None:
            self.result.add_error(
                f"{path}.calls",
                "Required field 'calls' is missing",
                suggestion="Add at least one call with 'on' and 'expect' sections"
            )
            return
        if not isinstance(calls, list) or len(calls) == 0:
            self.result.add_error(
                f"{path}.calls",
                "Must be a non-empty list",
                value=calls
            )
            return

        for i, call in enumerate(calls):
            self._validate_call(f"{path}.calls[{i}]", call)

    def _validate_call(self, path: str, call: Any) -> None:
        if not isinstance(call, dict):
            self.result.add_error(
                path,
                "Call must be an object",
                value=call
            )
            return

        self._check_unknown_fields(path, call, self.CALL_FIELDS)

        args = call.get("args")
        if args is not None:
            if not isinstance(args, dict):
                self.result.add_error(
                    f"{path}.args",
                    "Must be an object",
                    value=args
                )
            else:
                for name, value in args.items():
                    if isinstance(value, (dict, list)):
                        self.result.add_error(
                            f"{path}.args.{name}",
                            "Argument values must be strings, numbers or booleans",
                            value=value
                        )

        if "on" not in call:
            self.result.add_error(
                f"{path}.on",
                "Required field 'on' is missing",
                suggestion="Describe the request with 'method' and 'url'"
            )
        else:
            self._validate_on(f"{path}.on", call["on"])

        if "expect" not in call:
            self.result.add_error(
                f"{path}.expect",
                "Required field 'expect' is missing",
                suggestion="Add at least 'statusCode' to check the response"
            )
        else:
            self._validate_expect(f"{path}.expect", call["expect"])

        remember = call.get("remember")
        if remember is not None:
            self._validate_remember(f"{path}.remember", remember)

    def _validate_on(self, path: str, on: Any) -> None:
        if not isinstance(on, dict):
            self.result.add_error(
                path,
                "Must be an object",
                value=on
            )
            return

        self._check_unknown_fields(path, on, self.ON_FIELDS)

        method = on.get("method")
        if not method:
            self.result.add_error(
                f"{path}.method",
                "Required field 'method' is missing"
            )
        elif not isinstance(method, str):
            self.result.add_error(
                f"{path}.method",
                "Must be a string",
                value=method
            )
        elif method.upper() not in self.HTTP_METHODS:
            self.result.add_error(
                f"{path}.method",
                "Unknown HTTP method",
                value=method,
                suggestion=f"Valid methods: {', '.join(sorted(self.HTTP_METHODS))}"
            )

        url = on.get("url")
        if not url:
            self.result.add_error(
                f"{path}.url",
                "Required field 'url' is missing"
            )
        elif not isinstance(url, str):
            self.result.add_error(
                f"{path}.url",
                "Must be a string",
                value=url
            )

        self._check_string_map(f"{path}.headers", on.get("headers"))
        self._check_string_map(f"{path}.params", on.get("params"))

        body_file = on.get("bodyFile")
        if body_file is not None and not isinstance(body_file, str):
            self.result.add_error(
                f"{path}.bodyFile",
                "Must be a string (path relative to the suite file)",
                value=body_file
            )
        if body_file and on.get("body") is not None:
            self.result.add_error(
                path,
                "Use either 'body' or 'bodyFile', not both"
            )

    def _validate_expect(self, path: str, expect: Any) -> None:
        if not isinstance(expect, dict):
            self.result.add_error(
                path,
                "Must be an object",
                value=expect
            )
            return

        self._check_unknown_fields(path, expect, self.EXPECT_FIELDS)

        status_code = expect.get("statusCode")
        if status_code is not None:
            if isinstance(status_code, bool) or not isinstance(status_code, int):
                self.result.add_error(
                    f"{path}.statusCode",
                    "Must be an integer",
                    value=status_code
                )
            elif not 100 <= status_code <= 599:
                self.result.add_error(
                    f"{path}.statusCode",
                    "Must be a valid HTTP status code (100-599)",
                    value=status_code
                )

        content_type = expect.get("contentType")
        if content_type is not None and not isinstance(content_type, str):
            self.result.add_error(
                f"{path}.contentType",
                "Must be a string",
                value=content_type
            )

        self._check_string_map(f"{path}.headers", expect.get("headers"))

        body = expect.get("body")
        if body is not None and not isinstance(body, dict):
            self.result.add_error(
                f"{path}.body",
                "Must be an object mapping paths to expected values",
                value=body,
                suggestion="Use 'bodyEquals' to compare the whole body"
            )

        strict_body = expect.get("strictBody")
        if strict_body is not None and not isinstance(strict_body, bool):
            self.result.add_error(
                f"{path}.strictBody",
                "Must be a boolean",
                value=strict_body
            )

        for key in ("absent", "present"):
            paths = expect.get(key)
            if paths is None:
                continue
            if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
                self.result.add_error(
                    f"{path}.{key}",
                    "Must be a list of paths",
                    value=paths
                )

        for key in ("bodySchemaFile", "bodySchemaURI"):
            value = expect.get(key)
            if value is not None and not isinstance(value, str):
                self.result.add_error(
                    f"{path}.{key}",
                    "Must be a string",
                    value=value
                )

    def _validate_remember(self, path: str, remember: Any) -> None:
        if not isinstance(remember, dict):
            self.result.add_error(
                path,
                "Must be an object",
                value=remember
            )
            return

        self._check_unknown_fields(path, remember, self.REMEMBER_FIELDS)
        self._check_string_map(f"{path}.body", remember.get("body"))
        self._check_string_map(f"{path}.headers", remember.get("headers"))

    def _check_string_map(self, path: str, value: Any) -> None:
        if value is None:
            return
        if not isinstance(value, dict):
            self.result.add_error(
                path,
                "Must be an object",
                value=value
            )
            return
        for key, item in value.items():
            if not isinstance(item, str):
                self.result.add_error(
                    f"{path}.{key}",
                    "Must be a string",
                    value=item,
                    suggestion="Quote the value, e.g. '\"42\"'"
                )

    def _check_unknown_fields(self, path: str, data: dict, allowed: set[str]) -> None:
        for key in data:
            if key not in allowed:
                self.result.add_error(
                    f"{path}.{key}",
                    f"Unknown field '{key}'",
                    suggestion=f"Valid fields are: {', '.join(sorted(allowed))}"
                )
