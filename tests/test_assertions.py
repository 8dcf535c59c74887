"""Tests for response expectations."""

from typing import Any

import pytest

from conftest import json_response
from ensemble.assertions import (
    AbsentExpectation,
    AssertionResult,
    AssertionStatus,
    BodyExpectation,
    BodyPathExpectation,
    BodySchemaExpectation,
    ContentTypeExpectation,
    HeaderExpectation,
    PresentExpectation,
    StatusCodeExpectation,
)
from ensemble.diffing import BodyDiffRecorder, DiffRecord
from ensemble.query import MISSING, PathErrorKind
from ensemble.transport import HTTPResponse


@pytest.fixture
def response(order: dict[str, Any]) -> HTTPResponse:
    """A 200 JSON response carrying the order document."""
    return json_response(order, headers={"Location": "/orders/417857"})


class TestStatusAndHeaders:
    """Status code, header and content-type checks."""

    def test_status_code(self, response: HTTPResponse) -> None:
        assert StatusCodeExpectation(200).check(response).passed
        result = StatusCodeExpectation(201).check(response)
        assert result.failed
        assert result.message == "Unexpected Status Code. Expected: 201, Actual: 200"

    def test_header_value(self, response: HTTPResponse) -> None:
        assert HeaderExpectation("location", "/orders/417857").check(response).passed
        result = HeaderExpectation("Location", "/orders/1").check(response)
        assert result.message == 'Unexpected header. Expected "Location: /orders/1". Actual "Location: /orders/417857"'

    def test_header_presence_only(self, response: HTTPResponse) -> None:
        assert HeaderExpectation("Location").check(response).passed

    def test_missing_header(self, response: HTTPResponse) -> None:
        result = HeaderExpectation("ETag", "abc").check(response)
        assert result.message == 'Missing header. Expected "ETag: abc"'

    def test_content_type_ignores_parameters(self) -> None:
        response = json_response({}, headers={"Content-Type": "application/json; charset=utf-8"})
        assert ContentTypeExpectation("application/json").check(response).passed
        assert not ContentTypeExpectation("application/xml").check(response).passed
        assert ContentTypeExpectation("application/json").describe() == "Content Type is 'application/json'"


class TestBodyPaths:
    """Values on exact and recursive paths."""

    def test_all_match(self, response: HTTPResponse) -> None:
        expectation = BodyPathExpectation({
            "id": 417857,
            "customer.vip": True,
            "items.size()": 2,
            "~items.sku": ["A-1", "B-2"],
            "notes": None,
        })
        result = expectation.check(response)
        assert result.passed, result.message
        assert result.message == "All 5 body paths match"

    def test_mismatch_reports_actual(self, response: HTTPResponse) -> None:
        result = BodyPathExpectation({"status": "PAID"}).check(response)
        assert result.message == 'Expected value PAID on path "status" is not found'
        assert result.path == "status"
        assert result.expected == "PAID"
        assert result.actual == "NEW"
        assert result.cause is None

    def test_unresolvable_path_reports_reason(self, response: HTTPResponse) -> None:
        result = BodyPathExpectation({"items.7.sku": "A-1"}).check(response)
        assert result.failed
        assert result.actual is MISSING
        assert result.cause.kind is PathErrorKind.INDEX_OUT_OF_BOUNDS
        assert "Array only has [2] elements" in str(result.cause)

    def test_stops_at_first_failure(self, response: HTTPResponse) -> None:
        result = BodyPathExpectation({"status": "PAID", "id": 1}).check(response)
        assert result.path == "status"

    def test_unparseable_body_is_an_error(self) -> None:
        response = HTTPResponse(status_code=200, headers={"Content-Type": "text/plain"}, body=b"ok")
        result = BodyPathExpectation({"id": 1}).check(response)
        assert result.status is AssertionStatus.ERROR
        assert result.message.startswith("Can't parse response body.")


class TestWholeBody:
    """Partial and strict body comparison."""

    def test_partial_match(self, response: HTTPResponse) -> None:
        assert BodyExpectation({"status": "NEW", "items": [{"sku": "A-1"}]}).check(response).passed

    def test_strict_match_fails_on_extra_fields(self, response: HTTPResponse) -> None:
        result = BodyExpectation({"status": "NEW"}, strict=True).check(response)
        assert result.failed
        assert result.message.startswith("Body does not match expected (strict match):\n")
        assert "$.customer:" in result.message

    def test_partial_mismatch(self, response: HTTPResponse) -> None:
        result = BodyExpectation({"status": "PAID"}).check(response)
        assert result.message == (
            'Body does not match expected (partial match):\n$.status:\n\tExpected: "PAID"\n\tActual: "NEW"\n'
        )
        assert result.differences == 1
        assert [d.path for d in result.diffs] == ["$.status"]


class TestAbsentPresent:
    """Path existence checks."""

    def test_absent(self, response: HTTPResponse) -> None:
        assert AbsentExpectation(["deletedAt", "~items.price"]).check(response).passed

    def test_absent_found(self, response: HTTPResponse) -> None:
        result = AbsentExpectation(["~items.qty"]).check(response)
        assert result.message == "Value expected to be absent was found: [2 1], path: ~items.qty"

    def test_null_counts_as_present(self, response: HTTPResponse) -> None:
        assert PresentExpectation(["notes", "~items.tags"]).check(response).passed
        assert not AbsentExpectation(["notes"]).check(response).passed

    def test_present_missing(self, response: HTTPResponse) -> None:
        result = PresentExpectation(["id", "customer.email"]).check(response)
        assert result.message == "Value expected to exist was not found, path: customer.email"

    def test_describe(self) -> None:
        assert AbsentExpectation(["a", "b"]).describe() == "Absent fields:\n  - a\n  - b"


class TestBodySchema:
    """JSON Schema validation through jsonschema."""

    SCHEMA = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "required": ["id", "status"],
        "properties": {
            "id": {"type": "integer"},
            "status": {"enum": ["NEW", "PAID"]},
        },
    }

    def test_valid(self, response: HTTPResponse) -> None:
        assert BodySchemaExpectation(self.SCHEMA).check(response).passed

    def test_violations_are_listed(self) -> None:
        response = json_response({"id": "x"})
        result = BodySchemaExpectation(self.SCHEMA).check(response)
        assert result.failed
        assert result.message == (
            "Unexpected Body Schema:\n"
            "\t(root): 'status' is a required property\n"
            "\tid: 'x' is not of type 'integer'"
        )
        assert result.schema_errors == [
            "(root): 'status' is a required property",
            "id: 'x' is not of type 'integer'",
        ]

    def test_unsupported_content_type(self) -> None:
        response = HTTPResponse(status_code=200, headers={"Content-Type": "text/html"}, body=b"<p/>")
        result = BodySchemaExpectation(self.SCHEMA).check(response)
        assert result.status is AssertionStatus.ERROR
        assert result.message == "Unsupported content type for schema validation: text/html"

    def test_invalid_schema(self, response: HTTPResponse) -> None:
        result = BodySchemaExpectation({"type": "objekt"}, display_name="order.json").check(response)
        assert result.status is AssertionStatus.ERROR
        assert result.message.startswith("Invalid schema order.json:")


class TestAssertionResult:
    """Outcome values and their rendering."""

    def test_passed(self) -> None:
        result = AssertionResult.ok("Status code is 200", actual=200)
        assert result.passed
        assert str(result) == "PASSED: Status code is 200\n    actual: 200"

    def test_mismatch_lines(self) -> None:
        result = AssertionResult.mismatch("Mismatch", path="a.b", expected={"x": 1}, actual=[1])
        assert str(result) == 'FAILED: Mismatch\n    path: a.b\n    expected: {"x":1}\n    actual: [1]'

    def test_null_is_a_compared_value(self) -> None:
        result = AssertionResult.mismatch("Mismatch", expected=None, actual=0)
        assert str(result) == "FAILED: Mismatch\n    expected: <nil>\n    actual: 0"

    def test_unusable(self) -> None:
        result = AssertionResult.unusable("Can't parse response body.")
        assert result.status is AssertionStatus.ERROR
        assert not result.passed and not result.failed
        assert str(result) == "ERROR: Can't parse response body."

    def test_long_values_are_truncated(self) -> None:
        result = AssertionResult.mismatch("Mismatch", actual="x" * 500)
        actual_line = str(result).splitlines()[-1]
        assert actual_line.endswith("...")
        assert len(actual_line) == len("    actual: ") + 100

    def test_body_differs_keeps_dropped_count(self) -> None:
        recorder = BodyDiffRecorder(records=[DiffRecord("$.a", "1", "2")], dropped=4)
        result = AssertionResult.body_differs(recorder)
        assert result.failed
        assert result.differences == 5
        assert result.message.startswith("Body does not match expected (partial match):\n$.a:")
