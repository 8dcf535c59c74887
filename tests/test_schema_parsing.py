"""Tests for suite validation, parsing and discovery."""

import json
from pathlib import Path

import pytest
import yaml

from ensemble.query import MISSING
from ensemble.schema_parsing import (
    discover_suite_files,
    is_suite_shape,
    load_suite,
    load_suites,
    load_yaml,
    validate_suite_text,
)

VALID_SUITE = """
- name: create and fetch
  calls:
    - args:
        qty: 3
      on:
        method: post
        url: /orders
        headers:
          Content-Type: application/json
        body:
          qty: "{qty}"
      expect:
        statusCode: 201
        contentType: application/json
        body:
          status: NEW
      remember:
        body:
          orderId: id
        headers:
          location: Location
    - on:
        method: GET
        url: "{location}"
      expect:
        statusCode: 200
        bodyEquals:
          status: NEW
        strictBody: true
        absent: [deletedAt]
        present: [id]
- ignore: waiting for the cancel endpoint
  calls:
    - on: {method: DELETE, url: /orders/1}
      expect: {statusCode: 204}
"""


def _messages(text: str) -> list[tuple[str, str]]:
    suite, result = validate_suite_text(text)
    assert suite is None
    return [(e.path, e.message) for e in result.errors]


class TestParsing:
    """Validated data becomes typed suites."""

    def test_full_suite(self) -> None:
        suite, result = validate_suite_text(VALID_SUITE, name="orders")
        assert result.is_valid, str(result)
        assert suite.name == "orders"
        assert [case.name for case in suite.cases] == ["create and fetch", "case 2"]

        create, fetch = suite.cases[0].calls
        assert create.on.method == "POST"
        assert create.on.body == {"qty": "{qty}"}
        assert create.args == {"qty": 3}
        assert create.expect.status_code == 201
        assert create.expect.body == {"status": "NEW"}
        assert not create.expect.has_body_equals
        assert create.remember.body == {"orderId": "id"}
        assert create.remember.headers == {"location": "Location"}

        assert fetch.expect.body_equals == {"status": "NEW"}
        assert fetch.expect.strict_body
        assert fetch.expect.absent == ["deletedAt"]
        assert fetch.expect.present == ["id"]
        assert fetch.expect.body_equals is not MISSING

    def test_ignored_case(self) -> None:
        suite, _ = validate_suite_text(VALID_SUITE)
        assert suite.cases[1].ignored
        assert suite.cases[1].ignore == "waiting for the cancel endpoint"
        assert not suite.cases[0].ignored

    def test_null_body_equals_is_kept(self) -> None:
        suite, _ = validate_suite_text(
            "- calls:\n"
            "    - on: {method: GET, url: /x}\n"
            "      expect: {bodyEquals: null}\n"
        )
        assert suite.cases[0].calls[0].expect.has_body_equals
        assert suite.cases[0].calls[0].expect.body_equals is None


class TestValidation:
    """Invalid suites are reported with paths, not exceptions."""

    def test_top_level_must_be_a_list(self) -> None:
        assert _messages("name: x") == [("suite", "Must be a list of test cases")]

    def test_empty_list(self) -> None:
        assert _messages("[]") == [("suite", "Must contain at least one test case")]

    def test_missing_calls(self) -> None:
        assert _messages("- name: x") == [("[0].calls", "Required field 'calls' is missing")]

    def test_missing_on_and_expect(self) -> None:
        assert _messages("- calls:\n    - args: {a: 1}\n") == [
            ("[0].calls[0].on", "Required field 'on' is missing"),
            ("[0].calls[0].expect", "Required field 'expect' is missing"),
        ]

    def test_unknown_method(self) -> None:
        errors = _messages("- calls:\n    - on: {method: FETCH, url: /x}\n      expect: {}\n")
        assert errors == [("[0].calls[0].on.method", "Unknown HTTP method")]

    def test_body_and_body_file(self) -> None:
        errors = _messages(
            "- calls:\n"
            "    - on: {method: POST, url: /x, body: {a: 1}, bodyFile: a.json}\n"
            "      expect: {}\n"
        )
        assert errors == [("[0].calls[0].on", "Use either 'body' or 'bodyFile', not both")]

    def test_status_code_range(self) -> None:
        errors = _messages("- calls:\n    - on: {method: GET, url: /x}\n      expect: {statusCode: 42}\n")
        assert errors == [("[0].calls[0].expect.statusCode", "Must be a valid HTTP status code (100-599)")]

    def test_structured_args(self) -> None:
        errors = _messages(
            "- calls:\n"
            "    - args: {items: [1, 2]}\n"
            "      on: {method: GET, url: /x}\n"
            "      expect: {}\n"
        )
        assert errors == [
            ("[0].calls[0].args.items", "Argument values must be strings, numbers or booleans"),
        ]

    def test_header_values_must_be_strings(self) -> None:
        errors = _messages(
            "- calls:\n"
            "    - on: {method: GET, url: /x, headers: {X-Count: 2}}\n"
            "      expect: {}\n"
        )
        assert errors == [("[0].calls[0].on.headers.X-Count", "Must be a string")]

    def test_unknown_field(self) -> None:
        errors = _messages("- calls:\n    - on: {method: GET, url: /x}\n      expect: {status: 200}\n")
        assert errors == [("[0].calls[0].expect.status", "Unknown field 'status'")]

    def test_errors_are_collected(self) -> None:
        """All problems are reported in one pass."""
        errors = _messages(
            "- calls:\n"
            "    - on: {method: FETCH}\n"
            "      expect: {statusCode: 700}\n"
        )
        assert len(errors) == 3

    def test_invalid_yaml(self) -> None:
        suite, result = validate_suite_text("- calls: [")
        assert suite is None
        assert "Invalid YAML syntax" in result.errors[0].message

    def test_result_rendering(self) -> None:
        _, result = validate_suite_text("- name: x")
        text = str(result)
        assert text.startswith("Schema validation failed with 1 error(s):")
        assert "❌ [0].calls: Required field 'calls' is missing" in text


class TestYAMLLoading:
    """YAML suites keep `on` as a key."""

    ON_SUITE = (
        "- name: c\n"
        "  calls:\n"
        "    - on: {method: GET, url: /x}\n"
        "      expect: {statusCode: 200}\n"
    )

    def test_unquoted_on_key(self) -> None:
        suite, result = validate_suite_text(self.ON_SUITE)
        assert result.is_valid, str(result)
        assert suite.cases[0].calls[0].on.url == "/x"

    def test_unquoted_on_key_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "health.yml"
        path.write_text(self.ON_SUITE, encoding="utf-8")
        suite, result = load_suite(path)
        assert result.is_valid, str(result)
        assert suite.cases[0].calls[0].on.method == "GET"

    def test_only_true_and_false_are_booleans(self) -> None:
        assert load_yaml("{on: 1, off: no, yes: y, a: true, b: False}") == {
            "on": 1,
            "off": "no",
            "yes": "y",
            "a": True,
            "b": False,
        }

    def test_safe_loader_is_untouched(self) -> None:
        assert yaml.safe_load("on: 1") == {True: 1}


class TestDiscovery:
    """Suite files on disk."""

    @pytest.fixture
    def suite_root(self, tmp_path: Path) -> Path:
        """A suite tree with a nested package, a payload file and a schema."""
        (tmp_path / "orders").mkdir()
        (tmp_path / "orders" / "create.yaml").write_text(VALID_SUITE, encoding="utf-8")
        (tmp_path / "orders" / "payload.json").write_text(json.dumps({"qty": 1}), encoding="utf-8")
        (tmp_path / "health.json").write_text(
            json.dumps([{"calls": [{"on": {"method": "GET", "url": "/health"}, "expect": {"statusCode": 200}}]}]),
            encoding="utf-8",
        )
        (tmp_path / "README.md").write_text("docs", encoding="utf-8")
        return tmp_path

    def test_discover(self, suite_root: Path) -> None:
        files = discover_suite_files(suite_root)
        assert [p.relative_to(suite_root).as_posix() for p in files] == [
            "health.json",
            "orders/create.yaml",
            "orders/payload.json",
        ]

    def test_load_suites_skips_non_suites(self, suite_root: Path) -> None:
        loaded = list(load_suites(suite_root))
        assert [suite.full_name for _, suite, _ in loaded] == ["health", "orders.create"]
        assert all(result.is_valid for _, _, result in loaded)

    def test_load_suite_with_root(self, suite_root: Path) -> None:
        suite, result = load_suite(suite_root / "orders" / "create.yaml", root=suite_root)
        assert result.is_valid
        assert suite.full_name == "orders.create"
        assert suite.base_dir == suite_root / "orders"

    def test_load_missing_file(self, tmp_path: Path) -> None:
        suite, result = load_suite(tmp_path / "nope.yaml")
        assert suite is None
        assert result.errors[0].message == "File not found"

    def test_invalid_json_file_is_reported(self, tmp_path: Path) -> None:
        (tmp_path / "broken.json").write_text("[{,]", encoding="utf-8")
        [(path, suite, result)] = list(load_suites(tmp_path))
        assert suite is None
        assert "Invalid JSON syntax" in result.errors[0].message

    def test_suite_shape(self) -> None:
        assert is_suite_shape([{"calls": []}])
        assert not is_suite_shape({"calls": []})
        assert not is_suite_shape([{"type": "object"}])
        assert not is_suite_shape([])
