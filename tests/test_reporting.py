"""Tests for run models and the console, JSON and JUnit XML reporters."""

import io
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from xml.etree import ElementTree

import pytest
from rich.console import Console

from ensemble.reporting import (
    CallTrace,
    CaseError,
    CaseResult,
    CaseStatus,
    ConsoleReporter,
    JSONReporter,
    JUnitXMLReporter,
    MultiReporter,
    RunReport,
    RunStatus,
    TimeFrame,
    build_suite_element,
)
from ensemble.schema_parsing import Case, Suite


@pytest.fixture
def results() -> list[CaseResult]:
    """One passed, one failed and one skipped case of suite orders.create."""
    suite = Suite(name="create", dir="orders")

    passed = CaseResult(suite=suite, case=Case(name="happy path"))
    ok = CallTrace(method="POST", url="/orders")
    ok.add_expectation("Status code is 201", True)
    passed.traces.append(ok)
    passed.frame.finish()

    failed = CaseResult(suite=suite, case=Case(name="wrong status"))
    bad = CallTrace(method="GET", url="/orders/1", response_dump="404 Not Found")
    bad.add_expectation("Status code is 200", False)
    bad.failure = "Unexpected Status Code. Expected: 200, Actual: 404"
    failed.traces.append(bad)
    failed.error = CaseError(call_num=1, cause=bad.failure, response_dump=bad.response_dump)
    failed.frame.finish()

    skipped = CaseResult(suite=suite, case=Case(name="later"), skipped=True, skipped_msg="not yet")
    skipped.frame.finish()

    return [passed, failed, skipped]


def console_output(reporter: ConsoleReporter) -> str:
    return reporter.console.file.getvalue()


def make_console() -> Console:
    return Console(file=io.StringIO(), width=120)


class TestModels:
    """Statuses, counts and timing."""

    def test_case_status(self, results: list[CaseResult]) -> None:
        assert [r.status for r in results] == [CaseStatus.PASSED, CaseStatus.FAILED, CaseStatus.SKIPPED]

    def test_call_trace_errors(self) -> None:
        trace = CallTrace()
        assert not trace.has_error
        trace.failure = "mismatch"
        assert trace.has_error and not trace.terminated
        trace.error_cause = "Connection failed"
        assert trace.terminated
        assert trace.error_message == "Connection failed"

    def test_time_frame(self) -> None:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        frame = TimeFrame(start=start, end=start + timedelta(milliseconds=250))
        assert frame.duration_ms == 250.0
        assert TimeFrame().duration_ms == 0.0

        frame.extend(TimeFrame(start=start - timedelta(seconds=1), end=start + timedelta(seconds=1)))
        assert frame.duration_ms == 2000.0

    def test_run_report(self, results: list[CaseResult]) -> None:
        run = RunReport(base_url="http://api.test")
        run.start()
        assert run.status is RunStatus.RUNNING
        run.add_results(results)
        run.complete()

        assert (run.total, run.passed, run.failed, run.skipped) == (3, 1, 1, 1)
        assert run.status is RunStatus.FAILED
        assert "Cases: 1 passed, 1 failed, 1 skipped" in run.summary()

        data = json.loads(run.to_json())
        assert data["summary"] == {"total": 3, "passed": 1, "failed": 1, "skipped": 1}
        assert data["results"][1]["error"] == {
            "call": 1,
            "cause": "Unexpected Status Code. Expected: 200, Actual: 404",
        }
        assert data["results"][2]["skipped_msg"] == "not yet"

    def test_all_passed(self, results: list[CaseResult]) -> None:
        run = RunReport()
        run.add_results([results[0], results[2]])
        run.complete()
        assert run.status is RunStatus.PASSED


class TestConsoleReporter:
    """Human-readable output."""

    def test_report(self, results: list[CaseResult]) -> None:
        reporter = ConsoleReporter(make_console())
        reporter.init()
        reporter.report(results)
        out = console_output(reporter)

        assert "orders.create" in out
        assert "└ PASSED happy path" in out
        assert "└ FAILED wrong status" in out
        assert "└ SKIPPED later (not yet)" in out
        assert "GET /orders/1" in out
        assert "× Status code is 200" in out
        assert "Unexpected Status Code. Expected: 200, Actual: 404" in out
        # passed cases only show calls with log_http
        assert "POST /orders" not in out

    def test_log_http_shows_every_call(self, results: list[CaseResult]) -> None:
        reporter = ConsoleReporter(make_console(), log_http=True)
        reporter.report(results)
        out = console_output(reporter)
        assert "POST /orders" in out
        assert "√ Status code is 201" in out
        assert "404 Not Found" in out

    def test_terminated_call_shows_cause(self, results: list[CaseResult]) -> None:
        trace = CallTrace(error_cause="Connection failed: refused")
        result = CaseResult(
            suite=results[0].suite,
            case=Case(name="offline"),
            traces=[trace],
            error=CaseError(call_num=1, cause="Connection failed: refused"),
        )
        reporter = ConsoleReporter(make_console())
        reporter.report([result])
        assert "            Connection failed: refused" in console_output(reporter)

    def test_summary_and_exit_code(self, results: list[CaseResult]) -> None:
        reporter = ConsoleReporter(make_console())
        reporter.init()
        reporter.report(results)
        reporter.flush()
        out = console_output(reporter)

        assert "Test Run Summary" in out
        assert "Overall result:" in out
        assert "FAILED" in out
        assert reporter.exit_code == 1

    def test_exit_code_without_failures(self, results: list[CaseResult]) -> None:
        reporter = ConsoleReporter(make_console())
        reporter.report([results[0]])
        reporter.flush()
        assert reporter.exit_code == 0


class TestJUnit:
    """JUnit XML files, one per suite."""

    def test_suite_element(self, results: list[CaseResult]) -> None:
        element = build_suite_element(results)

        assert element.tag == "testsuite"
        assert element.get("name") == "create"
        assert element.get("package") == "orders"
        assert element.get("tests") == "3"
        assert element.get("failures") == "1"
        assert element.get("errors") == "0"
        assert element.get("skipped") == "1"
        assert element.get("timestamp").endswith("Z")

        cases = element.findall("testcase")
        assert [c.get("name") for c in cases] == ["happy path", "wrong status", "later"]
        assert all(c.get("classname") == "orders.create" for c in cases)

        failure = cases[1].find("failure")
        assert failure.get("type") == "FailedExpectation"
        assert failure.get("message") == "Unexpected Status Code. Expected: 200, Actual: 404"
        assert failure.text == (
            "On Call #1 - Unexpected Status Code. Expected: 200, Actual: 404\n\n404 Not Found"
        )
        assert cases[2].find("skipped").get("message") == "not yet"
        assert cases[0].find("failure") is None

    def test_reporter_writes_file(self, results: list[CaseResult], tmp_path: Path) -> None:
        reporter = JUnitXMLReporter(tmp_path / "junit")
        reporter.report(results)

        path = tmp_path / "junit" / "orders.create.xml"
        assert path.read_text(encoding="utf-8").startswith("<?xml")
        assert ElementTree.parse(path).getroot().get("tests") == "3"


class TestJSONAndMulti:
    """Run report files and broadcasting."""

    def test_json_reporter(self, results: list[CaseResult], tmp_path: Path) -> None:
        path = tmp_path / "out" / "report.json"
        reporter = JSONReporter(path, base_url="http://api.test")
        reporter.init()
        reporter.report(results)
        reporter.flush()

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["base_url"] == "http://api.test"
        assert data["status"] == "failed"
        assert data["results"][0]["calls"][0]["expectations"] == [
            {"description": "Status code is 201", "passed": True},
        ]

    def test_multi_reporter(self, results: list[CaseResult], tmp_path: Path) -> None:
        console = ConsoleReporter(make_console())
        json_reporter = JSONReporter(tmp_path / "report.json")
        multi = MultiReporter(console, json_reporter)

        multi.init()
        multi.report(results)
        multi.flush()

        assert console.run.total == 3
        assert json_reporter.run.total == 3
        assert (tmp_path / "report.json").exists()
