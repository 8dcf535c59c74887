"""
Result data models for suite runs.

This module defines the data structures for capturing what happened
during a run: one ``CallTrace`` per request, one ``CaseResult`` per case
and a ``RunReport`` aggregating everything with timing.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..schema_parsing import Case, Suite


class CaseStatus(str, Enum):
    """Outcome of a single case."""
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class RunStatus(str, Enum):
    """Overall status of a run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TimeFrame:
    """A period of time; ``end`` stays None while still running."""
    start: datetime = field(default_factory=_now)
    end: datetime | None = None

    def finish(self) -> None:
        self.end = _now()

    @property
    def duration_ms(self) -> float:
        if self.end is None:
            return 0.0
        return (self.end - self.start).total_seconds() * 1000

    def extend(self, other: TimeFrame) -> None:
        """Grow to cover ``other`` as well: earlier start, later end."""
        if other.start < self.start:
            self.start = other.start
        if other.end is not None and (self.end is None or other.end > self.end):
            self.end = other.end


@dataclass
class ExpectationOutcome:
    """One evaluated expectation of a call."""
    description: str
    passed: bool


@dataclass
class CallTrace:
    """
    Record of a single call.

    Attributes:
        method: HTTP method actually sent
        url: URL after variable substitution
        frame: When the call ran
        expectations: Evaluated expectations in order; evaluation stops
            at the first failure
        failure: Message of the failing expectation (or remember step)
        error_cause: Why the call could not be completed at all (bad
            template, unreadable file, transport failure)
        request_dump / response_dump: Raw HTTP text for verbose output
    """
    method: str = ""
    url: str = ""
    frame: TimeFrame = field(default_factory=TimeFrame)
    expectations: list[ExpectationOutcome] = field(default_factory=list)
    failure: str | None = None
    error_cause: str | None = None
    request_dump: str = ""
    response_dump: str = ""

    @property
    def terminated(self) -> bool:
        return self.error_cause is not None

    @property
    def has_error(self) -> bool:
        return self.terminated or self.failure is not None

    @property
    def error_message(self) -> str | None:
        return self.error_cause or self.failure

    def add_expectation(self, description: str, passed: bool) -> None:
        self.expectations.append(ExpectationOutcome(description, passed))

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "started_at": self.frame.start.isoformat(),
            "duration_ms": self.frame.duration_ms,
            "expectations": [
                {"description": e.description, "passed": e.passed}
                for e in self.expectations
            ],
            "failure": self.failure,
            "error_cause": self.error_cause,
        }


@dataclass
class CaseError:
    """Why a case failed: the failing call (1-based) and its message."""
    call_num: int
    cause: str
    response_dump: str = ""

    def __str__(self) -> str:
        return self.cause


@dataclass
class CaseResult:
    """Outcome of one case of one suite."""
    suite: Suite
    case: Case
    frame: TimeFrame = field(default_factory=TimeFrame)
    traces: list[CallTrace] = field(default_factory=list)
    error: CaseError | None = None
    skipped: bool = False
    skipped_msg: str = ""

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def status(self) -> CaseStatus:
        if self.skipped:
            return CaseStatus.SKIPPED
        if self.has_error:
            return CaseStatus.FAILED
        return CaseStatus.PASSED

    def to_dict(self) -> dict[str, Any]:
        return {
            "suite": self.suite.full_name,
            "case": self.case.name,
            "status": self.status.value,
            "duration_ms": self.frame.duration_ms,
            "skipped_msg": self.skipped_msg or None,
            "error": {
                "call": self.error.call_num,
                "cause": self.error.cause,
            } if self.error else None,
            "calls": [trace.to_dict() for trace in self.traces],
        }


@dataclass
class RunReport:
    """
    Complete record of a run across all suites.

    Results are appended as suites finish, so their order follows
    completion, not discovery.
    """
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    base_url: str = ""
    frame: TimeFrame = field(default_factory=TimeFrame)
    status: RunStatus = RunStatus.PENDING
    results: list[CaseResult] = field(default_factory=list)

    def start(self) -> None:
        self.status = RunStatus.RUNNING
        self.frame = TimeFrame()

    def add_results(self, results: list[CaseResult]) -> None:
        self.results.extend(results)

    def complete(self) -> None:
        """Mark the run as completed and calculate final status."""
        self.frame.finish()
        self.status = RunStatus.FAILED if self.failed else RunStatus.PASSED

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status == CaseStatus.FAILED)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.status == CaseStatus.SKIPPED)

    @property
    def passed(self) -> int:
        return self.total - self.failed - self.skipped

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "run_id": self.run_id,
            "base_url": self.base_url,
            "started_at": self.frame.start.isoformat(),
            "ended_at": self.frame.end.isoformat() if self.frame.end else None,
            "duration_ms": self.frame.duration_ms,
            "status": self.status.value,
            "summary": {
                "total": self.total,
                "passed": self.passed,
                "failed": self.failed,
                "skipped": self.skipped,
            },
            "results": [result.to_dict() for result in self.results],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            "═══════════════════════════════════════════════════════════",
            f"  Run Report: {self.base_url or '<no host>'}",
            "═══════════════════════════════════════════════════════════",
            f"  Run ID:     {self.run_id}",
            f"  Status:     {_status_icon(self.status)} {self.status.value.upper()}",
            f"  Duration:   {self.frame.duration_ms:.0f}ms",
            f"  Started:    {self.frame.start.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            "───────────────────────────────────────────────────────────",
            f"  Cases: {self.passed} passed, {self.failed} failed, {self.skipped} skipped",
            "═══════════════════════════════════════════════════════════",
        ]
        return "\n".join(lines)


def _status_icon(status: RunStatus) -> str:
    return {
        RunStatus.PENDING: "⏳",
        RunStatus.RUNNING: "🔄",
        RunStatus.PASSED: "✅",
        RunStatus.FAILED: "❌",
    }.get(status, "❓")
