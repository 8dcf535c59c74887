"""
Expectation outcomes.

A failed expectation is a value, not an exception: each check returns an
``AssertionResult`` saying what was compared and where the response
departed from it. Body comparisons carry their diff records, schema
checks their violations and path lookups the ``PathError`` that stopped
them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..diffing import BodyDiffRecorder, DiffRecord
from ..formatting import FormatConfig, format_value
from ..query import MISSING, MatchResult, PathError, to_string

DISPLAY_FORMAT = FormatConfig(use_json=True)
MAX_DISPLAY = 100


class AssertionStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"  # response does not meet the expectation
    ERROR = "error"  # check cannot run on this response (unparseable body, unusable schema)


@dataclass
class AssertionResult:
    """
    Outcome of one expectation against one response.

    ``expected`` and ``actual`` are ``MISSING`` when nothing was compared,
    so a JSON null on either side is still shown.
    """
    status: AssertionStatus
    message: str
    path: str | None = None
    expected: Any = MISSING
    actual: Any = MISSING
    cause: PathError | None = None
    diffs: list[DiffRecord] = field(default_factory=list)
    dropped_diffs: int = 0
    schema_errors: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == AssertionStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == AssertionStatus.FAILED

    @property
    def differences(self) -> int:
        """Body differences found, including those past the report cap."""
        return len(self.diffs) + self.dropped_diffs

    def __str__(self) -> str:
        lines = [f"{self.status.value.upper()}: {self.message}"]
        if self.path:
            lines.append(f"    path: {self.path}")
        if self.expected is not MISSING:
            lines.append(f"    expected: {_display(self.expected)}")
        if self.actual is not MISSING:
            lines.append(f"    actual: {_display(self.actual)}")
        if self.cause is not None:
            lines.append(f"    cause: {self.cause}")
        return "\n".join(lines)

    # ─── Constructors ────────────────────────────────────────────────────────

    @classmethod
    def ok(cls, message: str, actual: Any = MISSING) -> AssertionResult:
        return cls(status=AssertionStatus.PASSED, message=message, actual=actual)

    @classmethod
    def mismatch(
        cls,
        message: str,
        path: str | None = None,
        expected: Any = MISSING,
        actual: Any = MISSING,
    ) -> AssertionResult:
        return cls(
            status=AssertionStatus.FAILED,
            message=message,
            path=path,
            expected=expected,
            actual=actual,
        )

    @classmethod
    def unusable(cls, message: str) -> AssertionResult:
        """The check could not be evaluated against this response."""
        return cls(status=AssertionStatus.ERROR, message=message)

    @classmethod
    def path_not_matched(cls, path: str, expected: Any, match: MatchResult) -> AssertionResult:
        """
        A body path whose value is not ``expected``.

        A lookup that stopped early keeps its ``PathError`` as the cause;
        one that resolved keeps the value it found.
        """
        return cls(
            status=AssertionStatus.FAILED,
            message=f'Expected value {to_string(expected)} on path "{path}" is not found',
            path=path,
            expected=expected,
            actual=match.value if match.error is None else MISSING,
            cause=match.error,
        )

    @classmethod
    def body_differs(cls, recorder: BodyDiffRecorder) -> AssertionResult:
        mode = "strict" if recorder.strict else "partial"
        return cls(
            status=AssertionStatus.FAILED,
            message=f"Body does not match expected ({mode} match):\n{recorder}",
            diffs=list(recorder.records),
            dropped_diffs=recorder.dropped,
        )

    @classmethod
    def schema_violated(cls, violations: list[str]) -> AssertionResult:
        lines = ["Unexpected Body Schema:"] + [f"\t{v}" for v in violations]
        return cls(
            status=AssertionStatus.FAILED,
            message="\n".join(lines),
            schema_errors=violations,
        )


def _display(value: Any) -> str:
    text = format_value(value, DISPLAY_FORMAT)
    if len(text) > MAX_DISPLAY:
        return text[: MAX_DISPLAY - 3] + "..."
    return text
