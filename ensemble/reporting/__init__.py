"""
Reporting for Suite Runs

This package provides result records and reporters for suite runs.

Features:
    - Per-call traces with evaluated expectations and HTTP dumps
    - Per-case results with timing, failures and skip reasons
    - Console output (rich) with a summary table
    - JSON run reports
    - JUnit XML, one file per suite

Usage:
    from ensemble.reporting import ConsoleReporter, JUnitXMLReporter, MultiReporter

    reporter = MultiReporter(ConsoleReporter(), JUnitXMLReporter("reports"))
    reporter.init()
    reporter.report(results)  # once per suite
    reporter.flush()
"""

# Models
from .models import (
    CallTrace,
    CaseError,
    CaseResult,
    CaseStatus,
    ExpectationOutcome,
    RunReport,
    RunStatus,
    TimeFrame,
)

# Reporters
from .reporter import ConsoleReporter, JSONReporter, MultiReporter, Reporter
from .junit import JUnitXMLReporter, build_suite_element

__all__ = [
    # Models
    "CallTrace",
    "CaseError",
    "CaseResult",
    "CaseStatus",
    "ExpectationOutcome",
    "RunReport",
    "RunStatus",
    "TimeFrame",
    # Reporters
    "Reporter",
    "ConsoleReporter",
    "JSONReporter",
    "MultiReporter",
    "JUnitXMLReporter",
    "build_suite_element",
]
