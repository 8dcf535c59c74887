"""
Ensemble - HTTP API Contract Testing Tool

This package loads declarative suites, makes HTTP calls and checks the
responses against expectations.

Subpackages:
    - query: Body paths, exact resolution and recursive search
    - formatting: Deterministic value rendering for failure reports
    - diffing: Structural body comparison and diff recording
    - schema_parsing: Discover, parse and validate suite files
    - transport: HTTP transport (aiohttp) and rate limiting
    - assertions: Response expectations
    - runner: Variables, call execution and parallel scheduling
    - reporting: Run results, console / JSON / JUnit reporters

Usage:
    from ensemble import QueryEngine, diff_bodies

    engine = QueryEngine()
    engine.check({"items": [{"id": 1}, {"id": 2}]}, "~items.id", [1, 2]).found  # True
    engine.resolve({"items": [1, 2]}, "items.size()").value  # 2

    recorder = diff_bodies({"status": "NEW"}, {"status": "PAID", "id": 7})
    print(recorder)  # $.status, Expected: "NEW", Actual: "PAID"
"""

__version__ = "0.1.0"

# Query engine
from .query import (
    MISSING,
    FunctionRegistry,
    MatchResult,
    Path,
    PathError,
    PathErrorKind,
    PathMode,
    QueryEngine,
    parse_path,
    to_string,
)

# Formatting and diffs
from .formatting import FormatConfig, format_value
from .diffing import BodyDiffRecorder, DiffRecord, diff_bodies

# Suites
from .schema_parsing import (
    Call,
    Case,
    Expect,
    On,
    Remember,
    Suite,
    SchemaValidator,
    ValidationError,
    ValidationResult,
    load_suite,
    load_suites,
    validate_suite_text,
)

# Transport
from .transport import (
    BaseTransport,
    HTTPRequest,
    HTTPResponse,
    HTTPTransport,
    Throttle,
    TransportError,
    TransportErrorCode,
)

# Assertions
from .assertions import AssertionResult, AssertionStatus, ResponseExpectation

# Runner
from .runner import SuiteRunner, TemplateError, Vars, run_parallel

# Reporting
from .reporting import (
    CaseResult,
    ConsoleReporter,
    JSONReporter,
    JUnitXMLReporter,
    MultiReporter,
    Reporter,
    RunReport,
    RunStatus,
)

__all__ = [
    # Package info
    "__version__",
    # Query
    "MISSING",
    "FunctionRegistry",
    "MatchResult",
    "Path",
    "PathError",
    "PathErrorKind",
    "PathMode",
    "QueryEngine",
    "parse_path",
    "to_string",
    # Formatting and diffs
    "FormatConfig",
    "format_value",
    "BodyDiffRecorder",
    "DiffRecord",
    "diff_bodies",
    # Suites
    "Call",
    "Case",
    "Expect",
    "On",
    "Remember",
    "Suite",
    "SchemaValidator",
    "ValidationError",
    "ValidationResult",
    "load_suite",
    "load_suites",
    "validate_suite_text",
    # Transport
    "BaseTransport",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPTransport",
    "Throttle",
    "TransportError",
    "TransportErrorCode",
    # Assertions
    "AssertionResult",
    "AssertionStatus",
    "ResponseExpectation",
    # Runner
    "SuiteRunner",
    "TemplateError",
    "Vars",
    "run_parallel",
    # Reporting
    "CaseResult",
    "ConsoleReporter",
    "JSONReporter",
    "JUnitXMLReporter",
    "MultiReporter",
    "Reporter",
    "RunReport",
    "RunStatus",
]
