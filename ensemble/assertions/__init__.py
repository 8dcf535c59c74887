"""
Response Expectations

This package checks HTTP responses against what a suite call expects:
status code, headers, content type, values on body paths, whole-body
matches, absent/present paths and JSON Schema conformance.

Usage:
    from ensemble.assertions import StatusCodeExpectation, BodyPathExpectation

    checks = [
        StatusCodeExpectation(200),
        BodyPathExpectation({"items.size()": 2, "~id": [1, 2]}),
    ]
    for check in checks:
        result = check.check(response)
        if not result.passed:
            print(result)  # Detailed failure message
            break
"""

# Models
from .models import AssertionResult, AssertionStatus

# Expectations
from .expectations import (
    AbsentExpectation,
    BodyExpectation,
    BodyPathExpectation,
    BodySchemaExpectation,
    ContentTypeExpectation,
    HeaderExpectation,
    PresentExpectation,
    ResponseExpectation,
    StatusCodeExpectation,
)

__all__ = [
    # Models
    "AssertionResult",
    "AssertionStatus",
    # Expectations
    "ResponseExpectation",
    "StatusCodeExpectation",
    "HeaderExpectation",
    "ContentTypeExpectation",
    "BodyPathExpectation",
    "BodyExpectation",
    "AbsentExpectation",
    "PresentExpectation",
    "BodySchemaExpectation",
]
