"""
Schema Parsing for Test Suites

This package provides tools for discovering, parsing and validating
suite files (JSON or YAML).

Usage:
    from ensemble.schema_parsing import load_suite, load_suites, validate_suite_text

    # Load from file
    suite, result = load_suite("suites/orders/create.yaml", root="suites")
    if not result.is_valid:
        print(result)

    # Or walk a whole directory
    for path, suite, result in load_suites("suites"):
        ...

    # Or validate from string
    suite, result = validate_suite_text(yaml_string)
"""

# Public API
from .loader import (
    SUITE_EXTENSIONS,
    SuiteYAMLLoader,
    discover_suite_files,
    load_suite,
    load_suites,
    load_yaml,
    validate_suite_text,
)

# Models (for type hints and isinstance checks)
from .models import Call, Case, Expect, On, Remember, Suite

# Validation (for custom validation if needed)
from .validation import SchemaValidator, ValidationError, ValidationResult, is_suite_shape

__all__ = [
    # Loader functions
    "SUITE_EXTENSIONS",
    "SuiteYAMLLoader",
    "discover_suite_files",
    "load_suite",
    "load_suites",
    "load_yaml",
    "validate_suite_text",
    # Models
    "Call",
    "Case",
    "Expect",
    "On",
    "Remember",
    "Suite",
    # Validation
    "SchemaValidator",
    "ValidationError",
    "ValidationResult",
    "is_suite_shape",
]
