"""
Canonical Value Rendering

Deterministic, cycle-safe string renderings of values, used for diff
output and failure messages.

Usage:
    from ensemble.formatting import FormatConfig, format_value

    format_value({"b": 1, "a": 2})                        # dict{"a": 2, "b": 1}
    format_value(5, FormatConfig(print_primitive_type=True))  # int(5)
    format_value({"a": [1]}, FormatConfig(use_json=True))    # {"a":[1]}
"""

from .formatter import (
    DEFAULT_FORMAT,
    NIL,
    NON_EXISTENT,
    FormatConfig,
    format_hex,
    format_string,
    format_value,
    is_zero,
)
from .ordering import UncomparableKindError, ValueKind, is_less, sort_keys

__all__ = [
    # Formatter
    "DEFAULT_FORMAT",
    "NIL",
    "NON_EXISTENT",
    "FormatConfig",
    "format_hex",
    "format_string",
    "format_value",
    "is_zero",
    # Ordering
    "UncomparableKindError",
    "ValueKind",
    "is_less",
    "sort_keys",
]
