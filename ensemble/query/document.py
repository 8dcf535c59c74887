"""
Document model shared by the query, formatting and diff layers.

A document is the already-parsed body of a response: nested dicts
(objects), lists (arrays) and scalars (bool, int, float, str, None).
Every traversal dispatches on ``kind_of`` so that the object / array
distinction is explicit at each step.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any


class NodeKind(str, Enum):
    """Kind of a document node."""
    OBJECT = "object"
    ARRAY = "array"
    SCALAR = "scalar"


class _Missing:
    """Marker for a value that does not exist on one side of a comparison."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<non-existent>"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def kind_of(value: Any) -> NodeKind:
    """Classify a document node."""
    if isinstance(value, dict):
        return NodeKind.OBJECT
    if isinstance(value, (list, tuple)):
        return NodeKind.ARRAY
    return NodeKind.SCALAR


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def scalars_equal(a: Any, b: Any) -> bool:
    """
    Compare two scalars.

    Numbers compare numerically (``2 == 2.0``), booleans only equal
    booleans, and ``None`` only equals ``None``.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_number(a) and is_number(b):
        return a == b
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, str) or isinstance(b, str):
        return isinstance(a, str) and isinstance(b, str) and a == b
    return a == b


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality over documents."""
    kind = kind_of(a)
    if kind != kind_of(b):
        return False

    if kind is NodeKind.OBJECT:
        if a.keys() != b.keys():
            return False
        return all(values_equal(a[key], b[key]) for key in a)

    if kind is NodeKind.ARRAY:
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b))

    return scalars_equal(a, b)


def to_string(value: Any) -> str:
    """
    Plain, type-unaware stringification of a document node.

    Integral floats drop their fraction (``123.0`` -> ``"123"``), arrays
    render as space separated elements in brackets (``[1 2]``).
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        items = " ".join(f"{key}:{to_string(value[key])}" for key in sorted(value, key=str))
        return "{" + items + "}"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(to_string(item) for item in value) + "]"
    return str(value)
