"""
Total ordering used to sort mapping keys for canonical rendering.
"""

from __future__ import annotations

import dataclasses
import math
import types
from enum import IntEnum
from functools import cmp_to_key
from typing import Any, Iterable


class UncomparableKindError(TypeError):
    """Raised when values that have no ordering are used as sort keys."""


class ValueKind(IntEnum):
    """Rank of a value's kind; values of different kinds order by rank."""
    NONE = 0
    BOOL = 1
    INT = 2
    FLOAT = 3
    COMPLEX = 4
    STRING = 5
    BYTES = 6
    TUPLE = 7
    RECORD = 8
    REFERENCE = 9


_UNCOMPARABLE = (
    list, dict, set, bytearray,
    types.FunctionType, types.BuiltinFunctionType, types.MethodType, types.LambdaType,
)


def value_kind(value: Any) -> ValueKind:
    if isinstance(value, _UNCOMPARABLE):
        raise UncomparableKindError(
            f"values of type {type(value).__name__} cannot be ordered"
        )
    if value is None:
        return ValueKind.NONE
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, complex):
        return ValueKind.COMPLEX
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, bytes):
        return ValueKind.BYTES
    if isinstance(value, (tuple, frozenset)):
        return ValueKind.TUPLE
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return ValueKind.RECORD
    return ValueKind.REFERENCE


def is_less(x: Any, y: Any) -> bool:
    """
    Strict "x sorts before y".

    Values of different types order by kind rank, then type name, then
    module, then type identity. NaN sorts after every other float and is
    not less than another NaN.
    """
    kx, ky = value_kind(x), value_kind(y)
    tx, ty = type(x), type(y)

    if tx is not ty:
        if kx != ky:
            return kx < ky
        if tx.__qualname__ != ty.__qualname__:
            return tx.__qualname__ < ty.__qualname__
        if tx.__module__ != ty.__module__:
            return tx.__module__ < ty.__module__
        return id(tx) < id(ty)

    if kx is ValueKind.NONE:
        return False
    if kx is ValueKind.BOOL:
        return not x and y
    if kx is ValueKind.FLOAT:
        return x < y or (not math.isnan(x) and math.isnan(y))
    if kx is ValueKind.COMPLEX:
        return _float_less(x.real, y.real) or (
            not _float_less(y.real, x.real) and _float_less(x.imag, y.imag)
        )
    if kx in (ValueKind.INT, ValueKind.STRING, ValueKind.BYTES):
        return x < y
    if kx is ValueKind.TUPLE:
        xs = x if isinstance(x, tuple) else sort_keys(x)
        ys = y if isinstance(y, tuple) else sort_keys(y)
        return _sequence_less(xs, ys)
    if kx is ValueKind.RECORD:
        names = [f.name for f in dataclasses.fields(x)]
        return _sequence_less(
            [getattr(x, name) for name in names],
            [getattr(y, name) for name in names],
        )
    return id(x) < id(y)


def sort_keys(values: Iterable[Any]) -> list[Any]:
    """
    Sort values with ``is_less`` and drop entries equal to their predecessor.

    Two NaN keys compare equal and collapse into one.
    """
    ordered = sorted(values, key=cmp_to_key(_compare))
    result: list[Any] = []
    for value in ordered:
        if not result or is_less(result[-1], value):
            result.append(value)
    return result


def _compare(x: Any, y: Any) -> int:
    if is_less(x, y):
        return -1
    if is_less(y, x):
        return 1
    return 0


def _float_less(x: float, y: float) -> bool:
    return x < y or (not math.isnan(x) and math.isnan(y))


def _sequence_less(xs: Any, ys: Any) -> bool:
    for a, b in zip(xs, ys):
        if is_less(a, b):
            return True
        if is_less(b, a):
            return False
    return len(xs) < len(ys)
