"""
Result and error models for path resolution and search.

Resolution failures are values, not exceptions: every lookup returns a
``MatchResult`` that carries a ``PathError`` describing the segment that
could not be resolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .document import MISSING


class PathErrorKind(str, Enum):
    """Why a path could not be resolved."""
    KEY_NOT_FOUND = "key_not_found"
    INDEX_OUT_OF_BOUNDS = "index_out_of_bounds"
    NOT_AN_OBJECT = "not_an_object"
    NOT_AN_ARRAY = "not_an_array"
    FUNCTION_INAPPLICABLE = "function_inapplicable"
    UNKNOWN_FUNCTION = "unknown_function"
    PATH_NOT_FOUND = "path_not_found"  # recursive search exhausted


@dataclass(frozen=True)
class PathError:
    """
    A failed lookup.

    Attributes:
        kind: Error classification
        message: Human-readable description
        path: The path being resolved, as written
        segment: The segment that failed, if any
        position: Index of the failing segment within the path
    """
    kind: PathErrorKind
    message: str
    path: str = ""
    segment: str | None = None
    position: int | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class MatchResult:
    """Outcome of resolving or searching a path."""
    found: bool
    value: Any = MISSING
    error: PathError | None = None

    @classmethod
    def success(cls, value: Any = MISSING) -> MatchResult:
        return cls(found=True, value=value)

    @classmethod
    def failure(cls, error: PathError | None = None, value: Any = MISSING) -> MatchResult:
        return cls(found=False, value=value, error=error)
