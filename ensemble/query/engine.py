"""
Query engine facade.

Binds one function registry to the exact resolver and the recursive
matcher and picks between them from the path's search marker.
"""

from __future__ import annotations

from typing import Any

from .document import values_equal
from .functions import FunctionRegistry
from .matcher import RecursiveMatcher
from .models import MatchResult
from .path import Path, parse_path
from .resolver import ExactResolver


class QueryEngine:
    """
    Entry point for path queries over documents.

    The engine holds no per-query state and can be shared by concurrent
    workers.

    Example:
        engine = QueryEngine()
        engine.check(doc, "items.size()", 2)
        engine.check(doc, "~items.id", ["a", "b"])
    """

    def __init__(self, registry: FunctionRegistry | None = None):
        self.registry = registry or FunctionRegistry.default()
        self.resolver = ExactResolver(self.registry)
        self.matcher = RecursiveMatcher(self.registry)

    def parse(self, path: str | Path) -> Path:
        if isinstance(path, Path):
            return path
        return parse_path(path, self.registry)

    def resolve(self, document: Any, path: str | Path) -> MatchResult:
        """Resolve a path exactly, ignoring any search marker."""
        return self.resolver.resolve(document, self.parse(path))

    def search(self, document: Any, expected: Any, path: str | Path) -> MatchResult:
        return self.matcher.search(document, expected, self.parse(path))

    def collect(self, document: Any, path: str | Path) -> list[Any]:
        return self.matcher.collect(document, self.parse(path))

    def check(self, document: Any, path: str | Path, expected: Any) -> MatchResult:
        """
        Check that ``expected`` is found on ``path``.

        Recursive paths (``~`` prefix) are searched; exact paths are
        resolved and the resolved value compared. A failed comparison
        returns a result with ``found=False``, the actual value and no
        error.
        """
        parsed = self.parse(path)
        if parsed.is_recursive:
            return self.matcher.search(document, expected, parsed)

        result = self.resolver.resolve(document, parsed)
        if not result.found:
            return result
        if values_equal(result.value, expected):
            return result
        return MatchResult.failure(value=result.value)
