"""
Recursive existential search.

Unlike the exact resolver, the matcher fans out over every array it
meets along the path and succeeds as soon as any branch reaches the
expected value. A missing branch only fails locally.
"""

from __future__ import annotations

from typing import Any

from .document import NodeKind, kind_of, to_string, values_equal
from .functions import FunctionRegistry
from .models import MatchResult, PathError, PathErrorKind
from .path import Path, Segment, SegmentKind


class RecursiveMatcher:
    """
    Searches a document for an expected value reachable along a path.

    Example:
        matcher = RecursiveMatcher(FunctionRegistry.default())
        doc = {"items": [{"id": "a"}, {"id": "b"}]}
        matcher.search(doc, ["a", "b"], parse_path("~items.id")).found  # True
    """

    def __init__(self, registry: FunctionRegistry):
        self.registry = registry

    def search(self, document: Any, expected: Any, path: Path) -> MatchResult:
        """
        Find ``expected`` along ``path``.

        A list expectation requires every element to be found, each one
        searched independently from the root.
        """
        if isinstance(expected, (list, tuple)):
            for item in expected:
                result = self._search(document, item, path.segments, path, 0)
                if not result.found:
                    return result
            return MatchResult.success()

        return self._search(document, expected, path.segments, path, 0)

    def collect(self, document: Any, path: Path) -> list[Any]:
        """All values reachable along ``path``, fanning out over arrays."""
        found: list[Any] = []
        self._collect(document, path.segments, path, 0, found)
        return found

    # ─── Search ──────────────────────────────────────────────────────────────

    def _search(
        self,
        node: Any,
        expected: Any,
        segments: tuple[Segment, ...],
        path: Path,
        offset: int,
    ) -> MatchResult:
        if not segments:
            if _matches(node, expected):
                return MatchResult.success(node)
            return MatchResult.failure(self._not_found(expected, path, None))

        for index, segment in enumerate(segments):
            position = offset + index

            if segment.kind is SegmentKind.FUNCTION:
                value, error = self.registry.call(
                    segment.text, node, path=path.raw, position=position
                )
                if error is None and values_equal(value, expected):
                    return MatchResult.success(value)

            kind = kind_of(node)

            if kind is NodeKind.OBJECT and segment.kind is not SegmentKind.FUNCTION:
                if segment.text not in node:
                    return MatchResult.failure(self._not_found(expected, path, position))
                node = node[segment.text]
                if _matches(node, expected):
                    return MatchResult.success(node)
                continue

            if kind is NodeKind.ARRAY:
                remaining = segments[index:]
                for element in node:
                    result = self._search(element, expected, remaining, path, position)
                    if result.found:
                        return result
                return MatchResult.failure(self._not_found(expected, path, position))

            return MatchResult.failure(self._not_found(expected, path, position))

        return MatchResult.failure(self._not_found(expected, path, None))

    def _not_found(self, expected: Any, path: Path, position: int | None) -> PathError:
        segment = path.segments[position].text if position is not None else None
        where = f" (stopped at '{segment}')" if segment is not None else ""
        return PathError(
            kind=PathErrorKind.PATH_NOT_FOUND,
            message=f"Value {to_string(expected)!r} not found by path '{path.raw}'{where}",
            path=path.raw,
            segment=segment,
            position=position,
        )

    # ─── Collect ─────────────────────────────────────────────────────────────

    def _collect(
        self,
        node: Any,
        segments: tuple[Segment, ...],
        path: Path,
        position: int,
        found: list[Any],
    ) -> None:
        if not segments:
            found.append(node)
            return

        segment, rest = segments[0], segments[1:]

        if segment.kind is SegmentKind.FUNCTION:
            value, error = self.registry.call(
                segment.text, node, path=path.raw, position=position
            )
            if error is None:
                found.append(value)
            return

        kind = kind_of(node)
        if kind is NodeKind.OBJECT:
            if segment.text in node:
                self._collect(node[segment.text], rest, path, position + 1, found)
        elif kind is NodeKind.ARRAY:
            for element in node:
                self._collect(element, segments, path, position, found)


def _matches(node: Any, expected: Any) -> bool:
    """The node equals ``expected``, or is an array holding it."""
    if values_equal(node, expected):
        return True
    if kind_of(node) is NodeKind.ARRAY:
        return any(values_equal(element, expected) for element in node)
    return False
