"""
Exact path resolution.

Walks a path one segment at a time and stops at the first segment that
cannot be resolved.
"""

from __future__ import annotations

from typing import Any

from .document import NodeKind, kind_of
from .functions import FunctionRegistry
from .models import MatchResult, PathError, PathErrorKind
from .path import Path, SegmentKind


class ExactResolver:
    """
    Resolves a path to the single node it addresses.

    Example:
        resolver = ExactResolver(FunctionRegistry.default())
        doc = {"items": [{"id": "417857"}, {"id": "417858"}]}
        resolver.resolve(doc, parse_path("items.1.id")).value  # "417858"
    """

    def __init__(self, registry: FunctionRegistry):
        self.registry = registry

    def resolve(self, document: Any, path: Path) -> MatchResult:
        node = document

        for position, segment in enumerate(path.segments):
            if segment.kind is SegmentKind.FUNCTION:
                value, error = self.registry.call(
                    segment.text, node, path=path.raw, position=position
                )
                if error:
                    return MatchResult.failure(error)
                return MatchResult.success(value)

            kind = kind_of(node)

            if segment.kind is SegmentKind.KEY:
                if kind is not NodeKind.OBJECT:
                    return MatchResult.failure(self._error(
                        PathErrorKind.NOT_AN_OBJECT,
                        f"Cannot get key '{segment.text}' from {kind.value} "
                        f"at '{path.prefix(position)}' (path '{path.raw}')",
                        path, position,
                    ))
                if segment.value not in node:
                    return MatchResult.failure(self._error(
                        PathErrorKind.KEY_NOT_FOUND,
                        f"Key '{segment.text}' not found (path '{path.raw}')",
                        path, position,
                    ))
                node = node[segment.value]

            else:
                if kind is not NodeKind.ARRAY:
                    return MatchResult.failure(self._error(
                        PathErrorKind.NOT_AN_ARRAY,
                        f"Cannot get index [{segment.text}] from {kind.value} "
                        f"at '{path.prefix(position)}' (path '{path.raw}')",
                        path, position,
                    ))
                if segment.value >= len(node):
                    return MatchResult.failure(self._error(
                        PathErrorKind.INDEX_OUT_OF_BOUNDS,
                        f"Array only has [{len(node)}] elements, cannot get element "
                        f"by index [{segment.text}] (counts from zero, path '{path.raw}')",
                        path, position,
                    ))
                node = node[segment.value]

        return MatchResult.success(node)

    @staticmethod
    def _error(kind: PathErrorKind, message: str, path: Path, position: int) -> PathError:
        return PathError(
            kind=kind,
            message=message,
            path=path.raw,
            segment=path.segments[position].text,
            position=position,
        )
