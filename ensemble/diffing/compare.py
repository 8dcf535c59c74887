"""
Generic pairwise tree comparison.

``compare_trees`` walks two documents side by side and reports every
compared leaf to a reporter callback. It makes no decisions about which
differences matter: that policy belongs to the reporter.

Arrays are aligned with an edit script rather than index by index, so an
element inserted at the front shows up as one insertion and not as a
mismatch at every following index.
"""

from __future__ import annotations

import difflib
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from ..query.document import MISSING, NodeKind, kind_of, scalars_equal


class StepKind(str, Enum):
    MAP_KEY = "map_key"
    SLICE_INDEX = "slice_index"


@dataclass(frozen=True)
class PathStep:
    """
    One step of a compare path.

    For array steps, ``expected_index`` and ``actual_index`` may differ
    when an equal element moved, and either is -1 when the element exists
    on one side only.
    """
    kind: StepKind
    key: str | None = None
    expected_index: int = -1
    actual_index: int = -1

    @classmethod
    def map_key(cls, key: str) -> PathStep:
        return cls(StepKind.MAP_KEY, key=key)

    @classmethod
    def slice_index(cls, expected_index: int, actual_index: int) -> PathStep:
        return cls(StepKind.SLICE_INDEX, expected_index=expected_index, actual_index=actual_index)

    @property
    def shifted(self) -> bool:
        """The element was inserted, removed or moved."""
        return self.kind is StepKind.SLICE_INDEX and self.expected_index != self.actual_index

    def __str__(self) -> str:
        if self.kind is StepKind.MAP_KEY:
            return f".{self.key}"
        if not self.shifted:
            return f"[{self.expected_index}]"
        ex = "?" if self.expected_index < 0 else str(self.expected_index)
        ac = "?" if self.actual_index < 0 else str(self.actual_index)
        return f"[{ex}->{ac}]"


ComparePath = tuple[PathStep, ...]


def render_path(path: ComparePath) -> str:
    """Render a compare path, e.g. ``$.items[1].id``."""
    return "$" + "".join(str(step) for step in path)


class DiffReporter(Protocol):
    def report(self, expected: Any, actual: Any, equal: bool, path: ComparePath) -> None:
        ...


def compare_trees(expected: Any, actual: Any, reporter: DiffReporter) -> bool:
    """
    Compare two documents, reporting every leaf pair.

    Returns:
        True if the documents are structurally equal
    """
    return _TreeWalker(reporter).walk(expected, actual, ())


class _TreeWalker:
    def __init__(self, reporter: DiffReporter):
        self.reporter = reporter

    def walk(self, expected: Any, actual: Any, path: ComparePath) -> bool:
        if expected is MISSING or actual is MISSING:
            self.reporter.report(expected, actual, False, path)
            return False

        kind = kind_of(expected)
        if kind != kind_of(actual):
            self.reporter.report(expected, actual, False, path)
            return False

        if kind is NodeKind.OBJECT:
            equal = True
            for key in sorted(set(expected) | set(actual), key=str):
                step = PathStep.map_key(str(key))
                if not self.walk(expected.get(key, MISSING), actual.get(key, MISSING), path + (step,)):
                    equal = False
            return equal

        if kind is NodeKind.ARRAY:
            return self._walk_array(expected, actual, path)

        equal = scalars_equal(expected, actual)
        self.reporter.report(expected, actual, equal, path)
        return equal

    def _walk_array(self, expected: list, actual: list, path: ComparePath) -> bool:
        matcher = difflib.SequenceMatcher(
            None,
            [_fingerprint(item) for item in expected],
            [_fingerprint(item) for item in actual],
            autojunk=False,
        )

        equal = True
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                for offset in range(i2 - i1):
                    i, j = i1 + offset, j1 + offset
                    step = PathStep.slice_index(i, j)
                    if step.shifted:
                        self.reporter.report(expected[i], actual[j], True, path + (step,))
                        equal = False
                    elif not self.walk(expected[i], actual[j], path + (step,)):
                        equal = False

            elif tag == "replace":
                common = min(i2 - i1, j2 - j1)
                for offset in range(common):
                    i, j = i1 + offset, j1 + offset
                    if not self.walk(expected[i], actual[j], path + (PathStep.slice_index(i, j),)):
                        equal = False
                for i in range(i1 + common, i2):
                    self.walk(expected[i], MISSING, path + (PathStep.slice_index(i, -1),))
                    equal = False
                for j in range(j1 + common, j2):
                    self.walk(MISSING, actual[j], path + (PathStep.slice_index(-1, j),))
                    equal = False

            elif tag == "delete":
                for i in range(i1, i2):
                    self.walk(expected[i], MISSING, path + (PathStep.slice_index(i, -1),))
                equal = False

            elif tag == "insert":
                for j in range(j1, j2):
                    self.walk(MISSING, actual[j], path + (PathStep.slice_index(-1, j),))
                equal = False

        return equal


def _fingerprint(value: Any) -> str:
    try:
        return json.dumps(value, sort_keys=True, default=repr)
    except (TypeError, ValueError):
        return repr(value)
