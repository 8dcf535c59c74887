"""
Body diff recording policy.

The recorder receives every leaf pair from ``compare_trees`` and keeps
only the differences that matter for the chosen mode:

    partial  expected is a subset of actual; extra actual entries are fine
    strict   both sides must match, including element positions

Output is capped so a pathological diff cannot flood the report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..formatting import FormatConfig, format_value
from ..query.document import MISSING
from .compare import ComparePath, compare_trees, render_path

logger = logging.getLogger(__name__)

MAX_DIFF_BYTES = 4096
MAX_DIFF_LINES = 256

JSON_FORMAT = FormatConfig(use_json=True)
TYPED_FORMAT = FormatConfig(print_primitive_type=True)


@dataclass(frozen=True)
class DiffRecord:
    """A single reported difference."""
    path: str
    expected: str
    actual: str

    def __str__(self) -> str:
        return f"{self.path}:\n\tExpected: {self.expected}\n\tActual: {self.actual}\n"


@dataclass
class BodyDiffRecorder:
    """
    Collects the differences between an expected and an actual body.

    Create one recorder per comparison; it accumulates state.

    Example:
        recorder = diff_bodies({"id": 1}, {"id": 2, "extra": True})
        recorder.has_diffs  # True: "id" differs, "extra" is ignored
    """
    strict: bool = False
    max_bytes: int = MAX_DIFF_BYTES
    max_lines: int = MAX_DIFF_LINES
    records: list[DiffRecord] = field(default_factory=list)
    nbytes: int = 0
    nlines: int = 0
    dropped: int = 0

    @property
    def has_diffs(self) -> bool:
        return bool(self.records) or self.dropped > 0

    def report(self, expected: Any, actual: Any, equal: bool, path: ComparePath) -> None:
        if expected is MISSING and not self.strict:
            return
        if actual is MISSING:
            self._record(expected, actual, path)
            return
        if not equal:
            self._record(expected, actual, path)
            return
        if self.strict and path and path[-1].shifted:
            self._record(expected, actual, path)

    def _record(self, expected: Any, actual: Any, path: ComparePath) -> None:
        if self.nbytes >= self.max_bytes or self.nlines >= self.max_lines:
            if self.dropped == 0:
                logger.debug(f"Diff output capped at {self.nbytes} bytes / {self.nlines} lines")
            self.dropped += 1
            return

        sx = format_value(expected, JSON_FORMAT)
        sy = format_value(actual, JSON_FORMAT)
        if sx == sy:
            sx = format_value(expected, TYPED_FORMAT)
            sy = format_value(actual, TYPED_FORMAT)

        record = DiffRecord(path=render_path(path), expected=sx, actual=sy)
        text = str(record)
        self.records.append(record)
        self.nbytes += len(text)
        self.nlines += text.count("\n")

    def __str__(self) -> str:
        return "".join(str(record) for record in self.records)


def diff_bodies(expected: Any, actual: Any, strict: bool = False) -> BodyDiffRecorder:
    """Compare two bodies with a fresh recorder and return it."""
    recorder = BodyDiffRecorder(strict=strict)
    compare_trees(expected, actual, recorder)
    return recorder
