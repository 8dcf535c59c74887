"""
Body Diffing

Structural comparison of an expected body against an actual one, with a
partial (subset) and a strict mode and a size-capped report.

Usage:
    from ensemble.diffing import diff_bodies

    recorder = diff_bodies({"id": 1}, {"id": 2, "name": "x"})
    if recorder.has_diffs:
        print(recorder)
        # $.id:
        #     Expected: 1
        #     Actual: 2
"""

from .compare import ComparePath, DiffReporter, PathStep, StepKind, compare_trees, render_path
from .recorder import (
    MAX_DIFF_BYTES,
    MAX_DIFF_LINES,
    BodyDiffRecorder,
    DiffRecord,
    diff_bodies,
)

__all__ = [
    # Comparison
    "ComparePath",
    "DiffReporter",
    "PathStep",
    "StepKind",
    "compare_trees",
    "render_path",
    # Recording
    "MAX_DIFF_BYTES",
    "MAX_DIFF_LINES",
    "BodyDiffRecorder",
    "DiffRecord",
    "diff_bodies",
]
