"""
Structural Queries over Parsed Documents

This package addresses values inside nested documents (parsed JSON/XML)
with a dotted path language.

Path syntax:
    - items.1.id: keys and zero-based indexes separated by dots
    - items.size(): a trailing path function (size(), string(), sizeAsString())
    - ~items.id: recursive search, fanning out over arrays

Usage:
    from ensemble.query import QueryEngine

    doc = {"items": [{"id": "417857"}, {"id": "417858"}]}
    engine = QueryEngine()

    engine.resolve(doc, "items.1.id").value   # "417858"
    engine.resolve(doc, "items.size()").value  # 2
    engine.search(doc, ["417857", "417858"], "items.id").found  # True
"""

# Document model
from .document import MISSING, NodeKind, kind_of, to_string, values_equal

# Path language
from .path import Path, PathMode, Segment, SegmentKind, parse_path

# Functions
from .functions import FunctionError, FunctionRegistry

# Results
from .models import MatchResult, PathError, PathErrorKind

# Engines
from .engine import QueryEngine
from .matcher import RecursiveMatcher
from .resolver import ExactResolver

__all__ = [
    # Document model
    "MISSING",
    "NodeKind",
    "kind_of",
    "to_string",
    "values_equal",
    # Path language
    "Path",
    "PathMode",
    "Segment",
    "SegmentKind",
    "parse_path",
    # Functions
    "FunctionError",
    "FunctionRegistry",
    # Results
    "MatchResult",
    "PathError",
    "PathErrorKind",
    # Engines
    "QueryEngine",
    "RecursiveMatcher",
    "ExactResolver",
]
