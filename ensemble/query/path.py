"""
Dotted path language.

    items.1.id          key, index, key
    items.size()        key, function
    ~items.id           recursive search for "id" under "items"

Parsing is two-phase: the raw string is split into key and index
segments, then the last segment alone is turned into a function segment
when it names a registered function. Functions never appear mid-path.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .functions import FunctionRegistry

SEARCH_MARKER = "~"
SEPARATOR = "."

_INDEX_PATTERN = re.compile(r"^(0|[1-9][0-9]*)$")


class SegmentKind(str, Enum):
    KEY = "key"
    INDEX = "index"
    FUNCTION = "function"


class PathMode(str, Enum):
    """How a path is matched against a document."""
    EXACT = "exact"
    RECURSIVE = "recursive"


@dataclass(frozen=True)
class Segment:
    """One step of a path."""
    kind: SegmentKind
    value: str | int

    @classmethod
    def key(cls, name: str) -> Segment:
        return cls(SegmentKind.KEY, name)

    @classmethod
    def index(cls, position: int) -> Segment:
        return cls(SegmentKind.INDEX, position)

    @classmethod
    def function(cls, name: str) -> Segment:
        return cls(SegmentKind.FUNCTION, name)

    @property
    def text(self) -> str:
        """The segment as it appeared in the source path."""
        return str(self.value)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Path:
    """A parsed path."""
    segments: tuple[Segment, ...] = ()
    mode: PathMode = PathMode.EXACT
    raw: str = ""

    @property
    def is_recursive(self) -> bool:
        return self.mode is PathMode.RECURSIVE

    @property
    def function(self) -> str | None:
        """Name of the terminating function, if the path has one."""
        if self.segments and self.segments[-1].kind is SegmentKind.FUNCTION:
            return str(self.segments[-1].value)
        return None

    def prefix(self, length: int) -> str:
        """Dotted form of the first ``length`` segments."""
        return SEPARATOR.join(s.text for s in self.segments[:length])

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.raw


def parse_path(raw: str, registry: FunctionRegistry | None = None) -> Path:
    """
    Parse a dotted path.

    Never fails: anything that is not a clean base-10 non-negative integer
    is a key, and only an exact registry name in last position is a
    function.

    Args:
        raw: Path string, optionally starting with ``~``
        registry: Functions to recognise (defaults to the built-in table)
    """
    if registry is None:
        registry = FunctionRegistry.default()

    mode = PathMode.EXACT
    body = raw
    if body.startswith(SEARCH_MARKER):
        mode = PathMode.RECURSIVE
        body = body[len(SEARCH_MARKER):]

    if not body:
        return Path(segments=(), mode=mode, raw=raw)

    segments: list[Segment] = []
    for token in body.split(SEPARATOR):
        if _INDEX_PATTERN.match(token):
            segments.append(Segment.index(int(token)))
        else:
            segments.append(Segment.key(token))

    last = segments[-1]
    if last.kind is SegmentKind.KEY and last.value in registry:
        segments[-1] = Segment.function(str(last.value))

    return Path(segments=tuple(segments), mode=mode, raw=raw)
