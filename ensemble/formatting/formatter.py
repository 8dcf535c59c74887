"""
Canonical, deterministic rendering of values for failure reports.

The rendering is stable across runs: mapping keys are sorted, address
tokens are zeroed unless real addresses are requested, and cycles are
cut with an address token instead of recursing.

    format_value({"b": 1, "a": [1, "x"]})
    # 'dict{"a": list{1, "x"}, "b": 1}'
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from typing import Any

from ..query.document import MISSING
from .ordering import sort_keys

logger = logging.getLogger(__name__)

NIL = "<nil>"
NON_EXISTENT = "<non-existent>"

_PRIMITIVES = (bool, int, float, complex, str)
_BUILTIN_KINDS = _PRIMITIVES + (bytes, bytearray, list, tuple, dict, set, frozenset)


@dataclass(frozen=True)
class FormatConfig:
    """
    Rendering switches.

    Attributes:
        use_stringer: Render objects with their own ``__str__`` through it
        use_json: Render JSON-encodable values as compact sorted JSON
        print_type: Prefix containers with their type name
        print_primitive_type: Prefix primitives with their type name too
        follow_pointers: Render records behind references instead of an address
        real_pointers: Show real object ids in address tokens
        elide_zero_fields: Omit record fields holding a zero value
    """
    use_stringer: bool = False
    use_json: bool = False
    print_type: bool = True
    print_primitive_type: bool = False
    follow_pointers: bool = True
    real_pointers: bool = False
    elide_zero_fields: bool = True


DEFAULT_FORMAT = FormatConfig()


def format_value(value: Any, config: FormatConfig | None = None) -> str:
    """Render ``value`` using ``config`` (defaults to ``FormatConfig()``)."""
    return _Renderer(config or DEFAULT_FORMAT).render(value)


def format_string(s: str) -> str:
    """
    Render a string literal.

    The double-quoted form is used when it needs no escapes, the
    back-quoted raw form when the string is printable, newline-free and
    has no back-quote, and the escaped double-quoted form otherwise.
    """
    quoted = _quote(s)
    if len(quoted) == len(s) + 2:
        return quoted
    if all(ch != "`" and ch != "\n" and ch.isprintable() for ch in s):
        return f"`{s}`"
    return quoted


def format_hex(value: int) -> str:
    """Hexadecimal with the width padded to 2, 4, ... or 16 digits."""
    width = 2
    while width < 16 and value >= 1 << (width * 4):
        width += 2
    return f"0x{value:0{width}x}"


def is_zero(value: Any) -> bool:
    """True for None, False, 0, empty strings and containers, and all-zero records."""
    if value is None or value is MISSING:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float, complex)):
        return value == 0
    if isinstance(value, (str, bytes, bytearray, list, dict, set, frozenset)):
        return len(value) == 0
    if isinstance(value, tuple):
        return all(is_zero(item) for item in value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    return False


class _Renderer:
    """One rendering pass; owns the visited set for that pass."""

    def __init__(self, config: FormatConfig):
        self.config = config
        self.visited: set[int] = set()

    def render(self, value: Any) -> str:
        return self._format(value, self.config)

    def _format(self, value: Any, conf: FormatConfig) -> str:
        if value is MISSING:
            return NON_EXISTENT

        if conf.use_stringer and _is_stringer(value):
            return "s" + format_string(str(value))

        if conf.use_json and value is not None:
            try:
                return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
            except (TypeError, ValueError) as e:
                logger.debug(f"JSON rendering unavailable for {type(value).__name__}: {e}")

        if value is None:
            if conf.print_type and conf.print_primitive_type:
                return f"NoneType({NIL})"
            return NIL

        if isinstance(value, _PRIMITIVES):
            return self._format_primitive(value, conf)

        if isinstance(value, (bytes, bytearray)):
            return self._format_bytes(value, conf)

        if isinstance(value, (list, tuple)):
            return self._format_sequence(value, conf)

        if isinstance(value, (set, frozenset)):
            return self._format_set(value, conf)

        if isinstance(value, dict):
            return self._format_mapping(value, conf)

        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return self._format_record(value, conf)

        return self._format_pointer(value, conf)

    def _format_primitive(self, value: Any, conf: FormatConfig) -> str:
        base = next(t for t in _PRIMITIVES if isinstance(value, t))
        if base is str:
            text = format_string(str.__str__(value))
        elif base is bool:
            text = "true" if value else "false"
        elif base is float:
            text = float.__repr__(value)
        elif base is int:
            text = int.__repr__(value)
        else:
            text = complex.__repr__(value)

        named = type(value) is not base
        if conf.print_type and (named or conf.print_primitive_type):
            return f"{_type_name(value)}({text})"
        return text

    def _format_bytes(self, value: bytes | bytearray, conf: FormatConfig) -> str:
        s = "{" + ", ".join(format_hex(b) for b in value) + "}"
        if conf.print_type:
            return _type_name(value) + s
        return s

    def _format_sequence(self, value: list | tuple, conf: FormatConfig) -> str:
        if isinstance(value, list):
            if id(value) in self.visited:
                return self._format_pointer(value, conf)
            self.visited.add(id(value))

        element_conf = dataclasses.replace(conf, print_type=True)
        s = "{" + ", ".join(self._format(item, element_conf) for item in value) + "}"
        if conf.print_type:
            return _type_name(value) + s
        return s

    def _format_set(self, value: set | frozenset, conf: FormatConfig) -> str:
        if id(value) in self.visited:
            return self._format_pointer(value, conf)
        self.visited.add(id(value))

        element_conf = dataclasses.replace(conf, print_type=True, follow_pointers=False)
        s = "{" + ", ".join(self._format(item, element_conf) for item in sort_keys(value)) + "}"
        if conf.print_type:
            return _type_name(value) + s
        return s

    def _format_mapping(self, value: dict, conf: FormatConfig) -> str:
        if id(value) in self.visited:
            return self._format_pointer(value, conf)
        self.visited.add(id(value))

        key_conf = dataclasses.replace(conf, print_type=True, follow_pointers=False)
        value_conf = dataclasses.replace(conf, print_type=True)
        items = [
            f"{self._format(key, key_conf)}: {self._format(value[key], value_conf)}"
            for key in sort_keys(value)
        ]
        s = "{" + ", ".join(items) + "}"
        if conf.print_type:
            return _type_name(value) + s
        return s

    def _format_record(self, value: Any, conf: FormatConfig) -> str:
        if not conf.follow_pointers or id(value) in self.visited:
            return self._format_pointer(value, conf)
        self.visited.add(id(value))

        field_conf = dataclasses.replace(conf, print_type=True)
        items = []
        for f in dataclasses.fields(value):
            field_value = getattr(value, f.name)
            if conf.elide_zero_fields and is_zero(field_value):
                continue
            items.append(f"{f.name}: {self._format(field_value, field_conf)}")

        s = "{" + ", ".join(items) + "}"
        if conf.print_type:
            s = _type_name(value) + s
        return "&" + s

    def _format_pointer(self, value: Any, conf: FormatConfig) -> str:
        address = id(value) if conf.real_pointers else 0
        s = format_hex(address)
        if conf.print_type:
            return f"({_type_name(value)})({s})"
        return s


def _type_name(value: Any) -> str:
    return type(value).__qualname__


def _is_stringer(value: Any) -> bool:
    if isinstance(value, _BUILTIN_KINDS) or value is None:
        return False
    return type(value).__str__ is not object.__str__


def _quote(s: str) -> str:
    out = ['"']
    for ch in s:
        if ch == '"':
            out.append('\\"')
        elif ch == "\\":
            out.append("\\\\")
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\r":
            out.append("\\r")
        elif ch.isprintable():
            out.append(ch)
        else:
            code = ord(ch)
            if code <= 0xFF:
                out.append(f"\\x{code:02x}")
            elif code <= 0xFFFF:
                out.append(f"\\u{code:04x}")
            else:
                out.append(f"\\U{code:08x}")
    out.append('"')
    return "".join(out)
