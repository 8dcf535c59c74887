"""Tests for canonical value rendering and key ordering."""

import math
from dataclasses import dataclass

import pytest

from ensemble.formatting import (
    NIL,
    NON_EXISTENT,
    FormatConfig,
    UncomparableKindError,
    format_hex,
    format_string,
    format_value,
    is_less,
    is_zero,
    sort_keys,
)
from ensemble.query import MISSING


@dataclass
class Point:
    x: int
    y: int = 0


class Label:
    def __str__(self) -> str:
        return "label-7"


class TestFormatValue:
    """Deterministic renderings of documents and Python values."""

    def test_mapping_keys_are_sorted(self) -> None:
        assert format_value({"b": 1, "a": [1, "x"]}) == 'dict{"a": list{1, "x"}, "b": 1}'

    def test_same_input_same_output(self) -> None:
        value = {"z": {3, 1, 2}, "a": (1, None)}
        assert format_value(value) == format_value(dict(reversed(list(value.items()))))

    def test_markers(self) -> None:
        assert format_value(None) == NIL
        assert format_value(MISSING) == NON_EXISTENT

    def test_primitive_types(self) -> None:
        conf = FormatConfig(print_primitive_type=True)
        assert format_value(5, conf) == "int(5)"
        assert format_value(True, conf) == "bool(true)"
        assert format_value(5) == "5"

    def test_bytes_render_as_hex(self) -> None:
        assert format_value(b"\x01\xff") == "bytes{0x01, 0xff}"

    def test_set_elements_are_sorted(self) -> None:
        assert format_value({3, 1, 2}) == "set{1, 2, 3}"

    def test_without_type_names(self) -> None:
        assert format_value([1, 2], FormatConfig(print_type=False)) == "{1, 2}"

    def test_json_mode(self) -> None:
        assert format_value({"b": [1], "a": "x"}, FormatConfig(use_json=True)) == '{"a":"x","b":[1]}'

    def test_json_mode_falls_back_for_unencodable_values(self) -> None:
        assert format_value({1, 2}, FormatConfig(use_json=True)) == "set{1, 2}"

    def test_cycle_is_cut_with_address_token(self) -> None:
        loop: list = []
        loop.append(loop)
        assert format_value(loop) == "list{(list)(0x00)}"

    def test_record_elides_zero_fields(self) -> None:
        assert format_value(Point(1)) == "&Point{x: 1}"
        conf = FormatConfig(elide_zero_fields=False)
        assert format_value(Point(1), conf) == "&Point{x: 1, y: 0}"

    def test_stringer(self) -> None:
        assert format_value(Label(), FormatConfig(use_stringer=True)) == 's"label-7"'


class TestFormatString:
    """Literal quoting rules."""

    def test_plain(self) -> None:
        assert format_string("abc") == '"abc"'

    def test_raw_form_for_quotes(self) -> None:
        assert format_string('say "hi"') == '`say "hi"`'

    def test_escaped_form_for_newlines(self) -> None:
        assert format_string("a\nb") == '"a\\nb"'

    def test_escaped_form_for_backquotes(self) -> None:
        assert format_string('`"') == '"`\\""'


class TestHelpers:
    """Hex widths and zero values."""

    @pytest.mark.parametrize(
        "value, expected",
        [(0, "0x00"), (255, "0xff"), (256, "0x0100"), (0x10000, "0x010000")],
    )
    def test_format_hex(self, value, expected) -> None:
        assert format_hex(value) == expected

    @pytest.mark.parametrize("value", [None, 0, 0.0, "", [], {}, False, Point(0)])
    def test_zero_values(self, value) -> None:
        assert is_zero(value)

    @pytest.mark.parametrize("value", [1, "a", [0], True, Point(1)])
    def test_non_zero_values(self, value) -> None:
        assert not is_zero(value)


class TestOrdering:
    """Total order over mapping keys."""

    def test_kinds_order_by_rank(self) -> None:
        assert sort_keys(["b", 2, None, True]) == [None, True, 2, "b"]

    def test_nan_sorts_last_and_collapses(self) -> None:
        ordered = sort_keys([2.0, math.nan, 1.0, math.nan])
        assert len(ordered) == 3
        assert ordered[:2] == [1.0, 2.0]
        assert math.isnan(ordered[2])

    def test_nan_after_every_float(self) -> None:
        assert is_less(1e308, math.nan)
        assert not is_less(math.nan, -1e308)
        assert not is_less(math.nan, math.nan)
        assert is_less(complex(1, 0), complex(math.nan, 0))

    def test_is_less(self) -> None:
        assert is_less(False, True)
        assert not is_less(True, True)
        assert is_less((1, "a"), (1, "b"))
        assert is_less(1, "a")

    def test_uncomparable_kinds_raise(self) -> None:
        with pytest.raises(UncomparableKindError):
            sort_keys([[1], [2]])
