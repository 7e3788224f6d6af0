"""
Tests for cell tagging and per-column numeric promotion.
"""

import math

import pandas
import pytest

from dbsql_frames.conversion import (
    CellKind,
    parse_numeric,
    promote_numeric_column,
    to_cell,
    to_cells,
)


class TestToCell:
    def test_null(self):
        assert to_cell(None).kind is CellKind.NULL

    def test_numeric_string(self):
        cell = to_cell("42")
        assert cell.kind is CellKind.STRING
        assert cell.raw == "42"
        assert cell.number == 42

    def test_text_string(self):
        cell = to_cell("abc")
        assert cell.kind is CellKind.STRING
        assert cell.number is None

    def test_json_number(self):
        cell = to_cell(3.5)
        assert cell.kind is CellKind.NUMBER
        assert cell.number == 3.5

    def test_bool_is_not_numeric(self):
        cell = to_cell(True)
        assert cell.kind is CellKind.OTHER
        assert not cell.is_numeric

    def test_nested_value_is_other(self):
        assert to_cell({"a": 1}).kind is CellKind.OTHER


class TestParseNumeric:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1", 1),
            ("-17", -17),
            ("2.5", 2.5),
            ("1e3", 1000.0),
            ("9223372036854775808", 9223372036854775808),
        ],
    )
    def test_numeric(self, text, expected):
        value = parse_numeric(text)
        assert value == expected
        assert type(value) is type(expected)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "  ",
            "abc",
            "1_000",
            "1.2.3",
            "12abc",
            "nan",
            "Nan",
            "inf",
            "Inf",
            "-inf",
            "infinity",
            "INFINITY",
        ],
    )
    def test_not_numeric(self, text):
        assert parse_numeric(text) is None

    def test_warehouse_special_values(self):
        assert math.isnan(parse_numeric("NaN"))
        assert parse_numeric("Infinity") == math.inf
        assert parse_numeric("-Infinity") == -math.inf


class TestPromoteNumericColumn:
    def test_integer_column_with_null(self):
        series = promote_numeric_column(to_cells(["1", "2", None, "4"]), "qty")

        assert series.name == "qty"
        assert str(series.dtype) == "Int64"
        assert series.iloc[0] == 1
        assert series.iloc[3] == 4
        assert series.iloc[2] is pandas.NA

    def test_mixed_int_and_float_is_float(self):
        series = promote_numeric_column(to_cells(["1", "2.5", None]))

        assert str(series.dtype) == "Float64"
        assert series.iloc[0] == 1.0
        assert series.iloc[1] == 2.5
        assert series.iloc[2] is pandas.NA

    def test_any_text_keeps_original_values(self):
        series = promote_numeric_column(to_cells(["1", "abc", None]))

        assert series.dtype == object
        assert series.tolist() == ["1", "abc", None]

    def test_json_numbers_promote(self):
        series = promote_numeric_column(to_cells([1, 2, 3]))
        assert str(series.dtype) == "Int64"
        assert series.tolist() == [1, 2, 3]

    def test_int64_overflow_falls_back_to_float(self):
        series = promote_numeric_column(to_cells(["1", "9223372036854775808"]))
        assert str(series.dtype) == "Float64"

    def test_booleans_are_not_promoted(self):
        series = promote_numeric_column(to_cells([True, False]))
        assert series.dtype == object
        assert series.tolist() == [True, False]

    def test_all_null_column_stays_object(self):
        series = promote_numeric_column(to_cells([None, None]))
        assert series.dtype == object
        assert series.tolist() == [None, None]

    def test_empty_column(self):
        series = promote_numeric_column([], "empty")
        assert len(series) == 0
        assert series.dtype == object

    def test_word_like_text_is_not_promoted(self):
        series = promote_numeric_column(to_cells(["Nan", "Inf", "Infinity"]))

        assert series.dtype == object
        assert series.tolist() == ["Nan", "Inf", "Infinity"]

    def test_nan_value_is_not_missing(self):
        series = promote_numeric_column(to_cells(["1.5", "NaN", None]))

        assert str(series.dtype) == "Float64"
        assert series.isna().tolist() == [False, False, True]
        assert series.iloc[0] == 1.5
        assert math.isnan(series.iloc[1])
        assert series.iloc[2] is pandas.NA

    def test_infinities_promote(self):
        series = promote_numeric_column(to_cells(["Infinity", "-Infinity", "2"]))

        assert str(series.dtype) == "Float64"
        assert series.tolist() == [math.inf, -math.inf, 2.0]
        assert not series.isna().any()
