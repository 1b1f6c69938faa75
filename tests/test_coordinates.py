"""Tests for the coordinate decoders."""

from __future__ import annotations

import math

import pytest

from tree_lights.coordinates import (
    Coordinate,
    CsvCoordinateDecoder,
    CsvCoordinateOptions,
    JsonArrayCoordinateDecoder,
    LineDelimitedJsonCoordinateDecoder,
)
from tree_lights.errors import DecodeError


def test_line_delimited_decodes_in_order() -> None:
    text = "[1, 2, 3]\n[4.5, 5, 6]\n[-1, 0, 2e1]\n"
    result = LineDelimitedJsonCoordinateDecoder().decode(text)
    assert result == ((1.0, 2.0, 3.0), (4.5, 5.0, 6.0), (-1.0, 0.0, 20.0))
    assert all(isinstance(c, Coordinate) for c in result)
    assert isinstance(result, tuple)


def test_line_delimited_skips_trivial_lines() -> None:
    text = "[1,2,3]\n\n[]\n \r\n[4,5,6]"
    result = LineDelimitedJsonCoordinateDecoder().decode(text)
    assert result == ((1.0, 2.0, 3.0), (4.0, 5.0, 6.0))


def test_line_delimited_accepts_crlf() -> None:
    result = LineDelimitedJsonCoordinateDecoder().decode("[1,2,3]\r\n[4,5,6]\r\n")
    assert len(result) == 2


@pytest.mark.parametrize(
    "line",
    ["[1, 2]", "[1, 2, 3, 4]", '[1, "2", 3]', "[true, 1, 2]", '{"x": 1}'],
)
def test_line_delimited_rejects_wrong_shape(line: str) -> None:
    with pytest.raises(DecodeError):
        LineDelimitedJsonCoordinateDecoder().decode(f"[0,0,0]\n{line}\n")


def test_line_delimited_rejects_invalid_json() -> None:
    with pytest.raises(DecodeError, match="Line 2"):
        LineDelimitedJsonCoordinateDecoder().decode("[0,0,0]\n[1,2,\n")


def test_json_array_decodes() -> None:
    result = JsonArrayCoordinateDecoder().decode("[[1, 2, 3], [4, 5, 6.5]]")
    assert result == ((1.0, 2.0, 3.0), (4.0, 5.0, 6.5))


@pytest.mark.parametrize(
    "text",
    [
        "[]",
        "[[1, 2, 3], [1, 2]]",
        '[[1, 2, "z"]]',
        '{"points": [[1, 2, 3]]}',
        "[1, 2, 3]",
        "not json",
    ],
)
def test_json_array_rejects_empty_or_malformed(text: str) -> None:
    with pytest.raises(DecodeError):
        JsonArrayCoordinateDecoder().decode(text)


@pytest.mark.parametrize(
    "text",
    [
        "[1" + "0" * 400 + ", 0, 0]",
        "[" + "9" * 5000 + ", 0, 0]",
        "[NaN, 0, 0]",
        "[Infinity, 0, 0]",
    ],
)
def test_json_decoders_reject_numbers_without_finite_float(text: str) -> None:
    with pytest.raises(DecodeError):
        LineDelimitedJsonCoordinateDecoder().decode(text)
    with pytest.raises(DecodeError):
        JsonArrayCoordinateDecoder().decode(f"[{text}]")


def test_csv_default_columns() -> None:
    result = CsvCoordinateDecoder().decode("1,2,3\n4,5,6\n")
    assert result == ((1.0, 2.0, 3.0), (4.0, 5.0, 6.0))


@pytest.mark.parametrize("skip", [0, 1, 2, 3])
def test_csv_skip_rows_drops_exactly_n_lines(skip: int) -> None:
    text = "1,1,1\n2,2,2\n3,3,3\n4,4,4"
    decoder = CsvCoordinateDecoder(CsvCoordinateOptions(skip_row_count=skip))
    result = decoder.decode(text)
    assert [c.x for c in result] == [float(n) for n in range(skip + 1, 5)]


def test_csv_skips_header_row() -> None:
    decoder = CsvCoordinateDecoder(CsvCoordinateOptions(skip_row_count=1))
    assert decoder.decode("X,Y,Z\n1,2,3") == ((1.0, 2.0, 3.0),)


def test_csv_selects_columns() -> None:
    options = CsvCoordinateOptions(xyz_columns=(3, 1, 2))
    result = CsvCoordinateDecoder(options).decode("id,10,20,30\n")
    assert result == ((30.0, 10.0, 20.0),)


def test_csv_drops_short_rows() -> None:
    result = CsvCoordinateDecoder().decode("1,2\n\n4,5,6\n7")
    assert result == ((4.0, 5.0, 6.0),)


def test_csv_non_numeric_cell_is_nan() -> None:
    (coord,) = CsvCoordinateDecoder().decode("1,abc,3")
    assert coord.x == 1.0
    assert math.isnan(coord.y)
    assert coord.z == 3.0


def test_csv_rejects_too_many_columns() -> None:
    wide = ",".join(["1"] * 11)
    with pytest.raises(DecodeError, match="more than 10 columns"):
        CsvCoordinateDecoder().decode(f"1,2,3\n{wide}\n")


def test_csv_rejects_by_comma_count_even_if_row_is_junk() -> None:
    options = CsvCoordinateOptions(validation_max_columns=3)
    decoder = CsvCoordinateDecoder(options)
    assert decoder.decode("1,2,3") == ((1.0, 2.0, 3.0),)
    with pytest.raises(DecodeError):
        decoder.decode("1,2,3\n,,,")


def test_csv_validation_ignores_skipped_rows() -> None:
    options = CsvCoordinateOptions(skip_row_count=1, validation_max_columns=3)
    assert CsvCoordinateDecoder(options).decode("a,b,c,d,e\n1,2,3") == (
        (1.0, 2.0, 3.0),
    )


@pytest.mark.parametrize("columns", [(0, 1), (0, 1, 2, 3), (0, -1, 2)])
def test_csv_options_reject_bad_columns(columns: tuple[int, ...]) -> None:
    with pytest.raises(ValueError):
        CsvCoordinateOptions(xyz_columns=columns)


def test_csv_options_accept_list_columns() -> None:
    options = CsvCoordinateOptions(xyz_columns=[2, 1, 0])  # type: ignore[arg-type]
    assert options.xyz_columns == (2, 1, 0)
