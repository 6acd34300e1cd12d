import pytest

from app.services.sheets.ranges import (
    column_letter,
    format_range,
    parse_range,
    split_sheet_qualifier,
)


@pytest.mark.parametrize("value", [
    "A2:A13",
    "Sheet1!A2:A13",
    "'Sheet1'!A2:A13",
    "'My Sheet'!A2:A13",
    "a2:a13",
])
def test_parse_range_ignores_sheet_qualifier(value):
    result = parse_range(value)
    assert result.ok
    assert result.address.column == "A"
    assert result.address.start_row == 2
    assert result.address.end_row == 13


def test_parse_range_keeps_unquoted_sheet_name():
    result = parse_range("'It''s data'!C2:AG13")
    assert result.address.sheet_qualifier == "It's data"
    assert result.address.column == "C"
    assert result.address.end_column == "AG"


def test_parse_single_cell():
    addr = parse_range("C1").address
    assert (addr.column, addr.start_row, addr.end_row) == ("C", 1, 1)
    assert addr.is_single_cell


def test_parse_reversed_rows_are_normalised():
    addr = parse_range("A13:A2").address
    assert (addr.start_row, addr.end_row) == (2, 13)


@pytest.mark.parametrize("value", ["", "A1:B", "A:A", "2:13", "A2:13", "A0", "hello world!", None])
def test_parse_range_failure_does_not_raise(value):
    result = parse_range(value)
    assert not result.ok
    assert result.error
    assert result.rows_or(2, 13) == (2, 13)
    assert result.column_or("Z") == "Z"


def test_column_letter():
    assert column_letter("'Sheet1'!ag2:ag13") == "AG"
    assert column_letter("nonsense") is None


def test_split_sheet_qualifier_without_sheet():
    assert split_sheet_qualifier("B2:B5") == (None, "B2:B5")


def test_format_range():
    assert format_range("b", 2, 13) == "B2:B13"
    assert format_range("C", 1) == "C1"
    assert format_range("C", 1, sheet_qualifier="Sheet1") == "Sheet1!C1"
    assert format_range("C", 2, 4, sheet_qualifier="My Sheet") == "'My Sheet'!C2:C4"



def test_cell_like_sheet_name_parses_as_cell():
    addr = parse_range("Sheet1").address
    assert (addr.column, addr.start_row, addr.end_row) == ("SHEET", 1, 1)
