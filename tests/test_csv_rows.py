import logging

import pytest

from csv_rows import normalize_name, parse_rows, read_rows


def test_normalize_name():
    assert normalize_name("  Hull Number ") == "hull_number"
    assert normalize_name("NOTES") == "notes"


def test_parse_rows_normalizes_headers():
    rows = parse_rows("Name, Type ,MIN,Repeat Count\nfoo,number,1,2\n")

    assert rows == [{"name": "foo", "type": "number", "min": "1", "repeat_count": "2"}]


@pytest.mark.parametrize(
    "header",
    ["Name,Type,Required", "NAME,TYPE,REQUIRED", " name , type , required "],
)
def test_header_variants_give_same_keys(header):
    rows = parse_rows(f"{header}\nfoo,text,Y\n")

    assert list(rows[0]) == ["name", "type", "required"]


def test_parse_rows_trims_values_and_pads_missing_columns():
    rows = parse_rows("\n  Name,Type,Min,Max\n  foo , text \nbar,number,1,2,extra\n\n")

    assert rows == [
        {"name": "foo", "type": "text", "min": "", "max": ""},
        {"name": "bar", "type": "number", "min": "1", "max": "2"},
    ]


def test_parse_rows_handles_crlf():
    rows = parse_rows("Name,Type\r\nfoo,number\r\n")

    assert rows == [{"name": "foo", "type": "number"}]


def test_parse_rows_does_not_interpret_quotes():
    rows = parse_rows('Name,Notes\nfoo,"a, b"\n')

    assert rows == [{"name": "foo", "notes": '"a'}]


def test_parse_rows_keeps_blank_lines_between_rows():
    rows = parse_rows("value\nRed\n\nBlue")

    assert [row["value"] for row in rows] == ["Red", "", "Blue"]


def test_parse_rows_header_only():
    assert parse_rows("Name,Type\n") == []
    assert parse_rows("") == []


def test_read_rows(tmp_path):
    (tmp_path / "Types").mkdir()
    (tmp_path / "Types" / "Crew.csv").write_text("Name,Type\nCaptain,text\n", encoding="utf-8")

    assert read_rows(tmp_path, "Types/Crew.csv") == [{"name": "Captain", "type": "text"}]


def test_read_rows_missing_file_is_logged_and_raised(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="csv_rows"):
        with pytest.raises(FileNotFoundError, match="File not found"):
            read_rows(tmp_path, "Missing.csv")

    assert "Error reading CSV file" in caplog.text
