from __future__ import annotations

from datetime import datetime
from io import BytesIO

import pytest

from user_batch.errors import ParseError
from user_batch.excel.reader import read_first_sheet
from user_batch.models.row_data import RowSource


def test_reads_header_and_rows(workbook_factory):
    path = workbook_factory(
        [
            ["name", "Age", "Birth Date"],
            ["Alice", "30", 44562],
            ["Bob", 41, datetime(1983, 2, 11)],
        ]
    )
    sheet = read_first_sheet(path)
    assert sheet.sheet_name == "Users"
    assert sheet.columns == ["name", "Age", "Birth Date"]
    assert [r.row_number for r in sheet.rows] == [1, 2]
    first = sheet.rows[0]
    assert first.source is RowSource.SPREADSHEET
    assert first.values == {"name": "Alice", "Age": "30", "Birth Date": 44562}
    assert sheet.rows[1].values["Birth Date"] == datetime(1983, 2, 11)


def test_blank_cells_become_none_and_blank_rows_skipped(workbook_factory):
    path = workbook_factory(
        [
            ["name", "age", "birth"],
            ["Alice", None, "2020-01-01"],
            [None, None, None],
            ["Carol", 25, None],
        ]
    )
    sheet = read_first_sheet(path)
    assert [r.values["name"] for r in sheet.rows] == ["Alice", "Carol"]
    assert sheet.rows[0].values["age"] is None
    assert sheet.rows[1].values["birth"] is None
    # 空行はスキップしても行番号は元の位置のまま
    assert sheet.rows[1].row_number == 3


def test_reads_from_file_object(workbook_factory):
    path = workbook_factory([["name", "age", "birth"], ["Dana", 3, "2021-03-03"]])
    sheet = read_first_sheet(BytesIO(path.read_bytes()))
    assert sheet.rows[0].values["name"] == "Dana"


def test_missing_file(tmp_path):
    with pytest.raises(ParseError, match="not found"):
        read_first_sheet(tmp_path / "nope.xlsx")


def test_not_a_workbook(tmp_path):
    bogus = tmp_path / "bogus.xlsx"
    bogus.write_text("name,age,birth\n", encoding="utf-8")
    with pytest.raises(ParseError):
        read_first_sheet(bogus)


def test_empty_sheet_has_no_header(workbook_factory):
    with pytest.raises(ParseError, match="no header row"):
        read_first_sheet(workbook_factory([]))
