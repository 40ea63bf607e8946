from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

import pandas as pd

from ..errors import ParseError
from ..models.row_data import RawInputRow, RowSource

"""Workbook reader for the spreadsheet import path.

Only the first sheet is read. Row 1 is the header row, every following row is
data. Cells are read with dtype=object so integers stay integers and
date-formatted cells arrive as datetimes; plain numeric cells holding a date
serial stay numbers and are resolved by the normalizer.
"""

__all__ = [
    "SheetData",
    "read_first_sheet",
]


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[RawInputRow]


def _load_first_sheet(source: Path | IO[bytes]) -> tuple[str, pd.DataFrame]:
    try:
        xls = pd.ExcelFile(source, engine="openpyxl")
    except FileNotFoundError as e:
        raise ParseError(f"workbook not found: {source}") from e
    except Exception as e:
        raise ParseError(f"failed to open workbook: {e}") from e
    if not xls.sheet_names:
        raise ParseError("workbook has no sheets")
    name = str(xls.sheet_names[0])
    try:
        # ヘッダなしで生読み (1行目をヘッダとして後で適用)
        df = xls.parse(xls.sheet_names[0], header=None, dtype=object)
    except Exception as e:
        raise ParseError(f"failed to read sheet '{name}': {e}") from e
    return name, df


def read_first_sheet(source: Path | IO[bytes]) -> SheetData:
    """Read the first sheet of an .xlsx workbook into RawInputRows.

    Steps:
    1. Open the workbook, take sheet index 0
    2. First row becomes the header (cells stripped, blank header cells skipped)
    3. Remaining rows become data rows; fully blank rows are skipped

    Raises:
        ParseError: the file is missing, not a readable workbook, or has no
            header row.
    """
    sheet_name, df = _load_first_sheet(source)
    if df.shape[0] < 1:
        raise ParseError(f"sheet '{sheet_name}' has no header row")

    header = df.iloc[0].tolist()
    columns: list[str | None] = [None if pd.isna(c) else str(c).strip() or None for c in header]
    if not any(columns):
        raise ParseError(f"sheet '{sheet_name}' has an empty header row")

    rows: list[RawInputRow] = []
    for offset, (_, raw) in enumerate(df.iloc[1:].iterrows(), start=1):
        if raw.isna().all():
            continue
        values: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            if col is None:
                continue
            # NaN は None に統一 (CellValue 側でも EMPTY 扱い)
            values[col] = None if pd.isna(val) else val
        rows.append(RawInputRow(source=RowSource.SPREADSHEET, row_number=offset, values=values))

    return SheetData(
        sheet_name=sheet_name,
        columns=[c for c in columns if c is not None],
        rows=rows,
    )
