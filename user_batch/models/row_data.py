from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .cell_value import CellValue

"""RawInputRow: one row of input before normalization.

A form submission produces a single row with known keys; a workbook produces
one row per data line with header cells as keys. Rows are discarded right
after normalization.
"""

__all__ = [
    "RowSource",
    "RawInputRow",
]


class RowSource(Enum):
    FORM = "form"
    SPREADSHEET = "spreadsheet"


@dataclass(frozen=True)
class RawInputRow:
    """Open mapping of text keys to arbitrary values, plus its origin.

    row_number is 1-based within the source (the first data row of a sheet is
    row 1; a form submission is always row 1).
    """
    source: RowSource
    row_number: int
    values: Mapping[str, Any] = field(default_factory=dict)

    def cell(self, key: str) -> CellValue:
        """Classified value under an exact key (EMPTY when the key is absent)."""
        return CellValue.of(self.values.get(key))

    @staticmethod
    def from_form(values: Mapping[str, Any]) -> RawInputRow:
        return RawInputRow(source=RowSource.FORM, row_number=1, values=dict(values))
