from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

import pandas as pd

"""Tagged cell values for rows coming from a form or a workbook.

Raw values arrive loosely typed (str / int / float / numpy scalar / datetime /
NaN / None). CellValue.of() classifies any of them into exactly one kind so the
normalizer never has to probe Python types itself.
"""

__all__ = [
    "CellKind",
    "CellValue",
]


class CellKind(Enum):
    """Kind of a classified cell.

    - TEXT: non-empty string (surrounding whitespace stripped)
    - NUMBER: int or float (bool excluded)
    - DATE: date/datetime already decoded by the workbook reader
    - EMPTY: None, NaN/NaT, or whitespace-only string
    """
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    EMPTY = "empty"


@dataclass(frozen=True)
class CellValue:
    kind: CellKind
    value: str | int | float | date | None = None

    @staticmethod
    def of(raw: Any) -> CellValue:
        if raw is None:
            return _EMPTY
        if isinstance(raw, str):
            stripped = raw.strip()
            if stripped == "":
                return _EMPTY
            return CellValue(CellKind.TEXT, stripped)
        # pd.Timestamp は datetime のサブクラス (NaT は isna で弾く)
        if isinstance(raw, (datetime, date)):
            if pd.isna(raw):
                return _EMPTY
            return CellValue(CellKind.DATE, raw.date() if isinstance(raw, datetime) else raw)
        if isinstance(raw, bool):
            return CellValue(CellKind.TEXT, str(raw))
        if isinstance(raw, numbers.Integral):
            return CellValue(CellKind.NUMBER, int(raw))
        if isinstance(raw, numbers.Real):
            f = float(raw)
            if math.isnan(f):
                return _EMPTY
            return CellValue(CellKind.NUMBER, f)
        return CellValue.of(str(raw))

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY


_EMPTY = CellValue(CellKind.EMPTY, None)
