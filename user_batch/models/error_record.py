from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the rejection / failure log.

Each record is one JSON line: rows dropped by the normalizer, rows rejected by
the validator, unreadable workbooks and failed storage calls.
row=-1 is used when the failure is not tied to a single row.
"""

__all__ = [
    "ErrorRecord",
    "UNMAPPABLE_ROW",
    "INVALID_RECORD",
    "PARSE_ERROR",
    "TRANSPORT_ERROR",
]

UNMAPPABLE_ROW = "UNMAPPABLE_ROW"
INVALID_RECORD = "INVALID_RECORD"
PARSE_ERROR = "PARSE_ERROR"
TRANSPORT_ERROR = "TRANSPORT_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: workbook file name, or "form"
        row: 1-based row number, -1 when unknown / not row specific
        error_type: UPPER_SNAKE_CASE classification
        message: human readable reason
    """
    timestamp: str
    source: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(source: str, row: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
