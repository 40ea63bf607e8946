from __future__ import annotations

import json
import re
from pathlib import Path

from user_batch.cli.main import main

TS_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")
ALLOWED_TYPES = {"UNMAPPABLE_ROW", "INVALID_RECORD", "PARSE_ERROR", "TRANSPORT_ERROR"}


def test_error_log_lines_follow_schema(write_config: Path, temp_workdir: Path, workbook_factory):
    path = workbook_factory(name="users.xlsx", rows=[["name", "age", "birth"], ["Alice", 30, "2022-01-01"], ["Bob", 0, "2000-01-01"], ["", 2, "2020-02-02"]])
    assert main(["--mock", "import", str(path)]) == 0

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert len(records) == 2
    for rec in records:
        assert list(rec) == ["timestamp", "source", "row", "error_type", "message"]
        assert TS_RE.match(rec["timestamp"])
        assert rec["source"] == "users.xlsx"
        assert isinstance(rec["row"], int)
        assert rec["error_type"] in ALLOWED_TYPES
    assert {(r["row"], r["error_type"]) for r in records} == {(2, "INVALID_RECORD"), (3, "UNMAPPABLE_ROW")}


def test_no_error_log_when_everything_passes(write_config: Path, temp_workdir: Path, workbook_factory):
    path = workbook_factory(name="ok.xlsx", rows=[["name", "age", "birth"], ["Alice", 30, "2022-01-01"]])
    assert main(["--mock", "import", str(path)]) == 0
    assert list((temp_workdir / "logs").glob("errors-*.log")) == []
