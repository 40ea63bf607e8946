# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from user_batch.db.memory import InMemoryUserStore
from user_batch.logging.init import reset_logging
from user_batch.models.user_record import UserRecord


@pytest.fixture(autouse=True)
def _clean_logging():
    # 各テストで stdout ハンドラを作り直す (capsys の差し替え後の stdout を掴むため)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """table: users
notice_ttl_seconds: 3
page_size: 500
error_log_dir: ./logs
aliases:
  name: [name, Name]
  age: [age, Age]
  birth: [birth, Birth, Birth Date]
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "app.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_workbook(path: Path, rows: list[list[Any]], sheet_name: str = "Users") -> Path:
    """Write rows (first row = header) as the first sheet of an .xlsx file."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


@pytest.fixture()
def workbook_factory(tmp_path: Path):
    def _make(rows: list[list[Any]], name: str = "users.xlsx", sheet_name: str = "Users") -> Path:
        return make_workbook(tmp_path / name, rows, sheet_name=sheet_name)
    return _make


@pytest.fixture()
def seeded_store() -> InMemoryUserStore:
    """Store holding ids 1..3 (Alice, Bob, Carol)."""
    return InMemoryUserStore(
        [
            UserRecord(name="Alice", age=30, birth="1994-05-01"),
            UserRecord(name="Bob", age=41, birth="1983-02-11"),
            UserRecord(name="Carol", age=25, birth="1999-12-31"),
        ]
    )
