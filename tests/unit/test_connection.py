from __future__ import annotations

import pytest

from user_batch.db.connection import resolve_dsn
from user_batch.models.config_models import DatabaseConfig

_ENV = ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE")


@pytest.fixture(autouse=True)
def _clear_pg_env(monkeypatch):
    for key in _ENV:
        monkeypatch.delenv(key, raising=False)


def test_database_url_wins(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u@h/db")
    monkeypatch.setenv("PGHOST", "ignored")
    assert resolve_dsn(DatabaseConfig(dsn="postgresql://cfg")) == "postgresql://u@h/db"


def test_config_dsn_used_when_env_empty():
    assert resolve_dsn(DatabaseConfig(dsn="postgresql://cfg")) == "postgresql://cfg"


def test_parts_from_config_with_env_override(monkeypatch):
    monkeypatch.setenv("PGUSER", "envuser")
    cfg = DatabaseConfig(host="db", port=6543, user="appuser", password="secret", database="appdb")
    assert resolve_dsn(cfg) == "host=db port=6543 user=envuser dbname=appdb password=secret"


def test_defaults_without_password():
    assert resolve_dsn(DatabaseConfig()) == "host=localhost port=5432 user=postgres dbname=postgres"
