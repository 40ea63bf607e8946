from __future__ import annotations

from pathlib import Path

import pytest

from user_batch.config.loader import ConfigError, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.table == "users"
    assert cfg.notice_ttl_seconds == 3.0
    assert cfg.page_size == 500
    assert cfg.error_log_dir == "./logs"
    assert cfg.aliases["birth"] == ("birth", "Birth", "Birth Date")
    assert cfg.database.host == "localhost"
    assert cfg.database.port == 5432


def test_minimal_config_uses_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "app.yml"
    p.write_text("table: people\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.table == "people"
    assert cfg.page_size == 1000
    assert cfg.aliases["name"] == ("name", "Name")
    assert cfg.database.host is None


def test_partial_aliases_merge_over_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "app.yml"
    p.write_text("aliases:\n  name: [full_name]\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.aliases["name"] == ("full_name",)
    assert cfg.aliases["age"] == ("age", "Age")


def test_missing_config(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "absent.yml")


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "app.yml"
    p.write_text("table: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


@pytest.mark.parametrize(
    "body",
    [
        "table: 'users; drop'\n",
        "notice_ttl_seconds: 0\n",
        "page_size: 0\n",
        "unknown_key: 1\n",
        "aliases:\n  name: []\n",
        "- a\n- b\n",
    ],
)
def test_schema_violations(temp_workdir: Path, body: str):
    p = temp_workdir / "config" / "app.yml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)
