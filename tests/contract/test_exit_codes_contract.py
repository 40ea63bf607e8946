from __future__ import annotations

from pathlib import Path

from user_batch.cli.main import main

# Exit code contract: 0 success / 1 fatal (config, connection, load) / 2 action failed


def test_exit_code_success(write_config: Path):
    assert main(["--mock", "list"]) == 0


def test_exit_code_fatal_on_bad_config(temp_workdir: Path, capsys):
    (temp_workdir / "config" / "app.yml").write_text("page_size: -1\n", encoding="utf-8")
    assert main(["--mock", "list"]) == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_exit_code_action_failed(write_config: Path):
    assert main(["--mock", "add"]) == 2
