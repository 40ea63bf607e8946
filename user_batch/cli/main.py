from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from user_batch.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from user_batch.db.connection import db_cursor
from user_batch.db.memory import InMemoryUserStore
from user_batch.db.store import PostgresUserStore, UserStore
from user_batch.errors import ParseError
from user_batch.excel.reader import read_first_sheet
from user_batch.logging.init import log_summary, setup_logging
from user_batch.models.config_models import AppConfig
from user_batch.normalize.fields import missing_fields, normalize_row
from user_batch.services.deletion import DeleteStateError
from user_batch.services.orchestrator import UserPanel
from user_batch.services.summary import render_summary_line, summarize_ingestion, summarize_mutation

"""CLI entrypoint.

    python -m user_batch.cli [--config PATH] [--debug] [--mock] <command>

Commands: list / add / import / delete / inspect. Every command except
inspect reads the current list first; a failed read is fatal.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_ACTION_FAILED = 2

logger = logging.getLogger(__name__)


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env (override=True: .env wins over the inherited environment)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="user-batch", description="Bulk user import / delete tool")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Config YAML path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--mock", action="store_true", help="Use an in-memory store (nothing is persisted)")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Print stored users")

    add = sub.add_parser("add", help="Create one user")
    add.add_argument("--name", default="")
    add.add_argument("--age", default="")
    add.add_argument("--birth", default="", help="YYYY-MM-DD")

    imp = sub.add_parser("import", help="Import users from the first sheet of an .xlsx file")
    imp.add_argument("file")

    delete = sub.add_parser("delete", help="Delete users by id or by displayed row number")
    delete.add_argument("ids", nargs="*", type=int, help="User ids")
    delete.add_argument("--row", dest="rows", action="append", type=int, default=[],
                        help="Displayed row number (as printed by `list`, 1-based); repeatable")
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    insp = sub.add_parser("inspect", help="Print header and first normalized rows, no changes")
    insp.add_argument("file")
    insp.add_argument("--limit", type=int, default=3)
    return p.parse_args(argv)


def _summary(line: str) -> None:
    # log_summary が "SUMMARY " を付けるので除去して渡す
    log_summary(line.removeprefix("SUMMARY "))


def _report(panel: UserPanel) -> None:
    n = panel.notices
    if n.success:
        logger.info(n.success)
    for text in (n.form_error, n.delete_error, n.page_error):
        if text:
            logger.error(text)


def _cmd_list(panel: UserPanel, args: argparse.Namespace) -> int:
    print(f"{'#':>4}  {'id':>6}  {'name':<24} {'age':>4}  birth")
    for i, u in enumerate(panel.users, start=1):
        print(f"{i:>4}  {u.id:>6}  {u.name:<24} {u.age:>4}  {u.birth}")
    print(f"Total: {len(panel.users)} users")
    _summary(render_summary_line("list", rows=len(panel.users), count=len(panel.users)))
    return EXIT_SUCCESS


def _cmd_add(panel: UserPanel, args: argparse.Namespace) -> int:
    result = panel.submit_form({"name": args.name, "age": args.age, "birth": args.birth})
    _report(panel)
    _summary(summarize_ingestion("add", result))
    return EXIT_SUCCESS if result.ok else EXIT_ACTION_FAILED


def _cmd_import(panel: UserPanel, args: argparse.Namespace) -> int:
    result = panel.import_workbook(Path(args.file))
    for r in result.rejected:
        logger.warning("row=%d %s %s", r.row, r.error_type, r.message)
    _report(panel)
    _summary(summarize_ingestion("import", result))
    return EXIT_SUCCESS if result.ok else EXIT_ACTION_FAILED


def _cmd_delete(panel: UserPanel, args: argparse.Namespace, confirm: Callable[[str], str]) -> int:
    if args.ids and args.rows:
        logger.error("give either ids or --row, not both")
        return EXIT_ACTION_FAILED
    try:
        if args.rows:
            for number in args.rows:
                if number >= 1:
                    panel.selection.set(number - 1)
            prompt = panel.request_delete_selected()
        elif args.ids:
            prompt = panel.request_delete(args.ids)
        else:
            prompt = None
    except DeleteStateError as e:  # pragma: no cover (single action per process)
        logger.error("%s", e)
        return EXIT_ACTION_FAILED
    if prompt is None:
        logger.error("nothing selected")
        return EXIT_ACTION_FAILED

    if not args.yes:
        answer = confirm(f"{prompt} [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            panel.cancel_delete()
            logger.info("delete cancelled")
            _summary(render_summary_line("delete"))
            return EXIT_ACTION_FAILED

    result = panel.confirm_delete()
    _report(panel)
    if result is None:
        _summary(render_summary_line("delete"))
        return EXIT_ACTION_FAILED
    _summary(summarize_mutation("delete", result))
    return EXIT_SUCCESS


def _cmd_inspect(cfg: AppConfig, args: argparse.Namespace) -> int:
    try:
        sheet = read_first_sheet(Path(args.file))
    except ParseError as e:
        logger.error("inspect: %s", e)
        return EXIT_ACTION_FAILED
    print(f"SHEET: {sheet.sheet_name} cols={sheet.columns} rows={len(sheet.rows)}")
    for row in sheet.rows[: args.limit]:
        record = normalize_row(row, cfg.aliases)
        if record is None:
            print(f"  row={row.row_number} unmappable missing={missing_fields(row, cfg.aliases)}")
        else:
            print(f"  row={row.row_number} {record.to_payload()}")
    return EXIT_SUCCESS


def _run(store: UserStore, cfg: AppConfig, args: argparse.Namespace, confirm: Callable[[str], str]) -> int:
    panel = UserPanel(store, cfg)
    if not panel.refresh():
        _report(panel)
        return EXIT_FATAL
    if args.command == "list":
        return _cmd_list(panel, args)
    if args.command == "add":
        return _cmd_add(panel, args)
    if args.command == "import":
        return _cmd_import(panel, args)
    if args.command == "delete":
        return _cmd_delete(panel, args, confirm)
    logger.error("unknown command: %s", args.command)  # pragma: no cover
    return EXIT_FATAL  # pragma: no cover


def main(argv: list[str] | None = None, confirm: Callable[[str], str] = input) -> int:
    # None のときのみシステム引数を読む ([] はそのまま使う)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    setup_logging(debug=args.debug)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(Path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    logger.debug("config loaded table=%s", cfg.table)

    if args.command == "inspect":
        return _cmd_inspect(cfg, args)

    # テスト等で DB 接続を完全に無効化したい場合 DISABLE_DB_CONNECT=1
    if args.mock or os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("mock mode: in-memory store")
        return _run(InMemoryUserStore(), cfg, args, confirm)

    try:
        with db_cursor(cfg.database) as cur:
            return _run(PostgresUserStore(cur, cfg.table, cfg.page_size), cfg, args, confirm)
    except psycopg2.Error as e:
        logger.error(f"database connection failed: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
