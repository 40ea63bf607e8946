from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Protocol

from ..models.user_record import INSERT_COLUMNS, UserRecord
from .batch_insert import StorageError, batch_delete, batch_insert, check_identifier

"""Storage collaborator for the batch mutator.

UserStore is the three-primitive contract (select / insert / delete).
PostgresUserStore implements it on a psycopg2 cursor, wrapping every mutation
in an explicit BEGIN / COMMIT so a multi-page insert is still all-or-nothing.
"""

__all__ = [
    "UserStore",
    "PostgresUserStore",
    "StorageError",
]

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    def select(self) -> list[UserRecord]: ...

    def insert(self, records: Sequence[UserRecord]) -> int: ...

    def delete(self, ids: Sequence[int]) -> int: ...


class PostgresUserStore:
    """UserStore backed by a psycopg2 cursor (connection in autocommit mode)."""

    def __init__(self, cursor: Any, table: str = "users", page_size: int = 1000) -> None:
        self.cursor = cursor
        self.table = check_identifier(table)
        self.page_size = page_size

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            self.cursor.execute("BEGIN")
        except Exception as e:
            raise StorageError(f"failed to begin transaction: {e}") from e
        try:
            yield
        except Exception:
            try:
                self.cursor.execute("ROLLBACK")
            except Exception:
                # 元のエラーを優先
                logger.warning("rollback failed table=%s", self.table, exc_info=True)
            raise
        try:
            self.cursor.execute("COMMIT")
        except Exception as e:
            raise StorageError(f"commit failed: {e}") from e

    def select(self) -> list[UserRecord]:
        try:
            self.cursor.execute(f'SELECT "id", "name", "age", "birth" FROM "{self.table}" ORDER BY "id"')
            rows = self.cursor.fetchall()
        except Exception as e:
            raise StorageError(str(e)) from e
        return [UserRecord.from_storage(r) for r in rows]

    def insert(self, records: Sequence[UserRecord]) -> int:
        if not records:
            return 0
        with self._transaction():
            inserted = batch_insert(
                self.cursor,
                self.table,
                INSERT_COLUMNS,
                [r.insert_values() for r in records],
                page_size=self.page_size,
            )
        logger.debug("table=%s inserted_rows=%d", self.table, inserted)
        return inserted

    def delete(self, ids: Sequence[int]) -> int:
        if not ids:
            return 0
        with self._transaction():
            removed = batch_delete(self.cursor, self.table, ids)
        logger.debug("table=%s requested=%d removed=%d", self.table, len(ids), removed)
        return removed
