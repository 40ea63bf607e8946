from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

from psycopg2.extras import execute_values

"""Batch INSERT / DELETE primitives on a psycopg2 cursor.

batch_insert sends all rows through psycopg2.extras.execute_values (one
statement per page_size rows); batch_delete removes every matching id with a
single `= ANY(%s)` statement. Transaction boundaries are owned by the caller.
"""

__all__ = [
    "StorageError",
    "batch_insert",
    "batch_delete",
    "check_identifier",
]

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class StorageError(Exception):
    pass


def check_identifier(name: str) -> str:
    """Table / column names are interpolated, so only plain identifiers pass."""
    if not _IDENTIFIER.match(name):
        raise StorageError(f"invalid identifier: {name!r}")
    return name


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    page_size: int = 1000,
) -> int:
    """Perform a batched INSERT using psycopg2.extras.execute_values.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: target table (plain identifier)
    columns: insert columns, id excluded (assigned by the sequence)
    rows: row value sequences in `columns` order
    page_size: execute_values page_size

    Returns the number of rows sent; 0 without touching the cursor when
    `rows` is empty.
    """
    rows_list = list(rows)
    if not rows_list:
        return 0

    check_identifier(table)
    cols_sql = ",".join(f'"{check_identifier(c)}"' for c in columns)
    sql = f'INSERT INTO "{table}" ({cols_sql}) VALUES %s'
    try:
        execute_values(cursor, sql, rows_list, page_size=page_size)
    except Exception as e:
        raise StorageError(str(e)) from e
    return len(rows_list)


def batch_delete(
    cursor: Any,
    table: str,
    ids: Iterable[int],
    id_column: str = "id",
) -> int:
    """DELETE every row whose id is in `ids` with one statement.

    Ids with no matching row are ignored. Returns the number of rows actually
    removed (cursor.rowcount), which may be lower than len(ids).
    """
    ids_list = [int(i) for i in ids]
    if not ids_list:
        return 0
    check_identifier(table)
    sql = f'DELETE FROM "{table}" WHERE "{check_identifier(id_column)}" = ANY(%s)'
    try:
        cursor.execute(sql, (ids_list,))
    except Exception as e:
        raise StorageError(str(e)) from e
    rowcount = getattr(cursor, "rowcount", -1)
    return rowcount if isinstance(rowcount, int) and rowcount >= 0 else 0
