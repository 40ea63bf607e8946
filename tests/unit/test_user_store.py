from __future__ import annotations

from datetime import date

import pytest

import user_batch.db.batch_insert as bi
from user_batch.db.memory import InMemoryUserStore
from user_batch.db.store import PostgresUserStore, StorageError
from user_batch.models.user_record import UserRecord


class DummyCursor:
    def __init__(self, rows=None, rowcount: int = -1, fail_on: str | None = None):
        self.executed: list[str] = []
        self.rows = rows or []
        self.rowcount = rowcount
        self.fail_on = fail_on

    def execute(self, sql, params=None):
        self.executed.append(sql)
        if self.fail_on and sql.startswith(self.fail_on):
            raise RuntimeError(f"{self.fail_on} failed")

    def fetchall(self):
        return self.rows


@pytest.fixture()
def fake_execute_values(monkeypatch):
    calls: list = []

    def fake(cursor, sql, rows, page_size=1000, template=None, fetch=False):
        cursor.execute(sql)
        calls.append(list(rows))
        return [(i + 1,) for i in range(len(calls[-1]))] if fetch else None

    monkeypatch.setattr(bi, "execute_values", fake)
    return calls


def test_select_maps_rows_and_dates():
    cur = DummyCursor(rows=[(1, "Alice", 30, date(2022, 1, 1)), {"id": 2, "name": "Bob", "age": 41, "birth": "1983-02-11"}])
    store = PostgresUserStore(cur)
    assert store.select() == [
        UserRecord(name="Alice", age=30, birth="2022-01-01", id=1),
        UserRecord(name="Bob", age=41, birth="1983-02-11", id=2),
    ]
    assert cur.executed == ['SELECT "id", "name", "age", "birth" FROM "users" ORDER BY "id"']


def test_insert_wrapped_in_transaction(fake_execute_values):
    cur = DummyCursor()
    store = PostgresUserStore(cur, table="people")
    n = store.insert([UserRecord("Alice", 30, "2022-01-01"), UserRecord("Bob", 41, "1983-02-11")])
    assert n == 2
    assert fake_execute_values == [[("Alice", 30, "2022-01-01"), ("Bob", 41, "1983-02-11")]]
    assert cur.executed[0] == "BEGIN"
    assert cur.executed[1].startswith('INSERT INTO "people"')
    assert cur.executed[-1] == "COMMIT"


def test_insert_failure_rolls_back(fake_execute_values):
    cur = DummyCursor(fail_on="INSERT")
    store = PostgresUserStore(cur)
    with pytest.raises(StorageError):
        store.insert([UserRecord("Alice", 30, "2022-01-01")])
    assert cur.executed[-1] == "ROLLBACK"
    assert "COMMIT" not in cur.executed


def test_begin_failure_is_storage_error():
    store = PostgresUserStore(DummyCursor(fail_on="BEGIN"))
    with pytest.raises(StorageError, match="begin"):
        store.delete([1])


def test_delete_returns_removed_count():
    cur = DummyCursor(rowcount=1)
    store = PostgresUserStore(cur)
    assert store.delete([1, 99]) == 1
    assert cur.executed == ["BEGIN", 'DELETE FROM "users" WHERE "id" = ANY(%s)', "COMMIT"]


def test_empty_mutations_do_not_touch_cursor():
    cur = DummyCursor()
    store = PostgresUserStore(cur)
    assert store.insert([]) == 0
    assert store.delete([]) == 0
    assert cur.executed == []


def test_invalid_table_name_rejected():
    with pytest.raises(StorageError):
        PostgresUserStore(DummyCursor(), table="users;--")


def test_memory_store_assigns_ids_and_ignores_unknown_deletes():
    store = InMemoryUserStore([UserRecord("Alice", 30, "2022-01-01")])
    store.insert([UserRecord("Bob", 41, "1983-02-11")])
    assert [u.id for u in store.select()] == [1, 2]
    assert store.delete([2, 42]) == 1
    assert store.delete([2]) == 0
    assert [u.name for u in store.select()] == ["Alice"]
    assert store.calls == ["insert", "select", "delete", "delete", "select"]
