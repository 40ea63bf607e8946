from __future__ import annotations

from collections.abc import Sequence

from ..models.user_record import UserRecord

"""In-memory UserStore used in mock mode (no database connection)."""

__all__ = ["InMemoryUserStore"]


class InMemoryUserStore:
    """Dict-backed store with sequence-like id assignment.

    `calls` records every primitive invoked ("select" / "insert" / "delete"),
    which is what "no storage call" assertions look at.
    """

    def __init__(self, records: Sequence[UserRecord] = ()) -> None:
        self._rows: dict[int, UserRecord] = {}
        self._next_id = 1
        self.calls: list[str] = []
        for r in records:
            self._store(r)

    def _store(self, record: UserRecord) -> UserRecord:
        stored = record.with_id(self._next_id)
        self._rows[stored.id] = stored
        self._next_id += 1
        return stored

    def select(self) -> list[UserRecord]:
        self.calls.append("select")
        return [self._rows[k] for k in sorted(self._rows)]

    def insert(self, records: Sequence[UserRecord]) -> int:
        self.calls.append("insert")
        for r in records:
            self._store(r)
        return len(records)

    def delete(self, ids: Sequence[int]) -> int:
        self.calls.append("delete")
        removed = 0
        for i in set(ids):
            if self._rows.pop(int(i), None) is not None:
                removed += 1
        return removed

    def __len__(self) -> int:
        return len(self._rows)
