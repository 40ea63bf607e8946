from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any

"""UserRecord: the canonical record shape shared by both ingestion paths.

A UserRecord produced by the normalizer is only a *candidate*: its fields are
present but not yet checked. Records returned by storage always carry the id
assigned on insert.
"""

__all__ = [
    "UserRecord",
    "INSERT_COLUMNS",
]

# id は DB 側で採番するため INSERT 列に含めない
INSERT_COLUMNS: tuple[str, ...] = ("name", "age", "birth")


@dataclass(frozen=True)
class UserRecord:
    """Canonical user record.

    id=0 means "not yet assigned" (the form / import paths always send 0).
    birth is kept as an ISO-8601 date string (YYYY-MM-DD).
    """
    name: str
    age: int
    birth: str
    id: int = 0

    def with_id(self, new_id: int) -> UserRecord:
        return replace(self, id=new_id)

    def insert_values(self) -> tuple[Any, ...]:
        """Values in INSERT_COLUMNS order."""
        return (self.name, self.age, self.birth)

    def to_payload(self) -> dict[str, Any]:
        """Wire shape: {id, name, age, birth}."""
        return {"id": self.id, "name": self.name, "age": self.age, "birth": self.birth}

    @staticmethod
    def from_storage(row: dict[str, Any] | tuple[Any, ...]) -> UserRecord:
        """Build from a storage row (dict or (id, name, age, birth) tuple).

        The storage engine may hand back a date object for birth; the record
        always carries it as text.
        """
        if isinstance(row, dict):
            rid, name, age, birth = row["id"], row["name"], row["age"], row["birth"]
        else:
            rid, name, age, birth = row[0], row[1], row[2], row[3]
        if isinstance(birth, datetime):
            birth = birth.date().isoformat()
        elif isinstance(birth, date):
            birth = birth.isoformat()
        return UserRecord(name=str(name), age=int(age), birth=str(birth), id=int(rid))
