from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema.exceptions import ValidationError as SchemaValidationError

from ..db.store import UserStore
from ..errors import TransportError, ValidationError
from ..models.cell_value import CellValue
from ..models.user_record import UserRecord
from ..normalize.fields import cell_to_age
from ..services.batch_mutator import BatchMutator

"""Transport-agnostic handlers for the /users resource.

Each handler takes the decoded JSON body and returns (status, payload), so any
HTTP layer can sit on top. Request bodies are checked against the JSON schemas
in api/schemas before anything reaches storage:

    GET    /users  -> 200 [{id, name, age, birth}, ...]
    POST   /users  {users: [...]} -> 200 {message, count} | 400
    DELETE /users  {ids: [...]}   -> 200 {message, count} | 400
"""

__all__ = [
    "list_users",
    "create_users",
    "delete_users",
]

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent / "schemas"

Response = tuple[int, Any]


@lru_cache(maxsize=None)
def _schema(name: str) -> dict[str, Any]:
    return json.loads((SCHEMA_DIR / f"{name}.json").read_text(encoding="utf-8"))


def _check(body: Any, schema_name: str) -> str | None:
    try:
        jsonschema.validate(body, _schema(schema_name))
    except SchemaValidationError as e:
        return e.message
    return None


def _bad_request(reason: str) -> Response:
    return 400, {"message": f"Invalid input: {reason}"}


def list_users(store: UserStore) -> Response:
    try:
        users = store.select()
    except Exception as e:
        logger.error("select failed: %s", e)
        return 500, {"message": "Internal Server Error"}
    return 200, [u.to_payload() for u in users]


def create_users(store: UserStore, body: Any) -> Response:
    reason = _check(body, "create_users")
    if reason is not None:
        return _bad_request(reason)

    records: list[UserRecord] = []
    for item in body["users"]:
        age = cell_to_age(CellValue.of(item["age"]))
        if age is None:
            return _bad_request(f"age is not an integer: {item['age']!r}")
        # id はクライアント値を無視して DB 採番
        records.append(UserRecord(name=item["name"], age=age, birth=item["birth"]))

    try:
        result = BatchMutator(store).bulk_insert(records)
    except ValidationError as e:
        return _bad_request("; ".join(e.problems) or str(e))
    except TransportError as e:
        logger.error("%s", e)
        return 500, {"message": "Internal Server Error"}
    return 200, {"message": result.message, "count": result.count}


def delete_users(store: UserStore, body: Any) -> Response:
    reason = _check(body, "delete_users")
    if reason is not None:
        return _bad_request(reason)

    ids = [int(i) for i in body["ids"]]
    try:
        result = BatchMutator(store).bulk_delete(ids)
    except TransportError as e:
        logger.error("%s", e)
        return 500, {"message": "Internal Server Error"}
    return 200, {"message": result.message, "count": result.count}
