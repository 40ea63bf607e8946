from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import date, timedelta

from ..models.cell_value import CellKind, CellValue
from ..models.config_models import DEFAULT_ALIASES
from ..models.row_data import RawInputRow
from ..models.user_record import UserRecord

"""Field normalizer: RawInputRow -> UserRecord candidate.

Each canonical field has an ordered alias list; the first alias holding a
non-empty value wins. Values are converted through the total functions below
(cell_to_text / cell_to_age / cell_to_birth), each returning None when the
cell cannot produce the field.

A row missing any of name / age / birth is unmappable: normalize_row returns
None and the row never reaches the validator.
"""

__all__ = [
    "SERIAL_EPOCH",
    "serial_to_iso_date",
    "resolve_alias",
    "cell_to_text",
    "cell_to_age",
    "cell_to_birth",
    "normalize_row",
    "missing_fields",
]

# Excel / Lotus 1900 date system: serial 25569 == 1970-01-01
SERIAL_EPOCH = date(1899, 12, 30)


def serial_to_iso_date(serial: float) -> str | None:
    """Spreadsheet day serial -> YYYY-MM-DD, time of day truncated.

    >>> serial_to_iso_date(44562)
    '2022-01-01'
    >>> serial_to_iso_date(44562.75)
    '2022-01-01'
    """
    if not math.isfinite(serial):
        return None
    try:
        return (SERIAL_EPOCH + timedelta(days=math.floor(serial))).isoformat()
    except OverflowError:
        return None


def resolve_alias(row: RawInputRow, aliases: Sequence[str]) -> CellValue:
    """First non-empty cell among aliases (in order); EMPTY if none."""
    for key in aliases:
        cell = row.cell(key)
        if not cell.is_empty:
            return cell
    return CellValue(CellKind.EMPTY)


def cell_to_text(cell: CellValue) -> str | None:
    if cell.kind is CellKind.TEXT:
        return str(cell.value)
    if cell.kind is CellKind.NUMBER:
        value = cell.value
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    if cell.kind is CellKind.DATE:
        return cell.value.isoformat()  # type: ignore[union-attr]
    return None


def cell_to_age(cell: CellValue) -> int | None:
    """int, integral float, or numeric text -> int. Anything else -> None."""
    value: float | int
    if cell.kind is CellKind.NUMBER:
        value = cell.value  # type: ignore[assignment]
    elif cell.kind is CellKind.TEXT:
        text = str(cell.value)
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
    else:
        return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)
    return int(value)


def cell_to_birth(cell: CellValue) -> str | None:
    """NUMBER -> date serial conversion, DATE -> ISO date, TEXT -> verbatim."""
    if cell.kind is CellKind.NUMBER:
        return serial_to_iso_date(float(cell.value))  # type: ignore[arg-type]
    if cell.kind is CellKind.DATE:
        return cell.value.isoformat()  # type: ignore[union-attr]
    if cell.kind is CellKind.TEXT:
        return str(cell.value)
    return None


def missing_fields(
    row: RawInputRow, aliases: Mapping[str, Sequence[str]] | None = None
) -> list[str]:
    """Canonical fields that cannot be resolved for this row (in canonical order)."""
    aliases = aliases or DEFAULT_ALIASES
    missing = []
    if cell_to_text(resolve_alias(row, aliases["name"])) is None:
        missing.append("name")
    if cell_to_age(resolve_alias(row, aliases["age"])) is None:
        missing.append("age")
    if cell_to_birth(resolve_alias(row, aliases["birth"])) is None:
        missing.append("birth")
    return missing


def normalize_row(
    row: RawInputRow, aliases: Mapping[str, Sequence[str]] | None = None
) -> UserRecord | None:
    """Map one raw row to a UserRecord candidate, or None if unmappable.

    The candidate is not validated here: age may still be < 1, for example.
    """
    aliases = aliases or DEFAULT_ALIASES
    name = cell_to_text(resolve_alias(row, aliases["name"]))
    age = cell_to_age(resolve_alias(row, aliases["age"]))
    birth = cell_to_birth(resolve_alias(row, aliases["birth"]))
    if name is None or age is None or birth is None:
        return None
    return UserRecord(name=name, age=age, birth=birth)
