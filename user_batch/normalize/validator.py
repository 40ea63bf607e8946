from __future__ import annotations

from ..errors import ValidationError
from ..models.user_record import UserRecord

"""Record validator.

Source independent: the same checks run for form submissions and workbook
rows. There is no cross-field validation (birth vs age is not compared).
"""

__all__ = [
    "REQUIRED_MESSAGE",
    "find_problems",
    "validate_record",
]

REQUIRED_MESSAGE = "All fields are required"


def find_problems(record: UserRecord) -> list[str]:
    problems: list[str] = []
    if not isinstance(record.name, str) or not record.name.strip():
        problems.append("name is empty")
    # bool は int のサブクラスなので明示的に除外
    if isinstance(record.age, bool) or not isinstance(record.age, int) or record.age < 1:
        problems.append("age must be a positive integer")
    if not isinstance(record.birth, str) or not record.birth.strip():
        problems.append("birth is empty")
    return problems


def validate_record(record: UserRecord | None) -> UserRecord:
    """Return the record unchanged or raise ValidationError.

    None (an unmappable row) fails the same way as an invalid record.
    """
    if record is None:
        raise ValidationError(REQUIRED_MESSAGE, ["missing name, age or birth"])
    problems = find_problems(record)
    if problems:
        raise ValidationError(REQUIRED_MESSAGE, problems)
    return record

