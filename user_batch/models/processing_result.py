from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .error_record import ErrorRecord
from .user_record import UserRecord

"""Outcome models for mutations and ingestion runs."""


class Operation(Enum):
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class MutationResult:
    """Single outcome for a whole batch.

    count is the number of records submitted (insert) or ids requested
    (delete); skipped=True when the batch was empty and storage was not called.
    """
    operation: Operation
    count: int
    message: str
    elapsed_seconds: float = 0.0
    skipped: bool = False


@dataclass(frozen=True)
class IngestionResult:
    """Result of one form submission or workbook import."""
    source: str
    total_rows: int  # 入力行数 (空行除外後)
    accepted: list[UserRecord] = field(default_factory=list)
    rejected: list[ErrorRecord] = field(default_factory=list)
    mutation: MutationResult | None = None
    elapsed_seconds: float = 0.0
    error: str | None = None  # ユーザー向けメッセージ (失敗時のみ)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def inserted(self) -> int:
        return self.mutation.count if self.mutation is not None else 0
