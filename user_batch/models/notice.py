from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Expiring notice value.

A notice is plain data (payload + expiry). Whoever renders state asks
is_active(now); nothing mutates the notice when it expires.
"""

__all__ = [
    "NoticeKind",
    "Notice",
]


class NoticeKind(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    text: str
    expires_at: float | None = None  # None = 次の操作まで残る

    def is_active(self, now: float) -> bool:
        return self.expires_at is None or now < self.expires_at
