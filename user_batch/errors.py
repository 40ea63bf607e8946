from __future__ import annotations

"""Error taxonomy for the ingestion pipeline.

All of these are caught at the orchestrator boundary and turned into
user-facing text; none of them are retried.
"""

__all__ = [
    "UserBatchError",
    "ValidationError",
    "EmptyBatchError",
    "TransportError",
    "ParseError",
]


class UserBatchError(Exception):
    """Base error for this package."""


class ValidationError(UserBatchError):
    """A record failed local validation and never reached storage."""

    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        super().__init__(message)
        self.problems = problems or []


class EmptyBatchError(UserBatchError):
    """Nothing left to submit after filtering."""


class TransportError(UserBatchError):
    """Storage / network call failed. The whole batch is considered failed."""


class ParseError(UserBatchError):
    """Spreadsheet could not be read."""
