from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from ..db.store import UserStore
from ..errors import TransportError, ValidationError
from ..models.processing_result import MutationResult, Operation
from ..models.user_record import UserRecord
from ..normalize.validator import find_problems

"""Batch mutator: one storage call per batch, one outcome per batch.

Empty batches short-circuit without touching storage. Any storage failure is
reported as TransportError for the whole batch; there is no partial result and
nothing is retried here.
"""

__all__ = [
    "BatchMutator",
    "INSERT_OK",
    "INSERT_EMPTY",
    "DELETE_OK",
    "DELETE_EMPTY",
]

logger = logging.getLogger(__name__)

INSERT_OK = "Users created successfully"
INSERT_EMPTY = "No users to create"
DELETE_OK = "Users deleted successfully"
DELETE_EMPTY = "No users to delete"


class BatchMutator:
    def __init__(self, store: UserStore, clock: Callable[[], float] = time.perf_counter) -> None:
        self.store = store
        self._clock = clock

    def bulk_insert(self, records: Sequence[UserRecord]) -> MutationResult:
        """Insert every record with a single storage call.

        Raises:
            ValidationError: a record does not pass the validator (nothing sent)
            TransportError: the storage call failed
        """
        if not records:
            return MutationResult(Operation.INSERT, count=0, message=INSERT_EMPTY, skipped=True)

        for record in records:
            problems = find_problems(record)
            if problems:
                raise ValidationError(f"refusing to insert invalid record: {'; '.join(problems)}", problems)

        start = self._clock()
        try:
            self.store.insert(list(records))
        except Exception as e:
            logger.debug("bulk insert failed size=%d", len(records), exc_info=True)
            raise TransportError(f"bulk insert failed: {e}") from e
        elapsed = self._clock() - start
        logger.debug("bulk insert size=%d elapsed=%.4f", len(records), elapsed)
        return MutationResult(Operation.INSERT, count=len(records), message=INSERT_OK, elapsed_seconds=elapsed)

    def bulk_delete(self, ids: Sequence[int]) -> MutationResult:
        """Delete every id with a single storage call; unknown ids are ignored.

        count is the number of ids requested, not the number actually removed.
        """
        if not ids:
            return MutationResult(Operation.DELETE, count=0, message=DELETE_EMPTY, skipped=True)

        start = self._clock()
        try:
            removed = self.store.delete([int(i) for i in ids])
        except Exception as e:
            logger.debug("bulk delete failed size=%d", len(ids), exc_info=True)
            raise TransportError(f"bulk delete failed: {e}") from e
        elapsed = self._clock() - start
        logger.debug("bulk delete requested=%d removed=%s elapsed=%.4f", len(ids), removed, elapsed)
        return MutationResult(Operation.DELETE, count=len(ids), message=DELETE_OK, elapsed_seconds=elapsed)
