from __future__ import annotations

from collections.abc import Sequence

from ..models.delete_state import DeleteState

"""Delete confirmation flow.

IDLE -> PENDING_CONFIRMATION(ids) -> IDLE (cancel)
                                  -> MUTATING -> IDLE (settle)

Only one delete can be pending or in flight at a time.
"""

__all__ = [
    "DeleteFlow",
    "DeleteStateError",
    "confirmation_prompt",
]


class DeleteStateError(Exception):
    """Transition not allowed from the current state."""


def confirmation_prompt(count: int) -> str:
    return f"Are you sure you want to delete {count} users? This action cannot be undone."


class DeleteFlow:
    def __init__(self) -> None:
        self.state = DeleteState.IDLE
        self._pending: tuple[int, ...] = ()

    @property
    def pending_ids(self) -> tuple[int, ...]:
        return self._pending

    def request(self, ids: Sequence[int]) -> str:
        """Capture ids and wait for confirmation. Returns the prompt text."""
        if self.state is not DeleteState.IDLE:
            raise DeleteStateError(f"cannot request delete while {self.state.value}")
        self._pending = tuple(int(i) for i in ids)
        self.state = DeleteState.PENDING_CONFIRMATION
        return confirmation_prompt(len(self._pending))

    def cancel(self) -> None:
        if self.state is not DeleteState.PENDING_CONFIRMATION:
            raise DeleteStateError(f"nothing to cancel while {self.state.value}")
        self._pending = ()
        self.state = DeleteState.IDLE

    def begin(self) -> tuple[int, ...]:
        """Confirmation accepted: move to MUTATING and hand out the ids."""
        if self.state is not DeleteState.PENDING_CONFIRMATION:
            raise DeleteStateError(f"nothing to confirm while {self.state.value}")
        self.state = DeleteState.MUTATING
        return self._pending

    def settle(self) -> None:
        if self.state is not DeleteState.MUTATING:
            raise DeleteStateError(f"no delete in flight while {self.state.value}")
        self._pending = ()
        self.state = DeleteState.IDLE
