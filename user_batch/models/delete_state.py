from __future__ import annotations

from enum import Enum

"""DeleteState enum for the confirmation / deletion lifecycle."""


class DeleteState(Enum):
    """State transitions: idle → pending_confirmation → (idle | mutating → idle)

    - IDLE: no delete in progress, new requests accepted
    - PENDING_CONFIRMATION: ids captured, waiting for confirm / cancel
    - MUTATING: the storage call is in flight
    """
    IDLE = "idle"
    PENDING_CONFIRMATION = "pending_confirmation"
    MUTATING = "mutating"
