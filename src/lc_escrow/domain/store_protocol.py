"""Ledger Store Protocol.

The escrow ledger never touches global state: it is handed a store that owns
the keyed collection of letters of credit, the id counter and the audit log.

Concrete implementations:
    - infrastructure/memory_store.py               (InMemoryLedgerStore)
    - infrastructure/database/repositories.py      (SqlLedgerStore)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from lc_escrow.domain.models import LCEvent, LetterOfCredit


@runtime_checkable
class LedgerStore(Protocol):
    """Persistence port used by EscrowLedger.

    Every other method is only called inside ``transaction()``.
    """

    def transaction(self) -> AbstractContextManager[None]:
        """Scope one ledger operation; commit on success, discard on error."""
        ...

    def get(self, lc_id: int) -> LetterOfCredit | None:
        """Fetch a letter of credit by id."""
        ...

    def put(self, lc: LetterOfCredit) -> None:
        """Insert a new record or write back a new state of an existing one."""
        ...

    def current_id(self) -> int:
        """Return the counter value (the id of the newest record, 0 if none)."""
        ...

    def allocate_id(self) -> int:
        """Advance the counter and return the new id."""
        ...

    def record_event(self, event: LCEvent) -> None:
        """Append an audit event."""
        ...

    def events_for(self, lc_id: int) -> list[LCEvent]:
        """Return the events of one letter of credit, oldest first."""
        ...
