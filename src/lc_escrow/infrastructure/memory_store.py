"""In-memory ledger store.

An arena-style dict keyed by sequential integer id plus a plain counter and
an append-only event list. The default backend and the one used by the unit
tests; nothing survives a process restart.

``transaction()`` snapshots the counter, the record map and the event list
length, and restores them if the block raises. Records are immutable, so a
shallow copy of the map is a full snapshot.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lc_escrow.domain.models import LCEvent, LetterOfCredit


class InMemoryLedgerStore:
    """Process-local LedgerStore implementation."""

    def __init__(self) -> None:
        self._records: dict[int, LetterOfCredit] = {}
        self._next_id = 0
        self._events: list[LCEvent] = []
        self._in_transaction = False

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._in_transaction:
            # Nested use joins the open transaction
            yield
            return
        records = dict(self._records)
        next_id = self._next_id
        event_count = len(self._events)
        self._in_transaction = True
        try:
            yield
        except Exception:
            self._records = records
            self._next_id = next_id
            del self._events[event_count:]
            raise
        finally:
            self._in_transaction = False

    def get(self, lc_id: int) -> LetterOfCredit | None:
        return self._records.get(lc_id)

    def put(self, lc: LetterOfCredit) -> None:
        self._records[lc.id] = lc

    def current_id(self) -> int:
        return self._next_id

    def allocate_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def record_event(self, event: LCEvent) -> None:
        self._events.append(event)

    def events_for(self, lc_id: int) -> list[LCEvent]:
        return [e for e in self._events if e.lc_id == lc_id]
