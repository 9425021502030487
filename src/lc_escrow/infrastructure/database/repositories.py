"""SQL-backed ledger store.

SqlLedgerStore implements the LedgerStore protocol on top of a SQLAlchemy
sessionmaker. Each ``transaction()`` opens one session that is committed on
success and rolled back on any error, so an operation's record write, counter
advance and audit event land together.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import select

from lc_escrow.domain.enums import EventType, LCStatus
from lc_escrow.domain.models import LCEvent, LetterOfCredit
from lc_escrow.infrastructure.database.orm_models import (
    LCEventRow,
    LedgerCounterRow,
    LetterOfCreditRow,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.orm import Session, sessionmaker

LC_ID_COUNTER = "lc_id"


class SqlLedgerStore:
    """LedgerStore implementation over a relational database."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._session is not None:
            # Nested use joins the open transaction
            yield
            return
        with self._session_factory() as session:
            self._session = session
            try:
                yield
                session.commit()
            except Exception:
                session.rollback()
                raise
            finally:
                self._session = None

    # ------------------------------------------------------------------
    # Letters of credit
    # ------------------------------------------------------------------

    def get(self, lc_id: int) -> LetterOfCredit | None:
        row = self._require_session().get(LetterOfCreditRow, lc_id)
        return _to_domain(row) if row is not None else None

    def put(self, lc: LetterOfCredit) -> None:
        session = self._require_session()
        row = session.get(LetterOfCreditRow, lc.id)
        if row is None:
            session.add(
                LetterOfCreditRow(
                    id=lc.id,
                    importer=lc.importer,
                    exporter=lc.exporter,
                    verifier=lc.verifier,
                    amount=lc.amount,
                    status=lc.status.value,
                    documents_hash=lc.documents_hash,
                )
            )
        else:
            # Parties and amount are immutable; only lifecycle fields move
            row.status = lc.status.value
            row.documents_hash = lc.documents_hash
        session.flush()

    # ------------------------------------------------------------------
    # Id counter
    # ------------------------------------------------------------------

    def current_id(self) -> int:
        counter = self._require_session().get(LedgerCounterRow, LC_ID_COUNTER)
        return counter.value if counter is not None else 0

    def allocate_id(self) -> int:
        session = self._require_session()
        counter = session.get(LedgerCounterRow, LC_ID_COUNTER, with_for_update=True)
        if counter is None:
            counter = LedgerCounterRow(name=LC_ID_COUNTER, value=0)
            session.add(counter)
        counter.value += 1
        session.flush()
        return counter.value

    # ------------------------------------------------------------------
    # Audit events
    # ------------------------------------------------------------------

    def record_event(self, event: LCEvent) -> None:
        session = self._require_session()
        session.add(
            LCEventRow(
                lc_id=event.lc_id,
                event_type=event.event_type.value,
                old_status=event.old_status.value if event.old_status else None,
                new_status=event.new_status.value,
                actor=event.actor,
                metadata_json=event.metadata,
                created_at=event.created_at,
            )
        )
        session.flush()

    def events_for(self, lc_id: int) -> list[LCEvent]:
        result = self._require_session().execute(
            select(LCEventRow).where(LCEventRow.lc_id == lc_id).order_by(LCEventRow.id.asc())
        )
        return [
            LCEvent(
                lc_id=row.lc_id,
                event_type=EventType(row.event_type),
                old_status=LCStatus(row.old_status) if row.old_status else None,
                new_status=LCStatus(row.new_status),
                actor=row.actor,
                metadata=row.metadata_json or {},
                created_at=row.created_at,
            )
            for row in result.scalars().all()
        ]

    def _require_session(self) -> Session:
        if self._session is None:
            raise RuntimeError("SqlLedgerStore used outside of transaction()")
        return self._session


def _to_domain(row: LetterOfCreditRow) -> LetterOfCredit:
    return LetterOfCredit(
        id=row.id,
        importer=row.importer,
        exporter=row.exporter,
        verifier=row.verifier,
        amount=row.amount,
        status=LCStatus(row.status),
        documents_hash=row.documents_hash,
    )
