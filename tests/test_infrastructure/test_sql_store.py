"""Tests for SqlLedgerStore on an in-memory SQLite database.

Runs the ledger end to end over the SQL store and checks the rows, the
counter and rollback behavior.
"""

from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.exc import StatementError

from lc_escrow.domain.enums import EventType, LCStatus
from lc_escrow.domain.exceptions import (
    InsufficientFundsError,
    InvalidStatusError,
    TransferError,
)
from lc_escrow.domain.models import LCEvent, LetterOfCredit
from lc_escrow.domain.store_protocol import LedgerStore
from lc_escrow.infrastructure.database.orm_models import LetterOfCreditRow
from lc_escrow.infrastructure.database.repositories import SqlLedgerStore
from lc_escrow.services.escrow_ledger import EscrowLedger
from lc_escrow.services.payment_service import InMemoryAccountBook
from tests.conftest import CUSTODY, EXPORTER, IMPORTER, VERIFIER, FlakyTransfer


@pytest.fixture
def sql_store(session_factory) -> SqlLedgerStore:
    return SqlLedgerStore(session_factory)


@pytest.fixture
def sql_ledger(sql_store: SqlLedgerStore, account_book: InMemoryAccountBook) -> EscrowLedger:
    return EscrowLedger(store=sql_store, transfer=account_book, custody_account=CUSTODY)


@pytest.fixture
def flaky_sql_ledger(sql_store: SqlLedgerStore, flaky: FlakyTransfer) -> EscrowLedger:
    return EscrowLedger(store=sql_store, transfer=flaky, custody_account=CUSTODY)


class TestStoreProtocol:
    def test_satisfies_protocol(self, sql_store: SqlLedgerStore) -> None:
        assert isinstance(sql_store, LedgerStore)

    def test_requires_transaction(self, sql_store: SqlLedgerStore) -> None:
        with pytest.raises(RuntimeError, match="outside of transaction"):
            sql_store.get(1)

    def test_counter_and_round_trip(self, sql_store: SqlLedgerStore) -> None:
        with sql_store.transaction():
            assert sql_store.current_id() == 0
            lc_id = sql_store.allocate_id()
            sql_store.put(LetterOfCredit(lc_id, IMPORTER, EXPORTER, VERIFIER, 250))

        with sql_store.transaction():
            assert sql_store.current_id() == 1
            lc = sql_store.get(1)

        assert lc == LetterOfCredit(1, IMPORTER, EXPORTER, VERIFIER, 250)

    def test_rollback_discards_writes(self, sql_store: SqlLedgerStore) -> None:
        with pytest.raises(ValueError, match="boom"):
            with sql_store.transaction():
                lc_id = sql_store.allocate_id()
                sql_store.put(LetterOfCredit(lc_id, IMPORTER, EXPORTER, VERIFIER, 250))
                raise ValueError("boom")

        with sql_store.transaction():
            assert sql_store.current_id() == 0
            assert sql_store.get(1) is None

    def test_events_in_order(self, sql_store: SqlLedgerStore) -> None:
        with sql_store.transaction():
            sql_store.put(LetterOfCredit(sql_store.allocate_id(), IMPORTER, EXPORTER, VERIFIER, 5))
            sql_store.record_event(
                LCEvent(1, EventType.LC_CREATED, LCStatus.FUNDED, IMPORTER, metadata={"amount": 5})
            )
            sql_store.put(LetterOfCredit(1, IMPORTER, EXPORTER, VERIFIER, 5, LCStatus.CANCELLED))
            sql_store.record_event(
                LCEvent(1, EventType.LC_CANCELLED, LCStatus.CANCELLED, IMPORTER, LCStatus.FUNDED)
            )

        with sql_store.transaction():
            events = sql_store.events_for(1)

        assert [e.event_type for e in events] == [EventType.LC_CREATED, EventType.LC_CANCELLED]
        assert events[0].old_status is None
        assert events[0].metadata == {"amount": 5}
        assert events[1].old_status is LCStatus.FUNDED


class TestLedgerOverSql:
    def test_payment_flow_persists(
        self,
        sql_ledger: EscrowLedger,
        session_factory,
        account_book: InMemoryAccountBook,
        documents_hash: bytes,
    ) -> None:
        lc_id = sql_ledger.create(IMPORTER, EXPORTER, VERIFIER, 1000)
        sql_ledger.submit_documents(EXPORTER, lc_id, documents_hash)
        sql_ledger.verify_and_release_payment(VERIFIER, lc_id)

        with session_factory() as session:
            row = session.execute(select(LetterOfCreditRow)).scalar_one()
            assert row.status == "PAID"
            assert row.documents_hash == documents_hash
            assert row.amount == 1000

        assert account_book.balance_of(EXPORTER) == 1000
        assert len(sql_ledger.get_events(lc_id)) == 3

    def test_rejected_cancel_leaves_row(
        self, sql_ledger: EscrowLedger, documents_hash: bytes
    ) -> None:
        lc_id = sql_ledger.create(IMPORTER, EXPORTER, VERIFIER, 500)
        sql_ledger.submit_documents(EXPORTER, lc_id, documents_hash)

        with pytest.raises(InvalidStatusError):
            sql_ledger.cancel(IMPORTER, lc_id)

        assert sql_ledger.get_lc(lc_id).status is LCStatus.DOCS_SUBMITTED

    def test_failed_funding_does_not_advance_counter(self, sql_ledger: EscrowLedger) -> None:
        with pytest.raises(InsufficientFundsError):
            sql_ledger.create(IMPORTER, EXPORTER, VERIFIER, 10**9)

        assert sql_ledger.get_lc_counter() == 0
        assert sql_ledger.create(IMPORTER, EXPORTER, VERIFIER, 10) == 1


class TestAtomicityOverSql:
    """A failed write moves no funds; a failed transfer leaves no write behind."""

    def test_rejected_row_moves_no_funds(self, sql_store: SqlLedgerStore) -> None:
        too_large = 2**64
        book = InMemoryAccountBook({IMPORTER: too_large})
        ledger = EscrowLedger(store=sql_store, transfer=book, custody_account=CUSTODY)

        with pytest.raises((OverflowError, StatementError)):
            ledger.create(IMPORTER, EXPORTER, VERIFIER, too_large)

        assert book.balance_of(IMPORTER) == too_large
        assert book.balance_of(CUSTODY) == 0
        assert ledger.get_lc_counter() == 0
        assert ledger.get_lc(1) is None

    def test_rejected_release_event_moves_no_funds(
        self,
        session_factory,
        account_book: InMemoryAccountBook,
        documents_hash: bytes,
    ) -> None:
        class RejectingStore(SqlLedgerStore):
            def record_event(self, event: LCEvent) -> None:
                if event.event_type is EventType.PAYMENT_RELEASED:
                    raise RuntimeError("audit log unavailable")
                super().record_event(event)

        ledger = EscrowLedger(
            store=RejectingStore(session_factory),
            transfer=account_book,
            custody_account=CUSTODY,
        )
        lc_id = ledger.create(IMPORTER, EXPORTER, VERIFIER, 1000)
        ledger.submit_documents(EXPORTER, lc_id, documents_hash)

        with pytest.raises(RuntimeError, match="audit log unavailable"):
            ledger.verify_and_release_payment(VERIFIER, lc_id)

        assert ledger.get_lc(lc_id).status is LCStatus.DOCS_SUBMITTED
        assert account_book.balance_of(EXPORTER) == 0
        assert account_book.balance_of(CUSTODY) == 1000

    def test_failed_create_transfer_discards_row(
        self, flaky_sql_ledger: EscrowLedger, flaky: FlakyTransfer, session_factory
    ) -> None:
        flaky.fail_next = True
        with pytest.raises(TransferError):
            flaky_sql_ledger.create(IMPORTER, EXPORTER, VERIFIER, 1000)

        with session_factory() as session:
            assert session.execute(select(LetterOfCreditRow)).first() is None
        assert flaky_sql_ledger.get_lc_counter() == 0
        assert flaky.book.balance_of(CUSTODY) == 0

    def test_failed_release_transfer_keeps_row(
        self, flaky_sql_ledger: EscrowLedger, flaky: FlakyTransfer, documents_hash: bytes
    ) -> None:
        lc_id = flaky_sql_ledger.create(IMPORTER, EXPORTER, VERIFIER, 1000)
        flaky_sql_ledger.submit_documents(EXPORTER, lc_id, documents_hash)

        flaky.fail_next = True
        with pytest.raises(TransferError):
            flaky_sql_ledger.verify_and_release_payment(VERIFIER, lc_id)

        assert flaky_sql_ledger.get_lc(lc_id).status is LCStatus.DOCS_SUBMITTED
        assert len(flaky_sql_ledger.get_events(lc_id)) == 2
        assert flaky.book.balance_of(CUSTODY) == 1000

        flaky_sql_ledger.verify_and_release_payment(VERIFIER, lc_id)
        assert flaky_sql_ledger.get_lc(lc_id).status is LCStatus.PAID
        assert flaky.book.balance_of(EXPORTER) == 1000

    def test_failed_cancel_transfer_keeps_row(
        self, flaky_sql_ledger: EscrowLedger, flaky: FlakyTransfer
    ) -> None:
        lc_id = flaky_sql_ledger.create(IMPORTER, EXPORTER, VERIFIER, 500)

        flaky.fail_next = True
        with pytest.raises(TransferError):
            flaky_sql_ledger.cancel(IMPORTER, lc_id)

        assert flaky_sql_ledger.get_lc(lc_id).status is LCStatus.FUNDED
        assert len(flaky_sql_ledger.get_events(lc_id)) == 1
        assert flaky.book.balance_of(CUSTODY) == 500
