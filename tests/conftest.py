"""Shared test fixtures for the LC escrow test suite.

Provides:
    - Party identities and a deterministic documents hash
    - A funded in-memory account book and an in-memory ledger
    - FlakyTransfer, a transfer primitive that fails on demand
    - A SQLite in-memory session factory for the SQL store
"""

from __future__ import annotations

import hashlib

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lc_escrow.domain.exceptions import TransferError
from lc_escrow.infrastructure.database.orm_models import Base
from lc_escrow.infrastructure.memory_store import InMemoryLedgerStore
from lc_escrow.services.escrow_ledger import EscrowLedger
from lc_escrow.services.payment_service import InMemoryAccountBook

IMPORTER = "importer-northwind"
EXPORTER = "exporter-acme-shipping"
VERIFIER = "verifier-inspection-co"
OUTSIDER = "mallory"
CUSTODY = "lc-escrow-custody"
IMPORTER_FUNDS = 10_000

# ---------------------------------------------------------------------------
# Domain Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def documents_hash() -> bytes:
    """Return a deterministic 32-byte documents hash."""
    return hashlib.sha256(b"BL-2026-0042 / 40ft container").digest()


@pytest.fixture
def account_book() -> InMemoryAccountBook:
    """Return an account book where only the importer holds funds."""
    return InMemoryAccountBook({IMPORTER: IMPORTER_FUNDS})


class FlakyTransfer:
    """Wraps an account book and fails the next transfer on demand."""

    def __init__(self, book: InMemoryAccountBook) -> None:
        self.book = book
        self.fail_next = False

    def transfer(self, amount: int, sender: str, recipient: str) -> None:
        if self.fail_next:
            self.fail_next = False
            raise TransferError("payment rail unavailable")
        self.book.transfer(amount, sender, recipient)


@pytest.fixture
def flaky(account_book: InMemoryAccountBook) -> FlakyTransfer:
    return FlakyTransfer(account_book)


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def ledger(store: InMemoryLedgerStore, account_book: InMemoryAccountBook) -> EscrowLedger:
    return EscrowLedger(store=store, transfer=account_book, custody_account=CUSTODY)


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def session_factory():
    """Yield a sessionmaker bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    engine.dispose()
