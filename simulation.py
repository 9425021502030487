#!/usr/bin/env python3
"""LC Escrow - End-to-End Simulation.

Simulates three scenarios with ImporterBot, ExporterBot and VerifierBot:

    Scenario 1: Happy Path
        - Importer opens a 1000-unit letter of credit
        - Exporter submits the shipping documents hash
        - Verifier releases payment -> PAID, exporter +1000

    Scenario 2: Exporter Never Responds
        - Importer opens a 500-unit letter of credit
        - Importer cancels before any documents arrive -> CANCELLED, refund 500

    Scenario 3: Late Cancellation
        - Exporter submits documents
        - Importer tries to cancel -> rejected, funds stay in custody
        - Verifier releases payment -> PAID

Usage:
    # In-memory ledger store:
    uv run python simulation.py

    # SQLite in-memory ledger store:
    uv run python simulation.py --sqlite

    # Run a specific scenario:
    uv run python simulation.py --scenario 1
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Configure structured logging BEFORE importing app modules
# ---------------------------------------------------------------------------
from lc_escrow.logging_config import get_logger, setup_logging

setup_logging(log_level="INFO", json_logs=False)
logger = get_logger("simulation")

from lc_escrow.domain.exceptions import InvalidStatusError  # noqa: E402
from lc_escrow.infrastructure.memory_store import InMemoryLedgerStore  # noqa: E402
from lc_escrow.services.escrow_ledger import EscrowLedger  # noqa: E402
from lc_escrow.services.payment_service import InMemoryAccountBook  # noqa: E402

CUSTODY = "lc-escrow-custody"


# ---------------------------------------------------------------------------
# Ledger wiring
# ---------------------------------------------------------------------------
def build_ledger(use_sqlite: bool) -> tuple[EscrowLedger, InMemoryAccountBook]:
    """Build a ledger over a fresh store and a funded account book."""
    book = InMemoryAccountBook({ImporterBot.identity: 10_000})

    if use_sqlite:
        from sqlalchemy import create_engine
        from sqlalchemy.orm import sessionmaker
        from sqlalchemy.pool import StaticPool

        from lc_escrow.infrastructure.database.orm_models import Base
        from lc_escrow.infrastructure.database.repositories import SqlLedgerStore

        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        store = SqlLedgerStore(sessionmaker(bind=engine, expire_on_commit=False))
        logger.info("database.sqlite_initialized")
    else:
        store = InMemoryLedgerStore()

    return EscrowLedger(store=store, transfer=book, custody_account=CUSTODY), book


# ---------------------------------------------------------------------------
# Bot Agents
# ---------------------------------------------------------------------------
@dataclass
class ImporterBot:
    """Simulated importer that funds and, if needed, cancels letters of credit."""

    identity = "importer-northwind"

    def open_lc(self, ledger: EscrowLedger, amount: int) -> int:
        lc_id = ledger.create(
            self.identity,
            exporter=ExporterBot.identity,
            verifier=VerifierBot.identity,
            amount=amount,
        )
        logger.info("🔵 IMPORTER: Letter of credit opened", lc_id=lc_id, amount=amount)
        return lc_id

    def cancel(self, ledger: EscrowLedger, lc_id: int) -> bool:
        try:
            ledger.cancel(self.identity, lc_id)
        except InvalidStatusError as exc:
            logger.info("🔵 IMPORTER: Cancellation rejected", lc_id=lc_id, reason=exc.message)
            return False
        logger.info("🔵 IMPORTER: Letter of credit cancelled", lc_id=lc_id)
        return True


@dataclass
class ExporterBot:
    """Simulated exporter that ships goods and submits the document hash."""

    identity = "exporter-acme-shipping"

    def submit_documents(self, ledger: EscrowLedger, lc_id: int, bill_of_lading: str) -> bytes:
        documents_hash = hashlib.sha256(bill_of_lading.encode()).digest()
        ledger.submit_documents(self.identity, lc_id, documents_hash)
        logger.info(
            "🟢 EXPORTER: Documents submitted",
            lc_id=lc_id,
            documents_hash=documents_hash.hex(),
        )
        return documents_hash


@dataclass
class VerifierBot:
    """Simulated inspection company trusted by both sides."""

    identity = "verifier-inspection-co"

    def approve(self, ledger: EscrowLedger, lc_id: int) -> None:
        ledger.verify_and_release_payment(self.identity, lc_id)
        logger.info("🟣 VERIFIER: Payment released", lc_id=lc_id)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------
def banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def section(title: str) -> None:
    print(f"\n--- {title} ---")


def print_balances(book: InMemoryAccountBook) -> None:
    for account in (ImporterBot.identity, ExporterBot.identity, CUSTODY):
        print(f"  💰 {account:<28} {book.balance_of(account):>8}")


def print_audit_trail(ledger: EscrowLedger, lc_id: int) -> None:
    section(f"Audit trail for LC {lc_id}")
    for event in ledger.get_events(lc_id):
        old = event.old_status.value if event.old_status else "-"
        print(f"  📜 {event.event_type.value:<20} {old:>14} -> {event.new_status.value:<14} by {event.actor}")


def check_custody(ledger: EscrowLedger, book: InMemoryAccountBook) -> None:
    """Custody must hold exactly the amounts of the LCs still in escrow."""
    records = [ledger.get_lc(lc_id) for lc_id in range(1, ledger.get_lc_counter() + 1)]
    held = sum(lc.amount for lc in records if lc.status.holds_custody)
    assert book.balance_of(CUSTODY) == held, f"custody {book.balance_of(CUSTODY)} != {held}"
    print(f"  🔒 Custody matches open letters of credit: {held}")


# ===========================================================================
# Scenarios
# ===========================================================================
def scenario_1_happy_path(use_sqlite: bool) -> None:
    """Documents submitted and approved; the exporter is paid."""
    banner("SCENARIO 1: Happy Path - Documents Approved, Exporter Paid")
    ledger, book = build_ledger(use_sqlite)
    importer, exporter, verifier = ImporterBot(), ExporterBot(), VerifierBot()

    section("Step 1: Importer opens a 1000-unit letter of credit")
    lc_id = importer.open_lc(ledger, 1000)
    print_balances(book)

    section("Step 2: Exporter submits the bill of lading hash")
    documents_hash = exporter.submit_documents(ledger, lc_id, "BL-2026-0042 / 40ft container")

    section("Step 3: Verifier approves and releases payment")
    verifier.approve(ledger, lc_id)
    print_balances(book)

    lc = ledger.get_lc(lc_id)
    assert lc is not None and lc.status.value == "PAID", f"Expected PAID, got {lc}"
    assert lc.documents_hash == documents_hash
    assert book.balance_of(ExporterBot.identity) == 1000
    print("  ✅ Exporter paid, letter of credit PAID")
    check_custody(ledger, book)
    print_audit_trail(ledger, lc_id)


def scenario_2_exporter_silent(use_sqlite: bool) -> None:
    """The exporter never ships; the importer reclaims the funds."""
    banner("SCENARIO 2: Exporter Never Responds - Importer Cancels")
    ledger, book = build_ledger(use_sqlite)
    importer = ImporterBot()

    section("Step 1: Importer opens a 500-unit letter of credit")
    lc_id = importer.open_lc(ledger, 500)
    print_balances(book)

    section("Step 2: Importer cancels")
    importer.cancel(ledger, lc_id)
    print_balances(book)

    lc = ledger.get_lc(lc_id)
    assert lc is not None and lc.status.value == "CANCELLED", f"Expected CANCELLED, got {lc}"
    assert book.balance_of(ImporterBot.identity) == 10_000
    print("  ✅ Importer refunded, letter of credit CANCELLED")
    check_custody(ledger, book)
    print_audit_trail(ledger, lc_id)


def scenario_3_late_cancellation(use_sqlite: bool) -> None:
    """After documents arrive only the verifier can move the funds."""
    banner("SCENARIO 3: Late Cancellation - Importer Locked Out")
    ledger, book = build_ledger(use_sqlite)
    importer, exporter, verifier = ImporterBot(), ExporterBot(), VerifierBot()

    lc_id = importer.open_lc(ledger, 750)
    exporter.submit_documents(ledger, lc_id, "BL-2026-0043 / bulk grain")

    section("Importer tries to cancel after documents were submitted")
    cancelled = importer.cancel(ledger, lc_id)
    assert not cancelled
    assert book.balance_of(CUSTODY) == 750
    print("  🛡️  Cancellation rejected, funds remain in custody")
    check_custody(ledger, book)

    verifier.approve(ledger, lc_id)
    print_balances(book)
    print_audit_trail(ledger, lc_id)


# ===========================================================================
# Main
# ===========================================================================
SCENARIOS = {
    1: scenario_1_happy_path,
    2: scenario_2_exporter_silent,
    3: scenario_3_late_cancellation,
}


def main() -> int:
    parser = argparse.ArgumentParser(description="LC escrow end-to-end simulation")
    parser.add_argument("--sqlite", action="store_true", help="Use the SQL store on in-memory SQLite")
    parser.add_argument("--scenario", type=int, choices=sorted(SCENARIOS), help="Run one scenario")
    args = parser.parse_args()

    print("\n" + "🚀" * 35)
    print("  LC ESCROW - SIMULATION")
    print(f"  Store: {'SQLite (in-memory)' if args.sqlite else 'in-memory dict'}")
    print("🚀" * 35 + "\n")

    selected = [SCENARIOS[args.scenario]] if args.scenario else list(SCENARIOS.values())
    for scenario in selected:
        scenario(args.sqlite)

    print("\n" + "=" * 70)
    print("  ✅ ALL SCENARIOS COMPLETED SUCCESSFULLY")
    print("=" * 70 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
