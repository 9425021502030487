"""SQLAlchemy 2.0 ORM models for the LC escrow.

Three tables:
    1. letters_of_credit - One row per letter of credit, keyed by sequential id.
    2. lc_events         - Append-only audit log of every state change.
    3. ledger_counters   - Named monotonic counters (the LC id generator).

Design decisions:
    - Integer primary keys allocated by the ledger counter, never by the DB.
    - BigInteger amounts in the smallest unit of account.
    - CHECK constraints mirror the domain invariants (status values, positive
      amount, documents hash present exactly for submitted states).
    - lc_events is append-only: no UPDATE or DELETE at the application level.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    event,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def _set_updated_at(mapper, connection, target):  # noqa: ANN001
    """SQLAlchemy event listener that updates `updated_at` before flush."""
    if hasattr(target, "updated_at"):
        target.updated_at = datetime.now(UTC)


# ---------------------------------------------------------------------------
# 1. letters_of_credit
# ---------------------------------------------------------------------------
class LetterOfCreditRow(Base):
    """A letter of credit held in escrow."""

    __tablename__ = "letters_of_credit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    # --- Parties ---
    importer: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="Identity that funded the letter of credit",
    )
    exporter: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="Beneficiary paid on release",
    )
    verifier: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="Identity trusted to approve the shipping documents",
    )

    # --- Financials ---
    amount: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Escrowed value in the smallest unit of account",
    )

    # --- Lifecycle ---
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="FUNDED",
        comment="Current lifecycle state (guarded by LetterOfCreditStateMachine)",
    )
    documents_hash: Mapped[bytes | None] = mapped_column(
        LargeBinary(32),
        nullable=True,
        default=None,
        comment="32-byte hash of the shipping documents",
    )

    # --- Timestamps ---
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    events: Mapped[list[LCEventRow]] = relationship(
        "LCEventRow",
        back_populates="letter_of_credit",
        order_by="LCEventRow.id.asc()",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('FUNDED', 'DOCS_SUBMITTED', 'PAID', 'CANCELLED')",
            name="ck_lc_valid_status",
        ),
        CheckConstraint("amount > 0", name="ck_lc_positive_amount"),
        CheckConstraint(
            "(status IN ('DOCS_SUBMITTED', 'PAID')) = (documents_hash IS NOT NULL)",
            name="ck_lc_documents_hash_status",
        ),
        Index("idx_lc_status", "status"),
        Index("idx_lc_importer", "importer"),
        Index("idx_lc_exporter", "exporter"),
        Index("idx_lc_verifier", "verifier"),
    )

    def __repr__(self) -> str:
        return f"<LetterOfCreditRow id={self.id} status={self.status} amount={self.amount}>"


# ---------------------------------------------------------------------------
# 2. lc_events (Append-Only Audit Log)
# ---------------------------------------------------------------------------
class LCEventRow(Base):
    """Immutable audit record of a letter of credit state change.

    This table is APPEND-ONLY. Every row represents a single atomic event.
    """

    __tablename__ = "lc_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    lc_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("letters_of_credit.id"),
        nullable=False,
    )

    event_type: Mapped[str] = mapped_column(
        String(40),
        nullable=False,
        comment="EventType enum value (e.g., LC_CREATED, PAYMENT_RELEASED)",
    )
    old_status: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="Status before this event (null for creation)",
    )
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    actor: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="Calling identity that triggered this event",
    )
    metadata_json: Mapped[dict | None] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
        default=None,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    letter_of_credit: Mapped[LetterOfCreditRow] = relationship(
        "LetterOfCreditRow",
        back_populates="events",
    )

    __table_args__ = (
        Index("idx_event_lc", "lc_id"),
        Index("idx_event_type", "event_type"),
    )

    def __repr__(self) -> str:
        return (
            f"<LCEventRow id={self.id} type={self.event_type} "
            f"{self.old_status}->{self.new_status}>"
        )


# ---------------------------------------------------------------------------
# 3. ledger_counters
# ---------------------------------------------------------------------------
class LedgerCounterRow(Base):
    """A named monotonic counter."""

    __tablename__ = "ledger_counters"

    name: Mapped[str] = mapped_column(String(40), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (CheckConstraint("value >= 0", name="ck_counter_non_negative"),)


event.listen(LetterOfCreditRow, "before_update", _set_updated_at)
