"""Domain records for the LC escrow.

LetterOfCredit is immutable: every transition produces a new instance via
dataclasses.replace(), and the ledger store persists that instance. The
record validates its own invariants on construction so a malformed state can
never be written back.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from lc_escrow.domain.enums import EventType, LCStatus

DOCUMENTS_HASH_LENGTH = 32


@dataclass(frozen=True)
class LetterOfCredit:
    """A single escrowed letter of credit.

    Attributes:
        id: Sequential identifier, starting at 1.
        importer: Identity that funded the letter of credit.
        exporter: Identity of the beneficiary.
        verifier: Identity trusted to approve the shipping documents.
        amount: Escrowed value in the smallest unit of account.
        status: Current lifecycle state.
        documents_hash: 32-byte content hash of the submitted documents.
    """

    id: int
    importer: str
    exporter: str
    verifier: str
    amount: int
    status: LCStatus = LCStatus.FUNDED
    documents_hash: bytes | None = None

    def __post_init__(self) -> None:
        if self.id < 1:
            raise ValueError(f"id must be >= 1, got {self.id}")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValueError(f"amount must be an int, got {self.amount!r}")
        if self.amount <= 0:
            raise ValueError(f"amount must be positive, got {self.amount}")
        # Coerce plain strings coming back from storage
        object.__setattr__(self, "status", LCStatus(self.status))
        if self.documents_hash is not None:
            if len(self.documents_hash) != DOCUMENTS_HASH_LENGTH:
                raise ValueError(
                    f"documents_hash must be {DOCUMENTS_HASH_LENGTH} bytes, "
                    f"got {len(self.documents_hash)}"
                )
            object.__setattr__(self, "documents_hash", bytes(self.documents_hash))
        if self.status.has_documents != (self.documents_hash is not None):
            raise ValueError(
                f"documents_hash must be set exactly for submitted states, "
                f"status={self.status}"
            )

    def with_documents(self, documents_hash: bytes) -> LetterOfCredit:
        """Return a copy carrying the documents hash in DOCS_SUBMITTED."""
        return replace(
            self,
            status=LCStatus.DOCS_SUBMITTED,
            documents_hash=documents_hash,
        )

    def with_status(self, status: LCStatus) -> LetterOfCredit:
        """Return a copy in a new status, all other fields unchanged."""
        return replace(self, status=status)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "importer": self.importer,
            "exporter": self.exporter,
            "verifier": self.verifier,
            "amount": self.amount,
            "status": self.status.value,
            "documents_hash": self.documents_hash.hex() if self.documents_hash else None,
        }


@dataclass(frozen=True)
class LCEvent:
    """Immutable audit record of one state change."""

    lc_id: int
    event_type: EventType
    new_status: LCStatus
    actor: str
    old_status: LCStatus | None = None
    metadata: dict = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
