"""Pydantic schemas for the LC escrow API.

These schemas define the request/response shapes for the REST API. They are
separate from the domain records and ORM rows to maintain clean boundaries
between the API, domain and database layers.

Amounts are validated by the ledger, not here, so a non-positive amount
surfaces as the domain's INVALID_AMOUNT error rather than a generic 422.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - needed at runtime by pydantic
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from lc_escrow.domain.models import LCEvent, LetterOfCredit

# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------


class CreateLetterOfCreditRequest(BaseModel):
    """Request body for opening a letter of credit. The caller is the importer."""

    exporter: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Identity of the beneficiary paid on release",
        examples=["exporter-acme-shipping"],
    )
    verifier: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Identity trusted to approve the shipping documents",
        examples=["verifier-inspection-co"],
    )
    amount: int = Field(
        ...,
        description="Amount to escrow in the smallest unit of account (must be > 0)",
        examples=[1000],
    )


class SubmitDocumentsRequest(BaseModel):
    """Request body for the exporter submitting the documents hash."""

    documents_hash: str = Field(
        ...,
        pattern=r"^(0x)?[0-9a-fA-F]{64}$",
        description="32-byte hash of the shipping documents, hex encoded",
        examples=["0x" + "ab" * 32],
    )

    def hash_bytes(self) -> bytes:
        return bytes.fromhex(self.documents_hash.removeprefix("0x"))


class DepositRequest(BaseModel):
    """Request body for crediting a simulated account (development only)."""

    amount: int = Field(..., gt=0, description="Amount to credit")


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------


class LetterOfCreditResponse(BaseModel):
    """Response schema for a letter of credit."""

    id: int
    importer: str
    exporter: str
    verifier: str
    amount: int
    status: str
    documents_hash: str | None = Field(
        default=None,
        description="Hex encoded documents hash, null until documents are submitted",
    )

    @classmethod
    def from_domain(cls, lc: LetterOfCredit) -> LetterOfCreditResponse:
        return cls(**lc.to_dict())


class CreateLetterOfCreditResponse(BaseModel):
    lc_id: int


class OperationResponse(BaseModel):
    success: bool = True


class CounterResponse(BaseModel):
    lc_counter: int


class LCStatusResponse(BaseModel):
    """Lightweight status check response."""

    lc_id: int
    status: str
    allowed_events: list[str] = Field(
        description="State machine events that can fire from the current status"
    )


class LCEventResponse(BaseModel):
    """Response schema for an audit event."""

    lc_id: int
    event_type: str
    old_status: str | None
    new_status: str
    actor: str
    metadata: dict | None = None
    created_at: datetime

    @classmethod
    def from_domain(cls, event: LCEvent) -> LCEventResponse:
        return cls(
            lc_id=event.lc_id,
            event_type=event.event_type.value,
            old_status=event.old_status.value if event.old_status else None,
            new_status=event.new_status.value,
            actor=event.actor,
            metadata=event.metadata,
            created_at=event.created_at,
        )


class BalanceResponse(BaseModel):
    account: str
    balance: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    store: str = "unknown"
