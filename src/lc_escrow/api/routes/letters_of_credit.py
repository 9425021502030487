"""Letter of credit REST API routes.

These endpoints provide the HTTP interface to the escrow ledger. The calling
identity of every request travels in the X-Caller-Identity header.

Routes:
    POST   /api/v1/letters-of-credit                 - Open (and fund) a letter of credit
    GET    /api/v1/letters-of-credit/counter         - Number of letters of credit created
    GET    /api/v1/letters-of-credit/{id}            - Get letter of credit details
    GET    /api/v1/letters-of-credit/{id}/status     - Get lightweight status check
    GET    /api/v1/letters-of-credit/{id}/events     - Get audit trail
    POST   /api/v1/letters-of-credit/{id}/documents  - Exporter submits documents hash
    POST   /api/v1/letters-of-credit/{id}/release    - Verifier releases payment
    POST   /api/v1/letters-of-credit/{id}/cancel     - Importer cancels and is refunded

Handlers are plain functions; FastAPI runs them in its thread pool and the
ledger serializes them.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from lc_escrow.api.deps import get_caller, get_ledger
from lc_escrow.domain.exceptions import NotFoundError
from lc_escrow.logging_config import get_logger
from lc_escrow.schemas.letter_of_credit import (
    CounterResponse,
    CreateLetterOfCreditRequest,
    CreateLetterOfCreditResponse,
    LCEventResponse,
    LCStatusResponse,
    LetterOfCreditResponse,
    OperationResponse,
    SubmitDocumentsRequest,
)
from lc_escrow.services.escrow_ledger import EscrowLedger

router = APIRouter(prefix="/api/v1/letters-of-credit", tags=["Letters of Credit"])
logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=CreateLetterOfCreditResponse,
    status_code=201,
    summary="Open a letter of credit",
)
def create_letter_of_credit(
    request: CreateLetterOfCreditRequest,
    caller: str = Depends(get_caller),
    ledger: EscrowLedger = Depends(get_ledger),
) -> CreateLetterOfCreditResponse:
    """Move the amount from the caller into custody and open a FUNDED letter of credit."""
    lc_id = ledger.create(
        caller=caller,
        exporter=request.exporter,
        verifier=request.verifier,
        amount=request.amount,
    )
    return CreateLetterOfCreditResponse(lc_id=lc_id)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


@router.post(
    "/{lc_id}/documents",
    response_model=OperationResponse,
    summary="Submit shipping documents hash",
)
def submit_documents(
    lc_id: int,
    request: SubmitDocumentsRequest,
    caller: str = Depends(get_caller),
    ledger: EscrowLedger = Depends(get_ledger),
) -> OperationResponse:
    """Exporter records the documents hash. Transitions FUNDED -> DOCS_SUBMITTED."""
    success = ledger.submit_documents(caller, lc_id, request.hash_bytes())
    return OperationResponse(success=success)


@router.post(
    "/{lc_id}/release",
    response_model=OperationResponse,
    summary="Verify documents and release payment",
)
def verify_and_release_payment(
    lc_id: int,
    caller: str = Depends(get_caller),
    ledger: EscrowLedger = Depends(get_ledger),
) -> OperationResponse:
    """Verifier pays the exporter from custody. Transitions DOCS_SUBMITTED -> PAID."""
    success = ledger.verify_and_release_payment(caller, lc_id)
    return OperationResponse(success=success)


@router.post(
    "/{lc_id}/cancel",
    response_model=OperationResponse,
    summary="Cancel and refund the importer",
)
def cancel_letter_of_credit(
    lc_id: int,
    caller: str = Depends(get_caller),
    ledger: EscrowLedger = Depends(get_ledger),
) -> OperationResponse:
    """Importer reclaims the funds. Valid only from FUNDED."""
    success = ledger.cancel(caller, lc_id)
    return OperationResponse(success=success)


# ---------------------------------------------------------------------------
# Read endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/counter",
    response_model=CounterResponse,
    summary="Get the letter of credit counter",
)
def get_lc_counter(ledger: EscrowLedger = Depends(get_ledger)) -> CounterResponse:
    return CounterResponse(lc_counter=ledger.get_lc_counter())


@router.get(
    "/{lc_id}",
    response_model=LetterOfCreditResponse,
    summary="Get letter of credit details",
)
def get_letter_of_credit(
    lc_id: int,
    ledger: EscrowLedger = Depends(get_ledger),
) -> LetterOfCreditResponse:
    """Fetch a letter of credit by id. Readable by anyone."""
    lc = ledger.get_lc(lc_id)
    if lc is None:
        raise NotFoundError(lc_id)
    return LetterOfCreditResponse.from_domain(lc)


@router.get(
    "/{lc_id}/status",
    response_model=LCStatusResponse,
    summary="Get lightweight status check",
)
def get_status(
    lc_id: int,
    ledger: EscrowLedger = Depends(get_ledger),
) -> LCStatusResponse:
    """Return the current status and the transitions still possible."""
    return LCStatusResponse(**ledger.get_status(lc_id))


@router.get(
    "/{lc_id}/events",
    response_model=list[LCEventResponse],
    summary="Get audit trail",
)
def get_events(
    lc_id: int,
    ledger: EscrowLedger = Depends(get_ledger),
) -> list[LCEventResponse]:
    """Return the full audit trail for a letter of credit."""
    return [LCEventResponse.from_domain(e) for e in ledger.get_events(lc_id)]
