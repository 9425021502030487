"""Pydantic API schemas."""

from lc_escrow.schemas.letter_of_credit import (
    BalanceResponse,
    CounterResponse,
    CreateLetterOfCreditRequest,
    CreateLetterOfCreditResponse,
    DepositRequest,
    HealthResponse,
    LCEventResponse,
    LCStatusResponse,
    LetterOfCreditResponse,
    OperationResponse,
    SubmitDocumentsRequest,
)

__all__ = [
    "BalanceResponse",
    "CounterResponse",
    "CreateLetterOfCreditRequest",
    "CreateLetterOfCreditResponse",
    "DepositRequest",
    "HealthResponse",
    "LCEventResponse",
    "LCStatusResponse",
    "LetterOfCreditResponse",
    "OperationResponse",
    "SubmitDocumentsRequest",
]
