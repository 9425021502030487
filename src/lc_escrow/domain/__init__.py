"""Domain layer - pure business logic with zero framework dependencies."""

from lc_escrow.domain.enums import (
    EventType,
    LCStatus,
)
from lc_escrow.domain.exceptions import (
    AlreadySubmittedError,
    EscrowError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidDocumentsHashError,
    InvalidStatusError,
    NotFoundError,
    TransferError,
    UnauthorizedError,
)
from lc_escrow.domain.models import (
    DOCUMENTS_HASH_LENGTH,
    LCEvent,
    LetterOfCredit,
)
from lc_escrow.domain.state_machine import (
    LetterOfCreditStateMachine,
    validate_transition,
)
from lc_escrow.domain.store_protocol import LedgerStore
from lc_escrow.domain.transfer_protocol import ValueTransfer

__all__ = [
    "EventType",
    "LCStatus",
    "AlreadySubmittedError",
    "EscrowError",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidDocumentsHashError",
    "InvalidStatusError",
    "NotFoundError",
    "TransferError",
    "UnauthorizedError",
    "DOCUMENTS_HASH_LENGTH",
    "LCEvent",
    "LetterOfCredit",
    "LetterOfCreditStateMachine",
    "validate_transition",
    "LedgerStore",
    "ValueTransfer",
]
