"""Domain exceptions for the LC escrow.

These exceptions are framework-agnostic and represent business rule violations.
They are caught and translated to HTTP responses by the API layer's middleware.
None of them is retried by the ledger itself.
"""


class EscrowError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "ESCROW_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


# --- Lookup / Authorization ---


class NotFoundError(EscrowError):
    """Raised when a letter of credit id does not exist."""

    def __init__(self, lc_id: int) -> None:
        super().__init__(
            message=f"Letter of credit not found: {lc_id}",
            code="NOT_FOUND",
        )
        self.lc_id = lc_id


class UnauthorizedError(EscrowError):
    """Raised when the caller does not hold the role a transition requires."""

    def __init__(self, lc_id: int, caller: str, role: str) -> None:
        super().__init__(
            message=f"Caller {caller} is not the {role} of letter of credit {lc_id}",
            code="UNAUTHORIZED",
        )
        self.lc_id = lc_id
        self.caller = caller
        self.role = role


# --- State Machine Errors ---


class InvalidStatusError(EscrowError):
    """Raised when a letter of credit is not in the status a transition needs.

    Example: releasing payment on a FUNDED letter of credit (documents missing).
    """

    def __init__(self, lc_id: int, current_status: str, attempted_event: str) -> None:
        super().__init__(
            message=(
                f"Letter of credit {lc_id} is {current_status}; "
                f"cannot {attempted_event}"
            ),
            code="INVALID_STATUS",
        )
        self.lc_id = lc_id
        self.current_status = current_status
        self.attempted_event = attempted_event


class AlreadySubmittedError(EscrowError):
    """Raised when documents are already recorded on a letter of credit."""

    def __init__(self, lc_id: int) -> None:
        super().__init__(
            message=f"Documents already submitted for letter of credit {lc_id}",
            code="ALREADY_SUBMITTED",
        )
        self.lc_id = lc_id


# --- Input Errors ---


class InvalidAmountError(EscrowError):
    """Raised when a letter of credit is requested with a non-positive amount."""

    def __init__(self, amount: object) -> None:
        super().__init__(
            message=f"Amount must be a positive integer, got {amount!r}",
            code="INVALID_AMOUNT",
        )
        self.amount = amount


class InvalidDocumentsHashError(EscrowError):
    """Raised when a documents hash is not a 32-byte value."""

    def __init__(self, length: int | None) -> None:
        super().__init__(
            message=f"Documents hash must be exactly 32 bytes, got {length}",
            code="INVALID_DOCUMENTS_HASH",
        )
        self.length = length


# --- Transfer Errors ---


class TransferError(EscrowError):
    """Raised by a value transfer primitive when a fund movement fails."""

    def __init__(self, message: str, code: str = "TRANSFER_FAILED") -> None:
        super().__init__(message=message, code=code)


class InsufficientFundsError(TransferError):
    """Raised when the sending account cannot cover the transfer."""

    def __init__(self, account: str, required: int, available: int) -> None:
        super().__init__(
            message=(
                f"Insufficient funds in {account}: "
                f"required {required}, available {available}"
            ),
            code="INSUFFICIENT_FUNDS",
        )
        self.account = account
        self.required = required
        self.available = available
