"""Domain enumerations for the LC escrow.

These enums define the canonical states and event types used throughout the
system. They are framework-agnostic (no SQLAlchemy, no FastAPI imports).
"""

import enum


class LCStatus(enum.StrEnum):
    """Lifecycle states of a letter of credit.

    State transitions are enforced by the LetterOfCreditStateMachine guard.
    See domain/state_machine.py for the transition table.
    """

    FUNDED = "FUNDED"
    DOCS_SUBMITTED = "DOCS_SUBMITTED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    @property
    def holds_custody(self) -> bool:
        """True while the escrowed amount sits in contract custody."""
        return self in (LCStatus.FUNDED, LCStatus.DOCS_SUBMITTED)

    @property
    def has_documents(self) -> bool:
        """True for every status only reachable through document submission."""
        return self in (LCStatus.DOCS_SUBMITTED, LCStatus.PAID)


class EventType(enum.StrEnum):
    """Types of audit events recorded in the lc_events log.

    Every successful state change produces exactly one event.
    """

    LC_CREATED = "LC_CREATED"
    DOCUMENTS_SUBMITTED = "DOCUMENTS_SUBMITTED"
    PAYMENT_RELEASED = "PAYMENT_RELEASED"
    LC_CANCELLED = "LC_CANCELLED"
