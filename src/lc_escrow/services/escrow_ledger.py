"""Escrow Ledger - core business logic for the letter of credit lifecycle.

This is the application layer that coordinates between:
    - Domain state machine (transition guard)
    - Ledger store (records, id counter, audit trail)
    - Value transfer primitive (fund custody)

Both REST routes and the simulation script call into this ledger, ensuring a
single source of truth for all business rules.

Every mutating operation holds the ledger lock and runs inside one store
transaction, so its guard checks, record write and fund transfer commit
together or not at all. The record and its audit event are staged in the
transaction first and the transfer runs last: a rejected write aborts before
any value moves, and a failed transfer rolls the staged write back.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from statemachine.exceptions import TransitionNotAllowed

from lc_escrow.domain.enums import EventType, LCStatus
from lc_escrow.domain.exceptions import (
    AlreadySubmittedError,
    InvalidAmountError,
    InvalidDocumentsHashError,
    InvalidStatusError,
    NotFoundError,
    UnauthorizedError,
)
from lc_escrow.domain.models import DOCUMENTS_HASH_LENGTH, LCEvent, LetterOfCredit
from lc_escrow.domain.state_machine import LetterOfCreditStateMachine, validate_transition
from lc_escrow.logging_config import get_logger

if TYPE_CHECKING:
    from lc_escrow.domain.store_protocol import LedgerStore
    from lc_escrow.domain.transfer_protocol import ValueTransfer

logger = get_logger(__name__)


class EscrowLedger:
    """Manages letters of credit and the funds they hold in custody."""

    def __init__(
        self,
        store: LedgerStore,
        transfer: ValueTransfer,
        custody_account: str,
    ) -> None:
        self._store = store
        self._transfer = transfer
        self._custody_account = custody_account
        self._lock = threading.RLock()

    @property
    def custody_account(self) -> str:
        return self._custody_account

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, caller: str, exporter: str, verifier: str, amount: int) -> int:
        """Lock ``amount`` from the caller into custody and open a FUNDED LC.

        Returns the new letter of credit id.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidAmountError(amount)

        with self._lock, self._store.transaction():
            lc = LetterOfCredit(
                id=self._store.allocate_id(),
                importer=caller,
                exporter=exporter,
                verifier=verifier,
                amount=amount,
            )
            self._store.put(lc)
            self._store.record_event(
                LCEvent(
                    lc_id=lc.id,
                    event_type=EventType.LC_CREATED,
                    old_status=None,
                    new_status=LCStatus.FUNDED,
                    actor=caller,
                    metadata={"exporter": exporter, "verifier": verifier, "amount": amount},
                )
            )

            self._transfer.transfer(amount, caller, self._custody_account)

        logger.info(
            "lc.created",
            lc_id=lc.id,
            importer=caller,
            exporter=exporter,
            verifier=verifier,
            amount=amount,
        )
        return lc.id

    # ------------------------------------------------------------------
    # Document submission
    # ------------------------------------------------------------------

    def submit_documents(self, caller: str, lc_id: int, documents_hash: bytes) -> bool:
        """Exporter records the shipping documents hash. No funds move.

        The record guards run first, so an unknown id or a wrong caller is
        reported ahead of a malformed hash.
        """
        with self._lock, self._store.transaction():
            lc = self._get_lc_or_raise(lc_id)
            self._require_role(lc, caller, "exporter")
            new_status = self._fire_transition(lc, "exporter_submits_documents")

            # Unreachable while the status guard holds; kept as its own check
            if lc.documents_hash is not None:
                raise AlreadySubmittedError(lc_id)

            if (
                not isinstance(documents_hash, bytes | bytearray)
                or len(documents_hash) != DOCUMENTS_HASH_LENGTH
            ):
                length = (
                    len(documents_hash) if isinstance(documents_hash, bytes | bytearray) else None
                )
                raise InvalidDocumentsHashError(length)

            updated = lc.with_documents(bytes(documents_hash))
            self._store.put(updated)
            self._store.record_event(
                LCEvent(
                    lc_id=lc_id,
                    event_type=EventType.DOCUMENTS_SUBMITTED,
                    old_status=lc.status,
                    new_status=new_status,
                    actor=caller,
                    metadata={"documents_hash": updated.documents_hash.hex()},
                )
            )

        logger.info(
            "lc.documents_submitted",
            lc_id=lc_id,
            documents_hash=updated.documents_hash.hex(),
        )
        return True

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def verify_and_release_payment(self, caller: str, lc_id: int) -> bool:
        """Verifier approves the documents; custody pays the exporter."""
        with self._lock, self._store.transaction():
            lc = self._get_lc_or_raise(lc_id)
            self._require_role(lc, caller, "verifier")
            new_status = self._fire_transition(lc, "verifier_releases_payment")

            self._store.put(lc.with_status(new_status))
            self._store.record_event(
                LCEvent(
                    lc_id=lc_id,
                    event_type=EventType.PAYMENT_RELEASED,
                    old_status=lc.status,
                    new_status=new_status,
                    actor=caller,
                    metadata={"recipient": lc.exporter, "amount": lc.amount},
                )
            )

            self._transfer.transfer(lc.amount, self._custody_account, lc.exporter)

        logger.info(
            "lc.payment_released",
            lc_id=lc_id,
            exporter=lc.exporter,
            amount=lc.amount,
        )
        return True

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def cancel(self, caller: str, lc_id: int) -> bool:
        """Importer reclaims the funds of an LC with no documents submitted."""
        with self._lock, self._store.transaction():
            lc = self._get_lc_or_raise(lc_id)
            self._require_role(lc, caller, "importer")
            new_status = self._fire_transition(lc, "importer_cancels")

            self._store.put(lc.with_status(new_status))
            self._store.record_event(
                LCEvent(
                    lc_id=lc_id,
                    event_type=EventType.LC_CANCELLED,
                    old_status=lc.status,
                    new_status=new_status,
                    actor=caller,
                    metadata={"recipient": lc.importer, "amount": lc.amount},
                )
            )

            self._transfer.transfer(lc.amount, self._custody_account, lc.importer)

        logger.info("lc.cancelled", lc_id=lc_id, importer=lc.importer, amount=lc.amount)
        return True

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def get_lc(self, lc_id: int) -> LetterOfCredit | None:
        """Return the record, or None if the id was never allocated."""
        with self._lock, self._store.transaction():
            return self._store.get(lc_id)

    def get_lc_counter(self) -> int:
        """Return the number of letters of credit created so far."""
        with self._lock, self._store.transaction():
            return self._store.current_id()

    def get_status(self, lc_id: int) -> dict:
        """Get LC status with the guard events that may fire next."""
        with self._lock, self._store.transaction():
            lc = self._get_lc_or_raise(lc_id)
        sm = LetterOfCreditStateMachine(current_status=lc.status.value)
        return {
            "lc_id": lc.id,
            "status": lc.status.value,
            "allowed_events": sm.get_allowed_events(),
        }

    def get_events(self, lc_id: int) -> list[LCEvent]:
        """Get audit trail."""
        with self._lock, self._store.transaction():
            self._get_lc_or_raise(lc_id)
            return self._store.events_for(lc_id)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_lc_or_raise(self, lc_id: int) -> LetterOfCredit:
        lc = self._store.get(lc_id)
        if lc is None:
            raise NotFoundError(lc_id)
        return lc

    @staticmethod
    def _require_role(lc: LetterOfCredit, caller: str, role: str) -> None:
        if getattr(lc, role) != caller:
            logger.warning("lc.unauthorized", lc_id=lc.id, caller=caller, role=role)
            raise UnauthorizedError(lc.id, caller, role)

    @staticmethod
    def _fire_transition(lc: LetterOfCredit, event_name: str) -> LCStatus:
        """Validate a state machine transition and return the resulting status.

        Raises InvalidStatusError if the transition is illegal.
        """
        try:
            new_status = validate_transition(lc.status.value, event_name)
        except TransitionNotAllowed as err:
            raise InvalidStatusError(lc.id, lc.status.value, event_name) from err
        return LCStatus(new_status)
