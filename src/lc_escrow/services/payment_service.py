"""Payment Service - a simulated value transfer primitive.

The real account system that moves value lives outside this service. For
development, tests and the simulation script, InMemoryAccountBook keeps
per-identity balances in a dict and implements the ValueTransfer protocol:
a transfer either moves the full amount or raises with no partial effect.
"""

from __future__ import annotations

import threading

from lc_escrow.domain.exceptions import InsufficientFundsError, TransferError
from lc_escrow.logging_config import get_logger

logger = get_logger(__name__)


class InMemoryAccountBook:
    """Balances per identity with atomic, all-or-nothing transfers."""

    def __init__(self, balances: dict[str, int] | None = None) -> None:
        self._balances: dict[str, int] = dict(balances or {})
        self._lock = threading.Lock()

    def balance_of(self, account: str) -> int:
        """Return the balance of an account (0 if it has never held funds)."""
        with self._lock:
            return self._balances.get(account, 0)

    def deposit(self, account: str, amount: int) -> int:
        """Credit an account out of thin air. Returns the new balance."""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise TransferError(f"Deposit amount must be a positive integer, got {amount!r}")
        with self._lock:
            self._balances[account] = self._balances.get(account, 0) + amount
            balance = self._balances[account]
        logger.info("payment.deposit", account=account, amount=amount, balance=balance)
        return balance

    def transfer(self, amount: int, sender: str, recipient: str) -> None:
        """Move ``amount`` from ``sender`` to ``recipient``.

        Raises:
            TransferError: If the amount is not a positive integer.
            InsufficientFundsError: If the sender cannot cover the amount.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise TransferError(f"Transfer amount must be a positive integer, got {amount!r}")

        with self._lock:
            available = self._balances.get(sender, 0)
            if available < amount:
                logger.warning(
                    "payment.transfer_rejected",
                    sender=sender,
                    recipient=recipient,
                    amount=amount,
                    available=available,
                )
                raise InsufficientFundsError(sender, required=amount, available=available)
            self._balances[sender] = available - amount
            self._balances[recipient] = self._balances.get(recipient, 0) + amount

        logger.info(
            "payment.transfer_completed",
            sender=sender,
            recipient=recipient,
            amount=amount,
        )
