"""Value Transfer Protocol.

Defines the interface of the atomic fund-movement primitive the ledger
composes with. This is a Protocol (structural subtyping) so concrete account
systems don't need to inherit from a base class; they just need to match
the shape.

The domain layer has ZERO imports from any real payment rail.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ValueTransfer(Protocol):
    """Protocol that every value transfer primitive must satisfy.

    Concrete implementations:
        - services/payment_service.py  (InMemoryAccountBook, simulated balances)
    """

    def transfer(self, amount: int, sender: str, recipient: str) -> None:
        """Move ``amount`` units from ``sender`` to ``recipient``.

        Either fully succeeds or raises (typically a TransferError) with no
        partial effect. Must not call back into the ledger.
        """
        ...
