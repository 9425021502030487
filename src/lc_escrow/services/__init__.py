"""Application services - use case orchestration."""

from lc_escrow.services.escrow_ledger import EscrowLedger
from lc_escrow.services.payment_service import InMemoryAccountBook

__all__ = ["EscrowLedger", "InMemoryAccountBook"]
