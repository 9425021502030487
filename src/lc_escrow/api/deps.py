"""FastAPI dependency injection providers.

These are used with Depends() in route handlers to inject the escrow ledger,
the simulated account book, the calling identity and configuration.
"""

from __future__ import annotations

from fastapi import Header, Request

from lc_escrow.config import Settings, get_settings
from lc_escrow.infrastructure.memory_store import InMemoryLedgerStore
from lc_escrow.logging_config import get_logger
from lc_escrow.services.escrow_ledger import EscrowLedger
from lc_escrow.services.payment_service import InMemoryAccountBook

logger = get_logger(__name__)

CALLER_HEADER = "X-Caller-Identity"


def build_ledger(
    settings: Settings,
    account_book: InMemoryAccountBook,
) -> EscrowLedger:
    """Wire an EscrowLedger with the store backend selected in settings."""
    if settings.store_backend == "sql":
        from lc_escrow.infrastructure.database.engine import get_session_factory
        from lc_escrow.infrastructure.database.repositories import SqlLedgerStore

        store = SqlLedgerStore(get_session_factory())
    else:
        store = InMemoryLedgerStore()

    logger.info(
        "ledger.built",
        store_backend=settings.store_backend,
        custody_account=settings.custody_account,
    )
    return EscrowLedger(
        store=store,
        transfer=account_book,
        custody_account=settings.custody_account,
    )


def get_ledger(request: Request) -> EscrowLedger:
    """Provide the application's EscrowLedger."""
    return request.app.state.ledger


def get_account_book(request: Request) -> InMemoryAccountBook:
    """Provide the simulated account book backing the ledger's transfers."""
    return request.app.state.account_book


def get_caller(
    caller: str = Header(..., alias=CALLER_HEADER, min_length=1, max_length=128),
) -> str:
    """Provide the calling identity of the request."""
    return caller


def get_app_settings() -> Settings:
    """Provide the application settings."""
    return get_settings()
