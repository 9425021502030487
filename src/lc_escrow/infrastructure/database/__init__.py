"""Database infrastructure - engine, ORM models, and the SQL ledger store."""

from lc_escrow.infrastructure.database.engine import (
    close_db,
    get_session_factory,
    init_db,
)
from lc_escrow.infrastructure.database.orm_models import (
    Base,
    LCEventRow,
    LedgerCounterRow,
    LetterOfCreditRow,
)
from lc_escrow.infrastructure.database.repositories import SqlLedgerStore

__all__ = [
    "Base",
    "LCEventRow",
    "LedgerCounterRow",
    "LetterOfCreditRow",
    "SqlLedgerStore",
    "get_session_factory",
    "init_db",
    "close_db",
]
