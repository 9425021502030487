"""Simulated account REST API routes.

The escrow ledger moves funds through InMemoryAccountBook when no external
account system is wired in. These endpoints let clients inspect balances and,
in development only, credit an identity so it can fund letters of credit.

Routes:
    GET    /api/v1/accounts/{account}/balance  - Current balance
    POST   /api/v1/accounts/{account}/deposit  - Credit an account (development only)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from lc_escrow.api.deps import get_account_book, get_app_settings
from lc_escrow.config import Settings
from lc_escrow.logging_config import get_logger
from lc_escrow.schemas.letter_of_credit import BalanceResponse, DepositRequest
from lc_escrow.services.payment_service import InMemoryAccountBook

router = APIRouter(prefix="/api/v1/accounts", tags=["Accounts"])
logger = get_logger(__name__)


@router.get(
    "/{account}/balance",
    response_model=BalanceResponse,
    summary="Get account balance",
)
def get_balance(
    account: str,
    book: InMemoryAccountBook = Depends(get_account_book),
) -> BalanceResponse:
    return BalanceResponse(account=account, balance=book.balance_of(account))


@router.post(
    "/{account}/deposit",
    response_model=BalanceResponse,
    summary="Credit a simulated account",
)
def deposit(
    account: str,
    request: DepositRequest,
    book: InMemoryAccountBook = Depends(get_account_book),
    settings: Settings = Depends(get_app_settings),
) -> BalanceResponse:
    """Credit an account out of thin air. Disabled outside development."""
    if not settings.is_development:
        logger.warning("accounts.deposit_forbidden", account=account, env=settings.app_env)
        raise HTTPException(status_code=403, detail="Deposits are only available in development")
    balance = book.deposit(account, request.amount)
    return BalanceResponse(account=account, balance=balance)
