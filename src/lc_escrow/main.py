"""FastAPI application entry point for the LC escrow.

Lifecycle:
    1. Startup: Initialize logging, create tables when the SQL store is active.
    2. Running: Serve the REST API on a single Uvicorn process.
    3. Shutdown: Dispose of the database engine.

Run with:
    uv run uvicorn lc_escrow.main:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from lc_escrow.config import get_settings
from lc_escrow.logging_config import get_logger, setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from lc_escrow.services.escrow_ledger import EscrowLedger
    from lc_escrow.services.payment_service import InMemoryAccountBook


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle."""
    settings = get_settings()

    setup_logging(
        log_level=settings.app_log_level,
        json_logs=not settings.is_development,
        echo_sql=settings.db_echo_sql,
    )
    logger = get_logger(__name__)
    logger.info(
        "app.starting",
        env=settings.app_env,
        debug=settings.app_debug,
        store_backend=settings.store_backend,
    )

    if settings.store_backend == "sql":
        from lc_escrow.infrastructure.database.engine import init_db

        init_db()

    logger.info("app.started", host=settings.app_host, port=settings.app_port)

    yield

    logger.info("app.shutting_down")
    if settings.store_backend == "sql":
        from lc_escrow.infrastructure.database.engine import close_db

        close_db()
    logger.info("app.stopped")


def create_app(
    ledger: EscrowLedger | None = None,
    account_book: InMemoryAccountBook | None = None,
) -> FastAPI:
    """Application factory - creates and configures the FastAPI app.

    Args:
        ledger: Pre-built ledger to serve. Built from settings if omitted.
        account_book: Simulated account book the ledger transfers through.
                      Must be the one wired into ``ledger`` when both are given.
    """
    from lc_escrow.api.deps import build_ledger
    from lc_escrow.services.payment_service import InMemoryAccountBook

    settings = get_settings()

    app = FastAPI(
        title="LC Escrow",
        description=(
            "Letter of credit escrow: importer funds are released to the "
            "exporter only on the designated verifier's approval."
        ),
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.app_debug,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    app.state.account_book = account_book or InMemoryAccountBook()
    app.state.ledger = ledger or build_ledger(settings, app.state.account_book)

    # --- Middleware ---
    from lc_escrow.api.middleware import setup_middleware

    setup_middleware(app)

    # --- REST API Routes ---
    from lc_escrow.api.routes.accounts import router as accounts_router
    from lc_escrow.api.routes.health import router as health_router
    from lc_escrow.api.routes.letters_of_credit import router as lc_router

    app.include_router(health_router)
    app.include_router(lc_router)
    app.include_router(accounts_router)

    return app


# The app instance used by Uvicorn
app = create_app()
