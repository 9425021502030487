"""Health check endpoint.

Verifies the ledger store answers a read, returns structured status.
Used by Docker healthchecks, load balancers, and monitoring systems.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from lc_escrow.api.deps import get_app_settings, get_ledger
from lc_escrow.config import Settings
from lc_escrow.logging_config import get_logger
from lc_escrow.schemas.letter_of_credit import HealthResponse
from lc_escrow.services.escrow_ledger import EscrowLedger

router = APIRouter(tags=["Health"])
logger = get_logger(__name__)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns the health status of the application and its ledger store.",
)
def health_check(
    ledger: EscrowLedger = Depends(get_ledger),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """Check the ledger store with a counter read."""
    healthy = True
    try:
        ledger.get_lc_counter()
        store_status = f"{settings.store_backend}: healthy"
    except Exception as exc:
        healthy = False
        store_status = f"{settings.store_backend}: unhealthy: {exc}"
        logger.error("health.store_check_failed", error=str(exc))

    overall = "ok" if healthy else "degraded"

    return HealthResponse(status=overall, version="0.1.0", store=store_status)
