"""Liveness and readiness endpoints.

Neither endpoint touches the oracle or the chain; readiness only reports
whether the configuration needed to prepare transactions is present.
"""

from fastapi import APIRouter, Depends

from basketfx import __version__
from basketfx.config import Settings, get_settings

SERVICE_NAME = "basketfx"

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness probe."""
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/health/detailed")
async def detailed_health(settings: Settings = Depends(get_settings)):
    """Readiness with redacted configuration.

    Status is "degraded" while the App contract address is unset, since
    every transaction endpoint would fail with a configuration error.
    """
    contract_ready = bool(settings.app_contract_address)
    return {
        "status": "healthy" if contract_ready else "degraded",
        "service": SERVICE_NAME,
        "version": __version__,
        "mode": "prepare-only",
        "checks": {
            "app_contract_configured": contract_ready,
            "reference_feed": settings.reference_feed_function,
            "display_pairs": sorted(settings.price_feed_ids),
        },
        "config": settings.get_safe_dict(),
    }
