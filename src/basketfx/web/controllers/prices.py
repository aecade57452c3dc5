"""Price feed API endpoints."""

from fastapi import APIRouter, Depends

from basketfx.web.contracts.prices import PriceFeedResponse
from basketfx.web.dependencies import get_price_feed_service
from basketfx.web.services.price_feed_service import PriceFeedService

router = APIRouter(prefix="/api", tags=["prices"])


@router.get("/price-feeds", response_model=PriceFeedResponse, response_model_exclude_none=True)
async def get_price_feeds(
    service: PriceFeedService = Depends(get_price_feed_service),
) -> PriceFeedResponse:
    """Get FLOW conversion rates for display.

    Always answers 200. When the oracle network is unreachable the payload
    carries snapshot rates with success=false and stale=true.
    """
    return await service.get_price_feeds()
