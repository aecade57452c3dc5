"""FastAPI dependency providers.

Services are built per request from explicit settings. Tests swap them out
through app.dependency_overrides.
"""

from fastapi import Depends

from basketfx.config import Settings, get_settings
from basketfx.web.services.buy_service import BuyService
from basketfx.web.services.liquidity_service import LiquidityService
from basketfx.web.services.price_feed_service import PriceFeedService


def get_buy_service(settings: Settings = Depends(get_settings)) -> BuyService:
    return BuyService(settings)


def get_liquidity_service(settings: Settings = Depends(get_settings)) -> LiquidityService:
    return LiquidityService(settings)


def get_price_feed_service(settings: Settings = Depends(get_settings)) -> PriceFeedService:
    return PriceFeedService(settings)
