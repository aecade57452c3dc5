"""Price feed contracts for display.

Numbers here are for showing rates in the UI only. Nothing that goes
on-chain is derived from this payload.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PriceFeedData(BaseModel):
    """FLOW conversion rates and the raw pair prices they came from."""

    model_config = ConfigDict(populate_by_name=True)

    flow_usd_price: float = Field(..., alias="flowUsdPrice")
    conversion_rates: dict[str, float] = Field(default_factory=dict, alias="conversionRates")
    raw_prices: dict[str, float] = Field(default_factory=dict, alias="rawPrices")
    timestamp: str = Field(..., description="ISO-8601 time the payload was built")
    stale: bool = Field(default=False, description="True when serving fallback snapshot rates")
    error: Optional[str] = Field(None, description="Why fallback rates are served")


class PriceFeedResponse(BaseModel):
    """Price feed payload; success is False when serving fallback rates."""

    success: bool
    data: PriceFeedData
