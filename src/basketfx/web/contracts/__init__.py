"""Request and response contracts for the web layer.

These Pydantic models define the API interface for web clients.
JSON field names are camelCase to match the frontend.
"""

from basketfx.web.contracts.prices import PriceFeedData, PriceFeedResponse
from basketfx.web.contracts.transactions import (
    AddLiquidityRequest,
    BuyTokensRequest,
    CalculateLiquidityRequest,
    CalculateLiquidityResponse,
    LiquidityAmount,
    RemoveLiquidityRequest,
    TransactionDescriptor,
    TransactionResponse,
)

__all__ = [
    # Price contracts
    "PriceFeedData",
    "PriceFeedResponse",
    # Transaction contracts
    "AddLiquidityRequest",
    "BuyTokensRequest",
    "CalculateLiquidityRequest",
    "CalculateLiquidityResponse",
    "LiquidityAmount",
    "RemoveLiquidityRequest",
    "TransactionDescriptor",
    "TransactionResponse",
]
