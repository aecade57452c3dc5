"""Transaction API endpoints for non-custodial operations.

These endpoints prepare unsigned transactions for client-side signing.
NO signing or broadcasting happens server-side. Failures are raised as
BasketFxError and rendered by the app's exception handlers.
"""

from fastapi import APIRouter, Depends

from basketfx.web.contracts.transactions import (
    AddLiquidityRequest,
    BuyTokensRequest,
    CalculateLiquidityRequest,
    CalculateLiquidityResponse,
    LiquidityAmount,
    RemoveLiquidityRequest,
    TransactionResponse,
)
from basketfx.web.dependencies import get_buy_service, get_liquidity_service
from basketfx.web.services.buy_service import BuyService
from basketfx.web.services.liquidity_service import LiquidityService

router = APIRouter(prefix="/api", tags=["transactions"])


@router.post("/buy-tokens", response_model=TransactionResponse)
async def buy_tokens(
    request: BuyTokensRequest,
    service: BuyService = Depends(get_buy_service),
) -> TransactionResponse:
    """Build an unsigned buyTokensFromFlow transaction.

    The returned value covers the native amount, the oracle update fee
    (plus margin) and a small rounding buffer. The client must:
    1. Sign the returned transaction with their private key
    2. Broadcast to the network themselves
    """
    descriptor = await service.prepare_buy(request)
    return TransactionResponse(data=descriptor)


@router.post("/add-liquidity", response_model=TransactionResponse)
async def add_liquidity(
    request: AddLiquidityRequest,
    service: LiquidityService = Depends(get_liquidity_service),
) -> TransactionResponse:
    """Build an unsigned addLiquidity transaction with fresh price updates."""
    descriptor = await service.prepare_add_liquidity(request)
    return TransactionResponse(data=descriptor)


@router.post("/remove-liquidity", response_model=TransactionResponse)
async def remove_liquidity(
    request: RemoveLiquidityRequest,
    service: LiquidityService = Depends(get_liquidity_service),
) -> TransactionResponse:
    """Build an unsigned removeLiquidity transaction.

    No price update is needed for a withdrawal, so value is always "0".
    """
    descriptor = await service.prepare_remove_liquidity(request)
    return TransactionResponse(data=descriptor)


@router.post("/calculate-liquidity", response_model=CalculateLiquidityResponse)
async def calculate_liquidity(
    request: CalculateLiquidityRequest,
    service: LiquidityService = Depends(get_liquidity_service),
) -> CalculateLiquidityResponse:
    """Estimate the amount of token B that pairs with amountA of token A.

    This is a READ-ONLY operation - no transaction is prepared.
    """
    amount_b = await service.calculate_liquidity(request)
    return CalculateLiquidityResponse(data=LiquidityAmount(amount_b=amount_b))
