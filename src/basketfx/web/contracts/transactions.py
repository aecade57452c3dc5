"""Transaction contracts for non-custodial operations.

These contracts define unsigned transactions that clients sign locally.
NO signing or broadcasting happens server-side.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TransactionDescriptor(BaseModel):
    """An unsigned transaction for client-side signing.

    The client is responsible for nonce, gas and chain ID, and for
    signing and broadcasting.
    """

    model_config = ConfigDict(frozen=True)

    to: str = Field(..., description="Contract address")
    value: str = Field(default="0", description="Native value in wei (decimal string)")
    data: str = Field(default="0x", description="Call data (hex encoded)")


class TransactionResponse(BaseModel):
    """Successful response carrying a transaction descriptor."""

    success: bool = True
    data: TransactionDescriptor


class BuyTokensRequest(BaseModel):
    """Request to buy basket tokens with the native currency."""

    model_config = ConfigDict(populate_by_name=True)

    token_symbol: Optional[str] = Field(None, alias="tokenSymbol", description="Frontend symbol (EUR, GBP...)")
    flow_amount: Optional[str] = Field(None, alias="flowAmount", description="Native amount, decimal string")


class AddLiquidityRequest(BaseModel):
    """Request to add liquidity to a token pair."""

    model_config = ConfigDict(populate_by_name=True)

    token_name_a: Optional[str] = Field(None, alias="tokenNameA", description="Contract token name")
    token_name_b: Optional[str] = Field(None, alias="tokenNameB", description="Contract token name")
    amount_a: Optional[str] = Field(None, alias="amountA", description="Amount of token A, decimal string")


class RemoveLiquidityRequest(BaseModel):
    """Request to burn LP tokens for a pair."""

    model_config = ConfigDict(populate_by_name=True)

    token_name_a: Optional[str] = Field(None, alias="tokenNameA")
    token_name_b: Optional[str] = Field(None, alias="tokenNameB")
    lp_token_amount: Optional[str] = Field(None, alias="lpTokenAmount", description="LP amount, decimal string")


class CalculateLiquidityRequest(BaseModel):
    """Request to estimate the paired amount for a liquidity deposit."""

    model_config = ConfigDict(populate_by_name=True)

    token_name_a: Optional[str] = Field(None, alias="tokenNameA")
    token_name_b: Optional[str] = Field(None, alias="tokenNameB")
    amount_a: Optional[str] = Field(None, alias="amountA")


class LiquidityAmount(BaseModel):
    """Estimated counter amount."""

    model_config = ConfigDict(populate_by_name=True)

    amount_b: str = Field(..., alias="amountB", description="Amount of token B, decimal string")


class CalculateLiquidityResponse(BaseModel):
    """Response for a liquidity amount estimate."""

    success: bool = True
    data: LiquidityAmount
