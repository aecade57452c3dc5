"""Oracle update fee estimation."""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from basketfx.exceptions import FeeQueryFailed

logger = logging.getLogger(__name__)

DEFAULT_FEE_MARGIN_PCT = 10

FeeViewCall = Callable[[list[str]], Awaitable[int]]


@dataclass(frozen=True)
class FeeQuote:
    """Oracle update fee in smallest native units."""

    base_fee: int
    adjusted_fee: int


def apply_fee_margin(base_fee: int, margin_pct: int = DEFAULT_FEE_MARGIN_PCT) -> int:
    """base_fee * (100 + margin_pct) // 100, integer only.

    Fees can exceed 2**53 on some networks, so float multiplication is not
    an option here.
    """
    if base_fee < 0:
        raise ValueError("Fee must not be negative")
    return base_fee * (100 + margin_pct) // 100


async def estimate_fee(
    update_data: list[str],
    view_call: FeeViewCall,
    margin_pct: int = DEFAULT_FEE_MARGIN_PCT,
) -> FeeQuote:
    """Quote the fee for publishing the given price updates on-chain.

    Args:
        update_data: 0x hex encoded price updates
        view_call: Awaitable view function returning the base fee
        margin_pct: Safety margin for price movement before inclusion

    Returns:
        FeeQuote with base and margin-adjusted fee

    Raises:
        FeeQueryFailed: View call reverted, RPC failed or returned garbage
    """
    if not update_data:
        raise FeeQueryFailed("No price updates to quote a fee for")

    try:
        raw_fee = await view_call(update_data)
    except Exception as e:
        logger.error(f"Update fee query failed: {type(e).__name__}: {e}")
        raise FeeQueryFailed(f"Failed to query oracle update fee: {e}") from e

    if isinstance(raw_fee, bool) or not isinstance(raw_fee, int) or raw_fee < 0:
        raise FeeQueryFailed(f"Invalid oracle update fee: {raw_fee!r}")

    quote = FeeQuote(base_fee=raw_fee, adjusted_fee=apply_fee_margin(raw_fee, margin_pct))
    logger.info(
        f"Oracle update fee for {len(update_data)} update(s): "
        f"{quote.base_fee} wei (with {margin_pct}% margin: {quote.adjusted_fee} wei)"
    )
    return quote
