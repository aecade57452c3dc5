"""Web services for transaction preparation.

SECURITY: These services MUST NOT:
- Access private keys or seed phrases
- Sign or broadcast transactions

These services CAN:
- Query chain state through view calls
- Fetch signed price updates from the oracle network
- Prepare unsigned transactions for client signing
"""

from basketfx.web.services.buy_service import BuyService
from basketfx.web.services.liquidity_service import LiquidityService
from basketfx.web.services.price_feed_service import PriceFeedService
from basketfx.web.services.transaction_builder import TransactionBuilder

__all__ = [
    "BuyService",
    "LiquidityService",
    "PriceFeedService",
    "TransactionBuilder",
]
