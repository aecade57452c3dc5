"""Price feed service for display rates.

Serves FLOW conversion rates to the UI. This is the only path that degrades
instead of failing: when the oracle cannot be read it answers with snapshot
rates marked as stale, so the UI keeps showing something.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from basketfx.config import Settings
from basketfx.exceptions import DataUnavailable
from basketfx.oracle.hermes import HermesClient, normalize_feed_id
from basketfx.oracle.normalizer import cross_rate, invert, normalize
from basketfx.web.contracts.prices import PriceFeedData, PriceFeedResponse

logger = logging.getLogger(__name__)

NATIVE_PAIR = "FLOW_USD"

# Display currency -> Pyth pair it is priced from (None = USD itself)
DISPLAY_CURRENCIES = {
    "USDC": "USDC_USD",
    "USD": None,
    "INR": "USD_INR",
    "CHF": "USD_CHF",
    "JPY": "USD_YEN",
    "EUR": "EUR_USD",
    "GBP": "GBP_USD",
}

FALLBACK_MESSAGE = "Using fallback rates due to API error"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def usd_price(pair: Optional[str], prices: dict[str, Decimal]) -> Decimal:
    """Price of a display currency in USD from its Pyth pair.

    X_USD pairs quote X in USD directly; USD_X pairs quote USD in X and are
    inverted.
    """
    if pair is None:
        return Decimal(1)
    if pair.endswith("_USD"):
        price = prices.get(pair)
        if price is None:
            raise DataUnavailable(f"{pair} price not available")
        return price
    if pair.startswith("USD_"):
        return invert(prices.get(pair))
    raise DataUnavailable(f"Unsupported pair orientation: {pair}")


class PriceFeedService:
    """Reads display prices from Hermes and derives FLOW conversion rates."""

    def __init__(self, settings: Settings, oracle: Optional[HermesClient] = None):
        self.settings = settings
        self._oracle = oracle

    @property
    def oracle(self) -> HermesClient:
        if self._oracle is None:
            self._oracle = HermesClient(
                base_url=self.settings.hermes_url,
                timeout=self.settings.request_timeout_seconds,
            )
        return self._oracle

    async def fetch_pair_prices(self) -> dict[str, Decimal]:
        """Fetch and normalize every configured display pair."""
        feed_ids = self.settings.price_feed_ids
        update = await self.oracle.fetch_latest_attestations(feed_ids.values())
        by_id = update.by_feed_id()

        prices = {}
        for pair, feed_id in feed_ids.items():
            attestation = by_id.get(normalize_feed_id(feed_id))
            if attestation is not None:
                prices[pair] = normalize(attestation)
                logger.debug(f"{pair}: {prices[pair]}")
        return prices

    def conversion_rates(self, prices: dict[str, Decimal]) -> dict[str, Decimal]:
        """Price of 1 FLOW in each display currency."""
        flow_usd = prices.get(NATIVE_PAIR)
        if flow_usd is None or flow_usd <= 0:
            raise DataUnavailable("FLOW/USD price not available or invalid")

        return {
            currency: cross_rate(flow_usd, usd_price(pair, prices))
            for currency, pair in DISPLAY_CURRENCIES.items()
        }

    async def get_price_feeds(self) -> PriceFeedResponse:
        """Live conversion rates, or the fallback snapshot on any failure."""
        try:
            prices = await self.fetch_pair_prices()
            rates = self.conversion_rates(prices)
        except Exception as e:
            logger.warning(f"Error fetching price feeds, serving fallback: {type(e).__name__}: {e}")
            return self.fallback_response()

        return PriceFeedResponse(
            success=True,
            data=PriceFeedData(
                flow_usd_price=float(prices[NATIVE_PAIR]),
                conversion_rates={k: float(v) for k, v in rates.items()},
                raw_prices={k: float(v) for k, v in prices.items()},
                timestamp=_timestamp(),
            ),
        )

    def fallback_response(self) -> PriceFeedResponse:
        """Snapshot rates flagged as stale."""
        return PriceFeedResponse(
            success=False,
            data=PriceFeedData(
                flow_usd_price=float(self.settings.fallback_flow_usd_price),
                conversion_rates={
                    k: float(v) for k, v in self.settings.fallback_conversion_rates.items()
                },
                raw_prices={},
                timestamp=_timestamp(),
                stale=True,
                error=FALLBACK_MESSAGE,
            ),
        )
