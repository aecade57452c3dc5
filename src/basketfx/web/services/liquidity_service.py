"""Liquidity service: add, remove and price liquidity for a token pair.

Adding liquidity needs fresh oracle prices and an update fee. Removing
liquidity is a pure withdrawal and never talks to the oracle. Estimating
the paired amount reads prices straight from the App contract.
"""

import asyncio
import logging
from typing import Optional

from basketfx.amounts import (
    apply_slippage,
    estimate_counter_amount,
    format_units,
    parse_positive_units,
)
from basketfx.chain.contracts import ChainReader
from basketfx.chain.fees import estimate_fee
from basketfx.config import Settings
from basketfx.exceptions import InvalidInput
from basketfx.oracle.codec import encode_updates
from basketfx.oracle.hermes import HermesClient
from basketfx.oracle.normalizer import fixed_point_rate
from basketfx.web.contracts.transactions import (
    AddLiquidityRequest,
    CalculateLiquidityRequest,
    RemoveLiquidityRequest,
    TransactionDescriptor,
)
from basketfx.web.services.pipeline import PipelineStage, RequestPipeline
from basketfx.web.services.transaction_builder import TransactionBuilder

logger = logging.getLogger(__name__)


def validate_pair(token_name_a: Optional[str], token_name_b: Optional[str]) -> tuple[str, str]:
    """Require two distinct, non-empty token names."""
    if not token_name_a or not token_name_b:
        raise InvalidInput("Missing required parameters")
    if token_name_a == token_name_b:
        raise InvalidInput("Tokens cannot be the same")
    return token_name_a, token_name_b


class LiquidityService:
    """Prepares addLiquidity / removeLiquidity transactions and pair quotes."""

    def __init__(
        self,
        settings: Settings,
        oracle: Optional[HermesClient] = None,
        chain: Optional[ChainReader] = None,
        builder: Optional[TransactionBuilder] = None,
    ):
        self.settings = settings
        self._oracle = oracle
        self._chain = chain
        self.builder = builder or TransactionBuilder()

    @property
    def oracle(self) -> HermesClient:
        if self._oracle is None:
            self._oracle = HermesClient(
                base_url=self.settings.hermes_url,
                timeout=self.settings.request_timeout_seconds,
            )
        return self._oracle

    @property
    def chain(self) -> ChainReader:
        if self._chain is None:
            self._chain = ChainReader.from_settings(self.settings)
        return self._chain

    async def prepare_add_liquidity(self, request: AddLiquidityRequest) -> TransactionDescriptor:
        """Prepare an unsigned addLiquidity transaction.

        The contract works out the paired amount itself; the amount of
        token A is raised by the slippage margin so the call is not
        under-authorized if prices move before inclusion.
        """
        settings = self.settings

        with RequestPipeline("add-liquidity") as pipeline:
            token_a, token_b = validate_pair(request.token_name_a, request.token_name_b)
            amount_a_wei = parse_positive_units(request.amount_a, "amountA", settings.token_decimals)
            contract = settings.require_app_contract()

            pipeline.advance(PipelineStage.FETCHING_PRICES)
            chain = self.chain
            feed_a, feed_b, reference_feed = await asyncio.gather(
                chain.name_to_id(token_a),
                chain.name_to_id(token_b),
                chain.reference_feed_id(),
            )
            price_update, pyth_address = await asyncio.gather(
                self.oracle.fetch_latest_attestations([feed_a, feed_b, reference_feed]),
                chain.pyth_address(),
            )
            update_data = encode_updates(price_update.raw_update_data)

            pipeline.advance(PipelineStage.COMPUTING_FEE)
            fee = await estimate_fee(
                update_data,
                lambda data: chain.get_update_fee(data, pyth_address),
                settings.fee_margin_pct,
            )

            pipeline.advance(PipelineStage.COMPUTING_AMOUNTS)
            amount_with_slippage = apply_slippage(amount_a_wei, settings.liquidity_slippage_pct)
            logger.debug(
                f"[{pipeline.request_id}] {token_a} amount {amount_a_wei} -> "
                f"{amount_with_slippage} with {settings.liquidity_slippage_pct}% slippage"
            )

            pipeline.advance(PipelineStage.ENCODING)
            return self.builder.build_add_liquidity(
                contract,
                token_a,
                token_b,
                amount_with_slippage,
                update_data,
                fee.adjusted_fee,
            )

    async def prepare_remove_liquidity(
        self, request: RemoveLiquidityRequest
    ) -> TransactionDescriptor:
        """Prepare an unsigned removeLiquidity transaction (value 0, no oracle)."""
        settings = self.settings

        with RequestPipeline("remove-liquidity") as pipeline:
            token_a, token_b = validate_pair(request.token_name_a, request.token_name_b)
            lp_amount_wei = parse_positive_units(
                request.lp_token_amount, "lpTokenAmount", settings.token_decimals
            )
            contract = settings.require_app_contract()

            pipeline.advance(PipelineStage.ENCODING)
            return self.builder.build_remove_liquidity(contract, token_a, token_b, lp_amount_wei)

    async def calculate_liquidity(self, request: CalculateLiquidityRequest) -> str:
        """Estimate how much token B pairs with amountA of token A.

        Returns:
            Amount of B as a decimal string
        """
        settings = self.settings

        with RequestPipeline("calculate-liquidity") as pipeline:
            token_a, token_b = validate_pair(request.token_name_a, request.token_name_b)
            amount_a_wei = parse_positive_units(request.amount_a, "amountA", settings.token_decimals)

            pipeline.advance(PipelineStage.FETCHING_PRICES)
            chain = self.chain
            feed_a, feed_b = await chain.resolve_feed_ids([token_a, token_b])
            price_a, price_b = await asyncio.gather(
                chain.get_normalized_price(feed_a),
                chain.get_normalized_price(feed_b),
            )

            pipeline.advance(PipelineStage.COMPUTING_AMOUNTS)
            rate_a_to_b = fixed_point_rate(price_a, price_b)
            amount_b_wei = estimate_counter_amount(amount_a_wei, rate_a_to_b)
            logger.debug(
                f"[{pipeline.request_id}] {token_a}/{token_b} rate {rate_a_to_b} "
                f"-> amountB {amount_b_wei}"
            )
            return format_units(amount_b_wei, settings.token_decimals)
