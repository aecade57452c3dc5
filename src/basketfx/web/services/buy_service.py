"""Buy service: prepare a native-currency -> basket token purchase.

The returned transaction carries the oracle price updates the contract needs
and enough native value to cover both the purchase and the update fee.
Signing and broadcasting are left to the client.
"""

import asyncio
import logging
from typing import Optional

from basketfx.amounts import parse_positive_units
from basketfx.chain.contracts import ChainReader
from basketfx.chain.fees import estimate_fee
from basketfx.config import Settings
from basketfx.exceptions import InvalidInput
from basketfx.oracle.codec import encode_updates
from basketfx.oracle.hermes import HermesClient
from basketfx.web.contracts.transactions import BuyTokensRequest, TransactionDescriptor
from basketfx.web.services.pipeline import PipelineStage, RequestPipeline
from basketfx.web.services.transaction_builder import TransactionBuilder

logger = logging.getLogger(__name__)


class BuyService:
    """Prepares buyTokensFromFlow transactions."""

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

    async def prepare_buy(self, request: BuyTokensRequest) -> TransactionDescriptor:
        """Prepare an unsigned buy transaction.

        Args:
            request: Frontend token symbol and native amount

        Returns:
            TransactionDescriptor with value = amount + buffer + update fee

        Raises:
            InvalidInput: Missing fields, unsupported token, bad amount
            OracleUnavailable: Price updates could not be fetched
            FeeQueryFailed: Update fee could not be quoted
        """
        settings = self.settings

        with RequestPipeline("buy") as pipeline:
            if not request.token_symbol or not request.flow_amount:
                raise InvalidInput("Missing required parameters")

            token_name = settings.resolve_contract_token(request.token_symbol)
            if not token_name:
                raise InvalidInput("Unsupported token")

            flow_amount_wei = parse_positive_units(
                request.flow_amount, "flowAmount", settings.token_decimals
            )
            contract = settings.require_app_contract()

            logger.info(
                f"[{pipeline.request_id}] Buy {request.flow_amount} native -> {token_name}"
            )

            pipeline.advance(PipelineStage.FETCHING_PRICES)
            chain = self.chain
            target_feed, reference_feed = await asyncio.gather(
                chain.name_to_id(token_name),
                chain.reference_feed_id(),
            )
            price_update, pyth_address = await asyncio.gather(
                self.oracle.fetch_latest_attestations([target_feed, reference_feed]),
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
            total_value = flow_amount_wei + settings.buy_value_buffer_wei + fee.adjusted_fee
            logger.info(
                f"[{pipeline.request_id}] Total value: {total_value} wei "
                f"(amount {flow_amount_wei} + buffer {settings.buy_value_buffer_wei} "
                f"+ fee {fee.adjusted_fee})"
            )

            pipeline.advance(PipelineStage.ENCODING)
            return self.builder.build_buy(contract, token_name, update_data, total_value)
