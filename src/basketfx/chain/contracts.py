"""Read-only access to the App contract and the Pyth verifier.

Only view functions are called here. Nothing in this module holds keys,
signs or broadcasts; write calls are encoded by the transaction builder
and handed back to the client.
"""

import asyncio
import logging
from typing import Any, Optional

from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError

from basketfx.chain.abi import APP_ABI, PYTH_ABI, with_reference_accessor
from basketfx.config import Settings
from basketfx.exceptions import (
    ChainCallReverted,
    ConfigurationError,
    DataUnavailable,
    InvalidInput,
)
from basketfx.oracle.codec import from_onchain_bytes

logger = logging.getLogger(__name__)

ZERO_FEED_ID = "0x" + "00" * 32


def _to_feed_id(value: Any) -> str:
    """Convert a bytes32 return value into a 0x hex feed ID."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    text = str(value).lower()
    return text if text.startswith("0x") else f"0x{text}"


class ChainReader:
    """View-call client for the basket App contract and its Pyth verifier."""

    def __init__(
        self,
        rpc_url: str,
        app_address: str,
        reference_feed_function: str = "FLOW_USD_PRICE_ID",
        pyth_address: Optional[str] = None,
        timeout: float = 10.0,
        w3: Optional[AsyncWeb3] = None,
    ):
        """Initialize chain reader.

        Args:
            rpc_url: JSON-RPC endpoint
            app_address: App contract address
            reference_feed_function: App view returning the native reference feed ID
            pyth_address: Pyth verifier address (None = ask App.pyth())
            timeout: Per-call timeout in seconds
            w3: Optional preconfigured AsyncWeb3 instance
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.reference_feed_function = reference_feed_function
        self.w3 = w3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))

        try:
            checksum = AsyncWeb3.to_checksum_address(app_address)
        except ValueError as e:
            raise ConfigurationError(f"Invalid App contract address: {app_address}") from e

        self.app = self.w3.eth.contract(
            address=checksum,
            abi=with_reference_accessor(APP_ABI, reference_feed_function),
        )
        self._pyth_address = pyth_address

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChainReader":
        """Build a reader from explicit settings."""
        return cls(
            rpc_url=settings.rpc_url,
            app_address=settings.require_app_contract(),
            reference_feed_function=settings.reference_feed_function,
            pyth_address=settings.pyth_contract_address,
            timeout=settings.request_timeout_seconds,
        )

    async def _call(self, description: str, call) -> Any:
        """Run a contract view call with timeout and error mapping."""
        try:
            return await asyncio.wait_for(call.call(), timeout=self.timeout)
        except ContractLogicError as e:
            logger.warning(f"{description} reverted: {e}")
            raise ChainCallReverted(f"{description} reverted: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error(f"{description} timed out after {self.timeout}s")
            raise DataUnavailable(f"{description} timed out") from e
        except Exception as e:
            logger.error(f"{description} failed: {type(e).__name__}: {e}")
            raise DataUnavailable(f"{description} failed: {e}") from e

    async def name_to_id(self, token_name: str) -> str:
        """Resolve a token name to its price feed ID."""
        raw = await self._call(
            f"nameToId({token_name})", self.app.functions.nameToId(token_name)
        )
        feed_id = _to_feed_id(raw)
        if feed_id == ZERO_FEED_ID:
            raise InvalidInput(f"Unknown token: {token_name}")
        return feed_id

    async def resolve_feed_ids(self, token_names: list[str]) -> list[str]:
        """Resolve several token names concurrently, preserving order."""
        return list(await asyncio.gather(*(self.name_to_id(n) for n in token_names)))

    async def reference_feed_id(self) -> str:
        """Feed ID of the native currency reference price."""
        fn = getattr(self.app.functions, self.reference_feed_function)
        raw = await self._call(self.reference_feed_function, fn())
        return _to_feed_id(raw)

    async def get_normalized_price(self, feed_id: str) -> int:
        """Price for a feed as normalized by the App contract."""
        raw = await self._call(
            f"getNormalizedPrice({feed_id[:10]}...)",
            self.app.functions.getNormalizedPrice(from_onchain_bytes(feed_id)),
        )
        return int(raw)

    async def pyth_address(self) -> str:
        """Pyth verifier address, from configuration or App.pyth()."""
        if self._pyth_address:
            return AsyncWeb3.to_checksum_address(self._pyth_address)
        address = await self._call("pyth()", self.app.functions.pyth())
        return AsyncWeb3.to_checksum_address(address)

    async def get_update_fee(self, update_data: list[str], pyth_address: Optional[str] = None) -> int:
        """Call Pyth getUpdateFee(bytes[]) with 0x hex update blobs.

        Errors propagate unwrapped; the fee estimator owns their mapping.
        """
        address = pyth_address or await self.pyth_address()
        pyth = self.w3.eth.contract(address=address, abi=PYTH_ABI)
        payload = [from_onchain_bytes(d) for d in update_data]
        fee = await asyncio.wait_for(
            pyth.functions.getUpdateFee(payload).call(), timeout=self.timeout
        )
        return int(fee)
