"""Pytest configuration and fixtures."""

import base64
import os
from typing import Optional
from unittest.mock import AsyncMock

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ["APP_CONTRACT_ADDRESS"] = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

from basketfx.config import Settings
from basketfx.exceptions import InvalidInput
from basketfx.oracle.hermes import HermesClient, PriceAttestation, PriceUpdate

APP_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
PYTH_ADDRESS = "0x2880aB155794e7179c9eE2e38200202908C17B43"

FLOW_FEED = "0x2fb245b9a84554a0f15aa123cbb5f64cd263b59e9a87d80148cbffab50c69f30"
EUR_FEED = "0xa995d00bb36a63cef7fd2c287dc105fc8f3d93779f062f09551b0af3e81ec30b"
GBP_FEED = "0x84c2dde9633d93d1bcad84e7dc41c9d56578b7ec52fabedc1f335d673df0a7c1"

# Stand-in for a signed accumulator update blob
UPDATE_BYTES = b"PNAU" + bytes(range(256)) + b"\x00\xff" * 8
UPDATE_B64 = base64.b64encode(UPDATE_BYTES).decode("ascii")
UPDATE_HEX = "0x" + UPDATE_BYTES.hex()


class FakeChainReader:
    """In-memory stand-in for ChainReader that records calls."""

    def __init__(
        self,
        feed_ids: Optional[dict[str, str]] = None,
        prices: Optional[dict[str, int]] = None,
        base_fee: int = 5000,
        fee_error: Optional[Exception] = None,
    ):
        self.feed_ids = feed_ids or {"fEUR": EUR_FEED, "fGBP": GBP_FEED}
        self.prices = prices or {}
        self.base_fee = base_fee
        self.fee_error = fee_error
        self.fee_calls: list[tuple[list[str], Optional[str]]] = []
        self.calls: list[str] = []

    async def name_to_id(self, token_name: str) -> str:
        self.calls.append(f"nameToId:{token_name}")
        if token_name not in self.feed_ids:
            raise InvalidInput(f"Unknown token: {token_name}")
        return self.feed_ids[token_name]

    async def resolve_feed_ids(self, token_names: list[str]) -> list[str]:
        return [await self.name_to_id(name) for name in token_names]

    async def reference_feed_id(self) -> str:
        self.calls.append("reference")
        return FLOW_FEED

    async def get_normalized_price(self, feed_id: str) -> int:
        self.calls.append(f"price:{feed_id}")
        return self.prices.get(feed_id, 0)

    async def pyth_address(self) -> str:
        self.calls.append("pyth")
        return PYTH_ADDRESS

    async def get_update_fee(self, update_data: list[str], pyth_address: Optional[str] = None) -> int:
        self.fee_calls.append((list(update_data), pyth_address))
        if self.fee_error is not None:
            raise self.fee_error
        return self.base_fee


def make_price_update(feed_ids: list[str], raw: Optional[list[str]] = None) -> PriceUpdate:
    """PriceUpdate with a 1.0 price for every feed."""
    return PriceUpdate(
        attestations=[
            PriceAttestation(feed_id=f, mantissa=100_000_000, exponent=-8, publish_time=1700000000)
            for f in feed_ids
        ],
        raw_update_data=raw if raw is not None else [UPDATE_B64],
        fetched_feed_ids=list(feed_ids),
    )


@pytest.fixture
def settings() -> Settings:
    """Explicit settings, independent of the process environment."""
    return Settings(
        _env_file=None,
        app_contract_address=APP_ADDRESS,
        rpc_url="http://localhost:8545",
        hermes_url="https://hermes.test",
    )


@pytest.fixture
def fake_chain() -> FakeChainReader:
    return FakeChainReader()


@pytest.fixture
def fake_oracle() -> AsyncMock:
    """HermesClient mock echoing back the requested feeds."""
    oracle = AsyncMock(spec=HermesClient)

    async def fetch(feed_ids):
        return make_price_update(list(feed_ids))

    oracle.fetch_latest_attestations.side_effect = fetch
    return oracle
