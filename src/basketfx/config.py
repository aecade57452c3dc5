"""Application configuration using pydantic-settings.

Every orchestrator receives a Settings instance explicitly, so tests and
individual requests can override endpoints and contract addresses without
touching process-wide state.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from basketfx.exceptions import ConfigurationError

# Pyth price feed IDs for the display-only price-feeds endpoint.
# Transaction paths resolve feed IDs from the App contract instead.
DEFAULT_PRICE_FEED_IDS = {
    "FLOW_USD": "0x2fb245b9a84554a0f15aa123cbb5f64cd263b59e9a87d80148cbffab50c69f30",
    "USD_CHF": "0x0b1e3297e69f162877b577b0d6a47a0d63b2392bc8499e6540da4187a63e28f8",
    "USD_INR": "0x0ac0f9a2886fc2dd708bc66cc2cea359052ce89d324f45d95fadbc6c4fcf1809",
    "USD_YEN": "0xef2c98c804ba503c6a707e38be4dfbb16683775f195b091252bf24693042fd52",
    "GBP_USD": "0x84c2dde9633d93d1bcad84e7dc41c9d56578b7ec52fabedc1f335d673df0a7c1",
    "EUR_USD": "0xa995d00bb36a63cef7fd2c287dc105fc8f3d93779f062f09551b0af3e81ec30b",
    "USDC_USD": "0xeaa020c61cc479712813461ce153894a96a6c00b21ed0cfc2798d1f9a9e9c94a",
}

# Frontend symbol -> contract token name
DEFAULT_TOKEN_MAPPING = {
    "USDC": "fUSD",
    "USD": "fUSD",
    "INR": "fINR",
    "EUR": "fEUR",
    "GBP": "fGBP",
    "JPY": "fYEN",
    "CHF": "fCHF",
}

# Snapshot rates served when Hermes cannot be reached
DEFAULT_FALLBACK_RATES = {
    "USDC": Decimal("0.3478"),
    "USD": Decimal("0.3478"),
    "INR": Decimal("29.0"),
    "CHF": Decimal("0.31"),
    "JPY": Decimal("52.0"),
    "EUR": Decimal("0.32"),
    "GBP": Decimal("0.27"),
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # Chain
    # ======================
    rpc_url: str = Field(
        default="https://testnet.evm.nodes.onflow.org", description="EVM JSON-RPC URL"
    )
    app_contract_address: str = Field(
        default="", description="Basket App contract address"
    )
    pyth_contract_address: Optional[str] = Field(
        default=None,
        description="Pyth verifier address (resolved via App.pyth() when unset)",
    )
    reference_feed_function: str = Field(
        default="FLOW_USD_PRICE_ID",
        description="App contract view returning the native currency reference feed ID",
    )

    # ======================
    # Oracle
    # ======================
    hermes_url: str = Field(
        default="https://hermes.pyth.network", description="Pyth Hermes REST endpoint"
    )
    request_timeout_seconds: float = Field(
        default=10.0, description="Timeout for oracle and RPC calls"
    )

    # ======================
    # Amounts and fees
    # ======================
    token_decimals: int = Field(default=18, description="Decimals of basket and native tokens")
    fee_margin_pct: int = Field(
        default=10, ge=0, description="Margin added to the oracle update fee (percent)"
    )
    liquidity_slippage_pct: int = Field(
        default=2, ge=0, le=100, description="Slippage applied to add-liquidity amounts (percent)"
    )
    buy_value_buffer_wei: int = Field(
        default=100, ge=0, description="Extra native units added to buy transactions"
    )

    # ======================
    # Tokens and price feeds
    # ======================
    token_mapping: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TOKEN_MAPPING))
    price_feed_ids: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_PRICE_FEED_IDS))
    fallback_flow_usd_price: Decimal = Field(default=Decimal("0.3478"))
    fallback_conversion_rates: dict[str, Decimal] = Field(
        default_factory=lambda: dict(DEFAULT_FALLBACK_RATES)
    )

    def require_app_contract(self) -> str:
        """Return the App contract address or fail if it is not configured."""
        if not self.app_contract_address:
            raise ConfigurationError("Server configuration error: App contract address is not set")
        return self.app_contract_address

    def resolve_contract_token(self, symbol: str) -> Optional[str]:
        """Map a frontend token symbol to the contract token name."""
        return self.token_mapping.get(symbol)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "rpc_url": self._redact_url(self.rpc_url),
            "app_contract": self.app_contract_address or "(not set)",
            "pyth_contract": self.pyth_contract_address or "(from App.pyth())",
            "hermes_url": self.hermes_url,
            "fees": {
                "margin_pct": self.fee_margin_pct,
                "buy_buffer_wei": self.buy_value_buffer_wei,
            },
            "liquidity": {
                "slippage_pct": self.liquidity_slippage_pct,
            },
            "tokens": sorted(set(self.token_mapping.values())),
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact credentials and API keys embedded in an RPC URL."""
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            creds, host = rest.rsplit("@", 1)
            if ":" in creds:
                user, _ = creds.split(":", 1)
                return f"{proto}://{user}:***@{host}"
        if "/v3/" in url:
            base, _ = url.split("/v3/", 1)
            return f"{base}/v3/***"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
