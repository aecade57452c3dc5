"""Pyth Hermes price oracle gateway.

Fetches the latest signed price updates for a set of feed IDs.
API docs: https://hermes.pyth.network/docs
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

import httpx

from basketfx.exceptions import EncodingFailure, OracleUnavailable
from basketfx.oracle.codec import to_onchain_bytes

logger = logging.getLogger(__name__)

LATEST_UPDATES_PATH = "/v2/updates/price/latest"


def normalize_feed_id(feed_id: str) -> str:
    """Lowercase a feed ID and make sure it carries a 0x prefix."""
    feed_id = feed_id.strip().lower()
    return feed_id if feed_id.startswith("0x") else f"0x{feed_id}"


@dataclass(frozen=True)
class PriceAttestation:
    """A parsed oracle price: value = mantissa * 10**exponent."""

    feed_id: str
    mantissa: int
    exponent: int
    publish_time: int


@dataclass
class PriceUpdate:
    """Result of one Hermes fetch.

    raw_update_data holds the signed base64 blobs to forward on-chain;
    attestations holds the parsed prices. Hermes may batch several feeds
    into one blob, so the two lists need not have the same length.
    """

    attestations: list[PriceAttestation]
    raw_update_data: list[str]
    fetched_feed_ids: list[str] = field(default_factory=list)

    def by_feed_id(self) -> dict[str, PriceAttestation]:
        """Index attestations by normalized feed ID."""
        return {a.feed_id: a for a in self.attestations}


class HermesClient:
    """Client for the Hermes REST API.

    Does not retry. Any failure surfaces as OracleUnavailable and the caller
    decides whether to re-issue the request.
    """

    def __init__(
        self,
        base_url: str = "https://hermes.pyth.network",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize Hermes client.

        Args:
            base_url: Hermes endpoint
            timeout: Request timeout in seconds
            client: Optional shared HTTP client (owned by the caller)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def fetch_latest_attestations(self, feed_ids: Iterable[str]) -> PriceUpdate:
        """Fetch the latest signed price updates for the given feeds.

        Args:
            feed_ids: Feed IDs, with or without 0x prefix; duplicates are ignored

        Returns:
            PriceUpdate with one attestation per requested feed

        Raises:
            OracleUnavailable: Network failure or malformed response
        """
        requested = list(dict.fromkeys(normalize_feed_id(f) for f in feed_ids))
        if not requested:
            raise OracleUnavailable("No price feeds requested")

        params = [("ids[]", feed_id[2:]) for feed_id in requested]
        params.append(("encoding", "base64"))
        params.append(("parsed", "true"))

        url = f"{self.base_url}{LATEST_UPDATES_PATH}"
        logger.debug(f"Fetching {len(requested)} price updates from Hermes")

        try:
            if self._client is not None:
                response = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Hermes returned {e.response.status_code}")
            raise OracleUnavailable(
                f"Price oracle returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Hermes request failed: {type(e).__name__}: {e}")
            raise OracleUnavailable(f"Price oracle unreachable: {e}") from e
        except ValueError as e:
            raise OracleUnavailable("Price oracle returned invalid JSON") from e

        return self._parse_response(payload, requested)

    @staticmethod
    def _parse_response(payload: dict, requested: list[str]) -> PriceUpdate:
        """Validate and parse a Hermes latest-updates response."""
        if not isinstance(payload, dict):
            raise OracleUnavailable("Failed to fetch price update data")

        binary = payload.get("binary") or {}
        raw_update_data = binary.get("data") if isinstance(binary, dict) else None
        if not raw_update_data or not isinstance(raw_update_data, list):
            raise OracleUnavailable("Failed to fetch price update data")

        encoding = binary.get("encoding", "base64")
        if encoding != "base64":
            raise OracleUnavailable(f"Unexpected price update encoding: {encoding}")

        for blob in raw_update_data:
            if not isinstance(blob, str):
                raise OracleUnavailable("Malformed price update data from oracle")
            try:
                to_onchain_bytes(blob)
            except EncodingFailure as e:
                raise OracleUnavailable(f"Malformed price update data from oracle: {e.message}") from e

        attestations = []
        for entry in payload.get("parsed") or []:
            try:
                price = entry["price"]
                attestations.append(
                    PriceAttestation(
                        feed_id=normalize_feed_id(entry["id"]),
                        mantissa=int(price["price"]),
                        exponent=int(price["expo"]),
                        publish_time=int(price.get("publish_time", 0)),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise OracleUnavailable(f"Malformed price entry from oracle: {e}") from e

        received = {a.feed_id for a in attestations}
        missing = [f for f in requested if f not in received]
        if missing:
            raise OracleUnavailable(f"Oracle did not return prices for: {', '.join(missing)}")

        return PriceUpdate(
            attestations=attestations,
            raw_update_data=list(raw_update_data),
            fetched_feed_ids=requested,
        )
