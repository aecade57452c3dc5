"""Tests for the oracle package: codec, normalizer and Hermes client."""

import base64
import json
from decimal import Decimal

import httpx
import pytest

from basketfx.exceptions import DataUnavailable, EncodingFailure, OracleUnavailable, PriceUnavailable
from basketfx.oracle.codec import (
    encode_updates,
    from_onchain_bytes,
    to_onchain_bytes,
)
from basketfx.oracle.hermes import HermesClient, PriceAttestation, normalize_feed_id
from basketfx.oracle.normalizer import (
    cross_rate,
    fixed_point_rate,
    invert,
    normalize,
    to_fixed_point,
)

from conftest import EUR_FEED, FLOW_FEED, UPDATE_B64, UPDATE_BYTES, UPDATE_HEX


class TestCodec:
    """Tests for base64 -> on-chain hex transcoding."""

    def test_to_onchain_bytes(self):
        """Test base64 update converts to 0x hex of the same bytes."""
        assert to_onchain_bytes(UPDATE_B64) == UPDATE_HEX
        assert to_onchain_bytes("AQID") == "0x010203"

    def test_round_trip(self):
        """Test hex -> bytes -> base64 -> hex is lossless."""
        hex_update = to_onchain_bytes(UPDATE_B64)
        again = to_onchain_bytes(base64.b64encode(from_onchain_bytes(hex_update)).decode())

        assert again == hex_update
        assert from_onchain_bytes(hex_update) == UPDATE_BYTES

    def test_preserves_every_byte_value(self):
        """Test all 256 byte values survive transcoding."""
        raw = bytes(range(256))
        assert from_onchain_bytes(to_onchain_bytes(base64.b64encode(raw).decode())) == raw

    def test_invalid_base64_rejected(self):
        """Test non-base64 input raises EncodingFailure."""
        with pytest.raises(EncodingFailure):
            to_onchain_bytes("not base64!!")

    def test_empty_update_rejected(self):
        """Test empty payload raises EncodingFailure."""
        with pytest.raises(EncodingFailure):
            to_onchain_bytes("")

    def test_encode_updates_preserves_order(self):
        """Test batch conversion keeps order."""
        assert encode_updates(["AQID", "BAUG"]) == ["0x010203", "0x040506"]


class TestNormalizer:
    """Tests for mantissa/exponent normalization and cross rates."""

    @pytest.mark.parametrize("exponent", list(range(-12, 1)))
    @pytest.mark.parametrize("mantissa", [1, 7, 34780000, 108340000, 123456789012345678])
    def test_normalize_is_exact(self, mantissa, exponent):
        """Test normalize equals mantissa * 10**exponent exactly."""
        attestation = PriceAttestation(
            feed_id=EUR_FEED, mantissa=mantissa, exponent=exponent, publish_time=0
        )
        value = normalize(attestation)

        assert value == Decimal(mantissa) * Decimal(10) ** exponent
        assert to_fixed_point(value) == mantissa * 10 ** (18 + exponent)

    def test_normalize_rejects_non_positive(self):
        """Test zero or negative prices raise DataUnavailable."""
        for mantissa in (0, -5):
            attestation = PriceAttestation(
                feed_id=FLOW_FEED, mantissa=mantissa, exponent=-8, publish_time=0
            )
            with pytest.raises(DataUnavailable):
                normalize(attestation)

    @pytest.mark.parametrize(
        "price_a,price_b",
        [
            ("0.3478", "1"),
            ("1.0834", "1.2712"),
            ("0.0067", "83.12"),
            ("61234.56789", "0.00000001"),
        ],
    )
    def test_cross_rate_inverse(self, price_a, price_b):
        """Test rate(A->B) * rate(B->A) is 1 within tolerance."""
        a, b = Decimal(price_a), Decimal(price_b)
        product = cross_rate(a, b) * cross_rate(b, a)

        assert abs(product - 1) < Decimal("1e-25")

    def test_cross_rate_missing_or_zero(self):
        """Test missing, zero and negative prices never produce a rate."""
        with pytest.raises(DataUnavailable):
            cross_rate(None, Decimal("1"))
        with pytest.raises(DataUnavailable):
            cross_rate(Decimal("1"), Decimal("0"))
        with pytest.raises(DataUnavailable):
            cross_rate(Decimal("-1"), Decimal("2"))

    def test_invert(self):
        """Test reciprocal of a USD-quoted pair."""
        assert invert(Decimal("4")) == Decimal("0.25")

    def test_fixed_point_rate(self):
        """Test integer cross rate with 18-decimal scale."""
        assert fixed_point_rate(2 * 10**18, 4 * 10**18) == 5 * 10**17
        assert fixed_point_rate(10**18, 3 * 10**18) == 333333333333333333

    def test_fixed_point_rate_zero_price(self):
        """Test zero on-chain price raises PriceUnavailable."""
        with pytest.raises(PriceUnavailable):
            fixed_point_rate(0, 10**18)


def hermes_payload(feed_ids, binary=None, encoding="base64"):
    """Build a Hermes latest-updates response body."""
    return {
        "binary": {"encoding": encoding, "data": binary if binary is not None else [UPDATE_B64]},
        "parsed": [
            {
                "id": feed_id[2:],
                "price": {"price": "34780000", "conf": "12000", "expo": -8, "publish_time": 1700000000},
                "ema_price": {"price": "34770000", "conf": "11000", "expo": -8, "publish_time": 1700000000},
            }
            for feed_id in feed_ids
        ],
    }


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHermesClient:
    """Tests for the Hermes gateway."""

    @pytest.mark.asyncio
    async def test_fetch_latest_attestations(self):
        """Test request shape and parsed result."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["ids"] = request.url.params.get_list("ids[]")
            seen["encoding"] = request.url.params.get("encoding")
            # Hermes does not promise request order
            return httpx.Response(200, json=hermes_payload([EUR_FEED, FLOW_FEED]))

        async with mock_client(handler) as http:
            client = HermesClient("https://hermes.test", client=http)
            update = await client.fetch_latest_attestations([FLOW_FEED, EUR_FEED, FLOW_FEED])

        assert seen["path"] == "/v2/updates/price/latest"
        assert seen["ids"] == [FLOW_FEED[2:], EUR_FEED[2:]]
        assert seen["encoding"] == "base64"
        assert update.raw_update_data == [UPDATE_B64]

        by_id = update.by_feed_id()
        assert set(by_id) == {FLOW_FEED, EUR_FEED}
        assert by_id[FLOW_FEED].mantissa == 34780000
        assert by_id[FLOW_FEED].exponent == -8

    @pytest.mark.asyncio
    async def test_missing_binary_data(self):
        """Test response without binary payload is OracleUnavailable."""

        def handler(request):
            return httpx.Response(200, json=hermes_payload([FLOW_FEED], binary=[]))

        async with mock_client(handler) as http:
            client = HermesClient("https://hermes.test", client=http)
            with pytest.raises(OracleUnavailable):
                await client.fetch_latest_attestations([FLOW_FEED])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("blob", ["not base64!!", "", 12345])
    async def test_malformed_update_blob(self, blob):
        """Test an update blob that is not base64 is OracleUnavailable."""

        def handler(request):
            return httpx.Response(200, json=hermes_payload([FLOW_FEED], binary=[UPDATE_B64, blob]))

        async with mock_client(handler) as http:
            client = HermesClient("https://hermes.test", client=http)
            with pytest.raises(OracleUnavailable):
                await client.fetch_latest_attestations([FLOW_FEED])

    @pytest.mark.asyncio
    async def test_missing_requested_feed(self):
        """Test a feed absent from the response is OracleUnavailable."""

        def handler(request):
            return httpx.Response(200, json=hermes_payload([FLOW_FEED]))

        async with mock_client(handler) as http:
            client = HermesClient("https://hermes.test", client=http)
            with pytest.raises(OracleUnavailable):
                await client.fetch_latest_attestations([FLOW_FEED, EUR_FEED])

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Test non-2xx status is OracleUnavailable."""

        def handler(request):
            return httpx.Response(503, text="unavailable")

        async with mock_client(handler) as http:
            client = HermesClient("https://hermes.test", client=http)
            with pytest.raises(OracleUnavailable):
                await client.fetch_latest_attestations([FLOW_FEED])

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Test transport failure is OracleUnavailable."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_client(handler) as http:
            client = HermesClient("https://hermes.test", client=http)
            with pytest.raises(OracleUnavailable):
                await client.fetch_latest_attestations([FLOW_FEED])

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """Test non-JSON body is OracleUnavailable."""

        def handler(request):
            return httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"})

        async with mock_client(handler) as http:
            client = HermesClient("https://hermes.test", client=http)
            with pytest.raises(OracleUnavailable):
                await client.fetch_latest_attestations([FLOW_FEED])

    @pytest.mark.asyncio
    async def test_malformed_price_entry(self):
        """Test parsed entry without price is OracleUnavailable."""
        payload = hermes_payload([FLOW_FEED])
        del payload["parsed"][0]["price"]

        def handler(request):
            return httpx.Response(200, content=json.dumps(payload).encode())

        async with mock_client(handler) as http:
            client = HermesClient("https://hermes.test", client=http)
            with pytest.raises(OracleUnavailable):
                await client.fetch_latest_attestations([FLOW_FEED])

    @pytest.mark.asyncio
    async def test_no_feeds_requested(self):
        """Test empty feed list fails without a network call."""
        client = HermesClient("https://hermes.test")
        with pytest.raises(OracleUnavailable):
            await client.fetch_latest_attestations([])

    def test_normalize_feed_id(self):
        """Test feed IDs are lowercased and 0x-prefixed."""
        assert normalize_feed_id("ABCD") == "0xabcd"
        assert normalize_feed_id("0xAbCd") == "0xabcd"
