"""Tests for amount arithmetic and fee estimation."""

from unittest.mock import AsyncMock

import pytest

from basketfx.amounts import (
    apply_slippage,
    estimate_counter_amount,
    format_units,
    parse_positive_units,
    parse_units,
)
from basketfx.chain.fees import FeeQuote, apply_fee_margin, estimate_fee
from basketfx.exceptions import FeeQueryFailed, InvalidInput, PriceUnavailable

from conftest import UPDATE_HEX


class TestParseUnits:
    """Tests for decimal string -> smallest unit parsing."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            ("10", 10 * 10**18),
            ("0.5", 5 * 10**17),
            (".5", 5 * 10**17),
            ("1.", 10**18),
            ("0.000000000000000001", 1),
            ("123456789.123456789", 123456789123456789 * 10**9),
            ("1.500000000000000000000", 15 * 10**17),
        ],
    )
    def test_parse_units(self, amount, expected):
        """Test exact parsing without float conversion."""
        assert parse_units(amount) == expected

    def test_parse_units_custom_decimals(self):
        """Test parsing with 6 decimals."""
        assert parse_units("1.25", 6) == 1_250_000

    @pytest.mark.parametrize("amount", ["", "abc", "1.2.3", "1e18", " . ", "--1"])
    def test_parse_units_invalid(self, amount):
        """Test malformed strings raise InvalidInput."""
        with pytest.raises(InvalidInput):
            parse_units(amount)

    def test_parse_units_too_many_decimals(self):
        """Test more fractional digits than decimals is rejected."""
        with pytest.raises(InvalidInput):
            parse_units("0.0000000000000000001")

    @pytest.mark.parametrize("amount", [None, "", "0", "0.0", "-1"])
    def test_parse_positive_units_rejects(self, amount):
        """Test missing, zero and negative amounts are InvalidInput."""
        with pytest.raises(InvalidInput):
            parse_positive_units(amount, "amountA")

    def test_format_units(self):
        """Test formatting matches ethers formatUnits output."""
        assert format_units(10**18) == "1.0"
        assert format_units(15 * 10**17) == "1.5"
        assert format_units(0) == "0.0"
        assert format_units(1) == "0.000000000000000001"
        assert format_units(-25 * 10**16) == "-0.25"

    @pytest.mark.parametrize("amount", ["1" * 80, "9" * 5000, "-" + "9" * 5000, str(2**256)])
    def test_parse_units_too_large(self, amount):
        """Test amounts beyond uint256 are InvalidInput, whatever their length."""
        with pytest.raises(InvalidInput, match="too large"):
            parse_units(amount, 0)

    def test_parse_units_uint256_bounds(self):
        """Test the largest uint256 parses and one wei more does not."""
        max_tokens, max_wei = divmod(2**256 - 1, 10**18)
        assert parse_units(f"{max_tokens}.{max_wei:018d}") == 2**256 - 1
        with pytest.raises(InvalidInput):
            parse_units(f"{max_tokens + 1}")

    def test_parse_units_leading_zeros(self):
        """Test leading zeros do not count towards the size limit."""
        assert parse_units("0" * 200 + "1") == 10**18


class TestSlippage:
    """Tests for slippage adjustment."""

    def test_two_percent_on_100_tokens(self):
        """Test 100 tokens at 18 decimals become 102 tokens."""
        assert apply_slippage(100 * 10**18, 2) == 102 * 10**18

    def test_floor_rounding(self):
        """Test integer floor on amounts not divisible by 100."""
        assert apply_slippage(99, 2) == 100  # 100.98
        assert apply_slippage(1, 2) == 1

    def test_never_below_requested(self):
        """Test slippage never reduces the authorized amount."""
        for amount in (0, 1, 7, 10**18 + 3, 2**200):
            assert apply_slippage(amount, 2) >= amount

    def test_result_beyond_uint256(self):
        """Test slippage pushing an amount past uint256 is InvalidInput."""
        with pytest.raises(InvalidInput):
            apply_slippage(2**256 - 1, 2)

    def test_negative_rejected(self):
        """Test negative inputs raise InvalidInput."""
        with pytest.raises(InvalidInput):
            apply_slippage(-1, 2)
        with pytest.raises(InvalidInput):
            apply_slippage(1, -2)


class TestCounterAmount:
    """Tests for counter amount estimation."""

    def test_half_rate(self):
        """Test amount at a 0.5 fixed-point rate."""
        assert estimate_counter_amount(10 * 10**18, 5 * 10**17) == 5 * 10**18

    def test_floor(self):
        """Test result is floored to whole wei."""
        assert estimate_counter_amount(10**18, 333333333333333333) == 333333333333333333

    def test_rate_floored_to_zero(self):
        """Test a rate below one fixed-point unit gives zero, not an error."""
        assert estimate_counter_amount(10**18, 0) == 0

    def test_negative_rate(self):
        """Test negative rate raises PriceUnavailable."""
        with pytest.raises(PriceUnavailable):
            estimate_counter_amount(10**18, -1)


class TestFees:
    """Tests for fee margin and estimation."""

    def test_apply_fee_margin(self):
        """Test 10% margin with integer math."""
        assert apply_fee_margin(1000) == 1100
        assert apply_fee_margin(5000) == 5500
        assert apply_fee_margin(0) == 0
        assert apply_fee_margin(1) == 1

    def test_apply_fee_margin_beyond_float_range(self):
        """Test fees above 2**53 stay exact."""
        base = 2**60 + 1
        assert apply_fee_margin(base) == base * 110 // 100

    @pytest.mark.asyncio
    async def test_estimate_fee(self):
        """Test fee quote from the view call."""
        view_call = AsyncMock(return_value=1000)

        quote = await estimate_fee([UPDATE_HEX], view_call)

        assert quote == FeeQuote(base_fee=1000, adjusted_fee=1100)
        view_call.assert_awaited_once_with([UPDATE_HEX])

    @pytest.mark.asyncio
    async def test_estimate_fee_custom_margin(self):
        """Test configurable margin."""
        quote = await estimate_fee([UPDATE_HEX], AsyncMock(return_value=1000), margin_pct=25)
        assert quote.adjusted_fee == 1250

    @pytest.mark.asyncio
    async def test_estimate_fee_view_call_fails(self):
        """Test reverted or unreachable view call raises FeeQueryFailed."""
        view_call = AsyncMock(side_effect=ConnectionError("rpc down"))

        with pytest.raises(FeeQueryFailed):
            await estimate_fee([UPDATE_HEX], view_call)

    @pytest.mark.asyncio
    async def test_estimate_fee_invalid_result(self):
        """Test negative fee raises FeeQueryFailed."""
        with pytest.raises(FeeQueryFailed):
            await estimate_fee([UPDATE_HEX], AsyncMock(return_value=-1))

    @pytest.mark.asyncio
    async def test_estimate_fee_no_updates(self):
        """Test empty update list fails without calling the chain."""
        view_call = AsyncMock(return_value=1)

        with pytest.raises(FeeQueryFailed):
            await estimate_fee([], view_call)

        view_call.assert_not_awaited()
