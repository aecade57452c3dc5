"""Token amount arithmetic.

All on-chain-bound amounts are Python ints in the token's smallest unit.
Conversions from user input go through string parsing, never through float.
"""

import re
from typing import Optional

from basketfx.exceptions import InvalidInput, PriceUnavailable

DEFAULT_DECIMALS = 18
FIXED_POINT_SCALE = 10**18
MAX_UINT256 = 2**256 - 1
MAX_UINT256_DIGITS = len(str(MAX_UINT256))

_AMOUNT_RE = re.compile(r"^(-)?(\d*)(?:\.(\d*))?$")


def parse_units(amount: str, decimals: int = DEFAULT_DECIMALS) -> int:
    """Parse a decimal string into smallest units.

    Args:
        amount: Decimal string such as "10", "0.25" or ".5"
        decimals: Token decimals

    Returns:
        Integer amount scaled by 10**decimals

    Raises:
        InvalidInput: Non-numeric input, more fractional digits than decimals,
            or a magnitude that does not fit in uint256
    """
    if not isinstance(amount, str):
        raise InvalidInput(f"Amount must be a string, got {type(amount).__name__}")

    match = _AMOUNT_RE.match(amount.strip())
    if not match:
        raise InvalidInput(f"Invalid amount: {amount!r}")

    sign, whole, fraction = match.group(1), match.group(2), match.group(3) or ""
    if not whole and not fraction:
        raise InvalidInput(f"Invalid amount: {amount!r}")

    whole = whole.lstrip("0")
    if len(whole) > MAX_UINT256_DIGITS:
        raise InvalidInput("Amount too large")

    fraction = fraction.rstrip("0")
    if len(fraction) > decimals:
        raise InvalidInput(f"Too many decimal places in {amount!r} (max {decimals})")

    value = int(whole or "0") * 10**decimals + int(fraction.ljust(decimals, "0") or "0")
    if value > MAX_UINT256:
        raise InvalidInput("Amount too large")
    return -value if sign else value


def parse_positive_units(
    amount: Optional[str],
    field_name: str = "amount",
    decimals: int = DEFAULT_DECIMALS,
) -> int:
    """Parse a required, strictly positive amount field."""
    if amount is None or (isinstance(amount, str) and not amount.strip()):
        raise InvalidInput(f"Missing required parameter: {field_name}")

    value = parse_units(amount, decimals)
    if value <= 0:
        raise InvalidInput(f"{field_name} must be greater than zero")
    return value


def format_units(value: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Format smallest units as a decimal string ("1.5", "2.0", "0.0")."""
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"


def apply_slippage(amount: int, slippage_pct: int = 2) -> int:
    """Increase an authorized amount by a slippage margin.

    floor(amount * (100 + slippage_pct) / 100). The result is never below
    the requested amount, so the contract call is not under-funded.
    """
    if amount < 0:
        raise InvalidInput("Amount must not be negative")
    if slippage_pct < 0:
        raise InvalidInput("Slippage must not be negative")
    adjusted = amount * (100 + slippage_pct) // 100
    if adjusted > MAX_UINT256:
        raise InvalidInput("Amount too large")
    return adjusted


def estimate_counter_amount(
    amount_a: int,
    rate_a_to_b: int,
    scale: int = FIXED_POINT_SCALE,
) -> int:
    """Amount of B matching amount_a of A at a fixed-point rate.

    Args:
        amount_a: Amount of A in smallest units
        rate_a_to_b: Units of B per unit of A, scaled by ``scale``
        scale: Fixed-point scale of the rate

    Returns:
        Amount of B in smallest units (floored, may be 0 for a tiny rate)
    """
    if rate_a_to_b < 0:
        raise PriceUnavailable("Could not fetch valid prices for pair")
    return amount_a * rate_a_to_b // scale
