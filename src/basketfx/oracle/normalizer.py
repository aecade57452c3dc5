"""Price normalization and cross-rate math.

Oracle prices arrive as (mantissa, exponent) integer pairs. They are turned
into Decimal values for display and into scaled integers for anything that
ends up on-chain. Binary floats never touch these values.
"""

from decimal import Decimal, ROUND_FLOOR, localcontext
from typing import Optional

from basketfx.exceptions import DataUnavailable, PriceUnavailable
from basketfx.oracle.hermes import PriceAttestation

# 18 fractional digits plus headroom for large integer parts
PRECISION = 60

FIXED_POINT_DECIMALS = 18
FIXED_POINT_SCALE = 10**FIXED_POINT_DECIMALS


def normalize(attestation: PriceAttestation) -> Decimal:
    """Convert an attestation's mantissa/exponent pair into a Decimal.

    The result is exact: Decimal stores the mantissa digits unchanged and
    only shifts the exponent.
    """
    if attestation.mantissa <= 0:
        raise DataUnavailable(
            f"Non-positive price for feed {attestation.feed_id}: {attestation.mantissa}"
        )
    return Decimal(attestation.mantissa).scaleb(attestation.exponent)


def cross_rate(price_a: Optional[Decimal], price_b: Optional[Decimal]) -> Decimal:
    """Price of one unit of A expressed in B, given both prices in a common currency.

    Args:
        price_a: Price of A in the reference currency (USD)
        price_b: Price of B in the reference currency (USD)

    Returns:
        price_a / price_b

    Raises:
        DataUnavailable: If either price is missing, zero or negative
    """
    if price_a is None or price_b is None:
        raise DataUnavailable("Price not available for rate calculation")
    if price_a <= 0 or price_b <= 0:
        raise DataUnavailable(f"Invalid prices for rate calculation: {price_a}, {price_b}")

    with localcontext() as ctx:
        ctx.prec = PRECISION
        return price_a / price_b


def invert(price: Optional[Decimal]) -> Decimal:
    """Reciprocal of a price, e.g. USD/INR -> INR/USD."""
    return cross_rate(Decimal(1), price)


def to_fixed_point(value: Decimal, decimals: int = FIXED_POINT_DECIMALS) -> int:
    """Scale a Decimal into an integer with the given number of decimals (floor)."""
    with localcontext() as ctx:
        ctx.prec = PRECISION
        scaled = value.scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def fixed_point_rate(price_a: int, price_b: int, scale: int = FIXED_POINT_SCALE) -> int:
    """Integer cross rate for on-chain normalized prices.

    Both prices share the contract's normalization, so the ratio is
    scale-free and only needs to be multiplied by ``scale`` before dividing.
    """
    if price_a <= 0 or price_b <= 0:
        raise PriceUnavailable("Could not fetch valid prices for pair")
    return price_a * scale // price_b
