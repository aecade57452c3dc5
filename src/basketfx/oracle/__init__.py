"""Price oracle access.

- hermes: fetch signed price updates from the Pyth Hermes network
- codec: base64 <-> on-chain hex transcoding of update blobs
- normalizer: mantissa/exponent prices to Decimal and cross rates
"""

from basketfx.oracle.codec import encode_updates, from_onchain_bytes, to_onchain_bytes
from basketfx.oracle.hermes import HermesClient, PriceAttestation, PriceUpdate
from basketfx.oracle.normalizer import cross_rate, fixed_point_rate, normalize, to_fixed_point

__all__ = [
    "HermesClient",
    "PriceAttestation",
    "PriceUpdate",
    "encode_updates",
    "from_onchain_bytes",
    "to_onchain_bytes",
    "cross_rate",
    "fixed_point_rate",
    "normalize",
    "to_fixed_point",
]
