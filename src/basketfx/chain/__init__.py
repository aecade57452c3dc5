"""On-chain reads and fee estimation (view calls only)."""

from basketfx.chain.abi import APP_ABI, PYTH_ABI
from basketfx.chain.contracts import ChainReader
from basketfx.chain.fees import FeeQuote, apply_fee_margin, estimate_fee

__all__ = [
    "APP_ABI",
    "PYTH_ABI",
    "ChainReader",
    "FeeQuote",
    "apply_fee_margin",
    "estimate_fee",
]
