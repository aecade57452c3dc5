"""Web boundary layer for non-custodial transaction preparation.

SECURITY PRINCIPLES:
1. Nothing in this layer holds private keys, signs or broadcasts.
2. Chain access is limited to view calls (basketfx.chain).
3. Every write operation is returned as an unsigned {to, value, data}
   descriptor for the client's wallet to sign.
"""

__all__ = [
    "contracts",
    "services",
    "controllers",
]
