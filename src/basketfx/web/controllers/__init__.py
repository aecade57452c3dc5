"""HTTP controllers for web API endpoints.

SECURITY: These controllers MUST NOT:
- Access private keys
- Sign or broadcast transactions

All operations are read-only or prepare data for client-side signing.
"""

from basketfx.web.controllers.prices import router as prices_router
from basketfx.web.controllers.transactions import router as transactions_router

__all__ = [
    "prices_router",
    "transactions_router",
]
