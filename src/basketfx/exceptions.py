"""Error taxonomy for transaction preparation.

Every error carries the HTTP status it maps to. The API layer renders all of
them as {"success": false, "error": message}.
"""


class BasketFxError(Exception):
    """Base exception for all pipeline failures."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(BasketFxError):
    """Missing, malformed or contradictory request fields."""

    status_code = 400


class ConfigurationError(BasketFxError):
    """Server is missing required configuration (contract address etc.)."""
    pass


class OracleUnavailable(BasketFxError):
    """Price oracle network unreachable or returned malformed data."""
    pass


class FeeQueryFailed(BasketFxError):
    """Oracle update fee view call reverted or the RPC endpoint failed."""
    pass


class DataUnavailable(BasketFxError):
    """A price needed for a calculation is zero, negative or missing."""
    pass


class PriceUnavailable(DataUnavailable):
    """An on-chain normalized price is zero or missing."""
    pass


class EncodingFailure(BasketFxError):
    """Call data could not be encoded against the contract interface."""
    pass


class ChainCallReverted(BasketFxError):
    """A contract call was rejected by the chain."""
    pass
