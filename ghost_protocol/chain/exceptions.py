class ChainError(Exception):
    """Raised when a contract call, transaction or RPC request fails.

    The message keeps the provider's wording so callers can classify it
    (user rejection, insufficient funds, revert reason).
    """


class ChainConfigurationError(ChainError):
    """Raised when the chain client cannot be built from settings."""
