"""
Exception hierarchy shared across the TVL pipeline.

Package-specific errors (batch calls, decoding, remote feeds, storage) live
next to the code that raises them and all derive from TVLError, so callers
that only care about "the run failed" can catch a single type.
"""


class TVLError(Exception):
    """Base exception for the TVL pipeline."""
    pass


class InvalidAddress(TVLError):
    """Raised when a malformed contract address reaches a contract-binding step."""

    def __init__(self, address, reason: str = ""):
        self.address = address
        self.reason = reason
        message = f"Invalid address '{address}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnresolvablePrice(TVLError):
    """Raised when no USD price can be derived for a pool. Never fatal."""

    def __init__(self, pool_name: str, reason: str):
        self.pool_name = pool_name
        self.reason = reason
        super().__init__(f"Cannot resolve USD price for pool {pool_name}: {reason}")
