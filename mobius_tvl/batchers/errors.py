"""
Exception classes for batch calling and return-data decoding.
"""

from typing import Optional

from ..errors import TVLError


class BatchError(TVLError):
    """Base exception for batch operations."""
    pass


class BatchCallError(BatchError):
    """Raised when an aggregated on-chain read fails. Fails the whole batch."""

    def __init__(self, message: str, chunk_index: Optional[int] = None):
        self.chunk_index = chunk_index
        if chunk_index is not None:
            message = f"Chunk {chunk_index}: {message}"
        super().__init__(message)


class DecodeError(BatchError):
    """Raised when return data does not match the expected return shape."""

    def __init__(
        self,
        message: str,
        pool_index: Optional[int] = None,
        field: Optional[str] = None,
    ):
        self.pool_index = pool_index
        self.field = field
        if pool_index is not None or field is not None:
            message = f"{message} (pool_index={pool_index}, field={field})"
        super().__init__(message)
