"""
Base classes for blockchain batch calling.

Batchers split an arbitrary number of read calls into fixed-size chunks so
each aggregated eth_call stays under the node's gas and payload limits.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Sequence, TypeVar, Union

from web3 import Web3

from .errors import BatchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BatchResult:
    """Result from a batch operation."""

    return_data: List[bytes]
    block_numbers: List[int] = field(default_factory=list)
    chunk_count: int = 0

    @property
    def block_range(self):
        """Lowest and highest block any chunk was served from."""
        if not self.block_numbers:
            return None
        return min(self.block_numbers), max(self.block_numbers)


@dataclass
class BatchConfig:
    """Configuration for batch operations."""

    batch_size: int = 100

    def __post_init__(self):
        if self.batch_size <= 0:
            raise BatchError(f"batch_size must be positive, got {self.batch_size}")


class BaseBatcher(ABC):
    """
    Abstract base class for blockchain batch operations.

    Provides chunking shared by all batchers; subclasses define how one
    chunk is executed.
    """

    def __init__(self, web3: Web3, config: BatchConfig = None):
        self.web3 = web3
        self.config = config or BatchConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    async def batch_call(
        self, items: Sequence, block_identifier: Union[int, str] = "latest"
    ) -> BatchResult:
        """
        Execute the batch for the given items.

        Args:
            items: Requests to batch
            block_identifier: Block to call at

        Returns:
            BatchResult with one entry per item, in input order
        """
        pass

    def _chunk(self, items: Sequence[T]) -> List[List[T]]:
        """Split items into chunks based on batch_size."""
        chunk_size = self.config.batch_size
        return [
            list(items[i : i + chunk_size]) for i in range(0, len(items), chunk_size)
        ]
