"""
Base classes for output storage.
"""

from abc import ABC, abstractmethod
from typing import Any
import logging

from ...errors import TVLError

logger = logging.getLogger(__name__)


class StorageError(TVLError):
    """Base exception for storage-related errors."""
    pass


class DataError(StorageError):
    """Raised when data operations fail."""
    pass


class StorageBase(ABC):
    """
    Abstract base class for output writers.
    """

    @abstractmethod
    def save(self, filename: str, data: Any) -> bool:
        """Persist data under filename, replacing any previous content."""
        pass

    @abstractmethod
    def load(self, filename: str) -> Any:
        """Read back what save() wrote, or None if nothing was written."""
        pass
