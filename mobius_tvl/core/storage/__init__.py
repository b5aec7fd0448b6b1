"""
Output storage for the TVL figure.
"""

from .base import DataError, StorageBase, StorageError
from .json_storage import JsonStorage

__all__ = [
    "StorageBase",
    "StorageError",
    "DataError",
    "JsonStorage",
]
