"""
Off-chain data fetchers: pool registry metadata and USD spot prices.
"""

from .base import (
    FetchError,
    HttpJsonFetcher,
    PriceSourceUnavailable,
    RegistryAlignmentError,
    RegistryUnavailable,
)
from .pool_registry import FEE_BASE, PoolRegistryClient, parse_registry_entry
from .price_oracle import CoinGeckoPriceClient, PriceTable, collect_price_ids, get_price

__all__ = [
    'FetchError',
    'HttpJsonFetcher',
    'RegistryUnavailable',
    'RegistryAlignmentError',
    'PriceSourceUnavailable',
    'PoolRegistryClient',
    'parse_registry_entry',
    'FEE_BASE',
    'CoinGeckoPriceClient',
    'PriceTable',
    'collect_price_ids',
    'get_price',
]
