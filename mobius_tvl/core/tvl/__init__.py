"""
TVL computation: price resolution and aggregation.
"""

from .aggregator import (
    PoolValuation,
    TVLAggregator,
    TVLReport,
    derive_price,
    format_usd,
    resolve_prices,
    value_pool,
)

__all__ = [
    "PoolValuation",
    "TVLAggregator",
    "TVLReport",
    "derive_price",
    "format_usd",
    "resolve_prices",
    "value_pool",
]
