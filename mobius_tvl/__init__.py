"""
mobius_tvl: total value locked across a fixed set of stable-swap pools.
"""

__version__ = "0.1.0"
