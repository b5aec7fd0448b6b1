"""
Configuration management for mobius_tvl.

Example:
    from mobius_tvl.config import get_config

    config = get_config()

    rpc_url = config.chain.RPC_URL
    chunk_size = config.chain.MULTICALL_CHUNK_SIZE
    pools = config.get_pools()
"""

from .base import BaseConfig, ConfigError, setup_logging
from .chains import ChainConfig
from .feeds import FeedConfig
from .manager import ConfigManager, get_config
from .pools import STABLE_POOLS, load_pools, parse_pools

__all__ = [
    "BaseConfig",
    "ConfigError",
    "setup_logging",
    "ChainConfig",
    "FeedConfig",
    "ConfigManager",
    "get_config",
    "STABLE_POOLS",
    "load_pools",
    "parse_pools",
]
