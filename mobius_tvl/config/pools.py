"""
Static list of the stable-swap pools whose TVL is tracked.

The order of STABLE_POOLS is significant: the pool registry response is
aligned to it by index. Keep it in sync with the registry's data/pools.json.
A JSON file with the same shape can replace the built-in list (POOLS_FILE).
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.models import Pool
from ..errors import InvalidAddress
from .base import ConfigError

logger = logging.getLogger(__name__)

CUSD = {
    "address": "0x765de816845861e75a25fca122bb6898b8b1282a",
    "decimals": 18,
    "symbol": "cUSD",
    "coingecko_id": "celo-dollar",
}
USDC_OPTICS_V2 = {
    "address": "0xef4229c8c3250c675f21bcefa42f58efbff6002a",
    "decimals": 6,
    "symbol": "cUSDCxV2",
    "coingecko_id": "usd-coin",
}
USDC_WORMHOLE = {
    "address": "0x37f750b7cc259a2f741af45294f6a16572cf5cad",
    "decimals": 6,
    "symbol": "USDCet",
    "coingecko_id": "usd-coin",
}
MCUSD = {
    "address": "0x918146359264c492bd6934071c6bd31c854edbc3",
    "decimals": 18,
    "symbol": "mcUSD",
}

STABLE_POOLS: List[Dict[str, Any]] = [
    {
        "name": "cUSD/USDC (Optics V2)",
        "address": "0x9906589ea8fd27504974b7e8201df5bbde986b03",
        "lp_token": {
            "address": "0x39b6f09ef97db406ab78d869471adb2384c494e3",
            "decimals": 18,
            "symbol": "MobLP",
        },
        "tokens": [CUSD, USDC_OPTICS_V2],
    },
    {
        "name": "cUSD/USDCet (Wormhole)",
        "address": "0xc0ba93d4aaf90d39924402162ee4a213300d1d60",
        "lp_token": {
            "address": "0x7ed927e685d7196ff2e7bc48c5cb5e8af0e4a3a2",
            "decimals": 18,
            "symbol": "MobLP",
        },
        "tokens": [CUSD, USDC_WORMHOLE],
    },
    {
        "name": "cUSD/mcUSD (Moola)",
        "address": "0xf3f65dfe0c8c8f2986da0fec159abe6fd4e700b4",
        "lp_token": {
            "address": "0xd7bf6946b740930c60131044bd2f08787e1ddbd4",
            "decimals": 18,
            "symbol": "MobLP",
        },
        "tokens": [CUSD, MCUSD],
    },
]


def parse_pools(entries: List[Dict[str, Any]]) -> List[Pool]:
    """
    Build Pool objects from plain dictionaries.

    Raises:
        InvalidAddress: If any pool, LP or token address is malformed
        ConfigError: If an entry is missing fields or has the wrong shape
    """
    pools = []
    for i, entry in enumerate(entries):
        try:
            pools.append(Pool.from_dict(entry))
        except InvalidAddress:
            logger.error(f"Pool entry {i} ({entry.get('name', '?')}) has an invalid address")
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Malformed pool entry {i}: {e}") from e
    return pools


def load_pools(path: Optional[Union[str, Path]] = None) -> List[Pool]:
    """
    Load the static pool list.

    Args:
        path: Optional JSON file overriding the built-in list

    Returns:
        Pools in registry order
    """
    if not path:
        return parse_pools(STABLE_POOLS)

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            entries = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read pools file {path}: {e}") from e

    if not isinstance(entries, list):
        raise ConfigError(f"Pools file {path} must contain a JSON array")

    pools = parse_pools(entries)
    logger.info(f"Loaded {len(pools)} pools from {path}")
    return pools
