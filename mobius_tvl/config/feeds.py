"""
Off-chain data sources: the pool registry and the USD price feed.
"""

from dataclasses import dataclass

from .base import BaseConfig, ConfigError


@dataclass
class FeedConfig(BaseConfig):
    """HTTP endpoints for pool metadata and spot prices."""

    POOL_REGISTRY_URL: str = BaseConfig.get_env(
        "POOL_REGISTRY_URL",
        "https://raw.githubusercontent.com/mobiusAMM/mobius-pool-registry/master/data/pools.json",
    )
    COINGECKO_API_URL: str = BaseConfig.get_env(
        "COINGECKO_API_URL", "https://api.coingecko.com/api/v3"
    )
    PRICE_CURRENCY: str = BaseConfig.get_env("PRICE_CURRENCY", "usd")
    HTTP_TIMEOUT: float = BaseConfig.get_env_float("HTTP_TIMEOUT", 30.0)

    OUTPUT_FILE: str = BaseConfig.get_env("TVL_OUTPUT_FILE", "pools.json")
    POOLS_FILE: str = BaseConfig.get_env("POOLS_FILE", "")

    def _validate_config(self):
        super()._validate_config()
        for name in ("POOL_REGISTRY_URL", "COINGECKO_API_URL"):
            url = getattr(self, name)
            if not url.startswith(("http://", "https://")):
                raise ConfigError(f"{name} must be an http(s) URL, got: {url}")
        if self.HTTP_TIMEOUT <= 0:
            raise ConfigError(f"HTTP_TIMEOUT must be positive, got: {self.HTTP_TIMEOUT}")
