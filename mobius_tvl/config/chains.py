"""
Chain configuration for the single network the pools live on (Celo mainnet).
"""

from dataclasses import dataclass

from .base import BaseConfig, ConfigError


@dataclass
class ChainConfig(BaseConfig):
    """Celo RPC endpoint, Multicall2 deployment and batching settings."""

    CHAIN_NAME: str = "celo"
    CHAIN_ID: int = 42220

    RPC_URL: str = BaseConfig.get_env("CELO_RPC_URL", "https://forno.celo.org")
    RPC_TIMEOUT: float = BaseConfig.get_env_float("RPC_TIMEOUT", 30.0)

    # Multicall2 deployment on Celo mainnet
    MULTICALL_ADDRESS: str = BaseConfig.get_env(
        "MULTICALL_ADDRESS", "0x75f59534dd892c1f8a7b172d639fa854d529ada3"
    )

    # Calls per aggregate(); stays under the node's eth_call gas cap
    MULTICALL_CHUNK_SIZE: int = BaseConfig.get_env_int("MULTICALL_CHUNK_SIZE", 100)

    def _validate_config(self):
        super()._validate_config()
        if self.MULTICALL_CHUNK_SIZE <= 0:
            raise ConfigError(
                f"MULTICALL_CHUNK_SIZE must be positive, got: {self.MULTICALL_CHUNK_SIZE}"
            )
        if not self.RPC_URL.startswith(("http://", "https://")):
            raise ConfigError(f"CELO_RPC_URL must be an http(s) URL, got: {self.RPC_URL}")
