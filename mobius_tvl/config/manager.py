"""
Configuration manager for mobius_tvl.

Combines the configuration classes into a single interface and caches one
instance per process.
"""

import logging
from typing import List, Optional

from ..core.models import Pool
from ..errors import InvalidAddress
from ..utils.address import require_address
from .base import BaseConfig, ConfigError
from .chains import ChainConfig
from .feeds import FeedConfig
from .pools import load_pools

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Centralized configuration manager that combines all configuration classes.
    """

    def __init__(self):
        try:
            self._base_config = BaseConfig()
            self._chain_config = ChainConfig()
            self._feed_config = FeedConfig()
        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}") from e

    @property
    def base(self) -> BaseConfig:
        """Get base configuration."""
        return self._base_config

    @property
    def chain(self) -> ChainConfig:
        """Get chain configuration."""
        return self._chain_config

    @property
    def feeds(self) -> FeedConfig:
        """Get registry and price feed configuration."""
        return self._feed_config

    def get_pools(self, pools_file: Optional[str] = None) -> List[Pool]:
        """
        Load the static pool list.

        Args:
            pools_file: JSON file overriding POOLS_FILE and the built-in list
        """
        return load_pools(pools_file or self.feeds.POOLS_FILE or None)

    def validate_configuration(self) -> bool:
        """
        Validate settings that would otherwise only fail once the run starts.

        Raises:
            ConfigError: If the multicall address is malformed
        """
        try:
            require_address(self.chain.MULTICALL_ADDRESS)
        except InvalidAddress as e:
            raise ConfigError(f"MULTICALL_ADDRESS is invalid: {e}") from e

        logger.debug("Configuration validation successful")
        return True


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the validated global configuration manager, creating it on first use."""
    global _config_manager

    if _config_manager is None:
        manager = ConfigManager()
        manager.validate_configuration()
        _config_manager = manager

    return _config_manager
