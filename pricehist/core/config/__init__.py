"""Configuration management module."""

from pricehist.core.config.settings import (
    ConfigManager,
    LoggingConfig,
    PriceHistConfig,
    ProviderConfig,
    RetrievalConfig,
    StorageConfig,
    get_default_config,
    load_config_from_env,
)
from pricehist.core.config.validation import validate_config

__all__ = [
    "ConfigManager",
    "PriceHistConfig",
    "RetrievalConfig",
    "ProviderConfig",
    "StorageConfig",
    "LoggingConfig",
    "get_default_config",
    "load_config_from_env",
    "validate_config",
]
