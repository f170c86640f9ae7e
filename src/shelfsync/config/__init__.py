"""Application configuration helpers."""

from __future__ import annotations

from .catalog_sink import CatalogSinkConfig, get_catalog_sink_config
from .env import env_float, env_int, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .shopify import DEFAULT_SHOPIFY_API_VERSION, ShopifyConfig, get_shopify_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_storage_config,
)
from .sync import SyncConfig, get_sync_config

__all__ = [
    "DEFAULT_SHOPIFY_API_VERSION",
    "NO_RETRY",
    "CacheConfig",
    "CatalogSinkConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "ShopifyConfig",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_catalog_sink_config",
    "get_database_config",
    "get_shopify_config",
    "get_storage_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
