"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .geocoding import GeocodingConfig, get_geocoding_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .pure import PureConfig, get_pure_config
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "GeocodingConfig",
    "MissingConfigurationError",
    "PureConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "env_flag",
    "get_geocoding_config",
    "get_pure_config",
    "get_storage_config",
    "get_sync_config",
    "require_env_var",
    "require_env_vars",
]
