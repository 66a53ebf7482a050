"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    directory_resilience,
    notification_resilience,
)
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_http_cache_path,
    get_storage_config,
)
from .watcher import (
    NotificationFlags,
    PlatformConfig,
    TelegramSettings,
    WatcherConfig,
    load_watcher_config,
)

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "NotificationFlags",
    "PlatformConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "TelegramSettings",
    "WatcherConfig",
    "configure_logging",
    "directory_resilience",
    "get_database_config",
    "get_http_cache_path",
    "get_storage_config",
    "load_watcher_config",
    "notification_resilience",
    "optional_env_var",
    "require_env_vars",
]
