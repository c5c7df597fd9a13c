"""Configuration module for finfeed."""

from finfeed.config.factory import (
    create_feed,
    create_fetcher,
    create_from_config,
    create_ownership_pipeline,
    create_run_logger,
)
from finfeed.config.loader import get_default_config_path, load_config
from finfeed.config.models import (
    ApiConfig,
    FeedConfig,
    FinfeedConfig,
    LoggingConfig,
    OwnershipConfig,
    SupabaseArticlesConfig,
)

__all__ = [
    "ApiConfig",
    "FeedConfig",
    "FinfeedConfig",
    "LoggingConfig",
    "OwnershipConfig",
    "SupabaseArticlesConfig",
    "create_feed",
    "create_fetcher",
    "create_from_config",
    "create_ownership_pipeline",
    "create_run_logger",
    "get_default_config_path",
    "load_config",
]
