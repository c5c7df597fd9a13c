"""Factory functions to create components from configuration."""

from pathlib import Path

from finfeed.config.models import (
    FeedConfig,
    FinfeedConfig,
    OwnershipConfig,
    SupabaseArticlesConfig,
)
from finfeed.feed.controller import NewsFeed
from finfeed.feed.persistence import JsonFileStateStore, MemoryStateStore, StateStore
from finfeed.fetch.base import ArticleFetcher
from finfeed.fetch.supabase import SupabaseArticleFetcher
from finfeed.ownership.base import HoldingsClient
from finfeed.ownership.cache import TTLCache
from finfeed.ownership.client import SecApiClient
from finfeed.ownership.pipeline import OwnershipPipeline
from finfeed.run_logger import RunLogger


def create_fetcher(config: SupabaseArticlesConfig) -> ArticleFetcher:
    """Create an article fetcher from config.

    Raises:
        ConfigurationError: If the Supabase credentials are missing.
    """
    if isinstance(config, SupabaseArticlesConfig):
        return SupabaseArticleFetcher(table=config.table, timeout=config.timeout_seconds)
    msg = f"Unknown article source config type: {type(config)}"
    raise ValueError(msg)


def create_state_store(config: FeedConfig) -> StateStore:
    if config.state_path:
        return JsonFileStateStore(Path(config.state_path))
    return MemoryStateStore()


def create_feed(
    config: FinfeedConfig,
    *,
    fetcher: ArticleFetcher | None = None,
    store: StateStore | None = None,
) -> NewsFeed:
    """Create a news feed wired to the configured article source and state store."""
    return NewsFeed(
        fetcher if fetcher is not None else create_fetcher(config.articles),
        store=store if store is not None else create_state_store(config.feed),
        path=config.feed.path,
        debounce_seconds=config.feed.debounce_seconds,
        page_size=config.feed.page_size,
        fetch_limit=config.articles.limit,
    )


def create_ownership_pipeline(
    config: OwnershipConfig,
    *,
    client: HoldingsClient | None = None,
    run_logger: RunLogger | None = None,
) -> OwnershipPipeline:
    """Create an ownership pipeline from config.

    Raises:
        ConfigurationError: If no client is given and SEC_API_KEY is not set.
    """
    if client is None:
        client = SecApiClient(timeout=config.timeout_seconds)
    return OwnershipPipeline(
        client,
        cache=TTLCache(config.cache_ttl_hours * 3600, max_entries=config.cache_max_entries),
        name_cache=TTLCache(
            config.name_cache_ttl_days * 24 * 3600, max_entries=config.cache_max_entries
        ),
        page_size=config.page_size,
        offset_cap=config.offset_cap,
        top_n=config.top_n,
        run_logger=run_logger,
    )


def create_run_logger(
    config: FinfeedConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> RunLogger | None:
    """Create a RunLogger, or None if logging is disabled.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    if not log_enabled:
        return None
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)
    return RunLogger(log_dir=log_dir, enabled=True)


def create_from_config(
    config: FinfeedConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[OwnershipPipeline, RunLogger | None]:
    """Create the ownership pipeline from root config.

    Returns:
        Tuple of (pipeline, run_logger). run_logger is None if logging is disabled.
    """
    run_logger = create_run_logger(
        config, log_override=log_override, log_dir_override=log_dir_override
    )
    pipeline = create_ownership_pipeline(config.ownership, run_logger=run_logger)
    return (pipeline, run_logger)
