"""finfeed: article filtering and institutional ownership for a financial news feed."""

from finfeed.config import FinfeedConfig, create_from_config, load_config
from finfeed.data import (
    Article,
    ArticleSource,
    Entities,
    FilterCounts,
    FilterState,
    OwnerRow,
    OwnershipResult,
    SortOrder,
    TimePreset,
    TimeRange,
    TopicGroup,
)
from finfeed.errors import ConfigurationError, FinfeedError, UpstreamError
from finfeed.feed import (
    FeedState,
    FeedStatus,
    JsonFileStateStore,
    MemoryStateStore,
    NewsFeed,
    StateStore,
    build_url,
    parse_filters_from_query,
    serialize_filters_to_query,
)
from finfeed.fetch import ArticleFetcher, SupabaseArticleFetcher, map_article_row
from finfeed.filters import calculate_filter_counts, filter_articles, sort_articles
from finfeed.ownership import HoldingsClient, OwnershipPipeline, SecApiClient, TTLCache
from finfeed.run_logger import RunLogger
from finfeed.topics import (
    canonicalize_primary_topic,
    canonicalize_token,
    extract_category_tokens,
    group_primary_topics,
    normalize_primary_subtopic,
    tokenize_primary_subtopic,
)
from finfeed.url import extract_domain

__all__ = [
    # Models
    "Article",
    "ArticleSource",
    "Entities",
    "FilterCounts",
    "FilterState",
    "OwnerRow",
    "OwnershipResult",
    "SortOrder",
    "TimePreset",
    "TimeRange",
    "TopicGroup",
    # Errors
    "ConfigurationError",
    "FinfeedError",
    "UpstreamError",
    # Functions
    "build_url",
    "calculate_filter_counts",
    "canonicalize_primary_topic",
    "canonicalize_token",
    "extract_category_tokens",
    "extract_domain",
    "filter_articles",
    "group_primary_topics",
    "map_article_row",
    "normalize_primary_subtopic",
    "parse_filters_from_query",
    "serialize_filters_to_query",
    "sort_articles",
    "tokenize_primary_subtopic",
    # Protocols
    "ArticleFetcher",
    "HoldingsClient",
    "StateStore",
    # Feed
    "FeedState",
    "FeedStatus",
    "JsonFileStateStore",
    "MemoryStateStore",
    "NewsFeed",
    # Fetchers and clients
    "SecApiClient",
    "SupabaseArticleFetcher",
    # Ownership
    "OwnershipPipeline",
    "TTLCache",
    # Logging
    "RunLogger",
    # Config
    "FinfeedConfig",
    "create_from_config",
    "load_config",
]
