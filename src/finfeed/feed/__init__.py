"""Feed state controller and its synchronization boundaries."""

from finfeed.feed.controller import (
    DEFAULT_PAGE_SIZE,
    FeedState,
    FeedStatus,
    NewsFeed,
    paginate,
    total_pages,
)
from finfeed.feed.debounce import Debouncer
from finfeed.feed.persistence import (
    JsonFileStateStore,
    MemoryStateStore,
    StateStore,
    load_filters,
    load_sort_order,
    save_filters,
    save_sort_order,
)
from finfeed.feed.url_sync import (
    build_url,
    has_filter_params,
    parse_filters_from_query,
    serialize_filters_to_query,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "Debouncer",
    "FeedState",
    "FeedStatus",
    "JsonFileStateStore",
    "MemoryStateStore",
    "NewsFeed",
    "StateStore",
    "build_url",
    "has_filter_params",
    "load_filters",
    "load_sort_order",
    "paginate",
    "parse_filters_from_query",
    "save_filters",
    "save_sort_order",
    "serialize_filters_to_query",
    "total_pages",
]
