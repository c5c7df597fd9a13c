"""Article filtering and facet counting."""

from finfeed.filters.counts import (
    available_categories,
    available_primary_topics,
    available_sources,
    calculate_filter_counts,
    published_bounds,
)
from finfeed.filters.engine import (
    TIME_PRESET_DELTAS,
    article_matches,
    filter_articles,
    primary_topic_matches,
    sort_articles,
    time_window,
)

__all__ = [
    "TIME_PRESET_DELTAS",
    "article_matches",
    "available_categories",
    "available_primary_topics",
    "available_sources",
    "calculate_filter_counts",
    "filter_articles",
    "primary_topic_matches",
    "published_bounds",
    "sort_articles",
    "time_window",
]
