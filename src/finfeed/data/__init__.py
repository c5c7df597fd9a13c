"""Data models for finfeed."""

from finfeed.data.models import (
    DEFAULT_LOCATION,
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

__all__ = [
    "DEFAULT_LOCATION",
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
]
