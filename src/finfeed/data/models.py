"""Core data models for finfeed."""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import StrEnum
from typing import Any

DEFAULT_LOCATION = "Global"


class TimePreset(StrEnum):
    """Relative publication windows offered by the feed."""

    ALL = "all"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    THREE_MONTHS = "3months"
    YEAR = "year"


class SortOrder(StrEnum):
    """Feed ordering.

    ``RELEVANT`` has no scoring behind it and orders like ``NEWEST``.
    """

    NEWEST = "newest"
    OLDEST = "oldest"
    RELEVANT = "relevant"


@dataclass(frozen=True)
class ArticleSource:
    """Publisher of an article."""

    name: str = ""
    domain: str = ""
    logo: str = ""


@dataclass(frozen=True)
class Entities:
    """Named entities attached to an article. Duplicates are kept as delivered."""

    people: tuple[str, ...] = ()
    companies: tuple[str, ...] = ()
    stock_symbols: tuple[str, ...] = ()


@dataclass(frozen=True)
class Article:
    """An editorial article as delivered by the row source."""

    id: str
    title: str
    published_at: datetime
    description: str = ""
    content: str = ""
    category: str = ""
    topics: tuple[str, ...] = ()
    primary_topic: str | None = None
    entities: Entities = field(default_factory=Entities)
    location: str = DEFAULT_LOCATION
    source: ArticleSource = field(default_factory=ArticleSource)
    subheadline: str | None = None
    lead: str | None = None
    conclusion: str | None = None
    image: str | None = None
    sentiment: str | None = None
    urgency: str | None = None
    word_count: int | None = None
    read_time_minutes: int | None = None


@dataclass(frozen=True)
class TimeRange:
    """Time constraint of a filter. Explicit bounds are ignored for ``ALL``."""

    start: datetime | None = None
    end: datetime | None = None
    preset: TimePreset = TimePreset.ALL


_LIST_FIELDS = (
    "categories",
    "primary_topics",
    "people",
    "companies",
    "domains",
    "stock_symbols",
    "locations",
    "sources",
)


def _unique(values: Any) -> tuple[str, ...]:
    """Deduplicate while keeping first-seen order."""
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    seen: dict[str, None] = {}
    for value in values:
        if isinstance(value, str) and value not in seen:
            seen[value] = None
    return tuple(seen)


@dataclass(frozen=True)
class FilterState:
    """Active feed filters.

    Every list-valued field holds unique entries, and an empty tuple means the
    facet is unconstrained.
    """

    search: str = ""
    time_range: TimeRange = field(default_factory=TimeRange)
    categories: tuple[str, ...] = ()
    primary_topics: tuple[str, ...] = ()
    people: tuple[str, ...] = ()
    companies: tuple[str, ...] = ()
    domains: tuple[str, ...] = ()
    stock_symbols: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in _LIST_FIELDS:
            object.__setattr__(self, name, _unique(getattr(self, name)))

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_field(self, name: str, value: Any) -> "FilterState":
        """Return a copy with a single field replaced."""
        if name not in self.field_names():
            raise KeyError(f"Unknown filter field: {name}")
        return replace(self, **{name: value})

    @property
    def active_count(self) -> int:
        """Number of facets that currently constrain the feed."""
        count = 1 if self.search else 0
        if self.time_range.preset != TimePreset.ALL:
            count += 1
        return count + sum(1 for name in _LIST_FIELDS if getattr(self, name))


@dataclass
class FilterCounts:
    """Per-facet occurrence counts used for facet badges."""

    categories: dict[str, int] = field(default_factory=dict)
    primary_topics: dict[str, int] = field(default_factory=dict)
    people: dict[str, int] = field(default_factory=dict)
    companies: dict[str, int] = field(default_factory=dict)
    locations: dict[str, int] = field(default_factory=dict)
    sources: dict[str, int] = field(default_factory=dict)
    domains: dict[str, int] = field(default_factory=dict)
    stock_symbols: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class TopicGroup:
    """A canonical primary topic with its deduplicated label variants."""

    main: str
    subtopics: tuple[str, ...] = ()
    count: int = 0


@dataclass(frozen=True)
class OwnerRow:
    """An institutional holder of a stock, from its latest 13F filing."""

    name: str
    share: int
    portfolio_percent: float = 0.0
    filing_date: str = ""
    change: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "share": self.share,
            "change": self.change,
            "portfolioPercent": self.portfolio_percent,
            "filingDate": self.filing_date,
        }


@dataclass(frozen=True)
class OwnershipResult:
    """Top institutional owners for a symbol."""

    symbol: str
    owners: tuple[OwnerRow, ...] = ()
    updated_at: str = ""
    cached: bool = False
    stale: bool = False

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "symbol": self.symbol,
            "owners": [owner.to_dict() for owner in self.owners],
            "updatedAt": self.updated_at,
        }
        if self.cached:
            payload["cached"] = True
        if self.stale:
            payload["stale"] = True
        return payload
