"""Feed state: articles, filters, sort order and pagination.

State transitions are pure functions over an immutable ``FeedState``.
``NewsFeed`` holds the current state, loads articles, and drives the side
effects: persisting every filter change and pushing a debounced URL.

Precedence at mount: URL parameters, then persisted state, then defaults.
"""

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from finfeed.data import Article, FilterCounts, FilterState, SortOrder, TopicGroup
from finfeed.feed.debounce import Debouncer
from finfeed.feed.persistence import (
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
from finfeed.fetch.base import ArticleFetcher
from finfeed.filters.counts import (
    available_categories,
    available_primary_topics,
    available_sources,
    calculate_filter_counts,
    published_bounds,
)
from finfeed.filters.engine import filter_articles, sort_articles
from finfeed.topics.grouping import group_primary_topics

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 7


class FeedStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class FeedState:
    """Snapshot of the feed. ``page`` is 1-based."""

    articles: tuple[Article, ...] = ()
    filters: FilterState = field(default_factory=FilterState)
    sort_order: SortOrder = SortOrder.NEWEST
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    status: FeedStatus = FeedStatus.IDLE
    error: str | None = None


# ============================================================
# Transitions
# ============================================================


def total_pages(item_count: int, page_size: int) -> int:
    return max(1, math.ceil(item_count / max(1, page_size)))


def clamp_page(page: int, pages: int) -> int:
    return min(max(1, page), max(1, pages))


def paginate(items: Sequence[Article], page: int, page_size: int) -> list[Article]:
    """Slice one page out of ``items``; out-of-range pages are clamped."""
    size = max(1, page_size)
    current = clamp_page(page, total_pages(len(items), size))
    start = (current - 1) * size
    return list(items[start : start + size])


def apply_filters(state: FeedState, filters: FilterState) -> FeedState:
    return replace(state, filters=filters, page=1)


def apply_filter_update(state: FeedState, name: str, value: Any) -> FeedState:
    return apply_filters(state, state.filters.with_field(name, value))


def apply_sort(state: FeedState, sort_order: SortOrder | str) -> FeedState:
    return replace(state, sort_order=SortOrder(sort_order), page=1)


def apply_page(state: FeedState, page: int, item_count: int) -> FeedState:
    return replace(state, page=clamp_page(page, total_pages(item_count, state.page_size)))


def apply_page_size(state: FeedState, page_size: int) -> FeedState:
    return replace(state, page_size=max(1, page_size), page=1)


def apply_loading(state: FeedState) -> FeedState:
    return replace(state, status=FeedStatus.LOADING, error=None)


def apply_loaded(state: FeedState, articles: Sequence[Article]) -> FeedState:
    return replace(state, articles=tuple(articles), status=FeedStatus.READY, error=None)


def apply_failed(state: FeedState, message: str) -> FeedState:
    return replace(state, articles=(), status=FeedStatus.ERROR, error=message)


# ============================================================
# Store
# ============================================================


class NewsFeed:
    """Single source of truth for the article feed.

    Args:
        fetcher: Row source for articles.
        store: Persisted state store (defaults to an in-memory store).
        on_url_push: Receives replacement URLs after the debounce delay.
        path: Path component of pushed URLs.
        debounce_seconds: Quiet period before a URL push.
        page_size: Initial page size.
        fetch_limit: Maximum number of articles to load.
        clock: Reference time for relative time filters.
    """

    def __init__(
        self,
        fetcher: ArticleFetcher,
        *,
        store: StateStore | None = None,
        on_url_push: Callable[[str], None] | None = None,
        path: str = "/",
        debounce_seconds: float = 0.5,
        page_size: int = DEFAULT_PAGE_SIZE,
        fetch_limit: int = 200,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._store: StateStore = store if store is not None else MemoryStateStore()
        self._on_url_push = on_url_push
        self._path = path
        self._fetch_limit = fetch_limit
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._state = FeedState(page_size=max(1, page_size))
        self._debouncer: Debouncer[str] = Debouncer(self._push_url, delay=debounce_seconds)
        self._last_query: str | None = None
        self._memo_key: tuple[tuple[Article, ...], FilterState, SortOrder] | None = None
        self._memo: list[Article] = []

    # -- lifecycle --

    async def mount(self, query: str = "") -> None:
        """Restore persisted state, apply URL state on top, then load articles."""
        filters = load_filters(self._store)
        sort_order = load_sort_order(self._store)
        if has_filter_params(query):
            filters, sort_order = parse_filters_from_query(query)
        self._state = apply_sort(apply_filters(self._state, filters), sort_order)
        self._persist()
        self._last_query = serialize_filters_to_query(filters, sort_order)
        if self._last_query != query.lstrip("?"):
            self._debouncer.schedule(build_url(self._path, filters, sort_order))
        await self.refetch()

    async def refetch(self) -> None:
        self._state = apply_loading(self._state)
        try:
            articles = await self._fetcher.fetch(limit=self._fetch_limit)
        except Exception as e:
            logger.warning(f"Failed to fetch articles: {e}")
            self._state = apply_failed(self._state, str(e) or "Failed to fetch articles")
            return
        self._state = apply_loaded(self._state, articles)
        logger.info(f"Loaded {len(articles)} articles")

    def on_url_change(self, query: str) -> None:
        """Replace filters and sort order wholesale from a navigated URL.

        Echoes of URLs pushed by this feed are ignored.
        """
        normalized = query.lstrip("?")
        if normalized == self._last_query:
            return
        filters, sort_order = parse_filters_from_query(normalized)
        self._state = apply_sort(apply_filters(self._state, filters), sort_order)
        self._last_query = serialize_filters_to_query(filters, sort_order)
        self._persist()

    def flush_url(self) -> None:
        """Push a pending URL update immediately."""
        self._debouncer.flush()

    # -- mutations --

    def update_filter(self, name: str, value: Any) -> None:
        self._commit(apply_filter_update(self._state, name, value))

    def set_filters(self, filters: FilterState) -> None:
        self._commit(apply_filters(self._state, filters))

    def reset_filters(self) -> None:
        self._commit(apply_sort(apply_filters(self._state, FilterState()), SortOrder.NEWEST))

    def set_sort_order(self, sort_order: SortOrder | str) -> None:
        self._commit(apply_sort(self._state, sort_order))

    def set_page(self, page: int) -> None:
        self._state = apply_page(self._state, page, len(self.filtered_articles))

    def next_page(self) -> None:
        self.set_page(self.page + 1)

    def prev_page(self) -> None:
        self.set_page(self.page - 1)

    def set_page_size(self, page_size: int) -> None:
        self._state = apply_page_size(self._state, page_size)

    def _commit(self, state: FeedState) -> None:
        self._state = state
        self._persist()
        self._debouncer.schedule(build_url(self._path, state.filters, state.sort_order))

    def _persist(self) -> None:
        save_filters(self._store, self._state.filters)
        save_sort_order(self._store, self._state.sort_order)

    def _push_url(self, url: str) -> None:
        _, _, query = url.partition("?")
        self._last_query = query
        if self._on_url_push is not None:
            self._on_url_push(url)

    # -- state --

    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def articles(self) -> tuple[Article, ...]:
        return self._state.articles

    @property
    def filters(self) -> FilterState:
        return self._state.filters

    @property
    def sort_order(self) -> SortOrder:
        return self._state.sort_order

    @property
    def status(self) -> FeedStatus:
        return self._state.status

    @property
    def loading(self) -> bool:
        return self._state.status == FeedStatus.LOADING

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def page_size(self) -> int:
        return self._state.page_size

    @property
    def page(self) -> int:
        return clamp_page(self._state.page, self.total_pages)

    # -- derived --

    @property
    def filtered_articles(self) -> list[Article]:
        """Filtered and sorted articles (memoized per articles/filters/sort)."""
        key = (self._state.articles, self._state.filters, self._state.sort_order)
        if key != self._memo_key:
            matched = filter_articles(self._state.articles, self._state.filters, now=self._clock())
            self._memo = sort_articles(matched, self._state.sort_order)
            self._memo_key = key
        return list(self._memo)

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered_articles), self._state.page_size)

    @property
    def paginated_articles(self) -> list[Article]:
        return paginate(self.filtered_articles, self._state.page, self._state.page_size)

    @property
    def filter_counts(self) -> FilterCounts:
        return calculate_filter_counts(self.filtered_articles)

    @property
    def available_categories(self) -> list[str]:
        return available_categories(self._state.articles)

    @property
    def available_primary_topics(self) -> list[str]:
        return available_primary_topics(self._state.articles)

    @property
    def available_sources(self) -> list[str]:
        return available_sources(self._state.articles)

    @property
    def topic_groups(self) -> list[TopicGroup]:
        return group_primary_topics(self._state.articles)

    @property
    def active_filter_count(self) -> int:
        return self._state.filters.active_count

    @property
    def min_published_at(self) -> datetime | None:
        return published_bounds(self._state.articles)[0]

    @property
    def max_published_at(self) -> datetime | None:
        return published_bounds(self._state.articles)[1]
