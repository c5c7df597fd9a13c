"""Multi-facet article filtering.

Facets combine with AND; values within one facet combine with OR. An empty
facet never constrains. Filtering keeps the relative order of the input.
"""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from finfeed.data import Article, FilterState, SortOrder, TimePreset, TimeRange
from finfeed.topics.canonical import (
    canonicalize_primary_topic,
    extract_category_tokens,
    normalize_primary_subtopic,
    tokenize_primary_subtopic,
)

TIME_PRESET_DELTAS: dict[TimePreset, timedelta] = {
    TimePreset.HOUR: timedelta(hours=1),
    TimePreset.DAY: timedelta(hours=24),
    TimePreset.WEEK: timedelta(days=7),
    TimePreset.MONTH: timedelta(days=30),
    TimePreset.THREE_MONTHS: timedelta(days=90),
    TimePreset.YEAR: timedelta(days=365),
}


def time_window(
    preset: TimePreset | str, now: datetime | None = None
) -> tuple[datetime, datetime] | None:
    """Resolve a preset into ``(start, end)`` relative to ``now``.

    Returns:
        The window, or None for ``all`` (and unknown presets).
    """
    try:
        delta = TIME_PRESET_DELTAS.get(TimePreset(preset))
    except ValueError:
        return None
    if delta is None:
        return None
    end = _as_utc(now) if now is not None else datetime.now(tz=UTC)
    return (end - delta, end)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def matches_search(article: Article, query: str) -> bool:
    """Case-insensitive substring match over title, description, content and source name."""
    if not query:
        return True
    needle = query.lower()
    haystacks = (article.title, article.description, article.content, article.source.name)
    return any(needle in (text or "").lower() for text in haystacks)


def matches_time_range(
    article: Article, time_range: TimeRange, now: datetime | None = None
) -> bool:
    window = time_window(time_range.preset, now)
    if window is None:
        return True
    start, end = window
    published = _as_utc(article.published_at)
    return start <= published <= end


def matches_categories(article: Article, selected: Sequence[str]) -> bool:
    if not selected:
        return True
    tokens = extract_category_tokens(article)
    return any(choice in tokens or choice == article.category for choice in selected)


def primary_topic_matches(selection: str, topic: str | None) -> bool:
    """Whether one selected primary topic matches an article's primary topic.

    Matches by exact text, canonical label, normalized key, or when the
    selection's tokens are a subset of the topic's tokens.
    """
    if not topic or not selection:
        return False
    if selection == topic:
        return True
    label = canonicalize_primary_topic(topic)
    if label is not None and label == canonicalize_primary_topic(selection):
        return True
    key = normalize_primary_subtopic(topic)
    if key is not None and key == normalize_primary_subtopic(selection):
        return True
    wanted = set(tokenize_primary_subtopic(selection))
    return bool(wanted) and wanted <= set(tokenize_primary_subtopic(topic))


def matches_primary_topics(article: Article, selected: Sequence[str]) -> bool:
    if not selected:
        return True
    return any(primary_topic_matches(choice, article.primary_topic) for choice in selected)


def _any_in(selected: Sequence[str], values: Iterable[str]) -> bool:
    if not selected:
        return True
    pool = set(values or ())
    return any(choice in pool for choice in selected)


def article_matches(article: Article, filters: FilterState, now: datetime | None = None) -> bool:
    """Evaluate every facet of ``filters`` against a single article."""
    domain = article.source.domain
    return (
        matches_search(article, filters.search)
        and matches_time_range(article, filters.time_range, now)
        and matches_categories(article, filters.categories)
        and matches_primary_topics(article, filters.primary_topics)
        and _any_in(filters.people, article.entities.people)
        and _any_in(filters.companies, article.entities.companies)
        # domains and sources both gate on the publisher domain
        and (not filters.domains or domain in filters.domains)
        and _any_in(filters.stock_symbols, article.entities.stock_symbols)
        and (not filters.locations or article.location in filters.locations)
        and (not filters.sources or domain in filters.sources)
    )


def filter_articles(
    articles: Iterable[Article],
    filters: FilterState,
    *,
    now: datetime | None = None,
) -> list[Article]:
    """Return the articles passing every facet of ``filters``.

    Args:
        articles: Articles to filter.
        filters: Active filter state.
        now: Reference time for relative presets (defaults to current UTC time).

    Returns:
        Surviving articles in their original order.
    """
    reference = now or datetime.now(tz=UTC)
    return [article for article in articles if article_matches(article, filters, reference)]


def sort_articles(articles: Iterable[Article], order: SortOrder | str) -> list[Article]:
    """Order articles by publication time.

    ``relevant`` orders like ``newest``.
    """
    ascending = SortOrder(order) == SortOrder.OLDEST
    return sorted(articles, key=lambda a: _as_utc(a.published_at), reverse=not ascending)
