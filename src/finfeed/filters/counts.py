"""Facet counts and facet option lists."""

from collections.abc import Iterable
from datetime import datetime

from finfeed.data import Article, FilterCounts
from finfeed.topics.canonical import canonicalize_primary_topic, extract_category_tokens


def _bump(counter: dict[str, int], key: str) -> None:
    counter[key] = counter.get(key, 0) + 1


def calculate_filter_counts(articles: Iterable[Article]) -> FilterCounts:
    """Count facet occurrences over ``articles`` in a single pass.

    Raw occurrences are counted: an article listing ``"Apple"`` twice adds two
    to ``companies["Apple"]``. Keys are used verbatim, so ``"Apple"`` and
    ``"apple"`` are counted separately.
    """
    counts = FilterCounts()
    for article in articles:
        tokens = extract_category_tokens(article)
        if tokens:
            for token in tokens:
                _bump(counts.categories, token)
        elif article.category:
            _bump(counts.categories, article.category)

        label = canonicalize_primary_topic(article.primary_topic)
        if label:
            _bump(counts.primary_topics, label)

        for person in article.entities.people:
            _bump(counts.people, person)
        for company in article.entities.companies:
            _bump(counts.companies, company)
        for symbol in article.entities.stock_symbols:
            _bump(counts.stock_symbols, symbol)

        _bump(counts.locations, article.location)

        if article.source.name and article.source.name.strip():
            _bump(counts.sources, article.source.name)
        if article.source.domain and article.source.domain.strip():
            _bump(counts.domains, article.source.domain)
    return counts


def available_categories(articles: Iterable[Article]) -> list[str]:
    """Sorted category options; raw categories stand in when nothing canonicalizes."""
    options: set[str] = set()
    for article in articles:
        tokens = extract_category_tokens(article)
        if tokens:
            options.update(tokens)
        elif article.category:
            options.add(article.category)
    return sorted(options, key=str.lower)


def available_primary_topics(articles: Iterable[Article]) -> list[str]:
    labels = {canonicalize_primary_topic(a.primary_topic) for a in articles}
    return sorted((label for label in labels if label), key=str.lower)


def available_sources(articles: Iterable[Article]) -> list[str]:
    """Sorted publisher domains."""
    domains = {a.source.domain for a in articles if a.source.domain}
    return sorted(domains, key=str.lower)


def published_bounds(articles: Iterable[Article]) -> tuple[datetime | None, datetime | None]:
    """Earliest and latest publication times, or ``(None, None)`` when empty."""
    dates = [a.published_at for a in articles]
    if not dates:
        return (None, None)
    return (min(dates), max(dates))
