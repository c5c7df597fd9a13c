"""Grouping of primary topic variants under canonical labels.

The collapse is an approximate clustering heuristic. After exact token-key
deduplication, candidates are visited from the smallest token set upwards and
a candidate is dropped when its tokens are a subset or a superset of a label
already kept. The relation is not transitive, so the outcome depends on the
visiting order; ties in size keep first-seen order.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from finfeed.data import Article, TopicGroup
from finfeed.topics.canonical import canonicalize_primary_topic, tokenize_primary_subtopic

logger = logging.getLogger(__name__)


@dataclass
class _Bucket:
    labels: list[str] = field(default_factory=list)
    count: int = 0


def _collapse_variants(labels: Iterable[str]) -> list[str]:
    """Deduplicate raw label variants of one canonical topic."""
    candidates: list[tuple[str, frozenset[str]]] = []
    seen_keys: set[str] = set()
    for label in labels:
        tokens = tokenize_primary_subtopic(label)
        if not tokens:
            # Nothing left after stopwords; the group's main label covers it.
            continue
        key = " ".join(tokens)
        if key in seen_keys:
            continue
        seen_keys.add(key)
        candidates.append((label, frozenset(tokens)))

    kept: list[tuple[str, frozenset[str]]] = []
    for label, tokens in sorted(candidates, key=lambda c: len(c[1])):
        if any(tokens <= other or tokens >= other for _, other in kept):
            continue
        kept.append((label, tokens))

    return sorted((label for label, _ in kept), key=lambda s: (s.lower(), s))


def group_primary_topics(articles: Iterable[Article]) -> list[TopicGroup]:
    """Cluster primary topics into canonical groups with representative subtopics.

    Args:
        articles: Articles to group; those without a usable primary topic
            are skipped.

    Returns:
        Groups sorted by descending article count, ties broken by label.
    """
    buckets: dict[str, _Bucket] = {}
    for article in articles:
        main = canonicalize_primary_topic(article.primary_topic)
        if main is None or article.primary_topic is None:
            continue
        bucket = buckets.setdefault(main, _Bucket())
        bucket.count += 1
        raw = article.primary_topic.strip()
        if raw not in bucket.labels:
            bucket.labels.append(raw)

    groups = [
        TopicGroup(
            main=main,
            subtopics=tuple(_collapse_variants(bucket.labels)),
            count=bucket.count,
        )
        for main, bucket in buckets.items()
    ]
    groups.sort(key=lambda g: (-g.count, g.main))
    logger.debug(f"Grouped primary topics into {len(groups)} groups")
    return groups
