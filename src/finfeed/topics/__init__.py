"""Topic and category canonicalization."""

from finfeed.topics.canonical import (
    CANONICAL_CATEGORIES,
    PRIMARY_TOPIC_RULES,
    TopicRule,
    canonicalize_primary_topic,
    canonicalize_token,
    extract_category_tokens,
    normalize_primary_subtopic,
    split_composite,
    tokenize_primary_subtopic,
    topic_rule,
)
from finfeed.topics.grouping import group_primary_topics

__all__ = [
    "CANONICAL_CATEGORIES",
    "PRIMARY_TOPIC_RULES",
    "TopicRule",
    "canonicalize_primary_topic",
    "canonicalize_token",
    "extract_category_tokens",
    "group_primary_topics",
    "normalize_primary_subtopic",
    "split_composite",
    "tokenize_primary_subtopic",
    "topic_rule",
]
