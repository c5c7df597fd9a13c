"""Canonicalization of free-text categories and topic labels.

Categories map onto a small closed vocabulary. Primary topics go through an
ordered rule table (first match wins) and fall back to a cleaned, title-cased
prefix of the label. Subtopic keys are stemmed, stopword-free and sorted so
that word order does not matter ("rate hike" == "hike rate").
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from finfeed.data import Article

CANONICAL_CATEGORIES: tuple[str, ...] = (
    "Finance",
    "Markets",
    "Economics",
    "Policy",
    "Technology",
    "Business",
    "Science",
    "Health",
    "Politics",
)

CATEGORY_ALIASES: dict[str, str] = {
    "Tech": "Technology",
    "Econ": "Economics",
    "Economy": "Economics",
    "Market": "Markets",
    "Political": "Politics",
    "Healthcare": "Health",
}

_SEPARATORS = re.compile(r"[\s_-]+")
_COMPOSITE_SPLIT = re.compile(r"\s*[/,&]\s*|\band\b", re.IGNORECASE)


def _title_token(token: str) -> str:
    # Acronyms such as "AI" or "ETF" keep their casing.
    if len(token) > 1 and token.isupper():
        return token
    return token[:1].upper() + token[1:].lower()


def canonicalize_token(value: str | None) -> str | None:
    """Map a free-text category token onto the canonical vocabulary.

    Args:
        value: Raw token, e.g. ``" tech "`` or ``"markets"``.

    Returns:
        The canonical category, or None when the token is not recognized.
    """
    if not value:
        return None
    normalized = _SEPARATORS.sub(" ", value.strip())
    if not normalized:
        return None
    normalized = normalized[:1].upper() + normalized[1:].lower()
    candidate = CATEGORY_ALIASES.get(normalized, normalized)
    return candidate if candidate in CANONICAL_CATEGORIES else None


def split_composite(value: str | None) -> list[str]:
    """Split a composite category such as ``"Finance/Markets & Policy"``."""
    if not value:
        return []
    parts = _COMPOSITE_SPLIT.split(value)
    return [part.strip() for part in parts if part and part.strip()]


def extract_category_tokens(article: Article) -> set[str]:
    """Collect the canonical categories of an article.

    The composite ``category`` string is split and canonicalized, and every
    entry of ``topics`` is canonicalized as well.
    """
    tokens: set[str] = set()
    for raw in split_composite(article.category):
        token = canonicalize_token(raw)
        if token:
            tokens.add(token)
    for topic in article.topics or ():
        token = canonicalize_token(topic)
        if token:
            tokens.add(token)
    return tokens


# ============================================================
# Primary topics
# ============================================================


@dataclass(frozen=True)
class TopicRule:
    """A regex rule mapping verbose topic phrasings onto a fixed label."""

    pattern: re.Pattern[str]
    label: str


def topic_rule(pattern: str, label: str) -> TopicRule:
    return TopicRule(pattern=re.compile(pattern, re.IGNORECASE), label=label)


# Order matters: the first matching rule wins.
PRIMARY_TOPIC_RULES: tuple[TopicRule, ...] = (
    topic_rule(r"\bsocial\s+security\b", "Social Security"),
    topic_rule(
        r"\bretirement(\s+(planning|plans?|savings|strategies|strategy|income|accounts?))?\b",
        "Retirement Planning",
    ),
    topic_rule(r"\b(medicare|medicaid)\b", "Medicare"),
    topic_rule(
        r"\b(interest\s+rates?|rate\s+(hikes?|cuts?)|federal\s+reserve|the\s+fed)\b",
        "Interest Rates",
    ),
    topic_rule(r"\b(inflation|consumer\s+prices?|cpi)\b", "Inflation"),
    topic_rule(r"\b(tariffs?|trade\s+(wars?|policy|deals?))\b", "Trade Policy"),
    topic_rule(
        r"\b(jobs?\s+report|unemployment|labor\s+market|payrolls?)\b",
        "Labor Market",
    ),
    topic_rule(r"\b(housing|real\s+estate|mortgages?|home\s+prices)\b", "Housing Market"),
    topic_rule(r"\b(crypto\w*|bitcoin|ethereum|blockchain)\b", "Cryptocurrency"),
    topic_rule(r"\b(artificial\s+intelligence|ai|machine\s+learning)\b", "Artificial Intelligence"),
    topic_rule(r"\b(earnings|quarterly\s+results)\b", "Earnings"),
    topic_rule(r"\b(tax(es|ation)?|irs)\b", "Taxes"),
    topic_rule(r"\b(oil\s+prices?|natural\s+gas|opec|energy\s+(markets?|prices?))\b", "Energy"),
    topic_rule(
        r"\b(stock\s+market|equities|wall\s+street|s&p\s*500|nasdaq|dow\s+jones)\b",
        "Stock Market",
    ),
)

_GEO_QUALIFIERS = re.compile(
    r"\b(in|across|for|within)\s+the\s+(u\.s\.?a?\.?|us|usa|united\s+states)(?![a-z])"
    r"|\b(in|across)\s+(america|the\s+world)\b"
    r"|\b(u\.s\.?|usa|american|global|worldwide)(?![a-z])",
    re.IGNORECASE,
)

_FALLBACK_STOPWORDS = frozenset(
    {"the", "of", "and", "in", "on", "for", "to", "a", "an", "with", "by", "from"}
)


def canonicalize_primary_topic(
    value: str | None,
    rules: Iterable[TopicRule] = PRIMARY_TOPIC_RULES,
) -> str | None:
    """Map a verbose primary topic onto a stable display label.

    Rules are tried in order. Without a match, geographic qualifiers are
    stripped and the first three significant words are title-cased.

    Args:
        value: Free-text primary topic.
        rules: Ordered rule table to apply.

    Returns:
        The canonical label, or None for empty input.
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    for rule in rules:
        if rule.pattern.search(text):
            return rule.label

    cleaned = _GEO_QUALIFIERS.sub(" ", text)
    words = [w.strip(".,;:!?\"'()") for w in cleaned.split()]
    significant = [w for w in words if w and w.lower() not in _FALLBACK_STOPWORDS]
    if not significant:
        return None
    return " ".join(_title_token(w) for w in significant[:3])


# ============================================================
# Subtopic normalization
# ============================================================

_US_VARIANTS = re.compile(
    r"\b(u\.s\.a\.?|u\.s\.?|united\s+states(\s+of\s+america)?|usa)(?![a-z])"
)
_BOILERPLATE_PREFIX = re.compile(r"^\s*the\s+current\s+state\s+of\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")

SUBTOPIC_STEMS: dict[str, str] = {
    "retirement": "retire",
    "planning": "plan",
    "benefits": "benefit",
    "adjustment": "adj",
    "adjustments": "adj",
    "changes": "change",
    "strategies": "strategy",
}

SUBTOPIC_STOPWORDS = frozenset(
    {"the", "of", "and", "in", "on", "for", "to", "a", "an", "with", "by", "from"}
)

# Dropped for subset matching only; they name the bucket rather than the variant.
SUBSET_STOPWORDS = frozenset({"social", "security"})


def _subtopic_tokens(value: str | None) -> list[str]:
    if not value:
        return []
    text = value.lower()
    text = _US_VARIANTS.sub(" us ", text)
    text = _BOILERPLATE_PREFIX.sub("", text)
    tokens = [SUBTOPIC_STEMS.get(t, t) for t in _NON_ALNUM.split(text) if t]
    tokens = sorted(t for t in tokens if t not in SUBTOPIC_STOPWORDS)
    deduped: list[str] = []
    for token in tokens:
        if not deduped or deduped[-1] != token:
            deduped.append(token)
    return deduped


def normalize_primary_subtopic(value: str | None) -> str | None:
    """Build an order-independent comparison key for a topic label.

    Returns:
        Space-joined, sorted, stemmed tokens, or None when nothing is left.
    """
    tokens = _subtopic_tokens(value)
    return " ".join(tokens) if tokens else None


def tokenize_primary_subtopic(value: str | None) -> list[str]:
    """Tokens of a topic label for subset matching (see ``SUBSET_STOPWORDS``)."""
    return [t for t in _subtopic_tokens(value) if t not in SUBSET_STOPWORDS]
