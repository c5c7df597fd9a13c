"""Mapping of article database rows onto ``Article`` records.

Rows come from the ``articles`` table. Most columns are optional, and the
``sources`` column has no fixed shape. It may hold a publisher name, a URL,
a JSON document with primary/secondary source lists, a JSON array, or the
already-decoded equivalents of those.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from finfeed.data import DEFAULT_LOCATION, Article, ArticleSource, Entities
from finfeed.topics.canonical import split_composite
from finfeed.url import display_name_from_domain, extract_domain

logger = logging.getLogger(__name__)

ARTICLE_COLUMNS: tuple[str, ...] = (
    "id",
    "headline",
    "subheadline",
    "lead_paragraph",
    "body",
    "conclusion",
    "category",
    "primary_topic",
    "tags",
    "secondary_topics",
    "canonical_topics",
    "sources",
    "image_suggestions",
    "geographic_focus",
    "created_at",
    "published_at",
    "post_url",
    "word_count",
    "read_time_minutes",
    "sentiment",
    "urgency",
)

DEFAULT_CATEGORY = "Uncategorized"

FALLBACK_IMAGES: tuple[str, ...] = (
    "/finance.jpg",
    "/financial-news-trading.jpg",
    "/stock-market-trading-floor.png",
    "/nvidia-ai-chips.jpg",
    "/tesla-manufacturing-mexico.jpg",
    "/apple-privacy-features.jpg",
    "/healthcare-ai-medical-technology.jpg",
    "/bitcoin-trading-all-time-high.jpg",
    "/climate-summit-renewable-energy.jpg",
    "/china-technology-regulation.jpg",
)

_URL_KEYS = ("url", "link", "href", "website")
_NAME_KEYS = ("name", "source", "publisher")
_DOMAIN_KEYS = ("domain", "hostname")


# ============================================================
# Sources column
# ============================================================


def _source_from_url(value: str, name: str | None = None) -> tuple[str, str] | None:
    domain = extract_domain(value)
    if not domain:
        return None
    explicit = name.strip() if isinstance(name, str) else ""
    return (explicit or display_name_from_domain(domain) or "Unknown", domain)


def _source_from_string(value: str) -> tuple[str, str] | None:
    by_url = _source_from_url(value)
    if by_url:
        return by_url
    name = value.strip()
    return (name, "") if name else None


def _first_str(candidate: Mapping[str, Any], keys: Iterable[str]) -> str | None:
    for key in keys:
        value = candidate.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _source_from_mapping(candidate: Mapping[str, Any]) -> tuple[str, str]:
    url = _first_str(candidate, _URL_KEYS)
    raw_name = _first_str(candidate, _NAME_KEYS)
    if url:
        by_url = _source_from_url(url, raw_name)
        if by_url:
            return by_url

    domain = ""
    raw_domain = _first_str(candidate, _DOMAIN_KEYS)
    if raw_domain:
        raw_domain = raw_domain.strip()
        domain = (extract_domain(raw_domain) or raw_domain) if "/" in raw_domain else raw_domain

    name = raw_name.strip() if raw_name else domain.removeprefix("www.").split(".")[0]
    if not name:
        name = "Unknown"
    if name == name.lower():
        name = name[:1].upper() + name[1:]
    return (name, domain)


def _first_truthy(values: Iterable[Any]) -> Any:
    for value in values:
        if value:
            return value
    return None


def _decode(value: str) -> Any:
    stripped = value.strip()
    if stripped.startswith(("{", "[")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            logger.debug(f"sources column is not valid JSON: {stripped[:80]}")
    return value


def parse_sources(value: Any) -> tuple[str, str] | None:
    """Pick one representative ``(name, domain)`` from a ``sources`` column.

    Preference order: first primary source, first secondary source, first
    generic source, then the value itself.

    Returns:
        The source, or None when nothing usable is present.
    """
    if not value:
        return None
    if isinstance(value, str):
        value = _decode(value)
    if isinstance(value, str):
        return _source_from_string(value)

    if isinstance(value, list):
        value = _first_truthy(value)
        if not value:
            return None
        if isinstance(value, str):
            return _source_from_string(value)

    if not isinstance(value, Mapping):
        return None

    candidates: list[Any] = []
    for key in ("primary_sources", "secondary_sources", "sources"):
        listed = value.get(key)
        if isinstance(listed, list):
            candidates.extend(listed)
    candidate = _first_truthy(candidates) or value

    if isinstance(candidate, str):
        return _source_from_string(candidate)
    if isinstance(candidate, Mapping):
        return _source_from_mapping(candidate)
    return None


# ============================================================
# Row mapping
# ============================================================


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            logger.debug(f"Unparseable timestamp: {value}")
            return None
    else:
        return None
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def _is_image_path(value: str) -> bool:
    stripped = value.strip()
    return stripped.startswith(("/", "http://", "https://"))


def _pick_image(row_id: Any, suggestions: list[str]) -> str:
    valid = [s for s in suggestions if _is_image_path(s)]
    if valid:
        return valid[0]
    try:
        index = abs(int(row_id)) % len(FALLBACK_IMAGES)
    except (TypeError, ValueError):
        index = 0
    return FALLBACK_IMAGES[index]


def _source_for_row(row: Mapping[str, Any]) -> ArticleSource:
    parsed = parse_sources(row.get("sources"))
    if parsed is None:
        post_url = row.get("post_url")
        domain = extract_domain(post_url) if isinstance(post_url, str) else ""
        parsed = (display_name_from_domain(domain) or "Unknown", domain)
    name, domain = parsed
    logo = (name or domain or "?").strip()[:1].upper() or "?"
    return ArticleSource(name=name, domain=domain, logo=logo)


def map_article_row(row: Mapping[str, Any], *, now: datetime | None = None) -> Article:
    """Convert one ``articles`` row into an ``Article``.

    Args:
        row: Column name to value mapping.
        now: Publication time used when the row has no usable timestamp.

    Returns:
        The mapped article. Entities are left empty since rows do not carry them.
    """
    primary_topic = _optional_str(row.get("primary_topic"))
    category = _optional_str(row.get("category"))

    topics = (
        _str_list(row.get("secondary_topics"))
        + _str_list(row.get("canonical_topics"))
        + _str_list(row.get("tags"))
    )
    composite = "/".join(value for value in (primary_topic, category) if value)
    topics.extend(split_composite(composite))

    published_at = (
        _parse_timestamp(row.get("published_at"))
        or _parse_timestamp(row.get("created_at"))
        or now
        or datetime.now(tz=UTC)
    )

    subheadline = _optional_str(row.get("subheadline"))
    lead = _optional_str(row.get("lead_paragraph"))
    locations = _str_list(row.get("geographic_focus"))

    return Article(
        id=str(row.get("id", "")),
        title=_optional_str(row.get("headline")) or "",
        published_at=published_at,
        description=subheadline or lead or "",
        content=_optional_str(row.get("body")) or "",
        category=(category or DEFAULT_CATEGORY).strip(),
        topics=tuple(topics),
        primary_topic=primary_topic,
        entities=Entities(),
        location=locations[0] if locations else DEFAULT_LOCATION,
        source=_source_for_row(row),
        subheadline=subheadline,
        lead=lead,
        conclusion=_optional_str(row.get("conclusion")),
        image=_pick_image(row.get("id"), _str_list(row.get("image_suggestions"))),
        sentiment=_optional_str(row.get("sentiment")),
        urgency=_optional_str(row.get("urgency")),
        word_count=_optional_int(row.get("word_count")),
        read_time_minutes=_optional_int(row.get("read_time_minutes")),
    )


def map_article_rows(
    rows: Iterable[Mapping[str, Any]], *, now: datetime | None = None
) -> list[Article]:
    """Map rows in order, skipping entries that are not objects."""
    articles: list[Article] = []
    for row in rows:
        if not isinstance(row, Mapping):
            logger.warning(f"Skipping non-object article row: {row!r}")
            continue
        articles.append(map_article_row(row, now=now))
    return articles
