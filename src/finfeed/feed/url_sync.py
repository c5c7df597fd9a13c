"""Conversion between filter state and URL query strings.

Only a subset of the filter state is shareable through the URL. Parameters
equal to their default are omitted so URLs stay minimal; absent parameters
parse back to defaults.
"""

import logging
from collections.abc import Mapping
from urllib.parse import parse_qs, urlencode

from finfeed.data import FilterState, SortOrder, TimePreset, TimeRange

logger = logging.getLogger(__name__)

URL_PARAMS: tuple[str, ...] = (
    "search",
    "categories",
    "primaryTopics",
    "sources",
    "locations",
    "timeRange",
    "sort",
)


def _parse(query: str | Mapping[str, str]) -> dict[str, str]:
    if isinstance(query, Mapping):
        return {k: v for k, v in query.items() if isinstance(v, str)}
    parsed = parse_qs(query.lstrip("?"), keep_blank_values=False)
    return {key: values[0] for key, values in parsed.items() if values}


def _split_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def has_filter_params(query: str | Mapping[str, str]) -> bool:
    """Whether the query carries any filter or sort parameter."""
    params = _parse(query)
    return any(params.get(name) for name in URL_PARAMS)


def parse_filters_from_query(query: str | Mapping[str, str]) -> tuple[FilterState, SortOrder]:
    """Build filter state and sort order from URL query parameters.

    Unknown time presets and sort orders fall back to their defaults.

    Args:
        query: Raw query string (with or without ``?``) or a parameter mapping.

    Returns:
        Tuple of (filters, sort order).
    """
    params = _parse(query)

    preset = TimePreset.ALL
    raw_preset = params.get("timeRange")
    if raw_preset:
        try:
            preset = TimePreset(raw_preset)
        except ValueError:
            logger.warning(f"Ignoring unknown timeRange in URL: {raw_preset}")

    sort_order = SortOrder.NEWEST
    raw_sort = params.get("sort")
    if raw_sort:
        try:
            sort_order = SortOrder(raw_sort)
        except ValueError:
            logger.warning(f"Ignoring unknown sort in URL: {raw_sort}")

    filters = FilterState(
        search=params.get("search", ""),
        time_range=TimeRange(preset=preset),
        categories=_split_list(params.get("categories")),
        primary_topics=_split_list(params.get("primaryTopics")),
        sources=_split_list(params.get("sources")),
        locations=_split_list(params.get("locations")),
    )
    return (filters, sort_order)


def serialize_filters_to_query(
    filters: FilterState, sort_order: SortOrder = SortOrder.NEWEST
) -> str:
    """Encode the shareable part of the filter state, omitting defaults."""
    params: list[tuple[str, str]] = []
    if filters.search:
        params.append(("search", filters.search))
    if filters.categories:
        params.append(("categories", ",".join(filters.categories)))
    if filters.primary_topics:
        params.append(("primaryTopics", ",".join(filters.primary_topics)))
    if filters.sources:
        params.append(("sources", ",".join(filters.sources)))
    if filters.locations:
        params.append(("locations", ",".join(filters.locations)))
    if filters.time_range.preset != TimePreset.ALL:
        params.append(("timeRange", filters.time_range.preset.value))
    if sort_order != SortOrder.NEWEST:
        params.append(("sort", SortOrder(sort_order).value))
    return urlencode(params, safe=",")


def build_url(path: str, filters: FilterState, sort_order: SortOrder = SortOrder.NEWEST) -> str:
    query = serialize_filters_to_query(filters, sort_order)
    return f"{path}?{query}" if query else path
