"""Persisted feed state.

Filters are stored as one JSON blob and the sort order under its own key.
Stored values are merged over defaults, so blobs written by older versions
with missing fields still load.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

from finfeed.data import FilterState, SortOrder, TimePreset, TimeRange

logger = logging.getLogger(__name__)

FILTERS_KEY = "finfeed.filters"
SORT_ORDER_KEY = "finfeed.sortOrder"


class StateStore(Protocol):
    """Interface for a string key-value store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStateStore:
    """In-process store, mainly for tests and one-shot CLI runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStateStore:
    """Store backed by a single JSON object on disk.

    Args:
        path: File to read and write. Created on first write.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._data: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        self._data = {}
        if self._path.exists():
            try:
                raw = json.loads(self._path.read_text())
            except (OSError, json.JSONDecodeError):
                logger.warning(f"Unreadable state file {self._path}, starting empty", exc_info=True)
            else:
                if isinstance(raw, dict):
                    self._data = {k: v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2))


class StoredTimeRange(BaseModel):
    start: datetime | None = None
    end: datetime | None = None
    preset: TimePreset = TimePreset.ALL


class StoredFilters(BaseModel):
    """JSON shape of persisted filters."""

    search: str = ""
    time_range: StoredTimeRange = Field(default_factory=StoredTimeRange)
    categories: list[str] = Field(default_factory=list)
    primary_topics: list[str] = Field(default_factory=list)
    people: list[str] = Field(default_factory=list)
    companies: list[str] = Field(default_factory=list)
    domains: list[str] = Field(default_factory=list)
    stock_symbols: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)

    @classmethod
    def from_state(cls, filters: FilterState) -> "StoredFilters":
        return cls(
            search=filters.search,
            time_range=StoredTimeRange(
                start=filters.time_range.start,
                end=filters.time_range.end,
                preset=filters.time_range.preset,
            ),
            categories=list(filters.categories),
            primary_topics=list(filters.primary_topics),
            people=list(filters.people),
            companies=list(filters.companies),
            domains=list(filters.domains),
            stock_symbols=list(filters.stock_symbols),
            locations=list(filters.locations),
            sources=list(filters.sources),
        )

    def to_state(self) -> FilterState:
        return FilterState(
            search=self.search,
            time_range=TimeRange(
                start=self.time_range.start,
                end=self.time_range.end,
                preset=self.time_range.preset,
            ),
            categories=tuple(self.categories),
            primary_topics=tuple(self.primary_topics),
            people=tuple(self.people),
            companies=tuple(self.companies),
            domains=tuple(self.domains),
            stock_symbols=tuple(self.stock_symbols),
            locations=tuple(self.locations),
            sources=tuple(self.sources),
        )


def save_filters(store: StateStore, filters: FilterState) -> None:
    store.set(FILTERS_KEY, StoredFilters.from_state(filters).model_dump_json())


def load_filters(store: StateStore) -> FilterState:
    """Read persisted filters, falling back to defaults when absent or invalid."""
    raw = store.get(FILTERS_KEY)
    if not raw:
        return FilterState()
    try:
        return StoredFilters.model_validate_json(raw).to_state()
    except ValidationError:
        logger.warning("Ignoring invalid persisted filters")
        return FilterState()


def save_sort_order(store: StateStore, sort_order: SortOrder) -> None:
    store.set(SORT_ORDER_KEY, SortOrder(sort_order).value)


def load_sort_order(store: StateStore) -> SortOrder:
    raw = store.get(SORT_ORDER_KEY)
    if not raw:
        return SortOrder.NEWEST
    try:
        return SortOrder(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid persisted sort order: {raw}")
        return SortOrder.NEWEST
