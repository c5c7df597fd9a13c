"""Tests for persisted feed state."""

import json
from datetime import UTC, datetime
from pathlib import Path

from finfeed.data import FilterState, SortOrder, TimePreset, TimeRange
from finfeed.feed import (
    JsonFileStateStore,
    MemoryStateStore,
    load_filters,
    load_sort_order,
    save_filters,
    save_sort_order,
)
from finfeed.feed.persistence import FILTERS_KEY, SORT_ORDER_KEY


def test_round_trip_full_state() -> None:
    store = MemoryStateStore()
    filters = FilterState(
        search="tariffs",
        time_range=TimeRange(
            start=datetime(2025, 1, 1, tzinfo=UTC),
            end=datetime(2025, 2, 1, tzinfo=UTC),
            preset=TimePreset.MONTH,
        ),
        categories=("Policy",),
        primary_topics=("Trade Policy",),
        people=("Lutnick",),
        companies=("Ford",),
        domains=("reuters.com",),
        stock_symbols=("F",),
        locations=("United States",),
        sources=("ft.com",),
    )
    save_filters(store, filters)
    assert load_filters(store) == filters


def test_missing_state_loads_defaults() -> None:
    store = MemoryStateStore()
    assert load_filters(store) == FilterState()
    assert load_sort_order(store) == SortOrder.NEWEST


def test_partial_blob_is_merged_over_defaults() -> None:
    blob = json.dumps({"search": "fed", "categories": ["Markets"]})
    store = MemoryStateStore({FILTERS_KEY: blob})
    filters = load_filters(store)
    assert filters.search == "fed"
    assert filters.categories == ("Markets",)
    assert filters.time_range == TimeRange()
    assert filters.people == ()


def test_invalid_blob_is_ignored() -> None:
    store = MemoryStateStore({FILTERS_KEY: "not json"})
    assert load_filters(store) == FilterState()

    store = MemoryStateStore({FILTERS_KEY: json.dumps({"categories": "Markets", "search": 5})})
    assert load_filters(store) == FilterState()


def test_sort_order_round_trip() -> None:
    store = MemoryStateStore()
    save_sort_order(store, SortOrder.OLDEST)
    assert store.get(SORT_ORDER_KEY) == "oldest"
    assert load_sort_order(store) == SortOrder.OLDEST


def test_invalid_sort_order_is_ignored() -> None:
    store = MemoryStateStore({SORT_ORDER_KEY: "popular"})
    assert load_sort_order(store) == SortOrder.NEWEST


class TestJsonFileStateStore:
    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "state" / "feed.json"
        save_filters(JsonFileStateStore(path), FilterState(categories=("Markets",)))

        assert path.exists()
        assert load_filters(JsonFileStateStore(path)).categories == ("Markets",)

    def test_keeps_other_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "feed.json"
        store = JsonFileStateStore(path)
        store.set("a", "1")
        store.set("b", "2")
        assert json.loads(path.read_text()) == {"a": "1", "b": "2"}

    def test_corrupt_file_starts_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "feed.json"
        path.write_text("{broken")
        store = JsonFileStateStore(path)
        assert store.get(FILTERS_KEY) is None
        store.set(SORT_ORDER_KEY, "oldest")
        assert json.loads(path.read_text()) == {SORT_ORDER_KEY: "oldest"}

    def test_missing_file(self, tmp_path: Path) -> None:
        store = JsonFileStateStore(tmp_path / "absent.json")
        assert store.get(FILTERS_KEY) is None
        assert store.path == tmp_path / "absent.json"
