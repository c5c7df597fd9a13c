"""Tests for data models."""

import dataclasses

import pytest

from finfeed.data import (
    FilterCounts,
    FilterState,
    OwnerRow,
    OwnershipResult,
    SortOrder,
    TimePreset,
    TimeRange,
)


def test_filter_state_defaults() -> None:
    filters = FilterState()
    assert filters.search == ""
    assert filters.time_range == TimeRange(preset=TimePreset.ALL)
    assert filters.categories == ()
    assert filters.sources == ()
    assert filters.active_count == 0


def test_filter_state_deduplicates_list_fields() -> None:
    filters = FilterState(categories=("Markets", "Finance", "Markets"), people=["Powell", "Powell"])
    assert filters.categories == ("Markets", "Finance")
    assert filters.people == ("Powell",)


def test_filter_state_is_frozen() -> None:
    filters = FilterState()
    with pytest.raises(dataclasses.FrozenInstanceError):
        filters.search = "fed"  # type: ignore[misc]


def test_with_field_replaces_one_field() -> None:
    filters = FilterState(search="fed", categories=("Markets",))
    updated = filters.with_field("categories", ["Technology", "Technology"])
    assert updated.categories == ("Technology",)
    assert updated.search == "fed"
    assert filters.categories == ("Markets",)


def test_with_field_rejects_unknown_field() -> None:
    with pytest.raises(KeyError, match="Unknown filter field"):
        FilterState().with_field("colour", "red")


def test_active_count() -> None:
    filters = FilterState(
        search="rates",
        time_range=TimeRange(preset=TimePreset.WEEK),
        categories=("Markets",),
        domains=("reuters.com",),
    )
    assert filters.active_count == 4


def test_filter_states_compare_by_value() -> None:
    assert FilterState(categories=("A",)) == FilterState(categories=["A"])
    assert hash(FilterState(categories=("A",))) == hash(FilterState(categories=("A",)))


def test_filter_counts_start_empty() -> None:
    counts = FilterCounts()
    assert counts.categories == {}
    assert counts.locations == {}


def test_sort_order_values() -> None:
    assert SortOrder("newest") is SortOrder.NEWEST
    assert SortOrder.RELEVANT.value == "relevant"
    assert TimePreset("3months") is TimePreset.THREE_MONTHS


def test_owner_row_to_dict_uses_wire_names() -> None:
    row = OwnerRow(
        name="Vanguard Group Inc", share=1200, portfolio_percent=2.5, filing_date="2024-12-31"
    )
    assert row.to_dict() == {
        "name": "Vanguard Group Inc",
        "share": 1200,
        "change": 0,
        "portfolioPercent": 2.5,
        "filingDate": "2024-12-31",
    }


def test_ownership_payload_omits_unset_flags() -> None:
    result = OwnershipResult(symbol="AAPL", owners=(), updated_at="2025-01-01T00:00:00.000Z")
    assert result.to_payload() == {
        "symbol": "AAPL",
        "owners": [],
        "updatedAt": "2025-01-01T00:00:00.000Z",
    }


def test_ownership_payload_includes_flags() -> None:
    result = OwnershipResult(symbol="AAPL", updated_at="x", cached=True, stale=True)
    payload = result.to_payload()
    assert payload["cached"] is True
    assert payload["stale"] is True
