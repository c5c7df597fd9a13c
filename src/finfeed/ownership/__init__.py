"""Institutional ownership aggregation over 13F filings."""

from finfeed.ownership.base import HoldingsClient
from finfeed.ownership.cache import TTLCache
from finfeed.ownership.client import SecApiClient
from finfeed.ownership.pipeline import (
    FilerPosition,
    OwnershipPipeline,
    accumulate_positions,
    extract_position,
    rank_positions,
)

__all__ = [
    "FilerPosition",
    "HoldingsClient",
    "OwnershipPipeline",
    "SecApiClient",
    "TTLCache",
    "accumulate_positions",
    "extract_position",
    "rank_positions",
]
