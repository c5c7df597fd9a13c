"""Shared fixtures."""

from collections.abc import Callable
from datetime import UTC, datetime
from itertools import count
from typing import Any

import pytest

from finfeed.data import Article, ArticleSource, Entities

ArticleFactory = Callable[..., Article]


@pytest.fixture
def make_article() -> ArticleFactory:
    """Build articles with sensible defaults; keyword arguments override fields."""
    ids = count(1)

    def _make(**overrides: Any) -> Article:
        defaults: dict[str, Any] = {
            "id": str(next(ids)),
            "title": "Markets open higher",
            "published_at": datetime(2025, 6, 10, tzinfo=UTC),
            "category": "Markets",
            "source": ArticleSource(name="Reuters", domain="reuters.com", logo="R"),
            "entities": Entities(),
        }
        defaults.update(overrides)
        return Article(**defaults)

    return _make
