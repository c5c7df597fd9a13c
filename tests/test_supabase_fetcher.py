"""Tests for SupabaseArticleFetcher."""

from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from finfeed.data import Article
from finfeed.errors import ConfigurationError, UpstreamError
from finfeed.fetch import SupabaseArticleFetcher


@pytest.fixture
def rows() -> list[dict[str, Any]]:
    """Sample PostgREST response body."""
    return [
        {
            "id": 1,
            "headline": "Oil slides on supply news",
            "category": "Markets",
            "sources": "Reuters",
            "published_at": "2025-06-10T12:00:00Z",
        },
        {
            "id": 2,
            "headline": "Chipmakers rally",
            "category": "Technology",
            "sources": ["https://www.bloomberg.com/x"],
            "published_at": "2025-06-09T12:00:00Z",
        },
    ]


@pytest.fixture
def fetcher() -> SupabaseArticleFetcher:
    return SupabaseArticleFetcher(url="https://project.supabase.co/", api_key="anon-key")


def _response(
    payload: Any = None, *, status_code: int = 200, json_error: bool = False
) -> MagicMock:
    response = MagicMock()
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    if status_code >= 400:
        request = httpx.Request("GET", "https://project.supabase.co/rest/v1/articles")
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "failed",
            request=request,
            response=httpx.Response(status_code, request=request),
        )
    else:
        response.raise_for_status = MagicMock()
    return response


def test_init_requires_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """Should raise if no project URL is configured."""
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    with pytest.raises(ConfigurationError, match="SUPABASE_URL"):
        SupabaseArticleFetcher(api_key="anon-key")


def test_init_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Should raise if no API key is configured."""
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    with pytest.raises(ValueError, match="SUPABASE_ANON_KEY"):
        SupabaseArticleFetcher(url="https://project.supabase.co")


def test_init_uses_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Should read SUPABASE_URL and SUPABASE_ANON_KEY when nothing is passed."""
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "env-key")
    fetcher = SupabaseArticleFetcher(table="stories")
    assert fetcher.endpoint == "https://env.supabase.co/rest/v1/stories"
    assert fetcher._api_key == "env-key"


async def test_fetch_maps_rows(
    fetcher: SupabaseArticleFetcher,
    rows: list[dict[str, Any]],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Should return one Article per row, in response order."""

    async def mock_get(*args: Any, **kwargs: Any) -> MagicMock:
        return _response(rows)

    monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

    articles = await fetcher.fetch()

    assert len(articles) == 2
    assert all(isinstance(a, Article) for a in articles)
    assert articles[0].title == "Oil slides on supply news"
    assert articles[0].source.name == "Reuters"
    assert articles[1].source.domain == "www.bloomberg.com"


async def test_fetch_request_shape(
    fetcher: SupabaseArticleFetcher,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Should query the table newest first with the key in both auth headers."""
    captured: dict[str, Any] = {}

    async def mock_get(self: Any, url: str, **kwargs: Any) -> MagicMock:
        captured["url"] = url
        captured.update(kwargs)
        return _response([])

    monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

    assert await fetcher.fetch(limit=25) == []
    assert captured["url"] == "https://project.supabase.co/rest/v1/articles"
    assert captured["params"]["order"] == "published_at.desc"
    assert captured["params"]["limit"] == "25"
    assert "headline" in captured["params"]["select"].split(",")
    assert captured["headers"]["apikey"] == "anon-key"
    assert captured["headers"]["Authorization"] == "Bearer anon-key"


async def test_fetch_error_status(
    fetcher: SupabaseArticleFetcher,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Should raise UpstreamError carrying the status code."""

    async def mock_get(*args: Any, **kwargs: Any) -> MagicMock:
        return _response(status_code=503)

    monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

    with pytest.raises(UpstreamError, match="503") as excinfo:
        await fetcher.fetch()
    assert excinfo.value.status_code == 503


async def test_fetch_non_json_body(
    fetcher: SupabaseArticleFetcher,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Should raise UpstreamError when the body is not JSON."""

    async def mock_get(*args: Any, **kwargs: Any) -> MagicMock:
        return _response(json_error=True)

    monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

    with pytest.raises(UpstreamError, match="non-JSON"):
        await fetcher.fetch()


async def test_fetch_unexpected_payload(
    fetcher: SupabaseArticleFetcher,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Should reject a JSON object where a row list is expected."""

    async def mock_get(*args: Any, **kwargs: Any) -> MagicMock:
        return _response({"message": "permission denied"})

    monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

    with pytest.raises(UpstreamError, match="unexpected payload"):
        await fetcher.fetch()
