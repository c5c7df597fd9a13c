"""Article fetcher backed by the Supabase REST (PostgREST) API."""

import logging
import os

import httpx

from finfeed.data import Article
from finfeed.errors import ConfigurationError, UpstreamError
from finfeed.fetch.rows import ARTICLE_COLUMNS, map_article_rows

logger = logging.getLogger(__name__)


class SupabaseArticleFetcher:
    """Load the most recent articles from a Supabase table.

    Args:
        url: Project URL (defaults to SUPABASE_URL env var).
        api_key: Anon or service key (defaults to SUPABASE_ANON_KEY env var).
        table: Table holding article rows.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        api_key: str | None = None,
        table: str = "articles",
        timeout: float = 30.0,
    ) -> None:
        self._url = url or os.environ.get("SUPABASE_URL")
        if not self._url:
            raise ConfigurationError("Missing server env var: SUPABASE_URL")
        self._api_key = api_key or os.environ.get("SUPABASE_ANON_KEY")
        if not self._api_key:
            raise ConfigurationError("Missing server env var: SUPABASE_ANON_KEY")
        self._table = table
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self._url.rstrip('/')}/rest/v1/{self._table}"

    async def fetch(self, *, limit: int = 200) -> list[Article]:
        """Fetch up to ``limit`` articles, newest first.

        Raises:
            UpstreamError: The API answered with a failure status or non-JSON body.
        """
        params = {
            "select": ",".join(ARTICLE_COLUMNS),
            "order": "published_at.desc",
            "limit": str(limit),
        }
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(self.endpoint, params=params, headers=headers)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamError(f"Article request failed: {status}", status_code=status) from e
        try:
            rows = response.json()
        except ValueError as e:
            raise UpstreamError("Article source returned non-JSON response") from e
        if not isinstance(rows, list):
            raise UpstreamError("Article source returned an unexpected payload")

        articles = map_article_rows(rows)
        logger.info(f"Fetched {len(articles)} articles from {self._table}")
        return articles
