from typing import Protocol

from finfeed.data import Article


class ArticleFetcher(Protocol):
    """Interface for loading the article collection from a row source."""

    async def fetch(self, *, limit: int = 200) -> list[Article]:
        """Fetch the most recent articles.

        Args:
            limit: Maximum number of articles to return.

        Returns:
            Articles ordered newest first.
        """
        ...
