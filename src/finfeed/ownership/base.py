from typing import Any, Protocol


class HoldingsClient(Protocol):
    """Interface for a 13F holdings search backend."""

    async def search_holdings(
        self,
        query: str,
        *,
        from_: int = 0,
        size: int = 50,
        sort: list[dict[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        """Return one page of filings matching a Lucene-style query.

        Args:
            query: Search query, e.g. ``holdings.ticker:AAPL``.
            from_: Offset of the first filing.
            size: Page size.
            sort: Sort clauses.

        Returns:
            Filing documents with ``cik``, ``companyName``, ``periodOfReport``,
            ``filedAt`` and ``holdings``.
        """
        ...

    async def resolve_cik_name(self, cik: str) -> str | None:
        """Return the registered name of a filer, or None when unknown."""
        ...
