"""Client for the SEC-API 13F holdings search and CIK mapping endpoints."""

import logging
import os
from typing import Any

import httpx

from finfeed.errors import ConfigurationError, UpstreamError

SEC_API_BASE_URL = "https://api.sec-api.io"
HOLDINGS_PATH = "/form-13f/holdings"
CIK_MAPPING_PATH = "/mapping/cik"

logger = logging.getLogger(__name__)


def _decode_json(response: httpx.Response, what: str) -> Any:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise UpstreamError(f"{what} request failed: {status}", status_code=status) from e
    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(f"{what} returned non-JSON response") from e


class SecApiClient:
    """Query 13F holdings filings and resolve filer names.

    Args:
        api_key: SEC-API token (defaults to SEC_API_KEY env var).
        base_url: API root, overridable for tests and proxies.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str = SEC_API_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("SEC_API_KEY")
        if not self._api_key:
            raise ConfigurationError("Missing server env var: SEC_API_KEY")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def search_holdings(
        self,
        query: str,
        *,
        from_: int = 0,
        size: int = 50,
        sort: list[dict[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        """Run one page of a holdings search.

        Args:
            query: Lucene-style query, e.g. ``holdings.ticker:AAPL``.
            from_: Offset of the first filing to return.
            size: Page size.
            sort: Sort clauses, e.g. ``[{"filedAt": {"order": "desc"}}]``.

        Returns:
            The filings on this page.

        Raises:
            UpstreamError: Non-2xx status or a body that is not JSON.
        """
        body: dict[str, Any] = {"query": query, "from": str(from_), "size": str(size)}
        if sort:
            body["sort"] = sort

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                f"{self._base_url}{HOLDINGS_PATH}",
                params={"token": self._api_key},
                json=body,
                headers={"Accept": "application/json"},
            )

        payload = _decode_json(response, "Holdings search")
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            return []
        return [filing for filing in data if isinstance(filing, dict)]

    async def resolve_cik_name(self, cik: str) -> str | None:
        """Look up the registered name for a CIK.

        Returns:
            The name, or None when the mapping has no entry.

        Raises:
            UpstreamError: Non-2xx status or a body that is not JSON.
        """
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(
                f"{self._base_url}{CIK_MAPPING_PATH}/{cik}",
                params={"token": self._api_key},
                headers={"Accept": "application/json"},
            )

        payload = _decode_json(response, "CIK mapping")
        entries = payload if isinstance(payload, list) else [payload]
        for entry in entries:
            if isinstance(entry, dict):
                name = entry.get("name")
                if isinstance(name, str) and name.strip():
                    return name.strip()
        return None
