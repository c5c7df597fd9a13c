"""Tests for the ownership API."""

from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from finfeed.api import create_app
from finfeed.api.routes import CACHE_CONTROL
from finfeed.data import OwnerRow, OwnershipResult
from finfeed.errors import UpstreamError
from finfeed.ownership import OwnershipPipeline, TTLCache


class StubClient:
    """Holdings backend returning one filing, or raising a fixed error."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error

    async def search_holdings(self, query: str, **kwargs: Any) -> list[dict[str, Any]]:
        if self.error is not None:
            raise self.error
        return [
            {
                "cik": "1",
                "companyName": "Fund A",
                "periodOfReport": "2024-12-31",
                "filedAt": "2025-01-15T10:00:00Z",
                "holdings": [
                    {
                        "ticker": "AAPL",
                        "shrsOrPrnAmt": {"sshPrnamt": 1000, "sshPrnamtType": "SH"},
                        "value": 50.0,
                    },
                    {
                        "ticker": "MSFT",
                        "shrsOrPrnAmt": {"sshPrnamt": 10, "sshPrnamtType": "SH"},
                        "value": 50.0,
                    },
                ],
            }
        ]

    async def resolve_cik_name(self, cik: str) -> str | None:
        return None


def make_client(stub: StubClient, cache: TTLCache[OwnershipResult] | None = None) -> TestClient:
    return TestClient(create_app(pipeline=OwnershipPipeline(stub, cache=cache)))


def test_root() -> None:
    response = make_client(StubClient()).get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "finfeed API"


@pytest.mark.parametrize("path", ["/api/stocks/ownership", "/api/stocks/ownership?symbol=%20%20"])
def test_missing_symbol(path: str) -> None:
    response = make_client(StubClient()).get(path)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required query param: symbol"}


def test_ownership_success() -> None:
    response = make_client(StubClient()).get("/api/stocks/ownership", params={"symbol": "aapl"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == CACHE_CONTROL
    body = response.json()
    assert body["symbol"] == "AAPL"
    assert body["owners"] == [
        {
            "name": "Fund A",
            "share": 1000,
            "change": 0,
            "portfolioPercent": 50.0,
            "filingDate": "2024-12-31",
        }
    ]
    assert body["updatedAt"].endswith("Z")
    assert "cached" not in body


def test_second_request_is_served_from_cache() -> None:
    client = make_client(StubClient())
    client.get("/api/stocks/ownership", params={"symbol": "AAPL"})
    response = client.get("/api/stocks/ownership", params={"symbol": "AAPL"})
    assert response.json()["cached"] is True


@pytest.mark.parametrize(
    "error",
    [
        UpstreamError("Holdings search request failed: 503", status_code=503),
        httpx.ConnectError("connection refused"),
    ],
)
def test_upstream_failure(error: Exception) -> None:
    client = make_client(StubClient(error))
    response = client.get("/api/stocks/ownership", params={"symbol": "AAPL"})
    assert response.status_code == 502
    assert response.json()["error"] == str(error)


def test_filing_parse_failure_is_a_bad_gateway(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(filings: list[dict[str, Any]], symbol: str) -> dict[str, Any]:
        raise ValueError("bad filing")

    monkeypatch.setattr("finfeed.ownership.pipeline.accumulate_positions", broken)

    response = make_client(StubClient()).get("/api/stocks/ownership", params={"symbol": "AAPL"})
    assert response.status_code == 502
    assert response.json() == {"error": "bad filing"}


def test_stale_result_has_no_cache_header() -> None:
    now = [0.0]
    cache: TTLCache[OwnershipResult] = TTLCache(60, clock=lambda: now[0])
    expired = OwnershipResult("AAPL", (OwnerRow("Fund A", 10),), "2025-01-01T00:00:00.000Z")
    cache.set("AAPL", expired)
    now[0] = 120.0

    response = make_client(StubClient(UpstreamError("down")), cache).get(
        "/api/stocks/ownership", params={"symbol": "AAPL"}
    )

    assert response.status_code == 200
    assert "cache-control" not in response.headers
    body = response.json()
    assert body["stale"] is True
    assert body["cached"] is True
    assert body["owners"][0]["name"] == "Fund A"


def test_missing_api_key_is_a_server_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEC_API_KEY", raising=False)
    client = TestClient(create_app())

    response = client.get("/api/stocks/ownership", params={"symbol": "AAPL"})
    assert response.status_code == 500
    assert response.json() == {"error": "Missing server env var: SEC_API_KEY"}


def test_missing_symbol_checked_before_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEC_API_KEY", raising=False)
    response = TestClient(create_app()).get("/api/stocks/ownership")
    assert response.status_code == 400
