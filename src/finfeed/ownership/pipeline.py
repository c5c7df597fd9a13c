"""Top institutional owners of a stock from its latest 13F filing period."""

import asyncio
import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

from finfeed.data import OwnerRow, OwnershipResult
from finfeed.ownership.base import HoldingsClient
from finfeed.ownership.cache import DEFAULT_MAX_ENTRIES, TTLCache
from finfeed.run_logger import RunLogger, RunRecord

logger = logging.getLogger(__name__)

OWNERSHIP_TTL_SECONDS = 24 * 60 * 60
NAME_TTL_SECONDS = 7 * 24 * 60 * 60
PAGE_SIZE = 50
OFFSET_CAP = 10_000
TOP_N = 10

_LATEST_FIRST = [{"periodOfReport": {"order": "desc"}}]
_NEWEST_FILED_FIRST = [{"filedAt": {"order": "desc"}}]

_EPOCH = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class FilerPosition:
    """One filer's position in the symbol, taken from a single filing."""

    cik: str
    name: str
    share: int
    portfolio_percent: float
    filing_date: str
    filed_at: datetime


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _parse_filed_at(value: Any) -> datetime:
    if not isinstance(value, str) or not value.strip():
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return _EPOCH
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def _find_holding(holdings: list[Any], symbol: str) -> dict[str, Any] | None:
    """First share (non-option, non-principal) holding whose ticker matches ``symbol``."""
    for holding in holdings:
        if not isinstance(holding, dict):
            continue
        ticker = holding.get("ticker")
        if not isinstance(ticker, str) or ticker.upper() != symbol:
            continue
        put_call = holding.get("putCall")
        if isinstance(put_call, str) and put_call.strip():
            continue
        amount = holding.get("shrsOrPrnAmt")
        if isinstance(amount, dict) and amount.get("sshPrnamtType") not in (None, "SH"):
            continue
        return holding
    return None


def extract_position(filing: dict[str, Any], symbol: str) -> FilerPosition | None:
    """Read the filer's position in ``symbol`` out of one 13F filing.

    Returns:
        The position, or None when the filing has no usable share holding.
    """
    holdings = filing.get("holdings")
    if not isinstance(holdings, list):
        return None
    holding = _find_holding(holdings, symbol)
    if holding is None:
        return None

    amount = holding.get("shrsOrPrnAmt")
    amount = amount if isinstance(amount, dict) else {}
    shares = _number(amount.get("sshPrnamt"))
    if shares is None or shares <= 0:
        return None

    raw_cik = filing.get("cik")
    cik = str(raw_cik).strip() if raw_cik is not None else ""
    if not cik:
        return None
    company = filing.get("companyName")
    name = company.strip() if isinstance(company, str) and company.strip() else cik

    total_value = sum(
        value
        for h in holdings
        if isinstance(h, dict) and (value := _number(h.get("value"))) is not None
    )
    position_value = _number(holding.get("value")) or 0.0
    percent = position_value / total_value * 100 if total_value > 0 and position_value > 0 else 0.0

    period = filing.get("periodOfReport")
    return FilerPosition(
        cik=cik,
        name=name,
        share=int(shares),
        portfolio_percent=percent,
        filing_date=period[:10] if isinstance(period, str) else "",
        filed_at=_parse_filed_at(filing.get("filedAt")),
    )


def accumulate_positions(filings: list[dict[str, Any]], symbol: str) -> dict[str, FilerPosition]:
    """Key positions by filer CIK, keeping the latest-filed one per filer."""
    by_cik: dict[str, FilerPosition] = {}
    for filing in filings:
        position = extract_position(filing, symbol)
        if position is None:
            continue
        existing = by_cik.get(position.cik)
        if existing is None or position.filed_at > existing.filed_at:
            by_cik[position.cik] = position
    return by_cik


def rank_positions(positions: list[FilerPosition], top_n: int = TOP_N) -> list[FilerPosition]:
    return sorted(positions, key=lambda p: p.share, reverse=True)[:top_n]


class OwnershipPipeline:
    """Aggregate 13F filings into the top holders of a symbol.

    Flow:
    1. Serve a fresh cached result if present
    2. Find the most recent period of report filed for the symbol
    3. Scan every filing of that period, page by page
    4. Keep one position per filer, rank by shares, take the top N
    5. Resolve names of filers known only by CIK
    6. Cache the result

    Failures while searching and parsing filings (steps 2-4, up to ranking)
    fall back to a stale cached result when one exists and are raised
    otherwise.

    Args:
        client: Holdings search backend.
        cache: Result cache keyed by symbol (24h TTL by default).
        name_cache: Filer name cache keyed by CIK (7 day TTL by default).
        page_size: Filings per search page.
        offset_cap: Scan stops once the offset reaches this value.
        top_n: Number of owners returned.
        run_logger: Optional RunLogger for stage logging.
        now: Wall clock used for ``updatedAt``.
    """

    def __init__(
        self,
        client: HoldingsClient,
        *,
        cache: TTLCache[OwnershipResult] | None = None,
        name_cache: TTLCache[str] | None = None,
        page_size: int = PAGE_SIZE,
        offset_cap: int = OFFSET_CAP,
        top_n: int = TOP_N,
        run_logger: RunLogger | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        if cache is None:
            cache = TTLCache(OWNERSHIP_TTL_SECONDS, max_entries=DEFAULT_MAX_ENTRIES)
        if name_cache is None:
            name_cache = TTLCache(NAME_TTL_SECONDS, max_entries=DEFAULT_MAX_ENTRIES)
        self._cache = cache
        self._name_cache = name_cache
        self._page_size = page_size
        self._offset_cap = offset_cap
        self._top_n = top_n
        self._run_logger = run_logger
        self._now = now or (lambda: datetime.now(tz=UTC))

    @property
    def cache(self) -> TTLCache[OwnershipResult]:
        return self._cache

    @property
    def name_cache(self) -> TTLCache[str]:
        return self._name_cache

    async def get(self, symbol: str) -> OwnershipResult:
        """Return the top institutional owners of ``symbol``.

        Args:
            symbol: Ticker, case-insensitive.

        Returns:
            The result; ``cached`` marks a cache hit and ``stale`` a fallback
            to an expired entry after an upstream failure.

        Raises:
            ValueError: If the symbol is blank.
            UpstreamError: If the filings search fails and nothing is cached.
        """
        symbol = symbol.strip().upper()
        if not symbol:
            raise ValueError("symbol is required")

        cached = self._cache.get(symbol)
        if cached is not None:
            logger.info(f"Ownership cache hit for {symbol}")
            return replace(cached, cached=True)

        run: RunRecord | None = None
        if self._run_logger:
            run = self._run_logger.start_run("ownership", {"symbol": symbol})

        try:
            period = await self._latest_period(symbol, run)
            filings = await self._scan_period(symbol, period, run) if period else []
            positions = accumulate_positions(filings, symbol)
        except Exception:
            stale = self._cache.get(symbol, allow_stale=True)
            if stale is None:
                if self._run_logger:
                    self._run_logger.finish_run(run, None, outcome="error")
                raise
            logger.warning(
                f"Ownership lookup failed for {symbol}, serving stale data", exc_info=True
            )
            result = replace(stale, cached=True, stale=True)
            if self._run_logger:
                self._run_logger.finish_run(run, result, outcome="stale")
            return result

        if not period:
            logger.info(f"No 13F filings found for {symbol}")
            owners: list[OwnerRow] = []
        else:
            owners = await self._rank_and_name(positions, len(filings), run)

        result = OwnershipResult(
            symbol=symbol,
            owners=tuple(owners),
            updated_at=self._now().isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        )
        self._cache.set(symbol, result)

        if self._run_logger:
            self._run_logger.finish_run(run, result)
        return result

    async def _latest_period(self, symbol: str, run: RunRecord | None) -> str | None:
        """Phase 1: period of report of the newest filing holding ``symbol``."""
        start = time.monotonic()
        query = f"holdings.ticker:{symbol}"
        filings = await self._client.search_holdings(query, from_=0, size=1, sort=_LATEST_FIRST)

        period: str | None = None
        if filings:
            raw = filings[0].get("periodOfReport")
            if isinstance(raw, str) and raw.strip():
                period = raw.strip()[:10]

        if self._run_logger:
            self._run_logger.log_stage(
                run,
                "latest_period",
                type(self._client).__name__,
                input_data={"query": query},
                output_data={"period": period},
                upstream_requests=1,
                duration_seconds=time.monotonic() - start,
            )
        return period

    async def _scan_period(
        self, symbol: str, period: str, run: RunRecord | None
    ) -> list[dict[str, Any]]:
        """Phase 2: every filing of ``period`` holding ``symbol``."""
        start = time.monotonic()
        query = f'holdings.ticker:{symbol} AND periodOfReport:"{period}"'
        filings: list[dict[str, Any]] = []
        offset = 0
        requests = 0

        while True:
            page = await self._client.search_holdings(
                query, from_=offset, size=self._page_size, sort=_NEWEST_FILED_FIRST
            )
            requests += 1
            filings.extend(page)
            if len(page) < self._page_size:
                break
            offset += self._page_size
            if offset >= self._offset_cap:
                logger.warning(
                    f"Stopped scanning {symbol} filings at offset cap {self._offset_cap}"
                )
                break

        logger.info(f"Scanned {len(filings)} filings for {symbol} in period {period}")
        if self._run_logger:
            self._run_logger.log_stage(
                run,
                "scan_period",
                type(self._client).__name__,
                input_data={"query": query, "page_size": self._page_size},
                output_data={"filings": len(filings)},
                upstream_requests=requests,
                duration_seconds=time.monotonic() - start,
            )
        return filings

    async def _rank_and_name(
        self, positions: dict[str, FilerPosition], filing_count: int, run: RunRecord | None
    ) -> list[OwnerRow]:
        """Phase 3: rank one position per filer and resolve names."""
        start = time.monotonic()
        top = rank_positions(list(positions.values()), self._top_n)

        unnamed = [p.cik for p in top if p.name == p.cik]
        names = await self._resolve_names(unnamed)

        owners = [
            OwnerRow(
                name=names.get(p.cik, p.name),
                share=p.share,
                portfolio_percent=p.portfolio_percent,
                filing_date=p.filing_date,
            )
            for p in top
        ]

        if self._run_logger:
            self._run_logger.log_stage(
                run,
                "rank",
                type(self).__name__,
                input_data={"filings": filing_count, "filers": len(positions)},
                output_data=owners,
                upstream_requests=len(unnamed),
                duration_seconds=time.monotonic() - start,
            )
        return owners

    async def _resolve_names(self, ciks: list[str]) -> dict[str, str]:
        """Map CIKs to registered names. Lookups that fail are left out."""
        names: dict[str, str] = {}
        missing: list[str] = []
        for cik in ciks:
            cached = self._name_cache.get(cik)
            if cached is not None:
                names[cik] = cached
            else:
                missing.append(cik)

        results = await asyncio.gather(
            *(self._client.resolve_cik_name(cik) for cik in missing), return_exceptions=True
        )
        for cik, result in zip(missing, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(f"Could not resolve name for CIK {cik}: {result}")
                continue
            if result:
                self._name_cache.set(cik, result)
                names[cik] = result
        return names
