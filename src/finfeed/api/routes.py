"""Stock ownership API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from finfeed.config.factory import create_ownership_pipeline
from finfeed.config.models import FinfeedConfig
from finfeed.ownership.pipeline import OwnershipPipeline

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=0, s-maxage=86400, stale-while-revalidate=3600"

router = APIRouter(prefix="/api/stocks", tags=["stocks"])


def get_pipeline(app: FastAPI) -> OwnershipPipeline:
    """Return the app's ownership pipeline, creating it on first use.

    Raises:
        ConfigurationError: If SEC_API_KEY is not set.
    """
    pipeline: OwnershipPipeline | None = getattr(app.state, "ownership_pipeline", None)
    if pipeline is None:
        config: FinfeedConfig = app.state.config
        pipeline = create_ownership_pipeline(
            config.ownership, run_logger=getattr(app.state, "run_logger", None)
        )
        app.state.ownership_pipeline = pipeline
    return pipeline


@router.get("/ownership")
async def get_ownership(
    request: Request,
    symbol: Annotated[str | None, Query(description="Ticker symbol, e.g. AAPL")] = None,
) -> JSONResponse:
    """Top 10 institutional holders of a stock from its latest 13F period.

    Stale data is served, flagged with ``stale: true``, when the upstream
    search fails and an expired result is cached.
    """
    if not symbol or not symbol.strip():
        return JSONResponse({"error": "Missing required query param: symbol"}, status_code=400)

    pipeline = get_pipeline(request.app)
    try:
        result = await pipeline.get(symbol)
    except Exception as e:
        logger.warning(f"Ownership lookup failed for {symbol}: {e}")
        return JSONResponse({"error": str(e) or "Failed to query holdings"}, status_code=502)

    headers = {} if result.stale else {"cache-control": CACHE_CONTROL}
    return JSONResponse(result.to_payload(), headers=headers)
