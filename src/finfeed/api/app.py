"""FastAPI application for the finfeed API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from finfeed.api import routes
from finfeed.config.models import FinfeedConfig
from finfeed.errors import ConfigurationError, UpstreamError
from finfeed.ownership.pipeline import OwnershipPipeline
from finfeed.run_logger import RunLogger

API_VERSION = "0.1.0"


async def _configuration_error(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=500)


async def _upstream_error(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=502)


def create_app(
    config: FinfeedConfig | None = None,
    *,
    pipeline: OwnershipPipeline | None = None,
    run_logger: RunLogger | None = None,
) -> FastAPI:
    """Create the API application.

    Args:
        config: Root configuration (defaults apply when None).
        pipeline: Ownership pipeline to serve. Built from ``config`` on the
            first request when None.
        run_logger: Passed to a pipeline built from ``config``.
    """
    app = FastAPI(
        title="finfeed API",
        description="Institutional ownership data for the financial news feed",
        version=API_VERSION,
    )
    app.state.config = config or FinfeedConfig()
    app.state.ownership_pipeline = pipeline
    app.state.run_logger = run_logger

    app.add_exception_handler(ConfigurationError, _configuration_error)
    app.add_exception_handler(UpstreamError, _upstream_error)
    app.include_router(routes.router)

    @app.get("/")
    async def root():
        """API root - returns basic info."""
        return {
            "name": "finfeed API",
            "version": API_VERSION,
            "docs": "/docs",
        }

    return app


def serve(config: FinfeedConfig, *, run_logger: RunLogger | None = None) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        create_app(config, run_logger=run_logger),
        host=config.api.host,
        port=config.api.port,
    )
