"""Pydantic configuration models for finfeed components."""

from typing import Literal

from pydantic import BaseModel, Field

# ============================================================
# Feed Config
# ============================================================


class FeedConfig(BaseModel):
    """Configuration for the news feed controller."""

    page_size: int = Field(default=7, ge=1)
    debounce_seconds: float = Field(default=0.5, ge=0)
    path: str = "/"
    state_path: str | None = None

    model_config = {"frozen": True}


# ============================================================
# Article Source Configs
# ============================================================


class SupabaseArticlesConfig(BaseModel):
    """Configuration for SupabaseArticleFetcher."""

    type: Literal["supabase"] = "supabase"
    table: str = "articles"
    limit: int = Field(default=200, ge=1)
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


# ============================================================
# Ownership Config
# ============================================================


class OwnershipConfig(BaseModel):
    """Configuration for the 13F ownership pipeline."""

    cache_ttl_hours: float = 24.0
    name_cache_ttl_days: float = 7.0
    cache_max_entries: int = Field(default=1024, ge=1)
    page_size: int = Field(default=50, ge=1)
    offset_cap: int = Field(default=10_000, ge=1)
    top_n: int = Field(default=10, ge=1)
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


# ============================================================
# API Config
# ============================================================


class ApiConfig(BaseModel):
    """Configuration for the HTTP server."""

    host: str = "127.0.0.1"
    port: int = 8000

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for ownership run logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class FinfeedConfig(BaseModel):
    """Root configuration for finfeed."""

    feed: FeedConfig = Field(default_factory=FeedConfig)
    articles: SupabaseArticlesConfig = Field(default_factory=SupabaseArticlesConfig)
    ownership: OwnershipConfig = Field(default_factory=OwnershipConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
