"""Article row sources."""

from finfeed.fetch.base import ArticleFetcher
from finfeed.fetch.rows import map_article_row, map_article_rows, parse_sources
from finfeed.fetch.supabase import SupabaseArticleFetcher

__all__ = [
    "ArticleFetcher",
    "SupabaseArticleFetcher",
    "map_article_row",
    "map_article_rows",
    "parse_sources",
]
