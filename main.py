#!/usr/bin/env python
"""CLI for the finfeed article feed and ownership pipeline."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator, model_validator

from finfeed.api import serve
from finfeed.config import create_feed, create_from_config, get_default_config_path, load_config
from finfeed.config.factory import create_run_logger
from finfeed.errors import FinfeedError

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: Literal["feed", "ownership", "serve"]
    config: Path
    query: str = ""
    page: int = 1
    symbol: str | None = None
    host: str | None = None
    port: int | None = None
    log: bool = False
    log_dir: str = "logs"

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v

    @model_validator(mode="after")
    def ownership_needs_symbol(self) -> "CLIArgs":
        if self.symbol is not None:
            self.symbol = self.symbol.strip().upper() or None
        if self.command == "ownership" and self.symbol is None:
            raise ValueError("A ticker symbol is required for the ownership command")
        return self


async def run_feed(args: CLIArgs) -> None:
    """Load articles, apply filters from a query string and print one page."""
    config = load_config(args.config)
    feed = create_feed(config)
    await feed.mount(args.query)
    if feed.error:
        raise FinfeedError(feed.error)
    feed.set_page(args.page)

    logger.info(
        f"{len(feed.filtered_articles)} of {len(feed.articles)} articles match "
        f"({feed.active_filter_count} active filters, sort: {feed.sort_order})"
    )
    logger.info(f"Page {feed.page}/{feed.total_pages}\n")
    for article in feed.paginated_articles:
        logger.info(f"- {article.title}")
        published = f"{article.published_at:%Y-%m-%d %H:%M}"
        logger.info(f"  {article.source.name} | {article.category} | {published}")
        if article.primary_topic:
            logger.info(f"  Topic: {article.primary_topic}")

    groups = feed.topic_groups
    if groups:
        logger.info("\n--- Topics ---")
        for group in groups:
            logger.info(f"{group.main} ({group.count})")
            for subtopic in group.subtopics:
                logger.info(f"   {subtopic}")


async def run_ownership(args: CLIArgs) -> None:
    """Run the ownership pipeline once for a symbol."""
    config = load_config(args.config)
    pipeline, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )
    result = await pipeline.get(args.symbol or "")

    logger.info(f"\nTop holders of {result.symbol} (updated {result.updated_at}):\n")
    if not result.owners:
        logger.info("No 13F holdings found.")
    for i, owner in enumerate(result.owners, 1):
        logger.info(f"{i:>2}. {owner.name}")
        logger.info(
            f"    {owner.share:,} shares | {owner.portfolio_percent:.2f}% of portfolio | "
            f"period {owner.filing_date}"
        )

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


def run_serve(args: CLIArgs) -> None:
    """Run the HTTP API."""
    config = load_config(args.config)
    overrides = {k: v for k, v in {"host": args.host, "port": args.port}.items() if v is not None}
    if overrides:
        config = config.model_copy(update={"api": config.api.model_copy(update=overrides)})
    run_logger = create_run_logger(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )
    logger.info(f"Serving on http://{config.api.host}:{config.api.port}")
    serve(config, run_logger=run_logger)


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Financial news feed and institutional ownership.")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable ownership run logging to JSON files",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    feed_parser = subparsers.add_parser("feed", help="Print one page of the filtered article feed")
    feed_parser.add_argument(
        "--query",
        "-q",
        default="",
        help='Filter query string, e.g. "categories=Markets&timeRange=week&sort=oldest"',
    )
    feed_parser.add_argument("--page", "-p", type=int, default=1, help="Page number (default: 1)")

    ownership_parser = subparsers.add_parser("ownership", help="Show top institutional holders")
    ownership_parser.add_argument("symbol", help="Ticker symbol, e.g. AAPL")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address (default from config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default from config)")

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    load_dotenv()

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command=ns.command,
            config=config_path,
            query=getattr(ns, "query", ""),
            page=getattr(ns, "page", 1),
            symbol=getattr(ns, "symbol", None),
            host=getattr(ns, "host", None),
            port=getattr(ns, "port", None),
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        if args.command == "serve":
            run_serve(args)
        elif args.command == "ownership":
            asyncio.run(run_ownership(args))
        else:
            asyncio.run(run_feed(args))
    except FinfeedError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
