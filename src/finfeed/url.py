"""URL handling utilities."""

import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def extract_domain(url: str) -> str:
    """Extract the host name from a URL.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The host name, or an empty string when the URL has none.
    """
    try:
        return urlparse(url.strip()).hostname or ""
    except ValueError:
        logger.debug(f"Could not parse url {url}")
        return ""


def display_name_from_domain(domain: str) -> str:
    """Derive a publisher name from a domain: ``www.reuters.com`` -> ``Reuters``."""
    base = domain.removeprefix("www.").split(".")[0]
    return base[:1].upper() + base[1:] if base else ""
