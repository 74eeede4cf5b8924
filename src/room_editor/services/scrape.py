"""Listing scrape orchestration."""

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlparse

from room_editor.domain.errors import (
    InvalidInputError,
    NoDataError,
    UnsupportedSourceError,
)
from room_editor.domain.listings import ListingRecord
from room_editor.services.listings import normalize_listing

_logger = logging.getLogger(__name__)


class ListingScrapeProvider(Protocol):
    """Interface for the external listing scraper."""

    async def scrape(self, url: str) -> list[dict[str, object]]:
        """Run a scrape to completion and return the raw items."""


@dataclass
class ScrapeService:
    """Fetches a listing page through the provider and normalizes it."""

    provider: ListingScrapeProvider
    allowed_domains: frozenset[str] | None = None

    async def scrape_listing(self, url: str) -> ListingRecord:
        """Scrape a listing URL and return its normalized record."""
        if not url or not url.strip():
            raise InvalidInputError("URL is required")
        url = url.strip()
        if not is_supported_source(url, self.allowed_domains):
            raise UnsupportedSourceError(f"Unsupported listing source: {url}")

        try:
            items = await self.provider.scrape(url)
        except Exception as exc:
            _logger.warning("Listing scrape failed for %s: %s", url, exc)
            raise NoDataError(f"Failed to scrape property: {exc}") from exc

        if not items:
            raise NoDataError(
                "No data returned from scraper. The property might be unavailable "
                "or the URL format is incorrect."
            )
        _logger.info("Scraped %s items for %s", len(items), url)
        return normalize_listing(items[0])


def is_supported_source(url: str, allowed_domains: frozenset[str] | None) -> bool:
    """Return whether the URL's host belongs to one of the allowed domains."""
    if allowed_domains is None:
        return True
    host = (urlparse(url).hostname or "").lower()
    return any(
        host == domain or host.endswith(f".{domain}") for domain in allowed_domains
    )
