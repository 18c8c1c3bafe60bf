# ==============================================================================
#  Copyright 2025 Matthew Pounsett <matt@conundrum.com>
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
# ==============================================================================
"""Catalog scraper: fetches every listing page and merges the variants."""

import logging
from collections.abc import Callable

import httpx
from furl import furl
from pydantic import BaseModel

from smartphone_scraper.config import ScraperConfig
from smartphone_scraper.extractor import discover_pages, extract_products
from smartphone_scraper.models import Product, merge_unique, sort_products

logger = logging.getLogger(__name__)


class PageResult(BaseModel):
    """Outcome of scraping a single catalog page."""

    page: int
    products: list[Product] = []
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the page was fetched and extracted."""
        return self.error is None


class ScrapeResult(BaseModel):
    """Outcome of a whole run."""

    products: list[Product] = []
    failed_pages: dict[int, str] = {}
    warnings: list[str] = []


class CatalogScraper:
    """Scraper for the paginated smartphone catalog."""

    def __init__(
        self,
        config: ScraperConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the scraper with an HTTPX client.

        Args:
            config: Run settings (defaults to ScraperConfig()).
            transport: Optional HTTPX transport, e.g. a MockTransport in tests.
        """
        self.config = config or ScraperConfig()
        self.client = httpx.Client(
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
            transport=transport,
        )

    def __enter__(self) -> "CatalogScraper":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close the client."""
        self.close()

    def close(self) -> None:
        """Close the httpx client."""
        self.client.close()

    def page_url(self, page: int) -> str:
        """URL of one catalog page."""
        url = furl(self.config.base_url)
        url.args["page"] = page
        return str(url)

    def fetch_page(self, page: int) -> str:
        """Fetch the HTML of one catalog page.

        Raises:
            httpx.HTTPError: On transport errors or a non-success status.
        """
        url = self.page_url(page)
        logger.debug("Fetching %s", url)
        response = self.client.get(url)
        response.raise_for_status()
        return response.text

    def _extract(self, page: int, html: str, warnings: list[str]) -> PageResult:
        try:
            products = extract_products(html, base_url=self.page_url(page), warnings=warnings)
        except Exception as e:
            logger.error("Failed to extract products from page %d: %s", page, e)
            return PageResult(page=page, error=str(e))
        logger.info("Page %d: %d product variants", page, len(products))
        return PageResult(page=page, products=products)

    def scrape_page(self, page: int, warnings: list[str] | None = None) -> PageResult:
        """Fetch and extract one page, capturing any failure in the result."""
        if warnings is None:
            warnings = []
        try:
            html = self.fetch_page(page)
        except httpx.HTTPStatusError as e:
            logger.error("HTTP error fetching page %d: %s", page, e)
            return PageResult(page=page, error=str(e))
        except httpx.RequestError as e:
            logger.error("Request error fetching page %d: %s", page, e)
            return PageResult(page=page, error=str(e))
        return self._extract(page, html, warnings)

    def scrape(self, on_page: Callable[[PageResult], None] | None = None) -> ScrapeResult:
        """Scrape every page advertised by the catalog's pagination.

        Pages are processed one at a time in ascending order. A page that
        fails is recorded in ``failed_pages`` and skipped.

        Args:
            on_page: Called with each PageResult as soon as it is available.

        Returns:
            The de-duplicated products, sorted by title, colour and capacity.
        """
        warnings: list[str] = []
        failed: dict[int, str] = {}

        def record(result: PageResult) -> None:
            if result.ok:
                failed.pop(result.page, None)
            else:
                failed[result.page] = result.error
            if on_page is not None:
                on_page(result)

        try:
            seed_html = self.fetch_page(1)
        except httpx.HTTPError as e:
            logger.error("Failed to fetch first page: %s", e)
            record(PageResult(page=1, error=str(e)))
            return ScrapeResult(failed_pages=failed, warnings=warnings)

        pages = discover_pages(seed_html)
        logger.info("Discovered pages: %s", pages)

        seed = self._extract(1, seed_html, warnings)
        record(seed)
        products = merge_unique([], seed.products)

        for page in pages:
            result = self.scrape_page(page, warnings)
            record(result)
            products = merge_unique(products, result.products)

        logger.info("Collected %d unique product variants", len(products))
        return ScrapeResult(
            products=sort_products(products),
            failed_pages=failed,
            warnings=warnings,
        )
