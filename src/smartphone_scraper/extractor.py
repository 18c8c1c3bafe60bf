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
"""Extraction of product variants and page numbers from catalog HTML."""

import logging

from bs4 import BeautifulSoup, Tag
from furl import furl

from smartphone_scraper.models import Product

logger = logging.getLogger(__name__)

# Selectors for the catalog page markup
PRODUCT_SELECTOR = "#products .product"
COLOUR_SELECTOR = "span[data-colour]"
TITLE_SELECTOR = ".product-name"
PRICE_SELECTOR = ".my-8.block.text-center.text-lg"
CAPACITY_SELECTOR = ".product-capacity"
AVAILABILITY_SELECTOR = ".bg-white div:nth-child(5)"
SHIPPING_SELECTOR = ".my-4.text-sm.block.text-center"
PAGE_LINK_SELECTOR = "#pages a"


def _text(node: Tag | None) -> str:
    """Whitespace-normalized text of a node, or "" if there is no node."""
    if node is None:
        return ""
    return " ".join(node.get_text().split())


def _first_text(container: Tag, selector: str) -> str:
    """Text of the first node matching ``selector``, or "" if none does."""
    node = container.select_one(selector)
    if node is None:
        logger.debug("No match for %r in product container", selector)
    return _text(node)


def _image_url(container: Tag, base_url: str | None) -> str:
    img = container.select_one("img")
    src = img.get("src", "") if img else ""
    if src and base_url:
        return str(furl(base_url).join(src))
    return src


def _shipping_text(container: Tag) -> str:
    # The first block is the availability line, shipping is the second
    blocks = container.select(SHIPPING_SELECTOR)
    if len(blocks) < 2:
        return ""
    return _text(blocks[1])


def extract_products(
    html: str,
    base_url: str | None = None,
    warnings: list[str] | None = None,
) -> list[Product]:
    """Extract every colour variant listed on one catalog page.

    Args:
        html: Page HTML.
        base_url: URL the page was fetched from, used to resolve relative
            image paths. Image sources are kept as-is when omitted.
        warnings: Optional sink for data-quality warnings.

    Returns:
        Products in document order, one per colour swatch. Duplicates are
        not removed here.
    """
    soup = BeautifulSoup(html, "html.parser")
    products = []

    for container in soup.select(PRODUCT_SELECTOR):
        colours = [swatch["data-colour"] for swatch in container.select(COLOUR_SELECTOR)]
        if not colours:
            logger.debug("Product container without colour swatches skipped")
            continue

        title = _first_text(container, TITLE_SELECTOR)
        price = _first_text(container, PRICE_SELECTOR)
        image_url = _image_url(container, base_url)
        capacity = _first_text(container, CAPACITY_SELECTOR)
        availability = _first_text(container, AVAILABILITY_SELECTOR)
        shipping = _shipping_text(container)

        for colour in colours:
            products.append(
                Product.from_raw(
                    title=title,
                    price=price,
                    image_url=image_url,
                    capacity=capacity,
                    colour=colour,
                    availability_text=availability,
                    shipping_text=shipping,
                    warnings=warnings,
                )
            )

    logger.debug("Extracted %d product variants", len(products))
    return products


def discover_pages(html: str) -> list[int]:
    """Return the sorted, unique page numbers linked from the pagination control."""
    soup = BeautifulSoup(html, "html.parser")
    pages = set()

    for link in soup.select(PAGE_LINK_SELECTOR):
        text = _text(link)
        try:
            pages.add(int(text))
        except ValueError:
            logger.debug("Ignoring non-numeric pagination link: %r", text)

    return sorted(pages)
