"""Data models for scraped smartphone variants."""

import logging
from collections.abc import Iterable
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from smartphone_scraper.normalizers import (
    parse_availability,
    parse_capacity_to_mb,
    parse_price,
    parse_shipping_date,
    strip_availability_label,
)

logger = logging.getLogger(__name__)


class Product(BaseModel):
    """A single colour/capacity variant of a listed product."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    title: str
    price: float = Field(ge=0)
    image_url: str = ""
    capacity_mb: int = Field(default=0, ge=0, alias="capacityMB")
    colour: str
    availability_text: str = ""
    is_available: bool = False
    shipping_text: str = ""
    shipping_date: date | None = None

    @classmethod
    def from_raw(
        cls,
        title: str,
        price: str,
        image_url: str,
        capacity: str,
        colour: str,
        availability_text: str,
        shipping_text: str,
        warnings: list[str] | None = None,
        today: date | None = None,
    ) -> "Product":
        """Build a product from the strings found on the page.

        Never rejects input. Problems such as an empty title or an unreadable
        capacity are reported through ``warnings`` and the log, and the field
        falls back to a default.
        """
        title = title.strip()
        if not title:
            message = "Title is empty"
            logger.warning(message)
            if warnings is not None:
                warnings.append(message)

        availability = strip_availability_label(availability_text)

        return cls(
            title=title,
            price=parse_price(price, warnings),
            image_url=image_url,
            capacity_mb=parse_capacity_to_mb(capacity, warnings),
            colour=colour.strip().lower(),
            availability_text=availability,
            is_available=parse_availability(availability),
            shipping_text=shipping_text.strip(),
            shipping_date=parse_shipping_date(shipping_text, warnings, today=today),
        )

    @property
    def variant_key(self) -> tuple[str, int, str]:
        """Identity of a variant: title, capacity and colour, case-insensitive."""
        return (self.title.lower(), self.capacity_mb, self.colour.lower())

    def is_same_variant(self, other: "Product") -> bool:
        """Whether ``other`` is the same title, capacity and colour."""
        return self.variant_key == other.variant_key

    @property
    def sort_key(self) -> str:
        """Concatenated title, colour and capacity used for output order."""
        return f"{self.title}{self.colour}{self.capacity_mb}"


def merge_unique(accumulated: list[Product], candidates: Iterable[Product]) -> list[Product]:
    """Return ``accumulated`` extended with the candidates not already present.

    The first record seen for a variant wins, even if a later one differs in
    price, availability or shipping.
    """
    merged = list(accumulated)
    seen = {product.variant_key for product in merged}
    for product in candidates:
        if product.variant_key in seen:
            logger.debug("Skipping duplicate variant: %s", product.variant_key)
            continue
        seen.add(product.variant_key)
        merged.append(product)
    return merged


def sort_products(products: Iterable[Product]) -> list[Product]:
    """Sort products by their title, colour and capacity string."""
    return sorted(products, key=lambda product: product.sort_key)


_PRODUCT_LIST = TypeAdapter(list[Product])


def products_to_json(products: list[Product]) -> str:
    """Serialize products to a pretty-printed JSON array."""
    return _PRODUCT_LIST.dump_json(products, indent=4, by_alias=True).decode("utf-8")
