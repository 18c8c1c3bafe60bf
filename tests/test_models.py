"""Tests for the product model, de-duplication and JSON output."""

import json
import unittest
from datetime import date

from smartphone_scraper.models import Product, merge_unique, products_to_json, sort_products


def make_product(title="Phone", capacity="64GB", colour="red", price="£100", **kwargs):
    raw = {
        "title": title,
        "price": price,
        "image_url": "https://example.com/images/phone.png",
        "capacity": capacity,
        "colour": colour,
        "availability_text": "Availability: In Stock",
        "shipping_text": "Delivery by 2024-03-25",
    }
    raw.update(kwargs)
    return Product.from_raw(**raw)


class TestFromRaw(unittest.TestCase):
    def test_normalizes_fields(self):
        product = Product.from_raw(
            title="  iPhone 12 Pro ",
            price="£1,099.99",
            image_url="https://example.com/iphone.png",
            capacity="128GB",
            colour=" Sky Blue ",
            availability_text="Availability: In Stock Online",
            shipping_text=" Delivers Wednesday 27th Mar 2024 ",
        )
        self.assertEqual(product.title, "iPhone 12 Pro")
        self.assertEqual(product.price, 1099.99)
        self.assertEqual(product.capacity_mb, 128000)
        self.assertEqual(product.colour, "sky blue")
        self.assertEqual(product.availability_text, "In Stock Online")
        self.assertTrue(product.is_available)
        self.assertEqual(product.shipping_text, "Delivers Wednesday 27th Mar 2024")
        self.assertEqual(product.shipping_date, date(2024, 3, 27))

    def test_malformed_input_still_builds_with_warnings(self):
        warnings = []
        product = Product.from_raw(
            title="",
            price="-£5",
            image_url="",
            capacity="lots",
            colour="Black",
            availability_text="Availability: Out of Stock",
            shipping_text="",
            warnings=warnings,
        )
        self.assertEqual(product.title, "")
        self.assertEqual(product.price, 0.0)
        self.assertEqual(product.capacity_mb, 0)
        self.assertFalse(product.is_available)
        self.assertIsNone(product.shipping_date)
        self.assertEqual(len(warnings), 3)
        self.assertEqual(warnings[0], "Title is empty")

    def test_is_immutable(self):
        product = make_product()
        with self.assertRaises(Exception):
            product.title = "Other"


class TestVariantIdentity(unittest.TestCase):
    def test_case_insensitive_duplicates(self):
        first = make_product(title="Phone", colour="red")
        second = make_product(title="PHONE", colour="RED", price="£200")
        third = make_product(title="Phone", colour="blue")
        self.assertTrue(first.is_same_variant(second))
        self.assertFalse(first.is_same_variant(third))

    def test_capacity_distinguishes_variants(self):
        self.assertFalse(make_product(capacity="64GB").is_same_variant(make_product(capacity="128GB")))

    def test_merge_keeps_first_seen(self):
        first = make_product(price="£100")
        later = make_product(title="PHONE", price="£150")
        other = make_product(colour="blue")

        merged = merge_unique([first], [later, other, other])

        self.assertEqual(merged, [first, other])
        self.assertEqual(merged[0].price, 100.0)

    def test_merge_does_not_modify_accumulator(self):
        accumulated = [make_product()]
        merge_unique(accumulated, [make_product(colour="green")])
        self.assertEqual(len(accumulated), 1)


class TestOutput(unittest.TestCase):
    def test_sorted_by_title_colour_capacity(self):
        products = [
            make_product(title="Phone", colour="red", capacity="64GB"),
            make_product(title="Galaxy", colour="white", capacity="128GB"),
            make_product(title="Phone", colour="black", capacity="64GB"),
            make_product(title="Galaxy", colour="white", capacity="32GB"),
        ]
        ordered = sort_products(products)
        keys = [p.sort_key for p in ordered]
        self.assertEqual(keys, sorted(keys))
        self.assertEqual(ordered[0].sort_key, "Galaxywhite128000")

    def test_json_field_names_and_format(self):
        product = make_product(shipping_text="gibberish")
        text = products_to_json([product])
        data = json.loads(text)

        self.assertEqual(
            list(data[0]),
            [
                "title",
                "price",
                "imageUrl",
                "capacityMB",
                "colour",
                "availabilityText",
                "isAvailable",
                "shippingText",
                "shippingDate",
            ],
        )
        self.assertIsNone(data[0]["shippingDate"])
        self.assertIn("https://example.com/images/phone.png", text)
        self.assertIn('\n    {\n        "title"', text)

    def test_json_is_stable(self):
        products = sort_products([make_product(colour="blue"), make_product(colour="red")])
        self.assertEqual(products_to_json(products), products_to_json(list(products)))
        self.assertEqual(json.loads(products_to_json(products))[0]["shippingDate"], "2024-03-25")
