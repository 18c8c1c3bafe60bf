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
"""Parsers that turn scraped label text into typed values.

Every parser is best-effort: malformed input is coerced to a safe default and
reported as a data-quality warning instead of raising. Callers that want to
inspect those warnings pass a list as ``warnings``; each message is also
logged.
"""

import logging
import re
from collections.abc import Callable
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

logger = logging.getLogger(__name__)

AVAILABILITY_LABEL = "Availability:"

_PRICE_JUNK = re.compile(r"[^0-9.]")
_NEGATIVE_PRICE = re.compile(r"\s*-\s*\D?\s*\d")
_CENTS = Decimal("0.01")
_CAPACITY = re.compile(r"(-?\d+(?:\.\d+)?)\s*(GB|MB)", re.IGNORECASE)

_MONTH_ABBREVIATIONS = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"


def _warn(warnings: list[str] | None, message: str, *args) -> None:
    text = message % args if args else message
    logger.warning(text)
    if warnings is not None:
        warnings.append(text)


def parse_price(raw: str, warnings: list[str] | None = None) -> float:
    """Parse a display price such as ``£399.99`` into a float.

    Currency symbols and separators are dropped and the amount is rounded
    half-up to two decimal places. A minus sign directly in front of the
    amount or its currency symbol marks a negative price, which is clamped
    to 0.0.
    """
    cleaned = _PRICE_JUNK.sub("", raw)
    if not cleaned:
        return 0.0
    try:
        value = Decimal(cleaned).quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        _warn(warnings, "Invalid price format: %s", raw.strip())
        return 0.0

    if _NEGATIVE_PRICE.match(raw):
        value = -value

    if value < 0:
        _warn(warnings, "Negative price value: %s", raw.strip())
        return 0.0

    return float(value)


def parse_capacity_to_mb(raw: str, warnings: list[str] | None = None) -> int:
    """Convert a capacity label like ``64GB`` or ``256 MB`` to megabytes.

    Gigabytes are counted as 1000 megabytes.
    """
    if not raw or not raw.strip():
        _warn(warnings, "Empty capacity value")
        return 0

    match = _CAPACITY.search(raw)
    if not match:
        _warn(warnings, "Invalid capacity format: %s", raw.strip())
        return 0

    value = Decimal(match.group(1))
    if value < 0:
        _warn(warnings, "Negative capacity value: %s", raw.strip())
        return 0

    if match.group(2).upper() == "GB":
        value *= 1000
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def _day_month_year(match: re.Match, today: date) -> date:
    day, month, year = match.group("day", "month", "year")
    return datetime.strptime(f"{day} {month} {year}", "%d %B %Y").date()


def _iso(match: re.Match, today: date) -> date:
    return datetime.strptime(match.group(0), "%Y-%m-%d").date()


def _day_month_this_year(match: re.Match, today: date) -> date:
    day, month = match.group("day", "month")
    return datetime.strptime(f"{day} {month} {today.year}", "%d %B %Y").date()


def _day_abbreviated_month_year(match: re.Match, today: date) -> date:
    day, month, year = match.group("day", "month", "year")
    return datetime.strptime(f"{day} {month[:3]} {year}", "%d %b %Y").date()


# Order matters: the first pattern whose match also parses wins.
SHIPPING_DATE_PATTERNS: list[tuple[re.Pattern, Callable[[re.Match, date], date]]] = [
    # 25 March 2024
    (re.compile(r"(?P<day>\d{1,2})\s+(?P<month>\w+)\s+(?P<year>\d{4})"), _day_month_year),
    # 2024-03-25
    (re.compile(r"\d{4}-\d{2}-\d{2}"), _iso),
    # Monday 25th March 2024
    (
        re.compile(
            r"\w+day\s+(?P<day>\d{1,2})(?:st|nd|rd|th)\s+(?P<month>\w+)\s+(?P<year>\d{4})"
        ),
        _day_month_year,
    ),
    # 25th March
    (re.compile(r"(?P<day>\d{1,2})(?:st|nd|rd|th)\s+(?P<month>[A-Za-z]+)"), _day_month_this_year),
    # 25 Mar 2024, 25th Mar 2024
    (
        re.compile(
            rf"\b(?P<day>\d{{1,2}})(?:th|st|nd|rd)?\s+(?P<month>(?:{_MONTH_ABBREVIATIONS})[a-z]*)"
            r"\s+(?P<year>\d{4})\b",
            re.IGNORECASE,
        ),
        _day_abbreviated_month_year,
    ),
]

_RELATIVE_TOMORROW = ("tomorrow", "next day")


def parse_shipping_date(
    raw: str,
    warnings: list[str] | None = None,
    today: date | None = None,
) -> date | None:
    """Resolve free-text shipping information to a calendar date.

    Args:
        raw: Shipping label, e.g. "Delivery by Monday 25th March 2024".
        warnings: Optional sink for data-quality warnings.
        today: Reference date for relative and year-less dates
            (defaults to the current date).

    Returns:
        The resolved date, or None if nothing in the text could be parsed.
    """
    if not raw or not raw.strip():
        return None

    today = today or date.today()

    for pattern, convert in SHIPPING_DATE_PATTERNS:
        match = pattern.search(raw)
        if not match:
            continue
        try:
            return convert(match, today)
        except ValueError:
            logger.debug("Pattern %s matched %r but did not parse", pattern.pattern, match.group(0))
            continue

    lowered = raw.lower()
    if any(phrase in lowered for phrase in _RELATIVE_TOMORROW):
        return today + timedelta(days=1)

    _warn(warnings, "Could not parse shipping date from: %s", raw.strip())
    return None


def strip_availability_label(raw: str) -> str:
    """Remove the leading "Availability:" label from an availability line."""
    text = raw.strip()
    if text.startswith(AVAILABILITY_LABEL):
        text = text[len(AVAILABILITY_LABEL):]
    return text.strip()


def parse_availability(text: str) -> bool:
    """Whether an availability line says the product is in stock."""
    return "in stock" in text.strip().lower()
