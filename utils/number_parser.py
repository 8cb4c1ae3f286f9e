"""Parsing of prices and areas as emitted by the listings source."""

import logging
import math
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Space characters used interchangeably as thousands separators:
# ordinary space, NBSP, thin space, narrow NBSP and the U+2000-U+200B block
# (plus tab/CR/LF, which show up in copy-pasted values).
WHITESPACE_PATTERN = re.compile(r"[\u0020\u00A0\u2009\u202F\u2000-\u200B\t\r\n]")

NON_NUMERIC_PATTERN = re.compile(r"[^0-9,.\-]")

# A dot followed by at least three digits is a thousands separator
THOUSANDS_DOT_PATTERN = re.compile(r"\.(?=[0-9]{3,})")

LEADING_NUMBER_PATTERN = re.compile(r"-?[0-9]*\.?[0-9]+")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_monetary_amount(value: Any) -> float:
    """
    Parse a monetary amount in European notation. Never raises.

    Handles:
    - Dot or space thousands separators: "142.951.999", "1 234 567"
    - Comma decimal separator: "999,45"
    - Currency suffixes: "€", "€/kk", "€/mån"
    - Any Unicode space variant as separator (NBSP, thin space, ...)

    Examples:
        "1 462 587,91 €" → 1462587.91
        "142.951.999,45 €" → 142951999.45
        "550,55€/kk" → 550.55
        "-1 500 €" → -1500.0
        "", None, "-" → 0

    Unparseable input resolves to 0 and is logged as a warning, so bad
    source data never blocks a listing from rendering. Negative values are
    preserved; the Price constructor is where they are rejected.
    """
    if value is None:
        return 0
    if _is_number(value):
        if math.isfinite(value):
            return value
        logger.warning(f"Non-finite monetary amount {value!r}, using 0")
        return 0

    original = str(value)
    cleaned = WHITESPACE_PATTERN.sub("", original)
    cleaned = NON_NUMERIC_PATTERN.sub("", cleaned)

    if not cleaned or cleaned == "-":
        if original.strip() and original.strip() != "-":
            logger.warning(f"No number in monetary amount {original!r}, using 0")
        return 0

    cleaned = THOUSANDS_DOT_PATTERN.sub("", cleaned)
    cleaned = cleaned.replace(",", ".", 1)

    try:
        number = float(cleaned)
    except ValueError:
        logger.warning(
            f"Failed to parse monetary amount {original!r} (cleaned: {cleaned!r}), using 0"
        )
        return 0

    if not math.isfinite(number):
        logger.warning(f"Non-finite monetary amount {original!r}, using 0")
        return 0
    return number


def parse_area_amount(value: Any) -> float:
    """
    Parse an area value such as "85,5 m²" or "2 400 m²". Never raises.

    Same whitespace handling as parse_monetary_amount, decimal comma becomes
    a dot. Thousands dots are not removed; when the cleaned text is not a
    plain number, the leading number is used ("1.234.5" → 1.234).
    """
    if value is None:
        return 0
    if _is_number(value):
        return value if math.isfinite(value) else 0

    original = str(value)
    cleaned = WHITESPACE_PATTERN.sub("", original)
    # "m²" carries a superscript two, which is not in [0-9] and gets dropped here
    cleaned = NON_NUMERIC_PATTERN.sub("", cleaned)
    cleaned = cleaned.replace(",", ".")

    if not cleaned or cleaned == "-":
        if original.strip() and original.strip() != "-":
            logger.warning(f"No number in area value {original!r}, using 0")
        return 0

    try:
        number = float(cleaned)
    except ValueError:
        match = LEADING_NUMBER_PATTERN.match(cleaned)
        if not match:
            logger.warning(f"Failed to parse area value {original!r}, using 0")
            return 0
        number = float(match.group(0))
        logger.debug(f"Area value {original!r} parsed by prefix as {number}")

    return number if math.isfinite(number) else 0


def parse_positive_number(value: Any) -> Optional[float]:
    """Parse a count or size, returning None unless the result is positive."""
    if value is None or value == "":
        return None
    number = parse_area_amount(value)
    return number if number > 0 else None


def parse_coordinate(value: Any) -> Optional[float]:
    """Parse a signed decimal coordinate, None when missing or unparseable."""
    if value is None:
        return None
    if _is_number(value):
        return float(value) if math.isfinite(value) else None

    cleaned = WHITESPACE_PATTERN.sub("", str(value)).replace(",", ".")
    try:
        number = float(cleaned)
    except ValueError:
        logger.warning(f"Invalid coordinate {value!r}")
        return None
    return number if math.isfinite(number) else None


def parse_year(value: Any) -> Optional[int]:
    """Parse a four-digit construction year."""
    if value is None:
        return None
    match = re.search(r"\b(1[5-9]\d{2}|2\d{3})\b", str(value))
    if match:
        return int(match.group(1))
    return None
