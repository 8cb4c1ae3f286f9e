"""Normalization of free-form source values (booleans, statuses, units, text)."""

import logging
import re
from typing import Any, Optional

from models.constants import (
    AREA_UNIT_TO_SQM,
    ENERGY_CERT_STATUSES,
    NO_VALUES,
    YES_VALUES,
    ListingStatus,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

# Whole-value matches only: "inaktiv" or "unsold" must not read as a known state
SOLD_PATTERN = re.compile(r"^(myyty|sold|såld)$")
RESERVED_PATTERN = re.compile(r"^(varattu|reserved|reserverad)$")
ACTIVE_PATTERN = re.compile(r"^(aktiivinen|active|aktiv)$")

# Energy certificate: "not required" must be tested before "has certificate"
ENERGY_NOT_REQUIRED_PATTERN = re.compile(
    r"ei.*edellytt|ei.*tarvita|ei tarvitse|not required|inget.*lagstadgat"
    r"|ej.*lagstadgat|behöver inte"
)
ENERGY_EXEMPT_PATTERN = re.compile(r"vapautettu|exempt|undantagen|undantaget")
ENERGY_HAS_CERT_PATTERN = re.compile(
    r"^\s*kyllä\s*$|^\s*ja\s*$|^\s*yes\s*$|\bkohteella on energiatodistus\b"
)

PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n\s*\n+")


def to_bool(value: Any) -> Optional[bool]:
    """
    Interpret a yes/no value in Finnish, Swedish or English.

    Returns None for missing or unrecognized values.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value in (0, 1):
            return bool(value)
        logger.debug(f"Unrecognized boolean value: {value!r}")
        return None

    text = str(value).strip().lower()
    if not text:
        return None
    if text in YES_VALUES:
        return True
    if text in NO_VALUES:
        return False

    logger.debug(f"Unrecognized boolean value: {value!r}")
    return None


def normalize_status(value: Any) -> Optional[str]:
    """
    Map a free-text listing status to ACTIVE / SOLD / RESERVED.

    Text that matches none of the known forms is passed through unchanged.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    lowered = text.lower()
    if SOLD_PATTERN.search(lowered):
        return ListingStatus.SOLD.value
    if RESERVED_PATTERN.search(lowered):
        return ListingStatus.RESERVED.value
    if ACTIVE_PATTERN.search(lowered):
        return ListingStatus.ACTIVE.value
    return text


def normalize_energy_status(value: Any) -> Optional[str]:
    """Map energy certificate text to HAS_CERTIFICATE / NOT_REQUIRED_BY_LAW / EXEMPT_BY_ACT."""
    text = str(value or "").lower()
    if not text.strip():
        return None

    # Already normalized codes pass through
    code = text.strip().upper()
    if code in ENERGY_CERT_STATUSES:
        return code

    if ENERGY_NOT_REQUIRED_PATTERN.search(text):
        return "NOT_REQUIRED_BY_LAW"
    if ENERGY_EXEMPT_PATTERN.search(text):
        return "EXEMPT_BY_ACT"
    if ENERGY_HAS_CERT_PATTERN.search(text):
        return "HAS_CERTIFICATE"
    return None


def normalize_area_unit(unit: Any) -> Optional[str]:
    """
    Normalize an area unit label to SQM, ARE or HECTARE.

    HECTARE is tested before ARE since "HECTARE" contains "ARE".
    """
    if not unit:
        return None
    text = str(unit).strip().upper()
    if "SQUARE" in text or "SQM" in text or text in ("M2", "M²"):
        return "SQM"
    if "HECTAR" in text or text == "HA":
        return "HECTARE"
    if "ARE" in text or text == "A":
        return "ARE"
    return None


def area_to_sqm(amount: float, unit: Any = None, raw_text: Optional[str] = None) -> float:
    """Convert a plot area to square meters using the unit or the raw label."""
    normalized = normalize_area_unit(unit)
    if normalized:
        return amount * AREA_UNIT_TO_SQM[normalized]

    raw = (raw_text or "").lower()
    if " ha" in raw or raw.endswith("ha") or "hehtaari" in raw:
        return amount * AREA_UNIT_TO_SQM["HECTARE"]
    return amount


def text_to_html(text: Optional[str]) -> str:
    """
    Convert plain text with line breaks into HTML paragraphs.

    Blank lines separate paragraphs, single line breaks become <br>.
    """
    if not text:
        return ""
    normalized = text.replace("\r\n", "\n")
    paragraphs = [p.strip() for p in PARAGRAPH_SPLIT_PATTERN.split(normalized)]
    return "".join(
        f"<p>{p.replace(chr(10), '<br>')}</p>" for p in paragraphs if p
    )


def is_valid_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email))


def normalize_type_code(value: Optional[str]) -> Optional[str]:
    """Uppercase a listing type and replace spaces with underscores."""
    if not value or not str(value).strip():
        return None
    return str(value).strip().upper().replace(" ", "_")
