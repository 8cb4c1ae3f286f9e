"""Locale, status and vocabulary constants for Finnish listings."""

from enum import Enum
from typing import Dict, FrozenSet, Tuple

# Supported locales, mandatory locale first
LOCALES: Tuple[str, ...] = ("fi", "sv", "en")
DEFAULT_LOCALE = "fi"


class ListingStatus(str, Enum):
    """Known listing states. Other source values pass through as plain strings."""

    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    RESERVED = "RESERVED"


# Placeholders shown when a translation is missing and fallback is not wanted
MISSING_TRANSLATION_PLACEHOLDERS: Dict[str, str] = {
    "fi": "Tieto puuttuu",
    "sv": "Uppgift saknas",
    "en": "Information unavailable",
}

# Boolean vocabulary used by the listings source (fi / sv / en)
YES_VALUES: FrozenSet[str] = frozenset({"kyllä", "kylla", "ja", "yes", "on", "1", "true"})
NO_VALUES: FrozenSet[str] = frozenset({"ei", "nej", "no", "off", "0", "false"})

# Energy certificate states
ENERGY_CERT_STATUSES: Tuple[str, ...] = (
    "HAS_CERTIFICATE",
    "NOT_REQUIRED_BY_LAW",
    "EXEMPT_BY_ACT",
)

# Listing type codes grouped by page layout
APARTMENT_CODES: FrozenSet[str] = frozenset({
    "KERROSTALO",
    "FLAT",
    "APARTMENT_BUILDING",
})

ESTATE_CODES: FrozenSet[str] = frozenset({
    "OMAKOTITALO",
    "DETACHED_HOUSE",
    "DETACHEDHOUSE",
    "RIVITALO",
    "TOWNHOUSE",
    "PARITALO",
    "SEMI_DETACHED_HOUSE",
    "LUHTITALO",
    "TERRACED_HOUSE",
    "MÖKKI_TAI_HUVILA",
    "COTTAGE_OR_VILLA",
    "TONTTI",
    "PLOT",
    "MAATILA",
    "FARM",
    "VUOKRATALO",
    "RENTAL_HOUSE",
})

# Type codes that read as "rental" in the source's free-text type field.
# Only used to flag disagreements with the rent-based predicate.
RENTAL_TYPE_HINTS: Tuple[str, ...] = ("VUOKRA", "RENTAL", "HYRES")

# Plot area unit multipliers to square meters
AREA_UNIT_TO_SQM: Dict[str, float] = {
    "SQM": 1.0,
    "ARE": 100.0,
    "HECTARE": 10000.0,
}
