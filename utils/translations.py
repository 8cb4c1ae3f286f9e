"""Finnish, Swedish and English labels for listing vocabulary."""

from typing import Dict, Optional

from models.constants import DEFAULT_LOCALE
from models.localized import LocalizedValue

# Listing type code → localized label.
# The source emits both Finnish (KERROSTALO) and English (FLAT) codes.
_APARTMENT_BUILDING = {"fi": "Kerrostalo", "sv": "Höghus", "en": "Apartment Building"}
_DETACHED_HOUSE = {"fi": "Omakotitalo", "sv": "Egnahemshus", "en": "Detached House"}
_TOWNHOUSE = {"fi": "Rivitalo", "sv": "Radhus", "en": "Townhouse"}
_SEMI_DETACHED = {"fi": "Paritalo", "sv": "Parhus", "en": "Semi-detached House"}
_TERRACED_HOUSE = {"fi": "Luhtitalo", "sv": "Kedjehus", "en": "Terraced House"}
_COTTAGE = {"fi": "Mökki tai huvila", "sv": "Stuga eller villa", "en": "Cottage or Villa"}
_PLOT = {"fi": "Tontti", "sv": "Tomt", "en": "Plot"}
_FARM = {"fi": "Maatila", "sv": "Lantgård", "en": "Farm"}
_COMMERCIAL = {"fi": "Liikehuoneisto", "sv": "Affärslokal", "en": "Commercial Property"}
_OFFICE = {"fi": "Toimisto", "sv": "Kontor", "en": "Office"}
_INDUSTRIAL = {"fi": "Teollisuuskiinteistö", "sv": "Industriegendom", "en": "Industrial Property"}
_WAREHOUSE = {"fi": "Varasto", "sv": "Lager", "en": "Warehouse"}
_RENTAL_APARTMENT = {"fi": "Vuokrahuoneisto", "sv": "Hyreslägenhet", "en": "Rental Apartment"}
_RENTAL_HOUSE = {"fi": "Vuokratalo", "sv": "Hyreshus", "en": "Rental House"}

LISTING_TYPE_LABELS: Dict[str, Dict[str, str]] = {
    # Finnish codes
    "KERROSTALO": _APARTMENT_BUILDING,
    "OMAKOTITALO": _DETACHED_HOUSE,
    "RIVITALO": _TOWNHOUSE,
    "PARITALO": _SEMI_DETACHED,
    "LUHTITALO": _TERRACED_HOUSE,
    "MÖKKI_TAI_HUVILA": _COTTAGE,
    "TONTTI": _PLOT,
    "MAATILA": _FARM,
    "LIIKEHUONEISTO": _COMMERCIAL,
    "TOIMISTO": _OFFICE,
    "TEOLLISUUSKIINTEISTÖ": _INDUSTRIAL,
    "VARASTO": _WAREHOUSE,
    "VUOKRAHUONEISTO": _RENTAL_APARTMENT,
    "VUOKRATALO": _RENTAL_HOUSE,
    # English codes
    "FLAT": _APARTMENT_BUILDING,
    "APARTMENT_BUILDING": _APARTMENT_BUILDING,
    "DETACHED_HOUSE": _DETACHED_HOUSE,
    "DETACHEDHOUSE": _DETACHED_HOUSE,
    "TOWNHOUSE": _TOWNHOUSE,
    "SEMI_DETACHED_HOUSE": _SEMI_DETACHED,
    "PAIRHOUSE": _SEMI_DETACHED,
    "TERRACED_HOUSE": _TERRACED_HOUSE,
    "COTTAGE_OR_VILLA": _COTTAGE,
    "PLOT": _PLOT,
    "FARM": _FARM,
    "COMMERCIAL_PROPERTY": _COMMERCIAL,
    "OFFICE": _OFFICE,
    "OFFICE_SPACE": {"fi": "Toimistotila", "sv": "Kontorslokal", "en": "Office Space"},
    "INDUSTRIAL_PROPERTY": _INDUSTRIAL,
    "WAREHOUSE": _WAREHOUSE,
    "RENTAL_APARTMENT": _RENTAL_APARTMENT,
    "RENTAL_HOUSE": _RENTAL_HOUSE,
}

# Energy certificate status → label
ENERGY_STATUS_LABELS: Dict[str, Dict[Optional[str], str]] = {
    "fi": {
        "HAS_CERTIFICATE": "Kyllä",
        "NOT_REQUIRED_BY_LAW": "Ei lain edellyttämää energiatodistusta",
        "EXEMPT_BY_ACT": "Vapautettu energiatodistuslain nojalla",
        None: "Ei tietoa",
    },
    "sv": {
        "HAS_CERTIFICATE": "Ja",
        "NOT_REQUIRED_BY_LAW": "Inget lagstadgat energicertifikat",
        "EXEMPT_BY_ACT": "Undantagen enligt energicertifikatlagen",
        None: "Ingen information",
    },
    "en": {
        "HAS_CERTIFICATE": "Yes",
        "NOT_REQUIRED_BY_LAW": "No statutory energy certificate",
        "EXEMPT_BY_ACT": "Exempt by Act",
        None: "No information",
    },
}


def localize_listing_type(code: Optional[str]) -> Optional[LocalizedValue]:
    """
    Translate a listing type code into a LocalizedValue.

    Unknown codes are returned as-is in every locale. Empty codes give None.
    """
    if not code or not code.strip():
        return None

    normalized = code.strip().upper().replace(" ", "_")
    labels = LISTING_TYPE_LABELS.get(normalized)
    if labels:
        return LocalizedValue(fi=labels["fi"], sv=labels["sv"], en=labels["en"])

    raw = code.strip()
    return LocalizedValue(fi=raw, sv=raw, en=raw)


def get_listing_type_label(code: Optional[str], locale: str) -> str:
    localized = localize_listing_type(code)
    if localized is None:
        return ""
    return localized.pick(locale)


def get_energy_status_label(status: Optional[str], locale: str) -> str:
    labels = ENERGY_STATUS_LABELS.get(locale, ENERGY_STATUS_LABELS[DEFAULT_LOCALE])
    return labels.get(status, labels[None])
