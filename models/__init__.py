"""Data models for normalized property listings."""

from .constants import DEFAULT_LOCALE, LOCALES, ListingStatus
from .localized import LocalizedValue, lpick
from .metadata import CacheSnapshot, CacheStatus, SyncResult
from .property import (
    Agent,
    Area,
    Coordinates,
    Dimensions,
    Documents,
    Features,
    Fees,
    HousingCompany,
    Image,
    Media,
    Meta,
    Price,
    Pricing,
    Property,
    Rental,
    is_apartment,
    is_estate,
    is_rental,
    property_category,
)

__all__ = [
    "DEFAULT_LOCALE",
    "LOCALES",
    "ListingStatus",
    "LocalizedValue",
    "lpick",
    "CacheSnapshot",
    "CacheStatus",
    "SyncResult",
    "Agent",
    "Area",
    "Coordinates",
    "Dimensions",
    "Documents",
    "Features",
    "Fees",
    "HousingCompany",
    "Image",
    "Media",
    "Meta",
    "Price",
    "Pricing",
    "Property",
    "Rental",
    "is_apartment",
    "is_estate",
    "is_rental",
    "property_category",
]
