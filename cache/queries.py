"""Listing views used by the site's index pages."""

from collections import Counter
from typing import Dict, Iterable, List

from models.constants import ListingStatus
from models.property import Property, is_rental


def sale_listings(properties: Iterable[Property]) -> List[Property]:
    """Listings for sale (no positive rent), most expensive first."""
    return sorted(
        (p for p in properties if not is_rental(p)),
        key=lambda p: p.pricing.debt_free.value,
        reverse=True,
    )


def rental_listings(properties: Iterable[Property]) -> List[Property]:
    """Rental listings, highest rent first."""
    return sorted(
        (p for p in properties if is_rental(p)),
        key=lambda p: p.meta.rent or 0,
        reverse=True,
    )


def sold_listings(properties: Iterable[Property]) -> List[Property]:
    """Sold reference listings, most expensive first."""
    return sorted(
        (p for p in properties if p.meta.status == ListingStatus.SOLD.value),
        key=lambda p: p.pricing.debt_free.value,
        reverse=True,
    )


def count_by_status(properties: Iterable[Property]) -> Dict[str, int]:
    """Number of listings per meta.status; missing status counts as "unknown"."""
    return dict(Counter(p.meta.status or "unknown" for p in properties))
