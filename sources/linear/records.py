"""Shapes of raw Linear API records."""

from typing import Any, Dict, List, TypedDict, Union

# A localized field arrives in one of three forms:
#   {"fi": {"value": "..."}, "sv": {"value": "..."}}
#   {"fi": "...", "sv": "..."}
#   "..."
LocalizedField = Union[Dict[str, Any], str, None]


class RawImage(TypedDict, total=False):
    url: str
    thumbnail: str
    compressed: str
    isFloorPlan: bool


class RawAgent(TypedDict, total=False):
    name: str
    phone: str
    tel: str
    email: str
    avatar: str
    jobTitle: str
    photo: Dict[str, Any]


class RawListing(TypedDict, total=False):
    """One listing as returned by GET /v2/listings. Only common fields are listed."""

    id: Any
    slug: str
    nonLocalizedValues: Dict[str, Any]

    address: LocalizedField
    city: LocalizedField
    district: LocalizedField
    postalCode: LocalizedField
    gate: LocalizedField
    apartmentNumber: LocalizedField

    freeText: LocalizedField
    freeTextTitle: LocalizedField

    askPrice: LocalizedField
    debtFreePrice: LocalizedField
    area: LocalizedField
    rent: LocalizedField
    status: LocalizedField
    listingType: LocalizedField

    images: List[RawImage]
    links: Any
    agent: RawAgent
    realtor: RawAgent
