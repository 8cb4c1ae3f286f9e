"""Normalized property listing model."""

from dataclasses import dataclass, field, fields, is_dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from utils.number_parser import parse_area_amount, parse_monetary_amount

from .constants import APARTMENT_CODES, ESTATE_CODES
from .localized import LocalizedValue

NBSP = "\u00a0"


def _group_thousands(value: float, decimals: int, group_sep: str, decimal_sep: str) -> str:
    formatted = f"{value:,.{decimals}f}"
    return (
        formatted.replace(",", "\0")
        .replace(".", decimal_sep)
        .replace("\0", group_sep)
    )


@dataclass(frozen=True)
class Price:
    """Non-negative amount in euros."""

    value: float

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"Price cannot be negative: {self.value}")

    @classmethod
    def create(cls, raw: Any) -> "Price":
        """Parse raw source text into a Price. Raises ValueError if negative."""
        return cls(parse_monetary_amount(raw))

    def format(self, locale: str = "fi") -> str:
        """
        Format for display, rounded to whole euros.

        fi/sv: "1 462 588 €" (no-break space grouping)
        en:    "€1,462,588"
        """
        if locale == "en":
            return f"€{_group_thousands(self.value, 0, ',', '.')}"
        return f"{_group_thousands(self.value, 0, NBSP, ',')}{NBSP}€"


@dataclass(frozen=True)
class Area:
    """Non-negative area in square meters."""

    value: float

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"Area cannot be negative: {self.value}")

    @classmethod
    def create(cls, raw: Any) -> "Area":
        """Parse raw source text into an Area. Raises ValueError if negative."""
        return cls(parse_area_amount(raw))

    def format(self, locale: str = "fi") -> str:
        decimals = 0 if float(self.value).is_integer() else 1
        if locale == "en":
            number = _group_thousands(self.value, decimals, ",", ".")
        else:
            number = _group_thousands(self.value, decimals, NBSP, ",")
        return f"{number} m²"


@dataclass(frozen=True)
class Pricing:
    sales: Price
    debt_free: Price
    debt: Price
    property_tax: Optional[Price] = None
    bidding_start_price: Optional[Price] = None


@dataclass(frozen=True)
class Dimensions:
    living: Area
    total: Optional[Area] = None
    plot: Optional[Area] = None
    business: Optional[Area] = None
    balcony: Optional[Area] = None
    terrace: Optional[Area] = None
    rooms: Optional[str] = None  # e.g. "3h+k"
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None


@dataclass(frozen=True)
class Fees:
    """Monthly charges."""

    maintenance: Optional[Price] = None
    financing: Optional[Price] = None
    water: Optional[Price] = None
    heating: Optional[Price] = None
    electricity: Optional[Price] = None
    parking: Optional[Price] = None
    sauna: Optional[Price] = None


@dataclass(frozen=True)
class Features:
    balcony: Optional[bool] = None
    terrace: Optional[bool] = None
    sauna: Optional[bool] = None
    fireplace: Optional[bool] = None
    storage_room: Optional[bool] = None
    parking_space: Optional[bool] = None


@dataclass(frozen=True)
class HousingCompany:
    name: Optional[LocalizedValue] = None
    loans: Optional[float] = None
    encumbrances: Optional[float] = None
    loans_date: Optional[str] = None


@dataclass(frozen=True)
class Meta:
    # ACTIVE / SOLD / RESERVED, or the source's own value passed through
    status: Optional[str] = None
    floor: Optional[str] = None
    rent: Optional[float] = None
    housing_company: HousingCompany = field(default_factory=HousingCompany)

    type_code: Optional[str] = None
    listing_type_label: Optional[LocalizedValue] = None
    energy_class: Optional[str] = None
    energy_cert_status: Optional[str] = None
    year_built: Optional[int] = None
    floors_total: Optional[int] = None
    elevator: Optional[bool] = None
    condition: Optional[LocalizedValue] = None
    heating_system: Optional[LocalizedValue] = None

    # Source fields not modeled above, passed through unchanged (read-only copy)
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if not isinstance(self.extra, MappingProxyType):
            object.__setattr__(self, "extra", deep_freeze(self.extra))


@dataclass(frozen=True)
class Image:
    url: str
    thumb: Optional[str] = None
    floor_plan: bool = False


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True)
class Media:
    images: Tuple[Image, ...] = ()
    coordinates: Optional[Coordinates] = None

    def hero_image(self) -> Optional[Image]:
        """First non-floor-plan image, else the first image of any kind."""
        for image in self.images:
            if not image.floor_plan:
                return image
        return self.images[0] if self.images else None


@dataclass(frozen=True)
class Documents:
    floor_plan: Optional[str] = None
    brochure: Optional[str] = None
    brochure_intl: Optional[str] = None
    video: Optional[str] = None
    energy_cert: Optional[str] = None


@dataclass(frozen=True)
class Agent:
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class Rental:
    monthly_rent: float
    security_deposit: Optional[LocalizedValue] = None
    contract_type: Optional[LocalizedValue] = None
    earliest_termination: Optional[LocalizedValue] = None
    notice_period: Optional[LocalizedValue] = None
    pets_allowed: Optional[bool] = None
    smoking_allowed: Optional[bool] = None


@dataclass(frozen=True)
class Property:
    """
    One normalized listing, built once per (raw record, locale) by the mapper.

    Instances are immutable and live only as long as the cache snapshot that
    holds them.
    """

    # Identity
    id: str
    slug: str

    # Location
    address: Optional[LocalizedValue]
    city: Optional[LocalizedValue]
    postal_code: Optional[str] = None
    district: Optional[LocalizedValue] = None
    apartment_identifier: Optional[str] = None  # e.g. "C 47"
    gate: Optional[str] = None

    # Rich content
    description: Optional[LocalizedValue] = None
    description_title: Optional[LocalizedValue] = None

    pricing: Pricing = field(
        default_factory=lambda: Pricing(Price(0), Price(0), Price(0))
    )
    dimensions: Dimensions = field(default_factory=lambda: Dimensions(Area(0)))
    fees: Fees = field(default_factory=Fees)
    features: Features = field(default_factory=Features)
    meta: Meta = field(default_factory=Meta)
    media: Media = field(default_factory=Media)
    documents: Documents = field(default_factory=Documents)
    agent: Optional[Agent] = None
    rental: Optional[Rental] = None

    # Locale the mapper resolved locale-specific scalars for
    locale: str = "fi"

    @property
    def is_rental(self) -> bool:
        return is_rental(self)

    def has_debt(self) -> bool:
        return self.pricing.debt.value > 0

    def has_plot(self) -> bool:
        return self.dimensions.plot is not None and self.dimensions.plot.value > 0

    def has_company_loans(self) -> bool:
        loans = self.meta.housing_company.loans
        return loans is not None and loans > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary, dropping None values."""
        return _drop_none(to_plain(self))


def is_rental(prop: Property) -> bool:
    """
    Sale/rental predicate: a listing is a rental iff it has a positive rent.

    This is the only signal consulted for the split. The source's textual
    listing-type field is never used for it.
    """
    rent = prop.meta.rent
    return rent is not None and rent > 0


def is_apartment(prop: Property) -> bool:
    """Apartments (KERROSTALO/FLAT) show housing company details."""
    return (prop.meta.type_code or "").upper() in APARTMENT_CODES


def is_estate(prop: Property) -> bool:
    """Houses, plots and farms show property tax and plot information."""
    return (prop.meta.type_code or "").upper() in ESTATE_CODES


def property_category(prop: Property) -> str:
    """Layout category: rental, apartment, property or unknown."""
    if is_rental(prop):
        return "rental"
    if is_apartment(prop):
        return "apartment"
    if is_estate(prop):
        return "property"
    return "unknown"


def _drop_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_drop_none(v) for v in value]
    return value


def deep_freeze(value: Any) -> Any:
    """Read-only copy of nested dicts and lists (MappingProxyType / tuple)."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: deep_freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(deep_freeze(v) for v in value)
    return value


def to_plain(value: Any) -> Any:
    """
    Convert dataclasses and read-only mappings into plain dicts and lists.

    Used instead of dataclasses.asdict, which cannot copy MappingProxyType.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value
