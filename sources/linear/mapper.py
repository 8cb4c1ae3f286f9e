"""Mapping of raw Linear API records to Property objects."""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Pattern, Tuple

from models.constants import LOCALES, RENTAL_TYPE_HINTS
from models.localized import LocalizedValue
from models.property import (
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
)
from utils.normalizers import (
    area_to_sqm,
    is_valid_email,
    normalize_energy_status,
    normalize_status,
    normalize_type_code,
    text_to_html,
    to_bool,
)
from utils.number_parser import (
    parse_area_amount,
    parse_coordinate,
    parse_monetary_amount,
    parse_positive_number,
    parse_year,
)
from utils.slug import slugify
from utils.translations import localize_listing_type
from utils.validation import ValidationWarning, validate_property

from .constants import LINK_PATTERNS, MODELED_FIELDS, PLOT_AREA_FIELDS
from .records import RawListing

logger = logging.getLogger(__name__)


def _value(field: Any, locale: str) -> str:
    """
    Read one locale from a raw localized field.

    Accepts {"fi": {"value": "..."}}, {"fi": "..."} and plain strings.
    Returns "" when the locale has no value.
    """
    if field is None:
        return ""
    if isinstance(field, str):
        return field
    if isinstance(field, (int, float)) and not isinstance(field, bool):
        return str(field)
    if not isinstance(field, dict):
        return ""

    entry = field.get(locale)
    if entry is None or entry == "":
        return ""
    if isinstance(entry, dict):
        entry = entry.get("value")
    if entry is None or isinstance(entry, (dict, list)):
        return ""
    return str(entry)


def _scalar(field: Any) -> Any:
    """Unwrap a value that may or may not be a localized field (Finnish value)."""
    if isinstance(field, dict):
        return _value(field, "fi") or None
    return field


def _pick_nv(nv: Dict[str, Any], *keys: str) -> Any:
    """First non-empty value among nonLocalizedValues keys."""
    for key in keys:
        value = nv.get(key)
        if value is not None and value != "":
            return value
    return None


def _str_or_none(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _first(*values: Any) -> Any:
    """First value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _localized(field: Any, transform: Optional[Callable[[str], str]] = None) -> Optional[LocalizedValue]:
    values = {}
    for locale in LOCALES:
        text = _value(field, locale)
        values[locale] = transform(text) if transform else text
    return LocalizedValue.from_values(values)


class LinearMapper:
    """
    Converts raw Linear listings into Property objects for one locale.

    Mapping is pure: the same raw record and locale always give an equal
    Property, and nothing is remembered between calls. Slug collisions are
    resolved by the cache when it builds its index.
    """

    def map(self, raw: RawListing, locale: str = "fi") -> Property:
        """
        Map a raw record to a Property.

        Validation warnings are logged; the Property is returned regardless.

        Raises:
            ValueError: If locale is not supported
        """
        prop, _ = self.map_with_warnings(raw, locale)
        return prop

    def map_with_warnings(
        self, raw: RawListing, locale: str = "fi"
    ) -> Tuple[Property, List[ValidationWarning]]:
        """Map a raw record and return the Property with its warnings."""
        if locale not in LOCALES:
            raise ValueError(f"Unsupported locale: {locale}")

        builder = _PropertyBuilder(raw, locale)
        prop = builder.build()

        result = validate_property(prop)
        warnings = builder.warnings + result.warnings
        if warnings:
            address = prop.address.fi if prop.address else prop.id
            logger.warning(
                f"Property validation warnings for {address} ({locale}): "
                + "; ".join(f"{w.path}: {w.message}" for w in warnings)
            )
        return prop, warnings


class _PropertyBuilder:
    """Holds the per-call state (raw record, locale, warnings) for one mapping."""

    def __init__(self, raw: RawListing, locale: str):
        self.raw = raw or {}
        self.nv: Dict[str, Any] = self.raw.get("nonLocalizedValues") or {}
        self.locale = locale
        self.warnings: List[ValidationWarning] = []

    def _warn(self, path: str, message: str) -> None:
        self.warnings.append(ValidationWarning(path=path, message=message))

    def _text(self, name: str) -> str:
        """Locale value of a raw field, falling back to Finnish."""
        field = self.raw.get(name)
        return _value(field, self.locale) or _value(field, "fi")

    # ========== VALUE OBJECTS ==========

    def _price(self, raw_value: Any, path: str) -> Price:
        try:
            return Price.create(raw_value)
        except ValueError as e:
            logger.warning(f"{path}: {e}, using 0")
            self._warn(path, str(e))
            return Price(0)

    def _optional_price(self, raw_value: Any, path: str) -> Optional[Price]:
        if raw_value is None or raw_value == "":
            return None
        amount = parse_monetary_amount(raw_value)
        if amount == 0:
            return None
        if amount < 0:
            logger.warning(f"{path}: negative amount {raw_value!r} omitted")
            self._warn(path, f"Price cannot be negative: {amount}")
            return None
        return Price(amount)

    def _optional_area(self, raw_value: Any, path: str) -> Optional[Area]:
        if raw_value is None or raw_value == "":
            return None
        amount = parse_area_amount(raw_value)
        if amount == 0:
            return None
        if amount < 0:
            logger.warning(f"{path}: negative area {raw_value!r} omitted")
            self._warn(path, f"Area cannot be negative: {amount}")
            return None
        return Area(amount)

    # ========== SECTIONS ==========

    def build(self) -> Property:
        listing_id = str(_first(_scalar(self.nv.get("id")), _scalar(self.raw.get("id"))) or "")
        address = _localized(self.raw.get("address"))

        gate = _value(self.raw.get("gate"), "fi").strip() or None
        apartment_number = _value(self.raw.get("apartmentNumber"), "fi").strip() or None
        apartment_identifier = " ".join(p for p in (gate, apartment_number) if p) or None

        pricing = self._pricing()
        meta = self._meta()

        return Property(
            id=listing_id,
            slug=self._slug(listing_id, address),
            address=address,
            city=_localized(self.raw.get("city")),
            postal_code=_str_or_none(_first(self._text("postalCode"), _scalar(self.nv.get("postalCode")))),
            district=_localized(_first(self.raw.get("district"), self.raw.get("districtFree"))),
            apartment_identifier=apartment_identifier,
            gate=gate,
            description=_localized(
                _first(self.raw.get("freeText"), self.raw.get("marketingDescription")),
                transform=text_to_html,
            ),
            description_title=_localized(self.raw.get("freeTextTitle")),
            pricing=pricing,
            dimensions=self._dimensions(),
            fees=self._fees(),
            features=self._features(),
            meta=meta,
            media=self._media(),
            documents=self._documents(),
            agent=self._agent(),
            rental=self._rental(meta.rent),
            locale=self.locale,
        )

    def _slug(self, listing_id: str, address: Optional[LocalizedValue]) -> str:
        explicit = _scalar(self.raw.get("slug"))
        if explicit:
            slug = slugify(str(explicit))
            if slug:
                return slug
        if address is not None:
            slug = slugify(address.fi)
            if slug:
                return slug
        return slugify(f"kohde-{listing_id}")

    def _pricing(self) -> Pricing:
        sales = self._price(
            _first(_pick_nv(self.nv, "askPrice"), self._text("askPrice")), "pricing.sales"
        )
        debt_free = self._price(
            _first(_pick_nv(self.nv, "debtFreePrice"), self._text("debtFreePrice")),
            "pricing.debt_free",
        )
        debt = Price(max(0, debt_free.value - sales.value))

        property_tax = self._optional_price(
            _first(
                _pick_nv(self.nv, "propertyTax", "realEstateTax"),
                self._text("propertyTax"),
                self._text("realEstateTax"),
            ),
            "pricing.property_tax",
        )
        bidding_start_price = self._optional_price(
            _first(_pick_nv(self.nv, "debtlessStartPrice"), self._text("debtlessStartPrice")),
            "pricing.bidding_start_price",
        )
        return Pricing(
            sales=sales,
            debt_free=debt_free,
            debt=debt,
            property_tax=property_tax,
            bidding_start_price=bidding_start_price,
        )

    def _dimensions(self) -> Dimensions:
        living_raw = _first(_pick_nv(self.nv, "area"), _value(self.raw.get("area"), "fi"))
        living = self._optional_area(living_raw, "dimensions.living") or Area(0)

        total = self._optional_area(
            _first(
                _pick_nv(self.nv, "totalArea", "total_area", "kokonaisala"),
                _value(self.raw.get("overallArea"), "fi"),
                _value(self.raw.get("totalArea"), "fi"),
            ),
            "dimensions.total",
        )
        if total is None:
            other = self._optional_area(
                _first(_pick_nv(self.nv, "otherArea"), _value(self.raw.get("otherArea"), "fi")),
                "dimensions.other",
            )
            if other is not None:
                total = Area(living.value + other.value)

        return Dimensions(
            living=living,
            total=total,
            plot=self._plot_area(),
            business=self._optional_area(
                _first(
                    _pick_nv(self.nv, "businessPremiseArea"),
                    _value(self.raw.get("businessPremiseArea"), "fi"),
                ),
                "dimensions.business",
            ),
            balcony=self._optional_area(
                _first(_pick_nv(self.nv, "balconyArea"), _value(self.raw.get("balconyArea"), "fi")),
                "dimensions.balcony",
            ),
            terrace=self._optional_area(
                _first(_pick_nv(self.nv, "terraceArea"), _value(self.raw.get("terraceArea"), "fi")),
                "dimensions.terrace",
            ),
            rooms=_str_or_none(_first(self._text("rooms"), _scalar(_pick_nv(self.nv, "rooms")))),
            bedrooms=parse_positive_number(
                _first(_pick_nv(self.nv, "numberOfBedrooms"), _value(self.raw.get("numberOfBedrooms"), "fi"))
            ),
            bathrooms=parse_positive_number(
                _first(_pick_nv(self.nv, "numberOfBathrooms"), _value(self.raw.get("numberOfBathrooms"), "fi"))
            ),
        )

    def _plot_area(self) -> Optional[Area]:
        """Plot area in m², converting ares and hectares."""
        amount = None
        for name in PLOT_AREA_FIELDS:
            amount = parse_positive_number(self.nv.get(name))
            if amount is not None:
                break

        localized_texts = [_value(self.raw.get(name), "fi") for name in PLOT_AREA_FIELDS]
        if amount is None:
            for text in localized_texts:
                amount = parse_positive_number(text)
                if amount is not None:
                    break
        if amount is None:
            return None

        unit = _first(*(self.nv.get(f"{name}Unit") for name in PLOT_AREA_FIELDS))
        raw_text = _first(*localized_texts)
        return Area(area_to_sqm(amount, unit, raw_text))

    def _fee(self, path: str, nv_keys: Iterable[str], fields: Iterable[str]) -> Optional[Price]:
        raw_value = _first(
            _pick_nv(self.nv, *nv_keys),
            *(self._text(name) for name in fields),
        )
        return self._optional_price(raw_value, path)

    def _fees(self) -> Fees:
        return Fees(
            maintenance=self._fee(
                "fees.maintenance",
                ("renovationCharge", "maintenanceCharge"),
                ("maintenanceCharge", "renovationCharge"),
            ),
            financing=self._fee(
                "fees.financing",
                ("fundingCharge", "financingCharge"),
                ("fundingCharge", "financingCharge"),
            ),
            water=self._fee("fees.water", ("waterCharge",), ("waterCharge",)),
            heating=self._fee(
                "fees.heating",
                ("heatingCharge", "averageTotalHeatingCharge", "electricHeatingCharge"),
                ("heatingCharge", "averageTotalHeatingCharge", "electricHeatingCharge"),
            ),
            electricity=self._fee(
                "fees.electricity", ("electricHeatingCharge",), ("electricHeatingCharge",)
            ),
            parking=self._fee("fees.parking", ("parkingCharge",), ("parkingCharge",)),
            sauna=self._fee("fees.sauna", ("saunaCharge",), ("saunaCharge",)),
        )

    def _flag(self, nv_keys: Iterable[str], fields: Iterable[str]) -> Optional[bool]:
        value = _first(
            _pick_nv(self.nv, *nv_keys),
            *(_scalar(self.raw.get(name)) for name in fields),
        )
        return to_bool(value)

    def _features(self) -> Features:
        return Features(
            balcony=self._flag(("hasBalcony", "balcony"), ("hasBalcony", "balcony")),
            terrace=self._flag(("hasTerrace", "terrace"), ("hasTerrace", "terrace")),
            sauna=self._flag(("sauna",), ("sauna",)),
            fireplace=self._flag(("fireplace",), ("fireplace",)),
            storage_room=self._flag(("storageRoom",), ("storageRoom",)),
            parking_space=self._flag(("hasParkingSpace", "parkingSpace"), ("hasParkingSpace", "parkingSpace")),
        )

    def _type_code(self) -> Optional[str]:
        for name in ("listingType", "propertyType", "type"):
            field = self.raw.get(name)
            text = _value(field, "en") or _value(field, "fi") or _value(field, "sv")
            if text:
                return normalize_type_code(text)
        return normalize_type_code(_scalar(self.nv.get("listingType")))

    def _rent(self) -> Optional[float]:
        raw_rent = _first(self._text("rent"), _pick_nv(self.nv, "rent"))
        if raw_rent is None:
            return None
        rent = parse_monetary_amount(raw_rent)
        if rent < 0:
            logger.warning(f"meta.rent: negative rent {raw_rent!r} omitted")
            self._warn("meta.rent", f"Rent cannot be negative: {rent}")
            return None
        return rent

    def _meta(self) -> Meta:
        type_code = self._type_code()
        rent = self._rent()

        if type_code and any(hint in type_code for hint in RENTAL_TYPE_HINTS):
            if not (rent is not None and rent > 0):
                logger.debug(
                    f"Listing type {type_code} reads as rental but rent is {rent}; treating as sale"
                )

        loans_raw = _first(
            _pick_nv(self.nv, "companyLoans"),
            _scalar(self.raw.get("companyLoans")),
            _scalar(self.raw.get("taloyhtionLainat")),
        )
        encumbrances_raw = _first(
            _pick_nv(self.nv, "housingCooperativeMortgage"),
            _scalar(self.raw.get("housingCooperativeMortgage")),
            _scalar(self.raw.get("propertyMortgage")),
            _scalar(self.raw.get("encumbranceAmount")),
        )
        housing_company = HousingCompany(
            name=_localized(self.raw.get("housingCooperativeName")),
            loans=parse_monetary_amount(loans_raw) if loans_raw is not None else None,
            encumbrances=parse_monetary_amount(encumbrances_raw) if encumbrances_raw is not None else None,
            loans_date=(
                self._text("housingCooperativeMortgageDate")
                or self._text("propertyManagerCertificateDate")
                or None
            ),
        )

        energy_class_nv = self.nv.get("energyClass")
        energy_class = _first(
            self._text("energyClass"),
            energy_class_nv if isinstance(energy_class_nv, str) else None,
        )

        floors_total = parse_positive_number(
            _first(_pick_nv(self.nv, "floorCount"), _scalar(self.raw.get("floorCount")))
        )

        listing_type_code = _first(
            _scalar(self.nv.get("listingType")),
            _value(self.raw.get("listingType"), "fi"),
            type_code,
        )

        return Meta(
            status=normalize_status(_first(_pick_nv(self.nv, "status"), self._text("status"))),
            floor=_str_or_none(
                _first(self._text("floor"), self._text("floorLocation"), _scalar(_pick_nv(self.nv, "floor")))
            ),
            rent=rent,
            housing_company=housing_company,
            type_code=type_code,
            listing_type_label=localize_listing_type(listing_type_code),
            energy_class=energy_class,
            energy_cert_status=normalize_energy_status(self._text("listingHasEnergyCertificate")),
            year_built=parse_year(
                _first(
                    _pick_nv(self.nv, "yearBuilt", "completeYear"),
                    _scalar(self.raw.get("yearBuilt")),
                    _scalar(self.raw.get("completeYear")),
                )
            ),
            floors_total=int(floors_total) if floors_total is not None else None,
            elevator=to_bool(
                _first(
                    _scalar(self.raw.get("housingCooperativeElevator")),
                    _scalar(self.raw.get("elevator")),
                    _pick_nv(self.nv, "housingCooperativeElevator"),
                )
            ),
            condition=_localized(self.raw.get("condition")),
            heating_system=_localized(self.raw.get("heatingSystem")),
            extra={k: v for k, v in self.raw.items() if k not in MODELED_FIELDS},
        )

    def _media(self) -> Media:
        images = []
        for entry in self.raw.get("images") or []:
            if not isinstance(entry, dict):
                continue
            url = entry.get("compressed") or entry.get("url")
            if not url:
                logger.debug(f"Skipping image without URL: {entry}")
                continue
            images.append(
                Image(
                    url=url,
                    thumb=entry.get("thumbnail") or None,
                    floor_plan=bool(entry.get("isFloorPlan")),
                )
            )
        return Media(images=tuple(images), coordinates=self._coordinates())

    def _coordinates(self) -> Optional[Coordinates]:
        map_coordinates = _value(self.raw.get("mapCoordinates"), "fi").split(",")
        map_lat = map_coordinates[0] if len(map_coordinates) == 2 else None
        map_lon = map_coordinates[1] if len(map_coordinates) == 2 else None

        lat = parse_coordinate(
            _first(_pick_nv(self.nv, "latitude", "lat"), _value(self.raw.get("latitude"), "fi"), map_lat)
        )
        lon = parse_coordinate(
            _first(
                _pick_nv(self.nv, "longitude", "lon", "lng"),
                _value(self.raw.get("longitude"), "fi"),
                map_lon,
            )
        )
        if lat is None or lon is None:
            return None
        return Coordinates(lat=lat, lon=lon)

    def _link(self, pattern: Pattern) -> Optional[str]:
        """First URL in the generic "links" array matching pattern."""
        links = self.raw.get("links")
        if isinstance(links, dict):
            links = _first(links.get(self.locale), links.get("fi"), links)
        if isinstance(links, dict):
            links = links.get("value")
        if not isinstance(links, list):
            return None

        for link in links:
            url = _first(link.get("value"), link.get("url")) if isinstance(link, dict) else link
            if isinstance(url, str) and pattern.search(url):
                return url
        return None

    def _documents(self) -> Documents:
        floor_plan_image = next(
            (image.get("compressed") or image.get("url") for image in self.raw.get("images") or []
             if isinstance(image, dict) and image.get("isFloorPlan")),
            None,
        )
        return Documents(
            floor_plan=(
                self._text("floorPlanUrl")
                or floor_plan_image
                or self._link(LINK_PATTERNS["floor_plan"])
            ),
            brochure=(
                self._text("brochureUrl")
                or self._text("propertyBrochureUrl")
                or self._link(LINK_PATTERNS["brochure"])
            ),
            brochure_intl=(
                self._text("internationalBrochureUrl")
                or self._link(LINK_PATTERNS["brochure_intl"])
            ),
            video=self._text("videoUrl") or self._link(LINK_PATTERNS["video"]),
            energy_cert=self._text("energyCertificateUrl") or None,
        )

    def _agent(self) -> Optional[Agent]:
        agent = self.raw.get("agent")
        realtor = self.raw.get("realtor")
        source = agent if isinstance(agent, dict) else realtor if isinstance(realtor, dict) else None

        if source is not None:
            photo = source.get("photo") if isinstance(source.get("photo"), dict) else {}
            name = source.get("name") or self.raw.get("realtorName")
            phone = source.get("phone") or source.get("tel")
            email = source.get("email")
            photo_url = photo.get("sourceUrl") or source.get("avatar")
            title = source.get("jobTitle") or source.get("title")
        else:
            name = _scalar(self.raw.get("estateAgentName"))
            phone = _scalar(self.raw.get("estateAgentPhone"))
            email = _scalar(self.raw.get("estateAgentEmail"))
            photo_url = None
            title = None

        if email and not is_valid_email(email):
            kind = "URL" if str(email).startswith("http") else "format"
            logger.warning(f"Invalid agent email ({kind}) dropped: {email}")
            self._warn("agent.email", f"Invalid email {kind}: {email}")
            email = None

        values = dict(name=name, phone=phone, email=email, photo_url=photo_url, title=title)
        values = {k: (str(v) if v else None) for k, v in values.items()}
        if not any(values.values()):
            return None
        return Agent(**values)

    def _rental(self, rent: Optional[float]) -> Optional[Rental]:
        if rent is None or rent <= 0:
            return None
        return Rental(
            monthly_rent=rent,
            security_deposit=_localized(self.raw.get("securityDeposit")),
            contract_type=_localized(self.raw.get("rentalContractType")),
            earliest_termination=_localized(self.raw.get("earliestTermination")),
            notice_period=_localized(self.raw.get("noticePeriod")),
            pets_allowed=self._flag(("petsAllowed",), ("petsAllowed",)),
            smoking_allowed=self._flag(("smokingAllowed",), ("smokingAllowed",)),
        )
