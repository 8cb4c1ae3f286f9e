"""Schema validation for mapped properties.

Validation never raises: every schema violation becomes a ValidationWarning
with a dotted path, and callers decide whether to log or discard.
"""

from dataclasses import dataclass, field, is_dataclass
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, model_validator

from models.property import to_plain


URL_PATTERN = r"^https?://[^\s/$.?#][^\s]*$"
EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


def _unwrap_amount(value: Any) -> Any:
    """Price and Area serialize as {"value": x}; validate the bare number."""
    if isinstance(value, dict) and set(value) == {"value"}:
        return value["value"]
    return value


Amount = Annotated[float, BeforeValidator(_unwrap_amount)]
UrlStr = Annotated[str, Field(pattern=URL_PATTERN)]


class _Schema(BaseModel):
    model_config = ConfigDict(extra="allow")


class LocalizedSchema(_Schema):
    fi: str = Field(min_length=1)
    sv: Optional[str] = None
    en: Optional[str] = None


class PricingSchema(_Schema):
    sales: Amount = Field(ge=0)
    debt_free: Amount = Field(ge=0)
    debt: Amount = Field(ge=0)
    property_tax: Optional[Amount] = Field(None, ge=0)
    bidding_start_price: Optional[Amount] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_price_math(self):
        if abs((self.sales + self.debt) - self.debt_free) >= 1:
            raise ValueError("Price math incorrect: sales + debt should equal debt_free")
        return self


class DimensionsSchema(_Schema):
    living: Amount = Field(gt=0)
    total: Optional[Amount] = Field(None, gt=0)
    plot: Optional[Amount] = Field(None, gt=0)
    business: Optional[Amount] = Field(None, gt=0)
    balcony: Optional[Amount] = Field(None, gt=0)
    terrace: Optional[Amount] = Field(None, gt=0)
    rooms: Optional[str] = None
    bedrooms: Optional[float] = Field(None, gt=0)
    bathrooms: Optional[float] = Field(None, gt=0)


class FeesSchema(_Schema):
    maintenance: Optional[Amount] = Field(None, ge=0)
    financing: Optional[Amount] = Field(None, ge=0)
    water: Optional[Amount] = Field(None, ge=0)
    heating: Optional[Amount] = Field(None, ge=0)
    electricity: Optional[Amount] = Field(None, ge=0)
    parking: Optional[Amount] = Field(None, ge=0)
    sauna: Optional[Amount] = Field(None, ge=0)


class FeaturesSchema(_Schema):
    balcony: Optional[bool] = None
    terrace: Optional[bool] = None
    sauna: Optional[bool] = None
    fireplace: Optional[bool] = None
    storage_room: Optional[bool] = None
    parking_space: Optional[bool] = None


class HousingCompanySchema(_Schema):
    name: Optional[LocalizedSchema] = None
    loans: Optional[float] = None
    encumbrances: Optional[float] = None
    loans_date: Optional[str] = None


class MetaSchema(_Schema):
    status: Optional[str] = None
    floor: Optional[str] = None
    rent: Optional[float] = Field(None, ge=0)
    housing_company: HousingCompanySchema = Field(default_factory=HousingCompanySchema)
    year_built: Optional[int] = Field(None, ge=1500, le=2100)
    floors_total: Optional[int] = Field(None, gt=0)
    extra: Dict[str, Any] = Field(default_factory=dict)


class ImageSchema(_Schema):
    url: UrlStr
    thumb: Optional[str] = None
    floor_plan: bool = False


class CoordinatesSchema(_Schema):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class MediaSchema(_Schema):
    images: List[ImageSchema] = Field(default_factory=list)
    coordinates: Optional[CoordinatesSchema] = None


class DocumentsSchema(_Schema):
    floor_plan: Optional[UrlStr] = None
    brochure: Optional[UrlStr] = None
    brochure_intl: Optional[UrlStr] = None
    video: Optional[UrlStr] = None
    energy_cert: Optional[UrlStr] = None


class AgentSchema(_Schema):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    photo_url: Optional[UrlStr] = None
    title: Optional[str] = None


class RentalSchema(_Schema):
    monthly_rent: float = Field(gt=0)
    security_deposit: Optional[LocalizedSchema] = None
    contract_type: Optional[LocalizedSchema] = None
    earliest_termination: Optional[LocalizedSchema] = None
    notice_period: Optional[LocalizedSchema] = None
    pets_allowed: Optional[bool] = None
    smoking_allowed: Optional[bool] = None


class PropertySchema(_Schema):
    id: str = Field(min_length=1)
    slug: str = Field(min_length=1)

    address: Optional[LocalizedSchema] = None
    city: Optional[LocalizedSchema] = None
    postal_code: Optional[str] = Field(None, min_length=5)
    district: Optional[LocalizedSchema] = None

    description: Optional[LocalizedSchema] = None
    description_title: Optional[LocalizedSchema] = None

    pricing: PricingSchema
    dimensions: DimensionsSchema
    fees: FeesSchema = Field(default_factory=FeesSchema)
    features: FeaturesSchema = Field(default_factory=FeaturesSchema)
    meta: MetaSchema = Field(default_factory=MetaSchema)
    media: MediaSchema = Field(default_factory=MediaSchema)
    documents: DocumentsSchema = Field(default_factory=DocumentsSchema)
    agent: Optional[AgentSchema] = None
    rental: Optional[RentalSchema] = None


@dataclass
class ValidationWarning:
    path: str  # dotted, e.g. "media.images.0.url"
    message: str


@dataclass
class ValidationResult:
    success: bool
    data: Optional[Dict[str, Any]] = None
    warnings: List[ValidationWarning] = field(default_factory=list)


def validate_property(candidate: Any) -> ValidationResult:
    """
    Validate a Property (or its dict form) against the property schema.

    Returns a ValidationResult; never raises on invalid data.
    """
    payload = candidate
    if is_dataclass(candidate) and not isinstance(candidate, type):
        payload = to_plain(candidate)

    try:
        model = PropertySchema.model_validate(payload)
    except ValidationError as e:
        warnings = [
            ValidationWarning(
                path=".".join(str(part) for part in error["loc"]),
                message=error["msg"],
            )
            for error in e.errors()
        ]
        return ValidationResult(success=False, warnings=warnings)

    return ValidationResult(success=True, data=model.model_dump())
