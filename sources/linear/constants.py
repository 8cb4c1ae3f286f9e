"""Linear API constants: endpoints, field names and link patterns."""

import re
from typing import Dict, FrozenSet, Pattern

DEFAULT_BASE_URL = "https://linear-external-api.azurewebsites.net"
LISTINGS_PATH = "/v2/listings"
LISTINGS_PARAMS = {"languages[]": "fi"}

API_KEY_PREFIX = "LINEAR-API-KEY "
COMPANY_ID_HEADER = "x-company-id"

DEFAULT_TIMEOUT = 30.0

# Patterns for picking document URLs out of the generic "links" array
LINK_PATTERNS: Dict[str, Pattern] = {
    "floor_plan": re.compile(r"pohjakuva|floorplan|planritning", re.IGNORECASE),
    "brochure": re.compile(r"esitteet|brochure|broschyr", re.IGNORECASE),
    "brochure_intl": re.compile(r"sothebysrealty\.com/eng", re.IGNORECASE),
    "video": re.compile(r"youtu\.be|youtube\.com|vimeo\.com", re.IGNORECASE),
}

# Plot area fields in lookup order, each with its unit field in nonLocalizedValues
PLOT_AREA_FIELDS = ("plotArea", "lotArea", "siteArea", "propertyArea", "estateArea")

# Raw top-level fields read by the mapper. Everything else lands in meta.extra.
MODELED_FIELDS: FrozenSet[str] = frozenset({
    "id",
    "slug",
    "nonLocalizedValues",
    # Location
    "address",
    "city",
    "district",
    "districtFree",
    "postalCode",
    "gate",
    "apartmentNumber",
    # Content
    "freeText",
    "freeTextTitle",
    "marketingDescription",
    # Pricing
    "askPrice",
    "debtFreePrice",
    "propertyTax",
    "realEstateTax",
    "debtlessStartPrice",
    # Dimensions
    "area",
    "otherArea",
    "overallArea",
    "totalArea",
    "plotArea",
    "lotArea",
    "siteArea",
    "propertyArea",
    "estateArea",
    "businessPremiseArea",
    "balconyArea",
    "terraceArea",
    "rooms",
    "numberOfBedrooms",
    "numberOfBathrooms",
    # Fees
    "maintenanceCharge",
    "renovationCharge",
    "fundingCharge",
    "financingCharge",
    "waterCharge",
    "heatingCharge",
    "averageTotalHeatingCharge",
    "electricHeatingCharge",
    "parkingCharge",
    "saunaCharge",
    # Features
    "hasBalcony",
    "balcony",
    "hasTerrace",
    "terrace",
    "sauna",
    "fireplace",
    "storageRoom",
    "hasParkingSpace",
    "parkingSpace",
    # Meta
    "status",
    "listingType",
    "propertyType",
    "type",
    "energyClass",
    "listingHasEnergyCertificate",
    "heatingSystem",
    "condition",
    "yearBuilt",
    "completeYear",
    "floorCount",
    "floor",
    "floorLocation",
    "elevator",
    "housingCooperativeElevator",
    "housingCooperativeName",
    "companyLoans",
    "taloyhtionLainat",
    "housingCooperativeMortgage",
    "propertyMortgage",
    "encumbranceAmount",
    "housingCooperativeMortgageDate",
    "propertyManagerCertificateDate",
    # Rental
    "rent",
    "securityDeposit",
    "rentalContractType",
    "earliestTermination",
    "noticePeriod",
    "petsAllowed",
    "smokingAllowed",
    # Location
    "latitude",
    "longitude",
    "mapCoordinates",
    # Media and documents
    "images",
    "links",
    "floorPlanUrl",
    "brochureUrl",
    "propertyBrochureUrl",
    "internationalBrochureUrl",
    "videoUrl",
    "energyCertificateUrl",
    # Agent
    "agent",
    "realtor",
    "realtorName",
    "estateAgentName",
    "estateAgentPhone",
    "estateAgentEmail",
})
