"""Unit tests for mapping raw Linear records to Property objects."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from models.localized import lpick
from models.property import is_rental, property_category
from sources.linear.mapper import LinearMapper


@pytest.fixture
def mapper():
    return LinearMapper()


@pytest.fixture
def apartment(mapper, raw_by_id):
    return mapper.map(raw_by_id["l-1001"], "fi")


class TestLocationAndSlug:
    """Test identity, address and slug fields."""

    def test_id_and_slug(self, apartment):
        assert apartment.id == "l-1001"
        assert apartment.slug == "mantylantie-5-b"

    def test_address_fields(self, apartment):
        assert apartment.address.fi == "Mäntyläntie 5 B"
        assert apartment.postal_code == "00330"
        assert apartment.district.sv == "Munksnäs"

    def test_explicit_slug_wins(self, mapper, raw_by_id):
        assert mapper.map(raw_by_id["l-1003"]).slug == "bulevardi-1-a-12"

    def test_slug_from_id_when_address_missing(self, mapper):
        prop = mapper.map({"nonLocalizedValues": {"id": "x-9"}})
        assert prop.slug == "kohde-x-9"
        assert prop.address is None

    def test_plain_string_localized_fields(self, mapper, raw_by_id):
        prop = mapper.map(raw_by_id["l-1003"], "sv")
        assert prop.city.pick("sv") == "Helsingfors"
        assert prop.postal_code == "00120"


class TestPricing:
    """Test price parsing and debt calculation."""

    def test_finnish_formatted_prices(self, apartment):
        assert apartment.pricing.sales.value == pytest.approx(1462587.91)
        assert apartment.pricing.debt_free.value == pytest.approx(1462587.91)
        assert apartment.pricing.debt.value == 0

    def test_debt_is_difference(self, mapper, raw_by_id):
        prop = mapper.map(raw_by_id["l-1003"])
        assert prop.pricing.sales.value == 300000
        assert prop.pricing.debt.value == 50000
        assert prop.has_debt()

    def test_property_tax(self, mapper, raw_by_id):
        prop = mapper.map(raw_by_id["l-1005"])
        assert prop.pricing.property_tax.value == pytest.approx(1240.60)

    def test_negative_price_becomes_zero_with_warning(self, mapper):
        raw = {
            "nonLocalizedValues": {"id": "neg", "askPrice": "-100 €", "area": 40},
            "address": {"fi": {"value": "Testikatu 2"}},
        }
        prop, warnings = mapper.map_with_warnings(raw)
        assert prop.pricing.sales.value == 0
        assert "pricing.sales" in [w.path for w in warnings]

    def test_housing_company_amounts(self, apartment):
        company = apartment.meta.housing_company
        assert company.loans == pytest.approx(1462587.91)
        assert company.encumbrances == pytest.approx(1625002.18)
        assert company.name.fi == "As Oy Mäntyläntie 5"
        assert apartment.has_company_loans()


class TestLocalization:
    """Test locale handling and fallback."""

    def test_missing_translation_falls_back(self, mapper, raw_by_id):
        prop = mapper.map(raw_by_id["l-1001"], "en")
        assert prop.address.en is None
        assert lpick(prop.address, "en") == "Mäntyläntie 5 B"
        assert prop.locale == "en"

    def test_description_converted_to_html(self, apartment):
        assert apartment.description.fi == (
            "<p>Valoisa koti.<br>Hyvä sijainti.</p><p>Remontoitu 2020.</p>"
        )
        assert apartment.description.en == "<p>Bright home.</p>"

    def test_unsupported_locale(self, mapper, raw_by_id):
        with pytest.raises(ValueError):
            mapper.map(raw_by_id["l-1001"], "de")

    def test_listing_type_label(self, mapper, raw_by_id):
        prop = mapper.map(raw_by_id["l-1003"], "sv")
        assert prop.meta.type_code == "FLAT"
        assert prop.meta.listing_type_label.sv == "Höghus"


class TestRental:
    """Test the rental branch."""

    def test_rental_fields(self, mapper, raw_by_id):
        prop = mapper.map(raw_by_id["l-1002"])
        assert prop.apartment_identifier == "C 47"
        assert prop.gate == "C"
        assert prop.meta.rent == 1250
        assert prop.rental.monthly_rent == 1250
        assert prop.rental.pets_allowed is False
        assert prop.rental.security_deposit.pick("sv") == "2 månaders hyra"
        assert is_rental(prop)
        assert property_category(prop) == "rental"

    def test_sale_has_no_rental(self, apartment):
        assert apartment.rental is None
        assert not apartment.is_rental
        assert property_category(apartment) == "apartment"

    def test_zero_rent_is_sale(self, mapper):
        raw = {
            "nonLocalizedValues": {"id": "r0", "area": 30},
            "address": {"fi": {"value": "Vuokrakatu 1"}},
            "rent": {"fi": {"value": "0 €"}},
            "listingType": {"fi": {"value": "VUOKRAHUONEISTO"}},
        }
        prop = mapper.map(raw)
        assert prop.rental is None
        assert not is_rental(prop)


class TestMediaAndDocuments:
    """Test images, coordinates, documents and agent."""

    def test_images(self, apartment):
        images = apartment.media.images
        assert len(images) == 2
        assert images[0].floor_plan
        assert images[1].url == "https://cdn.example.fi/l-1001/1-c.jpg"
        assert images[1].thumb == "https://cdn.example.fi/l-1001/1-t.jpg"
        assert apartment.media.hero_image().url == "https://cdn.example.fi/l-1001/1-c.jpg"

    def test_documents(self, apartment):
        docs = apartment.documents
        assert docs.floor_plan == "https://cdn.example.fi/l-1001/plan.jpg"
        assert docs.brochure == "https://esitteet.example.fi/l-1001.pdf"
        assert docs.video == "https://youtu.be/abc123"
        assert docs.energy_cert is None

    def test_floor_plan_document_prefers_compressed(self, mapper):
        raw = {
            "nonLocalizedValues": {"id": "fp-1", "area": 40},
            "address": {"fi": {"value": "Testikatu 4"}},
            "images": [
                {
                    "url": "https://cdn.example.fi/fp-1/plan.png",
                    "compressed": "https://cdn.example.fi/fp-1/plan-c.jpg",
                    "isFloorPlan": True,
                }
            ],
        }
        prop = mapper.map(raw)
        assert prop.documents.floor_plan == "https://cdn.example.fi/fp-1/plan-c.jpg"
        assert prop.documents.floor_plan == prop.media.images[0].url

    def test_coordinates_from_non_localized_values(self, apartment):
        assert apartment.media.coordinates.lat == pytest.approx(60.2055)
        assert apartment.media.coordinates.lon == pytest.approx(24.8835)

    def test_coordinates_from_map_string(self, mapper, raw_by_id):
        coords = mapper.map(raw_by_id["l-1005"]).media.coordinates
        assert coords.lat == pytest.approx(60.3932)
        assert coords.lon == pytest.approx(25.6650)

    def test_agent(self, apartment):
        agent = apartment.agent
        assert agent.name == "Anna Virtanen"
        assert agent.email == "anna.virtanen@example.fi"
        assert agent.photo_url == "https://cdn.example.fi/agents/anna.jpg"
        assert agent.title == "Kiinteistönvälittäjä LKV"

    def test_agent_url_email_dropped(self, mapper, raw_by_id):
        prop, warnings = mapper.map_with_warnings(raw_by_id["l-1003"])
        assert prop.agent.name == "Pekka Laine"
        assert prop.agent.email is None
        assert "agent.email" in [w.path for w in warnings]


class TestDimensionsAndMeta:
    """Test areas, fees, features and meta fields."""

    def test_living_area(self, apartment):
        assert apartment.dimensions.living.value == pytest.approx(85.5)
        assert apartment.dimensions.rooms == "3h+k+s"

    def test_plot_in_hectares(self, mapper, raw_by_id):
        prop = mapper.map(raw_by_id["l-1005"])
        assert prop.dimensions.plot.value == pytest.approx(12000)
        assert prop.has_plot()
        assert property_category(prop) == "property"

    def test_total_from_other_area(self, mapper, raw_by_id):
        prop = mapper.map(raw_by_id["l-1005"])
        assert prop.dimensions.total.value == pytest.approx(175)

    def test_fees_and_features(self, apartment):
        assert apartment.fees.maintenance.value == pytest.approx(412.5)
        assert apartment.fees.parking is None
        assert apartment.features.balcony is True
        assert apartment.features.sauna is None

    def test_negative_fee_omitted(self, mapper):
        raw = {
            "nonLocalizedValues": {"id": "f-1", "area": 40},
            "address": {"fi": {"value": "Testikatu 3"}},
            "maintenanceCharge": {"fi": {"value": "-50 €"}},
        }
        prop, warnings = mapper.map_with_warnings(raw)
        assert prop.fees.maintenance is None
        assert "fees.maintenance" in [w.path for w in warnings]

    def test_meta(self, apartment):
        meta = apartment.meta
        assert meta.status == "ACTIVE"
        assert meta.type_code == "KERROSTALO"
        assert meta.energy_class == "C"
        assert meta.energy_cert_status == "HAS_CERTIFICATE"
        assert meta.elevator is True
        assert meta.year_built == 1962
        assert meta.floor == "3/5"

    def test_statuses(self, mapper, raw_by_id):
        assert mapper.map(raw_by_id["l-1003"]).meta.status == "SOLD"
        assert mapper.map(raw_by_id["l-1004"]).meta.status == "RESERVED"
        assert mapper.map(raw_by_id["l-1005"]).meta.status is None

    def test_energy_not_required(self, mapper, raw_by_id):
        prop = mapper.map(raw_by_id["l-1005"])
        assert prop.meta.energy_cert_status == "NOT_REQUIRED_BY_LAW"

    def test_unmodeled_fields_kept_in_extra(self, apartment):
        assert apartment.meta.extra == {"customField": {"fi": {"value": "custom"}}}

    def test_extra_is_read_only_copy(self, mapper, raw_by_id):
        raw = raw_by_id["l-1001"]
        fi = mapper.map(raw, "fi")
        sv = mapper.map(raw, "sv")

        with pytest.raises(TypeError):
            fi.meta.extra["injected"] = 1
        with pytest.raises(TypeError):
            fi.meta.extra["customField"]["fi"]["value"] = "changed"

        raw["customField"]["fi"]["value"] = "edited at source"
        assert sv.meta.extra["customField"]["fi"]["value"] == "custom"

    def test_extra_serializes_to_plain_dict(self, apartment):
        data = apartment.to_dict()
        assert data["meta"]["extra"] == {"customField": {"fi": {"value": "custom"}}}
        assert type(data["meta"]["extra"]) is dict


class TestMappingContract:
    """Test purity and warning behavior."""

    def test_mapping_is_pure(self, mapper, raw_by_id):
        raw = raw_by_id["l-1001"]
        assert mapper.map(raw, "sv") == mapper.map(raw, "sv")
        assert LinearMapper().map(raw, "sv") == mapper.map(raw, "sv")

    def test_clean_record_has_no_warnings(self, mapper, raw_by_id):
        _, warnings = mapper.map_with_warnings(raw_by_id["l-1001"])
        assert warnings == []

    def test_every_sample_maps_in_every_locale(self, mapper, sample_listings):
        for raw in sample_listings:
            for locale in ("fi", "sv", "en"):
                prop = mapper.map(raw, locale)
                assert prop.id.startswith("l-")
                assert prop.slug
