"""Unit tests for slug generation."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from utils.slug import qualified_slug, slugify, unique_slug

SAMPLES = [
    "Mäntyläntie 5 B",
    "Åkervägen 3, Borgå",
    "Bulevardi 1 A 12",
    "  --Rantatie   12--  ",
    "Østergade / Straße",
    "Crème Brûlée",
    "",
    "---",
    "ÄÖÅ äöå",
]


class TestSlugify:
    """Test slug normalization."""

    def test_finnish_address(self):
        assert slugify("Mäntyläntie 5 B") == "mantylantie-5-b"

    def test_nordic_letters(self):
        assert slugify("Åkervägen 3") == "akervagen-3"
        assert slugify("Østergade") == "ostergade"
        assert slugify("Straße") == "strasse"

    def test_other_diacritics_stripped(self):
        assert slugify("Crème Brûlée") == "creme-brulee"

    def test_separators_collapse_and_trim(self):
        assert slugify("  --Rantatie   12--  ") == "rantatie-12"
        assert slugify("Bulevardi 1 A 12, Helsinki") == "bulevardi-1-a-12-helsinki"

    def test_empty(self):
        assert slugify("") == ""
        assert slugify(None) == ""
        assert slugify("---") == ""

    @pytest.mark.parametrize("text", SAMPLES)
    def test_idempotent(self, text):
        once = slugify(text)
        assert slugify(once) == once


class TestUniqueSlug:
    """Test deterministic collision resolution."""

    def test_free_base_is_kept(self):
        assert unique_slug("mannerheimintie-1", set(), postal_code="00100") == "mannerheimintie-1"

    def test_postal_code_appended_first(self):
        taken = {"mannerheimintie-1"}
        assert unique_slug("mannerheimintie-1", taken, postal_code="00200") == "mannerheimintie-1-00200"

    def test_city_appended_next(self):
        taken = {"mannerheimintie-1", "mannerheimintie-1-00100"}
        result = unique_slug("mannerheimintie-1", taken, postal_code="00100", city="Helsinki")
        assert result == "mannerheimintie-1-00100-helsinki"

    def test_id_as_last_variant(self):
        taken = {"a", "a-00100", "a-00100-helsinki"}
        result = unique_slug("a", taken, postal_code="00100", city="Helsinki", listing_id="L-9")
        assert result == "a-l-9"

    def test_numbered_when_everything_taken(self):
        taken = {"a", "a-l-9"}
        assert unique_slug("a", taken, listing_id="L-9") == "a-l-9-2"

    def test_deterministic(self):
        taken = {"a"}
        assert unique_slug("a", taken, postal_code="00100") == unique_slug("a", taken, postal_code="00100")

    def test_qualified_slug(self):
        assert qualified_slug("mantylantie-5-b", "00340") == "mantylantie-5-b-00340"
        assert qualified_slug("mantylantie-5-b", None) == "mantylantie-5-b"
