"""Shared fixtures for the listings cache test suite."""

import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_sample_listings():
    """Raw listing records from the sample Linear export."""
    with open(FIXTURES_DIR / "listings_sample.json", "r", encoding="utf-8") as f:
        return json.load(f)["data"][0]["listings"]


@pytest.fixture
def sample_listings():
    return load_sample_listings()


@pytest.fixture
def raw_by_id(sample_listings):
    """Sample records keyed by their nonLocalizedValues id."""
    return {raw["nonLocalizedValues"]["id"]: raw for raw in sample_listings}
