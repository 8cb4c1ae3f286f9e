"""Utility modules for parsing and normalizing listing values."""

from .number_parser import parse_area_amount, parse_monetary_amount
from .slug import qualified_slug, slugify, unique_slug

__all__ = [
    "parse_area_amount",
    "parse_monetary_amount",
    "qualified_slug",
    "slugify",
    "unique_slug",
]
