"""In-memory listing cache with slug lookup and background sync."""

from .aliases import load_slug_aliases
from .listings_cache import ListingsCache, create_cache

__all__ = ["ListingsCache", "create_cache", "load_slug_aliases"]
