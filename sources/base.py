"""Abstract base class for listing sources."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class SourceFetchError(Exception):
    """Raised when a listing source cannot deliver a complete listing set."""


class ListingsSource(ABC):
    """
    Abstract base class for listing sources.

    A source returns the full set of raw listing records in one call. Mapping
    to Property objects, slug indexing and caching happen elsewhere, so each
    source only has to deal with transport and response shape.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize source with configuration.

        Args:
            config: Full configuration dictionary from config.json
        """
        self.config = config

    @abstractmethod
    def get_source_name(self) -> str:
        """
        Return source identifier.

        Returns:
            Source name (e.g., "linear", "file")
        """
        pass

    @abstractmethod
    async def fetch_listings(self) -> List[Dict[str, Any]]:
        """
        Fetch every current listing as a raw record.

        Returns:
            List of raw listing dicts, in source order

        Raises:
            SourceFetchError: If the listing set could not be retrieved.
                An empty list means the source has no listings, never an error.
        """
        pass

    async def close(self) -> None:
        """Release network resources. Default implementation does nothing."""
        return None
