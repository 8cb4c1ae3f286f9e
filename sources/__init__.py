"""Listing source factory and exports."""

import logging
from typing import Any, Dict

from sources.base import ListingsSource, SourceFetchError

logger = logging.getLogger(__name__)


def get_source(config: Dict[str, Any]) -> ListingsSource:
    """
    Factory function to get the configured listing source.

    Args:
        config: Configuration dictionary from config.json

    Returns:
        Source instance (LinearClient or JsonFileSource)

    Raises:
        ValueError: If source is not supported

    Example:
        >>> config = {"source": "file", "file": {"path": "listings.json"}}
        >>> source = get_source(config)
        >>> print(source.get_source_name())
        "file"
    """
    source = config.get("source", "linear").lower()

    if source == "linear":
        from sources.linear.client import LinearClient

        logger.info("Initializing Linear API client")
        return LinearClient(config)

    elif source == "file":
        from sources.file_source import JsonFileSource

        logger.info("Initializing JSON file source")
        return JsonFileSource(config)

    else:
        raise ValueError(
            f"Unsupported source: {source}. "
            f"Supported sources: 'linear', 'file'"
        )


__all__ = ["get_source", "ListingsSource", "SourceFetchError"]
