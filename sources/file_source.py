"""Listing source backed by a JSON export on disk."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from sources.base import ListingsSource, SourceFetchError
from sources.linear.client import extract_listings

logger = logging.getLogger(__name__)


class JsonFileSource(ListingsSource):
    """
    Reads raw listings from a JSON file saved from the Linear API.

    The file may use any response shape the API itself returns. The file is
    re-read on every fetch, so edits show up on the next sync.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        file_config = config.get("file", {})
        path = file_config.get("path")
        if not path:
            raise ValueError("file source requires file.path in config")
        self.path = Path(path)

    def get_source_name(self) -> str:
        return "file"

    async def fetch_listings(self) -> List[Dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise SourceFetchError(f"Listings file not found: {self.path}") from e
        except json.JSONDecodeError as e:
            raise SourceFetchError(f"Invalid JSON in {self.path}: {e}") from e

        listings = extract_listings(data)
        logger.info(f"Loaded {len(listings)} listings from {self.path}")
        return listings
