"""HTTP client for the Linear listings API."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from sources.base import ListingsSource, SourceFetchError

from .constants import (
    API_KEY_PREFIX,
    COMPANY_ID_HEADER,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    LISTINGS_PARAMS,
    LISTINGS_PATH,
)
from .records import RawListing

logger = logging.getLogger(__name__)


class LinearClient(ListingsSource):
    """Fetches the complete listing set from the Linear external API."""

    def __init__(
        self,
        config: Dict[str, Any],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Full configuration dictionary; reads the "linear" section
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        super().__init__(config)
        linear_config = config.get("linear", {})

        self.base_url = (linear_config.get("base_url") or DEFAULT_BASE_URL).rstrip("/")
        self.api_key: Optional[str] = linear_config.get("api_key")
        self.company_id: Optional[str] = linear_config.get("company_id")
        self.timeout = float(linear_config.get("timeout", DEFAULT_TIMEOUT))

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        if not self.api_key:
            logger.warning("Linear API key is not configured; fetches will fail")

    def get_source_name(self) -> str:
        return "linear"

    def _headers(self) -> Dict[str, str]:
        api_key = self.api_key or ""
        if not api_key.startswith(API_KEY_PREFIX):
            api_key = f"{API_KEY_PREFIX}{api_key}"

        headers = {
            "Authorization": api_key,
            "Accept": "application/json",
        }
        if self.company_id:
            headers[COMPANY_ID_HEADER] = self.company_id
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, connect=10.0),
                transport=self._transport,
            )
        return self._client

    async def fetch_listings(self) -> List[RawListing]:
        """
        Fetch all listings.

        Returns:
            Raw listing records in source order

        Raises:
            SourceFetchError: On missing credentials, transport errors,
                non-2xx responses, invalid JSON or an unknown response shape
        """
        if not self.api_key:
            raise SourceFetchError("Linear API key is not configured")

        url = f"{self.base_url}{LISTINGS_PATH}"
        logger.info(f"Fetching listings from {url}")

        try:
            response = await self._get_client().get(
                LISTINGS_PATH, params=LISTINGS_PARAMS, headers=self._headers()
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise SourceFetchError(f"Linear API request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise SourceFetchError(
                f"Linear API returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise SourceFetchError(f"Linear API request failed: {e}") from e
        except ValueError as e:
            raise SourceFetchError(f"Linear API returned invalid JSON: {e}") from e

        listings = extract_listings(data)
        logger.info(f"Fetched {len(listings)} listings from Linear API")
        return listings

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def extract_listings(data: Any) -> List[RawListing]:
    """
    Pull the listing array out of any of the response shapes the API uses.

    Supported shapes:
        [...]
        {"data": [{"listings": [...]}]}
        {"listings": [...]}
        {"data": [...]}

    Raises:
        SourceFetchError: If the payload matches none of them
    """
    if isinstance(data, list):
        logger.debug("Linear response: direct array")
        return data

    if isinstance(data, dict):
        nested = data.get("data")
        if (
            isinstance(nested, list)
            and nested
            and isinstance(nested[0], dict)
            and isinstance(nested[0].get("listings"), list)
        ):
            logger.debug("Linear response: data[0].listings")
            return nested[0]["listings"]

        if isinstance(data.get("listings"), list):
            logger.debug("Linear response: listings")
            return data["listings"]

        if isinstance(nested, list):
            logger.debug("Linear response: data")
            return nested

    raise SourceFetchError(
        f"Unknown Linear API response format: {type(data).__name__}"
    )
