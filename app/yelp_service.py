"""
Yelp business search service.

Issues business searches against the Yelp Fusion API and normalizes the
payload into engine Business records. Provider failures never raise: they
come back as a BusinessSearchResult with error set, which the dialog treats
as "no answer this turn".

Python 3.9 compatible - uses typing.Dict, typing.List, typing.Optional
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from engine.search import BusinessSearchResult
from engine.state import Business

from .config import Settings

logger = logging.getLogger(__name__)


class YelpService:
    """Service for Yelp business search."""

    # Largest page the search endpoint accepts
    MAX_LIMIT = 50

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        if not settings.yelp_api_key:
            raise RuntimeError("YELP_API_KEY is required for Yelp service")

        self.search_url = settings.yelp_search_url
        self.http_client = http_client or httpx.AsyncClient(timeout=settings.yelp_timeout_seconds)
        self.http_client.headers["Authorization"] = f"Bearer {settings.yelp_api_key}"
        logger.info("Yelp service initialized")

    async def close(self):
        """Close the HTTP client."""
        await self.http_client.aclose()
        logger.info("Yelp service closed")

    async def search(self, term: str, location: str, limit: int) -> BusinessSearchResult:
        """
        Search for businesses matching term near location.

        Args:
            term: Free-text search terms (e.g., "tacos ")
            location: Place name to search around (e.g., "Austin")
            limit: Number of results to request

        Returns:
            BusinessSearchResult with businesses in provider order, or error
        """
        if limit > self.MAX_LIMIT:
            logger.warning(f"Requested limit {limit} exceeds provider maximum {self.MAX_LIMIT}")

        params = {
            "term": term,
            "location": location,
            "limit": limit,
        }

        try:
            response = await self.http_client.get(self.search_url, params=params)
            if response.status_code != 200:
                logger.error(f"Yelp status {response.status_code} for term='{term}' location='{location}'")
                return BusinessSearchResult(error="YELP_ERROR")

            data = response.json()
            businesses = [self._parse_business(b) for b in data.get("businesses") or []]

            logger.info(f"Yelp search for '{term.strip()}' near '{location}': {len(businesses)} businesses (limit {limit})")
            return BusinessSearchResult(businesses=businesses, error=None)

        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Yelp search error: {e}")
            return BusinessSearchResult(error="YELP_ERROR")

    @staticmethod
    def _parse_business(raw: Dict[str, Any]) -> Business:
        """
        Convert one Yelp business payload into a Business record.

        The older search API exposed mobile_url; the current one only url.
        """
        location = raw.get("location") or {}
        display_address: List[str] = [str(line) for line in location.get("display_address") or []]

        return Business(
            name=raw.get("name") or "",
            image_url=raw.get("image_url") or "",
            info_url=raw.get("mobile_url") or raw.get("url") or "",
            display_phone=raw.get("display_phone") or "",
            distance=float(raw.get("distance") or 0.0),
            rating=float(raw.get("rating") or 0.0),
            city=location.get("city") or "",
            display_address=display_address,
        )
