"""
Runtime settings for the restaurant service.

Settings are read once at startup and handed to the services that need
them. Environment variables are loaded from .env by app.main before
from_env() is called.
"""
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_YELP_SEARCH_URL = "https://api.yelp.com/v3/businesses/search"


@dataclass(frozen=True)
class Settings:
    yelp_api_key: Optional[str] = None
    yelp_search_url: str = DEFAULT_YELP_SEARCH_URL
    yelp_timeout_seconds: float = 30.0
    debug: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            yelp_api_key=os.getenv("YELP_API_KEY") or None,
            yelp_search_url=os.getenv("YELP_SEARCH_URL", DEFAULT_YELP_SEARCH_URL),
            yelp_timeout_seconds=float(os.getenv("YELP_TIMEOUT_SECONDS", "30")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )


def mask_key(key: Optional[str]) -> str:
    """Mask API key showing only last 4 chars."""
    if not key:
        return "(not set)"
    if len(key) <= 4:
        return "****"
    return f"****{key[-4:]}"
