"""
Business search step of the restaurant dialog.

Pagination works by re-querying: to show the result at offset N the
provider is asked for N + 1 results and the last one is read. Provider
failures are absorbed here: the turn ends with no response and the
conversation state is left untouched.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from .state import Business, ConversationState

logger = logging.getLogger(__name__)


NO_RESULTS_MESSAGE = "I couldn't find any places like that nearby."
END_OF_RESULTS_MESSAGE = "That's all I could find."


@dataclass
class BusinessSearchResult:
    """Normalized provider response."""
    businesses: List[Business] = field(default_factory=list)
    error: Optional[str] = None


class BusinessSearchClient(Protocol):
    """Provider contract consumed by the dialog."""

    async def search(self, term: str, location: str, limit: int) -> BusinessSearchResult:
        ...


def describe_business(business: Business, offset: int) -> str:
    """Render the message presenting the business at offset."""
    if offset == 0:
        return f"Ok. How does this place look? {business.name} at {business.street_address}"
    return f"What about {business.name} instead?"


async def search_businesses(
    state: ConversationState,
    client: BusinessSearchClient,
) -> Optional[str]:
    """
    Run one provider search for the state's query, location and offset.

    Returns:
        The response text, or None when the provider failed and the turn
        should end silently
    """
    offset = state.offset
    logger.debug(
        f"searching Yelp for {state.query} at {state.location} with offset {offset}"
    )

    result = await client.search(
        term=state.query,
        location=state.location,
        limit=offset + 1,
    )

    if result.error:
        # Provider outages are rare; accidental repeat queries are not. Stay quiet.
        logger.warning(f"Search absorbed provider error: {result.error}")
        return None

    state.businesses = list(result.businesses)
    if not state.businesses:
        return NO_RESULTS_MESSAGE

    if len(state.businesses) <= offset:
        return END_OF_RESULTS_MESSAGE

    return describe_business(state.businesses[offset], offset)
