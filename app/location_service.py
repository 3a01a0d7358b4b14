"""
In-process user location service.

Remembers the last known location per user. Users with no known location
are asked where they are.
"""

import logging
from typing import Dict, Optional, Tuple

from engine.dialog import LocationResolutionError
from engine.state import Location

logger = logging.getLogger(__name__)

LOCATION_QUESTION = "Where are you?"


class UserLocationService:
    """Resolves and remembers user locations."""

    def __init__(self):
        self._locations: Dict[str, Location] = {}

    async def resolve(self, user_id: str) -> Tuple[Optional[Location], str]:
        """
        Resolve a user's location.

        Returns:
            (location, "") when known, (None, question) when not

        Raises:
            LocationResolutionError: if no user id is given
        """
        if not user_id:
            raise LocationResolutionError("user id is required to resolve a location")

        location = self._locations.get(user_id)
        if location is None:
            return None, LOCATION_QUESTION

        logger.debug(f"Resolved location for user={user_id}: '{location.name}'")
        return location, ""

    def remember(self, user_id: str, name: str) -> Location:
        """Store name as the user's current location."""
        location = Location(name=name.strip())
        self._locations[user_id] = location
        logger.info(f"Remembered location for user={user_id}: '{location.name}'")
        return location

    def forget(self, user_id: str) -> None:
        self._locations.pop(user_id, None)
