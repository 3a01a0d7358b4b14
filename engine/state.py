"""
Typed conversation records for the restaurant dialog.

A ConversationState is created on the first turn of a conversation and
mutated on every turn after that. Business records come from the search
provider and are never mutated once parsed.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Business:
    """A single business returned by the search provider."""
    name: str
    image_url: str = ""
    info_url: str = ""
    display_phone: str = ""
    distance: float = 0.0
    rating: float = 0.0
    city: str = ""
    display_address: List[str] = field(default_factory=list)

    @property
    def street_address(self) -> str:
        """First display address line, or empty string."""
        if self.display_address:
            return self.display_address[0]
        return ""

    @property
    def full_address(self) -> str:
        """
        Address used in "where is it" answers.

        Combines the first two display lines as "{line1} in {line2}" when a
        second line exists.
        """
        if len(self.display_address) > 1:
            return f"{self.display_address[0]} in {self.display_address[1]}"
        return self.street_address


@dataclass
class Location:
    """A resolved (or partially resolved) place for a user."""
    name: str = ""


@dataclass
class StructuredInput:
    """Command and object tokens extracted from a raw utterance by the host."""
    commands: List[str] = field(default_factory=list)
    objects: List[str] = field(default_factory=list)


@dataclass
class ConversationState:
    """
    Per-conversation dialog state.

    Attributes:
        query: Search terms built from the current top-level turn
        location: Resolved place name, empty while pending clarification
        offset: Index into businesses of the result currently shown
        businesses: Results of the most recent search; None until a search
            has succeeded, an empty list means nothing was found
    """
    query: str = ""
    location: str = ""
    offset: int = 0
    businesses: Optional[List[Business]] = None

    def reset(self, query: str) -> None:
        """Start a fresh top-level query."""
        self.query = query
        self.location = ""
        self.offset = 0
        self.businesses = []

    def current_business(self) -> Optional[Business]:
        """Business at the current offset, or None when out of range."""
        if not self.businesses or self.offset < 0:
            return None
        if self.offset >= len(self.businesses):
            return None
        return self.businesses[self.offset]
