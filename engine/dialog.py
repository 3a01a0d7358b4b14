"""
Restaurant dialog controller.

This module drives a single turn of the restaurant conversation:
- run(): a new top-level query ("find me tacos")
- follow_up(): a reply inside an open conversation ("what's the address?")

All per-conversation data lives in the ConversationState passed to each
call. The controller holds only its injected collaborators, so one instance
can serve many conversations.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Tuple

from .classifier import (
    FollowUpAction,
    POSITIVE_RESPONSE,
    WELCOME_RESPONSE,
    classify_words,
)
from .extract import build_query, tokenize
from .search import END_OF_RESULTS_MESSAGE, BusinessSearchClient, search_businesses
from .state import ConversationState, Location, StructuredInput

logger = logging.getLogger(__name__)


NOTHING_FOUND_MESSAGE = "I couldn't find anything like that"


class LocationResolutionError(Exception):
    """Raised by a location resolver when the lookup itself fails."""


class LocationResolver(Protocol):
    """
    Resolves where a user is.

    Returns (location, question). An empty question means resolution
    succeeded. A location with an empty name and no question means a
    contextual term ("nearby") could not be expanded yet.
    """

    async def resolve(self, user_id: str) -> Tuple[Optional[Location], str]:
        ...


class TurnAction(str, Enum):
    """Turn outcomes reported alongside the response text."""
    ASK_LOCATION = "ASK_LOCATION"
    SEARCH = "SEARCH"
    LOCATION_ANSWER = "LOCATION_ANSWER"
    NOTHING_FOUND = "NOTHING_FOUND"
    NONE = "NONE"


@dataclass
class TurnResult:
    """Result of a dialog turn."""
    response: Optional[str]
    action: str
    word: Optional[str] = None


class DialogController:
    """Orchestrates location resolution, search and follow-up answers."""

    def __init__(
        self,
        search_client: BusinessSearchClient,
        location_resolver: LocationResolver,
    ):
        self.search_client = search_client
        self.location_resolver = location_resolver

    async def run(
        self,
        state: ConversationState,
        structured_input: StructuredInput,
        user_id: str,
    ) -> TurnResult:
        """
        Handle a new top-level query.

        Location failures raise LocationResolutionError and abort the turn.
        """
        state.reset(build_query(structured_input))

        question = await self._resolve_location(state, user_id)
        if question:
            return TurnResult(response=question, action=TurnAction.ASK_LOCATION.value)

        # "nearby" and similar terms resolve to an empty name when there was
        # no earlier context to expand them. Ask the resolver once more.
        if not state.location:
            question = await self._resolve_location(state, user_id)
            if question:
                return TurnResult(response=question, action=TurnAction.ASK_LOCATION.value)

        response = await search_businesses(state, self.search_client)
        return TurnResult(response=response, action=TurnAction.SEARCH.value)

    async def follow_up(
        self,
        state: ConversationState,
        utterance: str,
        prior_response: str = "",
    ) -> TurnResult:
        """
        Handle a reply within an open conversation.

        Keywords are looked up in the words of the prior assistant response
        first. If none of those produce a response, the user's utterance is
        scanned the same way.
        """
        if not state.location:
            # TODO validate the answer against the location resolver before searching
            state.location = utterance
            response = await search_businesses(state, self.search_client)
            return TurnResult(response=response, action=TurnAction.LOCATION_ANSWER.value)

        if state.businesses is not None and len(state.businesses) == 0:
            return TurnResult(response=NOTHING_FOUND_MESSAGE, action=TurnAction.NOTHING_FOUND.value)

        for text in (prior_response, utterance):
            result = await self._scan(state, tokenize(text or ""))
            if result is not None:
                return result

        return TurnResult(response=None, action=TurnAction.NONE.value)

    async def _resolve_location(self, state: ConversationState, user_id: str) -> str:
        """Resolve the user's location into state, returning any clarifying question."""
        location, question = await self.location_resolver.resolve(user_id)
        if question:
            if location is not None and location.name:
                state.location = location.name
            logger.info(f"Location unresolved for user={user_id}, asking: '{question}'")
            return question

        state.location = location.name if location is not None else ""
        return ""

    async def _scan(self, state: ConversationState, words: List[str]) -> Optional[TurnResult]:
        for match in classify_words(words):
            response = await self._respond(state, match.action)
            if response:
                logger.debug(f"Follow-up word '{match.word}' -> {match.action.value}")
                return TurnResult(response=response, action=match.action.value, word=match.word)
        return None

    async def _respond(self, state: ConversationState, action: FollowUpAction) -> Optional[str]:
        """Produce the response for a classified follow-up action."""
        if action == FollowUpAction.ANOTHER:
            state.offset += 1
            return await search_businesses(state, self.search_client)
        if action == FollowUpAction.ACKNOWLEDGE:
            return POSITIVE_RESPONSE
        if action == FollowUpAction.THANKS:
            return WELCOME_RESPONSE

        business = state.current_business()
        if business is None:
            logger.warning(
                f"Offset {state.offset} out of range for "
                f"{len(state.businesses or [])} businesses"
            )
            return END_OF_RESULTS_MESSAGE

        if action == FollowUpAction.RATING:
            return f"It has a {business.rating:.1f} star review"
        if action == FollowUpAction.PHONE:
            return business.display_phone
        if action == FollowUpAction.CALL:
            return f"You can reach them here: {business.display_phone}"
        if action == FollowUpAction.INFO:
            return f"Here's some more info: {business.info_url}"
        if action == FollowUpAction.ADDRESS:
            return f"It's at {business.full_address}"
        if action == FollowUpAction.PICTURES:
            return f"I found some pics here: {business.info_url}"
        if action == FollowUpAction.MENU:
            return f"Yelp might have a menu... {business.info_url}"
        return None
