"""
Restaurant conversation turn processing.

This module connects the HTTP models to the dialog engine:
1. Converts the client's ConversationStateModel into an engine state
2. Decides whether the turn is a new query (run) or a reply (follow_up)
3. Converts the updated engine state back for the response
4. Logs a one-line summary per turn
"""
import logging
from typing import Optional

from fastapi import HTTPException

from .models import (
    BusinessModel,
    ConversationStateModel,
    EntryPoint,
    RestaurantTurnRequest,
    RestaurantTurnResponse,
    StructuredInputModel,
)
from .location_service import UserLocationService
from engine.dialog import DialogController, LocationResolutionError, TurnAction, TurnResult
from engine.extract import extract_structured_input, is_triggered
from engine.search import BusinessSearchClient
from engine.state import Business, ConversationState, StructuredInput

logger = logging.getLogger(__name__)


def _log_turn_summary(
    conversation_id: str,
    entry_point: EntryPoint,
    result: TurnResult,
    state: Optional[ConversationState],
) -> None:
    """Single-line summary for each handled turn."""
    businesses = None
    if state is not None and state.businesses is not None:
        businesses = len(state.businesses)
    logger.info(
        "[RESTAURANT-SUMMARY] "
        f"id={conversation_id} "
        f"entry={entry_point.value} "
        f"action={result.action} "
        f"word={result.word or 'none'} "
        f"offset={state.offset if state is not None else 'none'} "
        f"businesses={businesses if businesses is not None else 'none'} "
        f"responded={result.response is not None}"
    )


def business_to_api(business: Business) -> BusinessModel:
    return BusinessModel(
        name=business.name,
        imageUrl=business.image_url,
        infoUrl=business.info_url,
        displayPhone=business.display_phone,
        distance=business.distance,
        rating=business.rating,
        city=business.city,
        displayAddress=list(business.display_address),
    )


def business_from_api(model: BusinessModel) -> Business:
    return Business(
        name=model.name,
        image_url=model.imageUrl,
        info_url=model.infoUrl,
        display_phone=model.displayPhone,
        distance=model.distance,
        rating=model.rating,
        city=model.city,
        display_address=list(model.displayAddress),
    )


def state_to_api(state: ConversationState) -> ConversationStateModel:
    """Convert engine state to the API model."""
    businesses = None
    if state.businesses is not None:
        businesses = [business_to_api(b) for b in state.businesses]
    return ConversationStateModel(
        query=state.query,
        location=state.location,
        offset=state.offset,
        businesses=businesses,
    )


def state_from_api(model: Optional[ConversationStateModel]) -> ConversationState:
    """Convert the API model to engine state; None starts a fresh state."""
    if model is None:
        return ConversationState()
    businesses = None
    if model.businesses is not None:
        businesses = [business_from_api(b) for b in model.businesses]
    return ConversationState(
        query=model.query,
        location=model.location,
        offset=model.offset,
        businesses=businesses,
    )


def _structured_input(request: RestaurantTurnRequest) -> StructuredInput:
    si: Optional[StructuredInputModel] = request.structuredInput
    if si is None:
        return extract_structured_input(request.userMessage)
    return StructuredInput(commands=list(si.commands), objects=list(si.objects))


async def process_turn(
    request: RestaurantTurnRequest,
    search_client: BusinessSearchClient,
    location_service: UserLocationService,
) -> RestaurantTurnResponse:
    """
    Process one restaurant conversation turn.

    Flow:
    1. Triggered (command + food) -> run a new top-level query
    2. Otherwise, with existing state -> follow up within the conversation
    3. Otherwise -> not handled

    Raises:
        HTTPException(502): the location lookup failed
    """
    msg_preview = request.userMessage[:50] + "..." if len(request.userMessage) > 50 else request.userMessage
    logger.info(
        f"[RESTAURANT] Turn: id={request.conversationId}, "
        f"user={request.userId}, "
        f"hasState={request.state is not None}, "
        f"message='{msg_preview}'"
    )

    controller = DialogController(
        search_client=search_client,
        location_resolver=location_service,
    )
    structured_input = _structured_input(request)

    if is_triggered(structured_input):
        entry_point = EntryPoint.RUN
    elif request.state is not None:
        entry_point = EntryPoint.FOLLOW_UP
    else:
        logger.info(f"[RESTAURANT] Not handled: id={request.conversationId}")
        return RestaurantTurnResponse(
            assistantMessage=None,
            handled=False,
            entryPoint=EntryPoint.NONE,
            action=TurnAction.NONE.value,
            state=None,
        )

    state = state_from_api(request.state)

    try:
        if entry_point == EntryPoint.RUN:
            result = await controller.run(state, structured_input, request.userId)
        else:
            result = await controller.follow_up(
                state,
                request.userMessage,
                prior_response=request.priorResponse or "",
            )
    except LocationResolutionError as e:
        logger.error(f"[RESTAURANT] Location lookup failed: id={request.conversationId}: {e}")
        raise HTTPException(status_code=502, detail=f"location_failed: {e}")

    if result.action == TurnAction.LOCATION_ANSWER.value and state.location.strip():
        location_service.remember(request.userId, state.location)

    _log_turn_summary(request.conversationId, entry_point, result, state)

    return RestaurantTurnResponse(
        assistantMessage=result.response,
        handled=True,
        entryPoint=entry_point,
        action=result.action,
        state=state_to_api(state),
    )
