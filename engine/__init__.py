"""
Restaurant dialog engine - state, extraction, classifier and controller.
"""
from .state import (
    Business,
    ConversationState,
    Location,
    StructuredInput,
)
from .extract import (
    build_query,
    extract_structured_input,
    is_triggered,
    tokenize,
)
from .classifier import (
    FollowUpAction,
    classify_word,
)
from .search import (
    BusinessSearchClient,
    BusinessSearchResult,
    search_businesses,
)
from .dialog import (
    DialogController,
    LocationResolutionError,
    LocationResolver,
    TurnAction,
    TurnResult,
)

__all__ = [
    "Business",
    "ConversationState",
    "Location",
    "StructuredInput",
    "build_query",
    "extract_structured_input",
    "is_triggered",
    "tokenize",
    "FollowUpAction",
    "classify_word",
    "BusinessSearchClient",
    "BusinessSearchResult",
    "search_businesses",
    "DialogController",
    "LocationResolutionError",
    "LocationResolver",
    "TurnAction",
    "TurnResult",
]
