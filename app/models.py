"""
Pydantic models for the Restaurant API.
Python 3.9 compatible - uses typing.List, typing.Optional
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class EntryPoint(str, Enum):
    RUN = "RUN"
    FOLLOW_UP = "FOLLOW_UP"
    NONE = "NONE"


class StructuredInputModel(BaseModel):
    """Command/object tokens extracted by the host from the user message."""
    commands: List[str] = Field(default_factory=list)
    objects: List[str] = Field(default_factory=list)


class BusinessModel(BaseModel):
    name: str
    imageUrl: str = ""
    infoUrl: str = ""
    displayPhone: str = ""
    distance: float = 0.0
    rating: float = 0.0
    city: str = ""
    displayAddress: List[str] = Field(default_factory=list)


class ConversationStateModel(BaseModel):
    """Conversation state as round-tripped by the client."""
    query: str = ""
    location: str = ""
    offset: int = Field(default=0, ge=0)
    businesses: Optional[List[BusinessModel]] = None


# ============================================================
# Conversation Models
# ============================================================

class RestaurantTurnRequest(BaseModel):
    conversationId: str
    userId: str
    userMessage: str
    # Optional: extracted from userMessage when the host does not send it
    structuredInput: Optional[StructuredInputModel] = None
    # Absent on the first turn of a conversation
    state: Optional[ConversationStateModel] = None
    # Last assistantMessage of this conversation
    priorResponse: Optional[str] = None


class RestaurantTurnResponse(BaseModel):
    assistantMessage: Optional[str] = None  # None when the turn produced no answer
    handled: bool
    entryPoint: EntryPoint
    action: str
    state: Optional[ConversationStateModel] = None


# ============================================================
# Location Models
# ============================================================

class UserLocationRequest(BaseModel):
    name: str = Field(min_length=1)


class UserLocationResponse(BaseModel):
    userId: str
    name: str


# ============================================================
# Business Search Models (direct provider search)
# ============================================================

class BusinessSearchRequest(BaseModel):
    term: str
    location: str
    limit: int = Field(default=1, ge=1, le=50)


class BusinessSearchResponse(BaseModel):
    businesses: List[BusinessModel]
    error: Optional[str] = None
