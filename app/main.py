"""
Restaurant Finder Backend - FastAPI Application

Hosts the restaurant dialog: a user asks for food, the backend resolves
where they are, searches Yelp and answers follow-up questions about the
place it suggested. Conversation state is owned by the client and sent
back with every turn.

Python 3.9 compatible.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, mask_key
from .conversation import business_to_api, process_turn
from .location_service import UserLocationService
from .models import (
    BusinessSearchRequest,
    BusinessSearchResponse,
    RestaurantTurnRequest,
    RestaurantTurnResponse,
    UserLocationRequest,
    UserLocationResponse,
)
from .yelp_service import YelpService

# Load environment variables from the project .env
env_paths = [
    Path(__file__).parent.parent / ".env",  # project root .env
    Path.cwd() / ".env",  # current working directory
]
for env_path in env_paths:
    if env_path.exists():
        load_dotenv(env_path)
        break
else:
    load_dotenv()  # fallback to default behavior

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if os.getenv("DEBUG", "false").lower() == "true" else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

# Service instances (Python 3.9 compatible type hints)
yelp_service: Optional[YelpService] = None
location_service: Optional[UserLocationService] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - initialize services."""
    global yelp_service, location_service

    logger.info("=" * 60)
    logger.info("Initializing Restaurant Finder Backend")
    logger.info("=" * 60)

    settings = Settings.from_env()
    logger.info(f"YELP_API_KEY present: {bool(settings.yelp_api_key)} ({mask_key(settings.yelp_api_key)})")
    logger.info(f"YELP_SEARCH_URL: {settings.yelp_search_url}")

    # FAIL FAST if YELP_API_KEY is missing
    if not settings.yelp_api_key:
        error_msg = (
            "YELP_API_KEY is required. "
            "Set it in .env or as an environment variable."
        )
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    yelp_service = YelpService(settings)
    location_service = UserLocationService()
    logger.info("Location service initialized successfully")

    logger.info("=" * 60)

    yield

    # Shutdown
    if yelp_service:
        await yelp_service.close()
    logger.info("Shutting down Restaurant Finder Backend")


app = FastAPI(
    title="Restaurant Finder Backend",
    description="Multi-turn restaurant search dialog backed by Yelp",
    version=VERSION,
    lifespan=lifespan,
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.post("/restaurant/next", response_model=RestaurantTurnResponse)
async def restaurant_next(request: RestaurantTurnRequest) -> RestaurantTurnResponse:
    """
    Process one turn of the restaurant conversation.

    Returns handled=false for messages that neither start a restaurant
    query nor continue one. assistantMessage is null when the turn has
    nothing to say (e.g., the search provider was unavailable).
    """
    if yelp_service is None or location_service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")

    return await process_turn(
        request,
        search_client=yelp_service,
        location_service=location_service,
    )


@app.put("/users/{user_id}/location", response_model=UserLocationResponse)
async def set_user_location(user_id: str, request: UserLocationRequest) -> UserLocationResponse:
    """Store the user's current location for later queries."""
    if location_service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")

    location = location_service.remember(user_id, request.name)
    return UserLocationResponse(userId=user_id, name=location.name)


@app.delete("/users/{user_id}/location", status_code=204)
async def clear_user_location(user_id: str) -> None:
    """Forget the user's stored location."""
    if location_service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")

    location_service.forget(user_id)


@app.post("/restaurants/search", response_model=BusinessSearchResponse)
async def restaurants_search(request: BusinessSearchRequest) -> BusinessSearchResponse:
    """
    Search Yelp directly, without any conversation state.

    Provider errors are returned in the body, not as HTTP errors.
    """
    logger.info(
        f"Restaurants search: term='{request.term}', "
        f"location='{request.location}', "
        f"limit={request.limit}"
    )

    if yelp_service is None:
        raise HTTPException(
            status_code=500,
            detail="yelp_key_missing: YELP_API_KEY not configured"
        )

    result = await yelp_service.search(
        term=request.term,
        location=request.location,
        limit=request.limit,
    )

    logger.info(f"Restaurants search result: {len(result.businesses)} businesses, error={result.error}")

    return BusinessSearchResponse(
        businesses=[business_to_api(b) for b in result.businesses],
        error=result.error,
    )
