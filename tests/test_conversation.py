"""
Tests for the /restaurant/next endpoint.

These tests verify that:
1. Triggered messages start a new query and return the first result
2. Unknown locations are asked for, and the answer is remembered
3. State round-trips through the client between turns
4. Messages outside a conversation are not handled
5. Location failures surface as 502, missing services as 503
"""

from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

import app.main as main
from app.location_service import LOCATION_QUESTION, UserLocationService
from engine.search import BusinessSearchResult
from engine.state import Business


TORCHYS = Business(
    name="Torchy's",
    info_url="https://m.yelp.com/biz/torchys",
    display_phone="(512) 555-0100",
    rating=4.5,
    city="Austin",
    display_address=["101 Main St", "Austin, TX 78701"],
)

VERACRUZ = Business(
    name="Veracruz",
    display_phone="(512) 555-0199",
    rating=4.0,
    display_address=["1704 E Cesar Chavez St"],
)


def make_search_client(businesses: Optional[List[Business]] = None, error: Optional[str] = None) -> MagicMock:
    client = MagicMock()
    client.search = AsyncMock(
        return_value=BusinessSearchResult(businesses=list(businesses or []), error=error)
    )
    return client


@pytest.fixture
def search_client():
    return make_search_client([TORCHYS, VERACRUZ])


@pytest.fixture
def location_service():
    return UserLocationService()


@pytest.fixture
def services(monkeypatch, search_client, location_service):
    """Install test services in place of the lifespan-created ones."""
    monkeypatch.setattr(main, "yelp_service", search_client)
    monkeypatch.setattr(main, "location_service", location_service)
    return search_client, location_service


@pytest.fixture
async def client():
    """Create async test client."""
    transport = ASGITransport(app=main.app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def turn(message: str, state=None, prior: Optional[str] = None, **extra):
    data = {
        "conversationId": "conv-1",
        "userId": "user-1",
        "userMessage": message,
        "state": state,
        "priorResponse": prior,
    }
    data.update(extra)
    return data


class TestHealthEndpoint:
    """Tests for GET /health"""

    @pytest.mark.asyncio
    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": main.VERSION}


class TestRestaurantNext:
    """Tests for POST /restaurant/next"""

    @pytest.mark.asyncio
    async def test_known_location_first_turn(self, client: AsyncClient, services):
        search_client, location_service = services
        location_service.remember("user-1", "Austin")

        response = await client.post("/restaurant/next", json=turn("Find me some tacos"))

        assert response.status_code == 200
        data = response.json()
        assert data["handled"] is True
        assert data["entryPoint"] == "RUN"
        assert data["assistantMessage"] == "Ok. How does this place look? Torchy's at 101 Main St"
        assert data["state"]["query"] == "tacos "
        assert data["state"]["location"] == "Austin"
        assert data["state"]["offset"] == 0
        search_client.search.assert_awaited_once_with(term="tacos ", location="Austin", limit=1)

    @pytest.mark.asyncio
    async def test_structured_input_from_host(self, client: AsyncClient, services):
        search_client, location_service = services
        location_service.remember("user-1", "Austin")

        response = await client.post(
            "/restaurant/next",
            json=turn(
                "anything with al pastor?",
                structuredInput={"commands": ["find"], "objects": ["tacos", "al pastor"]},
            ),
        )

        assert response.json()["state"]["query"] == "tacos al pastor "
        search_client.search.assert_awaited_once_with(term="tacos al pastor ", location="Austin", limit=1)

    @pytest.mark.asyncio
    async def test_unknown_location_asks_then_remembers(self, client: AsyncClient, services):
        search_client, location_service = services

        first = await client.post("/restaurant/next", json=turn("Where can I get sushi?"))
        first_data = first.json()

        assert first_data["assistantMessage"] == LOCATION_QUESTION
        assert first_data["state"]["location"] == ""
        search_client.search.assert_not_awaited()

        second = await client.post(
            "/restaurant/next",
            json=turn("Austin", state=first_data["state"], prior=first_data["assistantMessage"]),
        )
        second_data = second.json()

        assert second_data["entryPoint"] == "FOLLOW_UP"
        assert second_data["action"] == "LOCATION_ANSWER"
        assert second_data["state"]["location"] == "Austin"
        search_client.search.assert_awaited_once_with(term="sushi ", location="Austin", limit=1)

        location, question = await location_service.resolve("user-1")
        assert question == ""
        assert location.name == "Austin"

    @pytest.mark.asyncio
    async def test_follow_up_pagination_and_details(self, client: AsyncClient, services):
        search_client, location_service = services
        location_service.remember("user-1", "Austin")

        first = (await client.post("/restaurant/next", json=turn("recommend tacos"))).json()
        second = (await client.post(
            "/restaurant/next",
            json=turn("show me something else", state=first["state"], prior=first["assistantMessage"]),
        )).json()

        assert second["assistantMessage"] == "What about Veracruz instead?"
        assert second["state"]["offset"] == 1
        assert search_client.search.await_args.kwargs["limit"] == 2

        third = (await client.post(
            "/restaurant/next",
            json=turn("what's their number?", state=second["state"], prior=second["assistantMessage"]),
        )).json()

        assert third["assistantMessage"] == "(512) 555-0199"
        assert third["action"] == "PHONE"

    @pytest.mark.asyncio
    async def test_provider_failure_returns_no_message(self, client: AsyncClient, monkeypatch, location_service):
        monkeypatch.setattr(main, "yelp_service", make_search_client(error="YELP_ERROR"))
        monkeypatch.setattr(main, "location_service", location_service)
        location_service.remember("user-1", "Austin")

        response = await client.post("/restaurant/next", json=turn("find pizza"))

        assert response.status_code == 200
        data = response.json()
        assert data["handled"] is True
        assert data["assistantMessage"] is None

    @pytest.mark.asyncio
    async def test_untriggered_message_without_state(self, client: AsyncClient, services):
        search_client, _ = services

        response = await client.post("/restaurant/next", json=turn("what's the weather like"))

        data = response.json()
        assert data["handled"] is False
        assert data["entryPoint"] == "NONE"
        assert data["assistantMessage"] is None
        search_client.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_location_failure_is_502(self, client: AsyncClient, services):
        response = await client.post("/restaurant/next", json=turn("find tacos", userId=""))

        assert response.status_code == 502
        assert "location_failed" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_services_missing_is_503(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(main, "yelp_service", None)
        monkeypatch.setattr(main, "location_service", None)

        response = await client.post("/restaurant/next", json=turn("find tacos"))

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_negative_offset_rejected(self, client: AsyncClient, services):
        state = {"query": "tacos ", "location": "Austin", "offset": -1, "businesses": []}

        response = await client.post("/restaurant/next", json=turn("else", state=state))

        assert response.status_code == 422


class TestUserLocationEndpoints:
    """Tests for PUT/DELETE /users/{userId}/location"""

    @pytest.mark.asyncio
    async def test_set_and_clear(self, client: AsyncClient, services):
        _, location_service = services

        response = await client.put("/users/user-9/location", json={"name": " Austin "})

        assert response.status_code == 200
        assert response.json() == {"userId": "user-9", "name": "Austin"}
        location, _ = await location_service.resolve("user-9")
        assert location.name == "Austin"

        response = await client.delete("/users/user-9/location")

        assert response.status_code == 204
        location, question = await location_service.resolve("user-9")
        assert location is None
        assert question == LOCATION_QUESTION


class TestRestaurantsSearch:
    """Tests for POST /restaurants/search"""

    @pytest.mark.asyncio
    async def test_direct_search(self, client: AsyncClient, services):
        search_client, _ = services

        response = await client.post(
            "/restaurants/search",
            json={"term": "tacos", "location": "Austin", "limit": 2},
        )

        assert response.status_code == 200
        data = response.json()
        assert [b["name"] for b in data["businesses"]] == ["Torchy's", "Veracruz"]
        assert data["businesses"][0]["displayAddress"] == ["101 Main St", "Austin, TX 78701"]
        assert data["error"] is None
        search_client.search.assert_awaited_once_with(term="tacos", location="Austin", limit=2)

    @pytest.mark.asyncio
    async def test_limit_out_of_range(self, client: AsyncClient, services):
        response = await client.post(
            "/restaurants/search",
            json={"term": "tacos", "location": "Austin", "limit": 0},
        )

        assert response.status_code == 422
