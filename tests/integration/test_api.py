"""Integration tests for the HTTP and serverless adapters."""

import os
from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from steam_profile_api.adapters import lambda_handler
from steam_profile_api.aggregation import FanOut, ProfileService
from steam_profile_api.api import create_app
from steam_profile_api.errors import UpstreamError
from steam_profile_api.handler import HandlerResponse
from steam_profile_api.models import ResponseKind


@pytest.fixture
def service(steam, cache, ttl) -> ProfileService:
    steam.add_profile(loccountrycode="US").add_owned(570, name="Dota 2", forever=125)
    steam.add_recent(570, name="Dota 2", forever=125, two_weeks=61).set_store(570)
    steam.set_achievements(570, unlocked=1, total=2)
    return ProfileService(steam, cache, ttl, fanout=FanOut(steam, store_delay=0))


@pytest.fixture
def api(mock_env: None, service: ProfileService) -> Iterator[TestClient]:
    with TestClient(create_app(service=service)) as client:
        yield client


class TestRoutes:
    """Tests for the three data routes."""

    def test_user_envelope(self, api: TestClient) -> None:
        response = api.get("/api/steam-user")

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert body["success"] is True
        assert body["data"]["username"] == "Gabe"
        assert body["data"]["statusMessage"] == "Online"
        assert body["data"]["playtimeStats"] == {"totalForever": 2, "totalTwoWeeks": 0}
        assert set(body["metadata"]) == {"cached", "cachedAt", "cacheExpiry", "fetchDuration"}
        assert body["metadata"]["cached"] is False
        assert body["metadata"]["fetchDuration"].endswith("ms")

    def test_second_call_is_cached(self, api: TestClient, steam) -> None:
        api.get("/api/steam-games")
        body = api.get("/api/steam-games").json()

        assert body["metadata"]["cached"] is True
        assert steam.calls["get_owned_games"] == 1

    def test_country_code_sets_store_region(self, api: TestClient, steam) -> None:
        response = api.get("/api/steam-games?cc=jp")

        assert response.status_code == 200
        assert steam.region == "jp"

    def test_store_region_untouched_without_country_code(self, api: TestClient, steam) -> None:
        api.get("/api/steam-games")

        assert steam.region is None

    def test_games_wire_format(self, api: TestClient) -> None:
        data = api.get("/api/steam-games").json()["data"]

        assert data["totalCount"] == 1
        recent = data["recentGames"][0]
        assert recent["price"] == {"amount": 2999, "currency": "USD", "displayPrice": "$29.99"}
        assert recent["achievements"] == {"total": 2, "unlocked": 1, "percentage": 50}
        assert recent["images"]["libraryHeroImage"].endswith("/570/library_hero.jpg")

    def test_achievements_wire_format(self, api: TestClient) -> None:
        data = api.get("/api/steam-achievements").json()["data"]

        assert data["totalCount"] == 2
        assert data["unlockedPercentage"] == 50
        assert data["byGame"][0]["gameName"] == "Dota 2"

    def test_preflight(self, api: TestClient) -> None:
        response = api.options("/api/steam-user")

        assert response.status_code == 200
        assert response.text == ""
        assert response.headers["access-control-allow-methods"] == "GET, OPTIONS"

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
    def test_method_not_allowed(self, api: TestClient, method: str) -> None:
        response = api.request(method, "/api/steam-achievements")

        assert response.status_code == 405
        assert response.json() == {
            "success": False,
            "error": "Method not allowed",
            "code": "METHOD_NOT_ALLOWED",
        }

    def test_upstream_failure_is_generic(self, api: TestClient, steam) -> None:
        steam.failing_profile = UpstreamError("secret upstream detail", status_code=503)

        response = api.get("/api/steam-user")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Failed to fetch Steam user data",
            "code": "STEAM_API_ERROR",
        }

    def test_player_not_found(self, api: TestClient, steam) -> None:
        steam.profiles.clear()

        response = api.get("/api/steam-user")

        assert response.status_code == 500
        assert response.json()["code"] == "STEAM_API_ERROR"


class TestEnvironment:
    """Tests for configuration failures."""

    def test_missing_key(self, service: ProfileService) -> None:
        with (
            patch.dict(os.environ, {"STEAM_USER_ID": "76561197960287930"}, clear=True),
            TestClient(create_app(service=service)) as client,
        ):
            response = client.get("/api/steam-games")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "STEAM_API_KEY environment variable is not set",
            "code": "ENV_ERROR",
        }


class TestMisc:
    def test_health(self, api: TestClient) -> None:
        body = api.get("/health").json()

        assert body["status"] == "ok"
        assert "timestamp" in body
        assert body["cache"] == {"item_count": 0}

    def test_health_counts_cached_responses(self, api: TestClient) -> None:
        api.get("/api/steam-user")
        api.get("/api/steam-games")

        assert api.get("/health").json()["cache"] == {"item_count": 2}

    def test_unknown_route(self, api: TestClient) -> None:
        response = api.get("/api/steam-friends")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not found", "code": "NOT_FOUND"}

    def test_unsupported_method_uses_error_envelope(self, api: TestClient) -> None:
        response = api.request("PROPFIND", "/api/steam-user")

        assert response.status_code == 405
        assert response.json() == {
            "success": False,
            "error": "Method not allowed",
            "code": "METHOD_NOT_ALLOWED",
        }


class TestLambdaAdapter:
    """Tests for the serverless entry points."""

    def test_preflight(self) -> None:
        result = lambda_handler.steam_user({"httpMethod": "OPTIONS"})

        assert result["statusCode"] == 200
        assert result["body"] == ""
        assert result["headers"]["Access-Control-Allow-Origin"] == "*"

    def test_method_not_allowed(self) -> None:
        result = lambda_handler.steam_games({"httpMethod": "POST"})

        assert result["statusCode"] == 405

    def test_country_code_query_parameter(self) -> None:
        handled = AsyncMock(return_value=HandlerResponse(status_code=200, body="{}"))

        with patch.object(lambda_handler, "handle_request", handled):
            result = lambda_handler.steam_games(
                {"httpMethod": "GET", "queryStringParameters": {"cc": "jp"}}
            )

        assert result["statusCode"] == 200
        handled.assert_awaited_once_with("GET", ResponseKind.GAMES, region="jp")

    def test_null_query_parameters(self) -> None:
        handled = AsyncMock(return_value=HandlerResponse(status_code=200, body="{}"))

        with patch.object(lambda_handler, "handle_request", handled):
            lambda_handler.steam_user({"httpMethod": "GET", "queryStringParameters": None})

        handled.assert_awaited_once_with("GET", ResponseKind.USER, region=None)

    def test_missing_environment(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            result = lambda_handler.steam_achievements({"httpMethod": "GET"})

        assert result["statusCode"] == 500
        assert '"code": "ENV_ERROR"' in result["body"]
