import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core import get_db
from app.services import sign_token


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(add_user):
    user = add_user()
    return {"Authorization": f"Bearer {sign_token(user.id)}"}


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "TravelPath API"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/api/health").json()["status"] == "healthy"

    def test_openapi_schema_uses_camel_case_and_examples(self, client):
        schemas = client.get("/openapi.json").json()["components"]["schemas"]

        assert schemas["FavoriteRoute"]["properties"]["route"]["examples"] == ["Paris → Rome"]
        assert "transportOptions" in schemas["PathOut"]["properties"]

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"


class TestDestinationEndpoints:
    def test_search(self, client, add_destination):
        add_destination("Paris", "France", popularity=3, latitude=48.8, longitude=2.3)

        response = client.get("/api/destinations/search", params={"query": "pa"})

        assert response.status_code == 200
        body = response.json()
        assert [d["name"] for d in body] == ["Paris"]
        assert "coordinates" not in body[0]

    def test_short_or_missing_query_is_empty(self, client):
        assert client.get("/api/destinations/search", params={"query": "p"}).json() == []
        assert client.get("/api/destinations/search").json() == []

    def test_popular(self, client, add_destination):
        add_destination("Rome", "Italy", popularity=1)
        add_destination("Paris", "France", popularity=2, latitude=48.8, longitude=2.3)

        body = client.get("/api/destinations/popular").json()

        assert [d["name"] for d in body] == ["Paris", "Rome"]
        assert body[0]["coordinates"] == {"lat": 48.8, "lng": 2.3}


class TestPathEndpoints:
    def test_find_uses_from_and_to_names(self, client, add_path):
        add_path("Paris", "Rome", popularity=2, transport_types=("train", "bus"))

        response = client.get("/api/destinations/paths", params={"from": "paris", "to": "rome"})

        assert response.status_code == 200
        body = response.json()
        assert body[0]["from"] == "Paris"
        assert body[0]["to"] == "Rome"
        assert [o["type"] for o in body[0]["transportOptions"]] == ["train", "bus"]

    def test_find_with_transport_type(self, client, add_path):
        add_path("Paris", "Rome", transport_types=("train",))

        response = client.get(
            "/api/destinations/paths",
            params={"from": "Paris", "to": "Rome", "transportType": "bus"}
        )

        assert response.status_code == 200
        assert response.json() == []

    def test_find_requires_from_and_to(self, client):
        response = client.get("/api/destinations/paths", params={"from": "Paris"})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
        assert response.json()["details"] == {"missing": ["to"]}

    def test_repeated_search_increments_popularity(self, client, add_path):
        path = add_path("Paris", "Rome", popularity=0)

        for _ in range(3):
            client.get("/api/destinations/paths", params={"from": "Paris", "to": "Rome"})
        detail = client.get(f"/api/destinations/paths/{path.id}").json()

        assert detail["popularity"] == 4

    def test_path_keys_are_camel_case(self, client, add_path):
        path = add_path("Paris", "Rome", transport_types=("train",))

        detail = client.get(f"/api/destinations/paths/{path.id}").json()

        assert {"from", "to", "totalDistance", "totalDuration", "transportOptions"} <= set(detail)
        assert "total_distance" not in detail
        assert {"arrivalTime", "departureTime", "costFromStart", "distanceFromStart"} <= set(detail["stations"][0])
        assert detail["transportOptions"][0]["comfortLevel"] == "comfort"

    def test_path_not_found(self, client):
        response = client.get("/api/destinations/paths/unknown-id")

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"


class TestAuthEndpoints:
    def test_register_login_profile(self, client):
        registered = client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "ada@example.com", "password": "secret123"}
        )
        assert registered.status_code == 201

        login = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "secret123"})
        assert login.status_code == 200
        token = login.json()["token"]

        profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert profile.json()["user"]["email"] == "ada@example.com"
        assert "password_hash" not in profile.json()["user"]

    def test_register_validation(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "A", "email": "not-an-email", "password": "123"}
        )

        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["details"]["errors"]}
        assert fields == {"name", "email", "password"}

    def test_bad_login(self, client, add_user):
        add_user(email="ada@example.com", password="secret123")

        response = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "wrong-one"})

        assert response.status_code == 401


class TestUserEndpoints:
    def test_history_requires_token(self, client):
        response = client.get("/api/users/search-history")

        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"

    def test_history_for_deleted_user_is_not_found(self, client):
        headers = {"Authorization": f"Bearer {sign_token('ghost')}"}

        assert client.get("/api/users/search-history", headers=headers).status_code == 404
        assert client.delete("/api/users/search-history", headers=headers).status_code == 404
        assert client.get("/api/users/statistics", headers=headers).status_code == 404

    def test_history_flow(self, client, auth_headers):
        for route in [("Paris", "Rome"), ("paris", "ROME"), ("Berlin", "Prague")]:
            response = client.post(
                "/api/users/search-history",
                json={"from": route[0], "to": route[1]},
                headers=auth_headers
            )
            assert response.status_code == 200

        history = client.get("/api/users/search-history", headers=auth_headers).json()
        assert history["pagination"] == {"page": 1, "limit": 20, "total": 2}
        assert [(e["from"], e["to"]) for e in history["searchHistory"]] == [("Berlin", "Prague"), ("Paris", "Rome")]

        entry_id = history["searchHistory"][0]["id"]
        assert client.delete(f"/api/users/search-history/{entry_id}", headers=auth_headers).status_code == 200
        assert client.delete("/api/users/search-history/not-there", headers=auth_headers).status_code == 200

        stats = client.get("/api/users/statistics", headers=auth_headers).json()["statistics"]
        assert stats["totalSearches"] == 1
        assert stats["favoriteRoutes"] == [{"route": "Paris → Rome", "count": 1}]
        assert {"recentSearches", "memberSince", "accountAgeDays"} <= set(stats)
        assert set(history["searchHistory"][0]) == {"id", "from", "to", "searchedAt"}

        assert client.delete("/api/users/search-history", headers=auth_headers).status_code == 200
        history = client.get("/api/users/search-history", headers=auth_headers).json()
        assert history["searchHistory"] == []

    def test_record_requires_from_and_to(self, client, auth_headers):
        response = client.post("/api/users/search-history", json={"from": "Paris"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_history_paging_params(self, client, auth_headers):
        response = client.get(
            "/api/users/search-history",
            params={"page": 0, "limit": 5},
            headers=auth_headers
        )

        assert response.status_code == 400

    def test_preferences(self, client, auth_headers):
        response = client.patch(
            "/api/users/preferences",
            json={"travelStyle": "budget", "preferredTransport": ["bus", "train"]},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["preferences"] == {"travelStyle": "budget", "preferredTransport": ["bus", "train"]}

        invalid = client.patch(
            "/api/users/preferences",
            json={"preferredTransport": ["rocket"]},
            headers=auth_headers
        )
        assert invalid.status_code == 400

    def test_delete_account(self, client, auth_headers):
        unconfirmed = client.request("DELETE", "/api/users/account", json={}, headers=auth_headers)
        assert unconfirmed.status_code == 400

        confirmed = client.request("DELETE", "/api/users/account", json={"confirm": True}, headers=auth_headers)
        assert confirmed.status_code == 200
        assert client.get("/api/users/profile", headers=auth_headers).status_code == 404
