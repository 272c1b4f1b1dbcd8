from unittest.mock import AsyncMock

from fastapi.testclient import TestClient
import pytest

from place_search.api.dependencies.services import get_place_resolver, get_place_search_service
from place_search.core.config import Settings
from place_search.core.exceptions import ServiceUnavailableException
from place_search.main import create_app
from place_search.services.geocoding.base import PlaceSource, ProviderResult
from place_search.services.geocoding.mock_provider import MockPlaceProvider, MockPlaceResolver
from place_search.services.place_search_service import PlaceSearchService


@pytest.fixture
def search_service(test_settings, cache, make_place):
    places = [
        make_place("near", source=PlaceSource.GOOGLE_TEXT, name="Brigade Road", lat=12.9719, lng=77.6070, confidence=0.8),
        make_place("far", source=PlaceSource.NOMINATIM, name="Brigade Road Ext", lat=13.10, lng=77.70, confidence=0.95),
    ]
    provider = MockPlaceProvider(None, test_settings, source=PlaceSource.GOOGLE_TEXT, places=places)
    return PlaceSearchService([provider], cache, test_settings)


@pytest.fixture
def client(search_service):
    app = create_app()
    app.dependency_overrides[get_place_search_service] = lambda: search_service
    app.dependency_overrides[get_place_resolver] = lambda: MockPlaceResolver()
    return TestClient(app)


class TestSearchRoute:
    def test_returns_ranked_public_places(self, client):
        response = client.get("/api/v1/places/search", params={"q": "brigade", "lat": 12.9716, "lng": 77.5946})

        assert response.status_code == 200
        body = response.json()
        assert [p["place_id"] for p in body] == ["near", "far"]
        assert set(body[0]) == {
            "source",
            "place_id",
            "name",
            "address",
            "formatted",
            "locality",
            "city",
            "state",
            "lat",
            "lng",
            "confidence",
        }

    def test_short_query_is_problem_400(self, client, search_service):
        response = client.get("/api/v1/places/search", params={"q": " b "})

        assert response.status_code == 400
        problem = response.json()
        assert problem["code"] == "invalid_query"
        assert problem["status"] == 400
        assert problem["title"] == "Bad Request"
        assert problem["instance"] == "/api/v1/places/search"
        assert search_service.providers[0].calls == []

    def test_missing_query_is_400(self, client):
        response = client.get("/api/v1/places/search")
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_query"

    def test_expand_is_an_alias(self, client):
        search = client.get("/api/v1/places/search", params={"q": "brigade"})
        expand = client.get("/api/v1/places/expand", params={"q": "brigade"})

        assert expand.status_code == 200
        assert expand.json() == search.json()

    def test_provider_outage_is_empty_200(self, test_settings, cache):
        provider = AsyncMock()
        provider.source = PlaceSource.NOMINATIM
        provider.accepts_query = lambda query: True
        provider.search.return_value = ProviderResult.failure(PlaceSource.NOMINATIM, "timeout")
        app = create_app()
        app.dependency_overrides[get_place_search_service] = lambda: PlaceSearchService(
            [provider], cache, test_settings
        )

        response = TestClient(app).get("/api/v1/places/search", params={"q": "brigade"})

        assert response.status_code == 200
        assert response.json() == []

    def test_out_of_range_latitude_is_422(self, client):
        response = client.get("/api/v1/places/search", params={"q": "brigade", "lat": 123, "lng": 77})
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"


class TestDetailsRoute:
    def test_resolves_place(self, client):
        response = client.get("/api/v1/places/details", params={"place_id": "ChIJ-brigade"})

        assert response.status_code == 200
        body = response.json()
        assert body["place_id"] == "ChIJ-brigade"
        assert body["lat"] is not None and body["lng"] is not None

    def test_missing_place_id_is_400(self, client):
        response = client.get("/api/v1/places/details")
        assert response.status_code == 400
        assert response.json()["code"] == "missing_place_id"

    def test_unknown_place_is_404(self, client):
        response = client.get("/api/v1/places/details", params={"place_id": "mock:missing"})
        assert response.status_code == 404
        assert response.json()["code"] == "place_not_found"

    def test_unconfigured_upstream_is_503(self, client):
        resolver = AsyncMock()
        resolver.get_place_details.side_effect = ServiceUnavailableException(
            "Google Maps API key not configured", code="provider_not_configured"
        )
        client.app.dependency_overrides[get_place_resolver] = lambda: resolver

        response = client.get("/api/v1/places/details", params={"place_id": "x"})

        assert response.status_code == 503
        assert response.json()["code"] == "provider_not_configured"

    def test_session_token_is_forwarded_to_resolver(self, client, make_place):
        resolver = AsyncMock()
        resolver.get_place_details.return_value = make_place("ChIJ-x", source=PlaceSource.GOOGLE_AUTOCOMPLETE)
        client.app.dependency_overrides[get_place_resolver] = lambda: resolver

        response = client.get("/api/v1/places/details", params={"place_id": "ChIJ-x", "session_token": "tok"})

        assert response.status_code == 200
        resolver.get_place_details.assert_awaited_once_with("ChIJ-x", session_token="tok")

    def test_session_token_defaults_to_none(self, client):
        resolver = AsyncMock()
        resolver.get_place_details.return_value = None
        client.app.dependency_overrides[get_place_resolver] = lambda: resolver

        client.get("/api/v1/places/details", params={"place_id": "ChIJ-x"})

        resolver.get_place_details.assert_awaited_once_with("ChIJ-x", session_token=None)


class TestReverseRoute:
    def test_reverse_geocodes(self, client):
        response = client.get("/api/v1/places/reverse", params={"lat": 12.97, "lng": 77.59})

        assert response.status_code == 200
        assert response.json() == {
            "address": "Reverse Mock Address, Bengaluru, Karnataka, India",
            "lat": 12.97,
            "lng": 77.59,
        }

    def test_nothing_found_is_404(self, client):
        resolver = AsyncMock()
        resolver.reverse_geocode.return_value = None
        client.app.dependency_overrides[get_place_resolver] = lambda: resolver

        response = client.get("/api/v1/places/reverse", params={"lat": 0.1, "lng": 0.1})

        assert response.status_code == 404
        assert response.json()["code"] == "address_not_found"

    def test_coordinates_required(self, client):
        assert client.get("/api/v1/places/reverse", params={"lat": 12.97}).status_code == 422


class TestInfrastructure:
    def test_mock_mode_app_end_to_end(self):
        app = create_app(Settings(environment="test", place_providers="mock"))
        with TestClient(app) as client:
            search = client.get("/api/v1/places/search", params={"q": "cubbon"})
            health = client.get("/health")

        assert search.status_code == 200
        # Every mock source returns the same landmark under its own id
        assert {p["name"] for p in search.json()} == {"Cubbon Park"}
        assert len(search.json()) == 5
        assert health.json()["status"] == "healthy"
        assert set(health.json()["providers"]) == {s.value for s in PlaceSource}

    def test_metrics_exposed(self, client):
        client.get("/api/v1/places/search", params={"q": "brigade"})
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "place_search_provider_requests_total" in response.text
        assert "place_search_cache_lookups_total" in response.text
